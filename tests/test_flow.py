"""Tests for the XState machine, the message catalogue, the flow adapter and the Telegram layer."""

import asyncio

import pytest
from telegram import Update

from api.flow_adapter import (
    DeletePerson,
    SendMessage,
    SendPeopleList,
    SendPersonForm,
    event_to_xstate,
    run_xstate_flow,
)
from api.flow_loader import REQUIRED_MESSAGES, load_messages
from api.telegram_ui import ChatSessions, _update_to_event, format_person_card, process_update
from api.xstate_machine import load_machine, transition
from peoplebook.application import PersonRepository
from peoplebook.config import Settings
from peoplebook.di import define_modules
from peoplebook.domain import Person
from peoplebook.presentation import PersonViewModel


@pytest.fixture
def machine():
    return load_machine()


@pytest.fixture
def messages():
    return load_messages()


@pytest.fixture
def view_model():
    return define_modules(Settings(store="memory", seed=False)).get(PersonViewModel)


def _text(subtype, text=""):
    return {"type": "text", "subtype": subtype, "payload": {"text": text}}


def _callback(subtype, **payload):
    return {"type": "callback", "subtype": subtype, "payload": payload}


def _messages_of(actions):
    return [a.text for a in actions if isinstance(a, SendMessage)]


def test_load_machine(machine):
    assert machine["initial"] == "people_list"
    for name in ("people_list", "editing", "awaiting_field"):
        assert name in machine["states"]


def test_load_machine_unknown_target(tmp_path):
    (tmp_path / "m.json").write_text(
        '{"id": "m", "initial": "a", "states": {"a": {"on": {"GO": "missing"}}}}'
    )
    with pytest.raises(ValueError, match="unknown state 'missing'"):
        load_machine(tmp_path / "m.json")


def test_xstate_machine_transition(machine):
    assert transition(machine, "people_list", "TEXT_COMMAND_START") == "welcome"
    assert transition(machine, "welcome", "DONE") == "people_list"
    assert transition(machine, "editing", "CALLBACK_SAVE") == "save_person"
    # Not handled in this state
    assert transition(machine, "people_list", "TEXT_FIELD_VALUE") is None


def test_event_to_xstate():
    assert event_to_xstate(_text("command_start")) == "TEXT_COMMAND_START"
    assert event_to_xstate(_callback("cmd_list")) == "CALLBACK_LIST"
    assert event_to_xstate(_callback("delete")) == "CALLBACK_DELETE"
    assert event_to_xstate(_text("field_value")) == "TEXT_FIELD_VALUE"
    assert event_to_xstate({"type": "photo", "subtype": None}) is None


def test_load_messages(messages):
    for key in REQUIRED_MESSAGES:
        assert key in messages


def test_load_messages_missing_key(tmp_path):
    (tmp_path / "messages.yaml").write_text("messages:\n  welcome: Hi\n")
    with pytest.raises(ValueError, match="Missing messages"):
        load_messages(tmp_path / "messages.yaml")


def test_welcome_returns_to_list(machine, messages, view_model):
    actions, state, _ = run_xstate_flow(
        None, _text("command_start", "/start"), {}, view_model, machine, messages
    )
    assert state == "people_list"
    assert _messages_of(actions) == [messages["welcome"]]
    assert actions[0].keyboard == "main"


def test_empty_list(machine, messages, view_model):
    actions, state, _ = run_xstate_flow(
        "people_list", _callback("cmd_list"), {}, view_model, machine, messages
    )
    assert state == "people_list"
    assert _messages_of(actions) == [messages["empty_list"]]


def test_add_fill_and_save(machine, messages, view_model):
    actions, state, slots = run_xstate_flow(
        "people_list", _text("command_add", "/add"), {}, view_model, machine, messages
    )
    assert state == "editing"
    assert slots == {"mode": "create"}
    form = [a for a in actions if isinstance(a, SendPersonForm)]
    assert form[0].title == "New person"

    for field, value in (("first_name", "Arne"), ("last_name", "Arndt")):
        actions, state, slots = run_xstate_flow(
            state, _callback("field", field=field), slots, view_model, machine, messages
        )
        assert state == "awaiting_field"
        assert slots["field"] == field
        actions, state, slots = run_xstate_flow(
            state, _text("field_value", value), slots, view_model, machine, messages
        )
        assert state == "editing"
        assert "field" not in slots

    assert view_model.person_ui_state.value.person.full_name == "Arne Arndt"
    actions, state, slots = run_xstate_flow(
        state, _callback("save"), slots, view_model, machine, messages
    )
    assert state == "people_list"
    assert "Arne Arndt saved." in _messages_of(actions)
    listed = [a for a in actions if isinstance(a, SendPeopleList)]
    assert [p.full_name for p in listed[0].people] == ["Arne Arndt"]
    assert "mode" not in slots


def test_clear_optional_field(machine, messages, view_model):
    _, state, slots = run_xstate_flow(
        "people_list", _text("command_add"), {}, view_model, machine, messages
    )
    for value in ("arne@example.com", "-"):
        _, state, slots = run_xstate_flow(
            state, _callback("field", field="email"), slots, view_model, machine, messages
        )
        _, state, slots = run_xstate_flow(
            state, _text("field_value", value), slots, view_model, machine, messages
        )
    assert view_model.person_ui_state.value.person.email is None


def test_save_invalid_stays_in_form(machine, messages, view_model):
    _, state, slots = run_xstate_flow(
        "people_list", _text("command_add"), {}, view_model, machine, messages
    )
    actions, state, slots = run_xstate_flow(
        state, _callback("save"), slots, view_model, machine, messages
    )
    assert state == "editing"
    assert slots["mode"] == "create"
    assert view_model.error_state.value.message.startswith("First name too short")


def test_edit_unknown_person(machine, messages, view_model):
    _, state, _ = run_xstate_flow(
        "people_list", _callback("edit", person_id="nope"), {}, view_model, machine, messages
    )
    assert state == "people_list"
    assert view_model.error_state.value.message == "Person not found"


def test_delete_yields_delete_action(machine, messages):
    arne = Person(first_name="Arne", last_name="Arndt")
    container = define_modules(Settings(store="memory", seed=False))
    view_model = container.get(PersonViewModel)
    container.get(PersonRepository).create(arne)
    actions, state, _ = run_xstate_flow(
        "people_list", _callback("delete", person_id=arne.id), {}, view_model, machine, messages
    )
    assert state == "people_list"
    assert [a.person for a in actions if isinstance(a, DeletePerson)] == [arne]

    actions, _, _ = run_xstate_flow(
        "people_list", _callback("delete", person_id="gone"), {}, view_model, machine, messages
    )
    assert _messages_of(actions) == [messages["person_not_found"]]


def test_undo_without_removed_person(machine, messages, view_model):
    actions, state, _ = run_xstate_flow(
        "people_list", _callback("undo"), {}, view_model, machine, messages
    )
    assert state == "people_list"
    assert _messages_of(actions)[0] == messages["nothing_to_undo"]


def test_form_buttons_after_form_closed(machine, messages, view_model):
    actions, state, _ = run_xstate_flow(
        "people_list", _callback("save"), {}, view_model, machine, messages
    )
    assert state == "people_list"
    assert _messages_of(actions) == [messages["form_expired"]]


def test_free_text_in_form(machine, messages, view_model):
    actions, state, slots = run_xstate_flow(
        "editing", _text("unsupported", "hello"), {"mode": "create"}, view_model, machine, messages
    )
    assert state == "editing"
    assert slots == {"mode": "create"}
    assert _messages_of(actions) == [messages["form_unsupported"]]


# --- Telegram updates ---

_USER = {"id": 1, "is_bot": False, "first_name": "U"}
_CHAT = {"id": 123, "type": "private"}


def _text_update(text, update_id=1):
    return Update.de_json(
        {
            "update_id": update_id,
            "message": {"message_id": update_id, "from": _USER, "chat": _CHAT, "date": 1, "text": text},
        },
        None,
    )


def _callback_update(data, update_id=1, message_id=7):
    return Update.de_json(
        {
            "update_id": update_id,
            "callback_query": {
                "id": f"cb{update_id}",
                "from": _USER,
                "chat_instance": "ci",
                "data": data,
                "message": {"message_id": message_id, "chat": _CHAT, "date": 1, "text": "card"},
            },
        },
        None,
    )


def test_update_to_event_text_commands():
    assert _update_to_event(_text_update("/start"), {})["subtype"] == "command_start"
    assert _update_to_event(_text_update("List people"), {})["subtype"] == "command_list"
    assert _update_to_event(_text_update("/add"), {})["subtype"] == "command_add"
    assert _update_to_event(_text_update("Arne"), {})["subtype"] == "unsupported"
    event = _update_to_event(_text_update("Arne"), {"field": "first_name"})
    assert event == {"type": "text", "subtype": "field_value", "payload": {"text": "Arne"}}


def test_bare_words_are_field_values_inside_a_form():
    slots = {"mode": "create", "field": "first_name"}
    for text in ("list", "Add", "LIST"):
        assert _update_to_event(_text_update(text), slots)["subtype"] == "field_value"
    assert _update_to_event(_text_update("/list"), slots)["subtype"] == "command_list"
    assert _update_to_event(_text_update("Add person"), slots)["subtype"] == "command_add"
    assert _update_to_event(_text_update("list"), {"mode": "create"})["subtype"] == "command_list"


def test_chat_sessions_drop_least_recently_used():
    sessions = ChatSessions(lambda: object(), max_sessions=2)
    first = sessions.get(1)
    sessions.get(2)
    assert sessions.get(1) is first
    sessions.get(3)
    assert len(sessions) == 2
    assert 1 in sessions
    assert 2 not in sessions


def test_update_to_event_callbacks():
    event = _update_to_event(_callback_update("delete:abc"), {})
    assert event["subtype"] == "delete"
    assert event["payload"]["person_id"] == "abc"
    assert _update_to_event(_callback_update("field:email"), {})["payload"]["field"] == "email"
    assert _update_to_event(_callback_update("form:save"), {})["subtype"] == "save"
    assert _update_to_event(_callback_update("undo"), {})["subtype"] == "undo"
    assert _update_to_event(_callback_update("something"), {}) is None


def test_format_person_card():
    person = Person(first_name="Arne", last_name="Arndt", email="arne@example.com", phone="+12025551234")
    assert format_person_card(person, "US") == "Arne Arndt\nEmail: arne@example.com\nPhone: +1 202-555-1234"


class FakeBot:
    def __init__(self):
        self.calls = []

    async def send_message(self, chat_id, text, reply_markup=None):
        self.calls.append(("send_message", text, reply_markup))

    async def answer_callback_query(self, callback_query_id):
        self.calls.append(("answer_callback_query", callback_query_id))

    async def edit_message_text(self, chat_id, message_id, text):
        self.calls.append(("edit_message_text", message_id, text))

    async def delete_message(self, chat_id, message_id):
        self.calls.append(("delete_message", message_id))


def test_process_update_delete_then_undo(messages):
    container = define_modules(Settings(store="memory", seed=False))
    arne = Person(first_name="Arne", last_name="Arndt")
    repository = container.get(PersonRepository)
    repository.create(arne)
    sessions = ChatSessions(lambda: container.get(PersonViewModel))
    bot = FakeBot()

    asyncio.run(
        process_update(
            _callback_update("delete:" + arne.id, update_id=1),
            bot,
            sessions,
            animation_duration=0,
            messages=messages,
        )
    )
    assert repository.get_all().data == []
    names = [call[0] for call in bot.calls]
    assert names == ["answer_callback_query", "edit_message_text", "delete_message", "send_message"]
    assert bot.calls[1] == ("edit_message_text", 7, "Deleting Arne Arndt ...")
    _, text, keyboard = bot.calls[3]
    assert text == "Arne Arndt deleted."
    assert keyboard.inline_keyboard[0][0].callback_data == "undo"
    assert sessions.get(123).deleted_row.visible is False

    bot.calls.clear()
    asyncio.run(
        process_update(
            _callback_update("undo", update_id=2), bot, sessions, animation_duration=0, messages=messages
        )
    )
    assert repository.get_all().data == [arne]
    sent = [call[1] for call in bot.calls if call[0] == "send_message"]
    assert sent == ["Arne Arndt"]
    assert sessions.get(123).deleted_row is None
    assert len(sessions) == 1
    assert sessions.get(123).state_value == "people_list"
    assert sessions.get(123).slots == {}


def test_process_update_shows_validation_error_once(messages):
    container = define_modules(Settings(store="memory", seed=False))
    sessions = ChatSessions(lambda: container.get(PersonViewModel))
    bot = FakeBot()
    for update in (_text_update("/add", 1), _callback_update("form:save", 2)):
        asyncio.run(process_update(update, bot, sessions, animation_duration=0, messages=messages))
    sent = [call[1] for call in bot.calls if call[0] == "send_message"]
    assert sent[-1].startswith("First name too short")
    session = sessions.get(123)
    assert session.state_value == "editing"
    assert session.view_model.error_state.value is None
