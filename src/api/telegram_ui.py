"""Telegram rendering of the people screens and per-chat session state.

Shared by the FastAPI webhook (api.main) and the dev polling bot (bot).
"""

import logging
from collections import OrderedDict
from collections.abc import Callable
from dataclasses import dataclass, field

from telegram import (
    InlineKeyboardButton,
    InlineKeyboardMarkup,
    KeyboardButton,
    ReplyKeyboardMarkup,
    Update,
)
from telegram.error import TelegramError

from api.flow_adapter import (
    FORM_FIELDS,
    DeletePerson,
    SendMessage,
    SendPeopleList,
    SendPersonForm,
    run_xstate_flow,
)
from api.flow_loader import get_messages
from peoplebook.domain import Person
from peoplebook.infrastructure import format_phone
from peoplebook.presentation import (
    ErrorHandler,
    ErrorState,
    PersonViewModel,
    SnackbarResult,
    SwipePersonListItem,
    SwipeValue,
)
from peoplebook.presentation import intents

logger = logging.getLogger(__name__)

BUTTON_LIST = "List people"
BUTTON_ADD = "Add person"
CALLBACK_UNDO = "undo"

_FIELD_BUTTONS = {
    "first_name": "First name",
    "last_name": "Last name",
    "email": "Email",
    "phone": "Phone",
    "image_path": "Image",
}


def main_keyboard() -> ReplyKeyboardMarkup:
    """Reply keyboard with List people and Add person buttons."""
    return ReplyKeyboardMarkup(
        [[KeyboardButton(BUTTON_LIST), KeyboardButton(BUTTON_ADD)]],
        resize_keyboard=True,
    )


def person_card_keyboard(person_id: str) -> InlineKeyboardMarkup:
    """Edit / Delete buttons under a card (the two swipe directions of a list row)."""
    return InlineKeyboardMarkup(
        [
            [
                InlineKeyboardButton("Edit", callback_data="edit:" + person_id),
                InlineKeyboardButton("Delete", callback_data="delete:" + person_id),
            ]
        ]
    )


def person_form_keyboard() -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(
        [
            [
                InlineKeyboardButton(_FIELD_BUTTONS["first_name"], callback_data="field:first_name"),
                InlineKeyboardButton(_FIELD_BUTTONS["last_name"], callback_data="field:last_name"),
            ],
            [
                InlineKeyboardButton(_FIELD_BUTTONS["email"], callback_data="field:email"),
                InlineKeyboardButton(_FIELD_BUTTONS["phone"], callback_data="field:phone"),
                InlineKeyboardButton(_FIELD_BUTTONS["image_path"], callback_data="field:image_path"),
            ],
            [
                InlineKeyboardButton("Save", callback_data="form:save"),
                InlineKeyboardButton("Cancel", callback_data="form:cancel"),
            ],
        ]
    )


def undo_keyboard(label: str) -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup([[InlineKeyboardButton(label, callback_data=CALLBACK_UNDO)]])


def format_person_card(person: Person, phone_region: str | None = None) -> str:
    """Name on the first line, then the optional fields that are set."""
    lines = [person.full_name or "(no name)"]
    if person.email:
        lines.append(f"Email: {person.email}")
    if person.phone:
        lines.append(f"Phone: {format_phone(person.phone, phone_region)}")
    if person.image_path:
        lines.append(f"Image: {person.image_path}")
    return "\n".join(lines)


def format_person_form(title: str, person: Person) -> str:
    lines = [title]
    for name, button in _FIELD_BUTTONS.items():
        value = getattr(person, name) or "-"
        lines.append(f"{button}: {value}")
    return "\n".join(lines)


def _keyboard_by_name(name: str | None):
    if name == "main":
        return main_keyboard()
    return None


def _update_to_event(update, slots: dict) -> dict | None:
    """Build flow event from Telegram Update. Returns None if no relevant event."""
    if not update or not isinstance(update, Update):
        return None
    if update.callback_query:
        data = (update.callback_query.data or "").strip()
        payload: dict = {"data": data}
        if data == "cmd:list":
            subtype = "cmd_list"
        elif data == "cmd:add":
            subtype = "cmd_add"
        elif data.startswith("edit:"):
            subtype = "edit"
            payload["person_id"] = data[5:].strip()
        elif data.startswith("delete:"):
            subtype = "delete"
            payload["person_id"] = data[7:].strip()
        elif data == CALLBACK_UNDO:
            subtype = "undo"
        elif data.startswith("field:"):
            subtype = "field"
            payload["field"] = data[6:].strip()
        elif data == "form:save":
            subtype = "save"
        elif data == "form:cancel":
            subtype = "cancel"
        else:
            return None
        return {"type": "callback", "subtype": subtype, "payload": payload}
    if update.message and update.message.text:
        text = update.message.text.strip()
        t = text.lower()
        payload = {"text": text}
        if text in ("/start", "/help"):
            subtype = "command_start"
        elif text in ("/list", BUTTON_LIST):
            subtype = "command_list"
        elif text in ("/add", BUTTON_ADD):
            subtype = "command_add"
        elif slots.get("field") in FORM_FIELDS:
            # Bare words are field values while a field is pending
            subtype = "field_value"
        elif t == "list":
            subtype = "command_list"
        elif t == "add":
            subtype = "command_add"
        else:
            subtype = "unsupported"
        return {"type": "text", "subtype": subtype, "payload": payload}
    # Other message (photo, voice, etc.)
    if update.message:
        return {"type": "text", "subtype": "unsupported", "payload": {"text": ""}}
    return None


@dataclass
class ChatSession:
    view_model: PersonViewModel
    state_value: str | None = None
    slots: dict = field(default_factory=dict)
    # Card hidden by the last delete, until the list shows the person again
    deleted_row: SwipePersonListItem | None = None


DEFAULT_MAX_SESSIONS = 1000


class ChatSessions:
    """One view-model and flow state per chat (or REST client id).

    At most max_sessions are kept; the least recently used one is dropped
    together with its form and undo buffer.
    """

    def __init__(
        self,
        view_model_factory: Callable[[], PersonViewModel],
        max_sessions: int = DEFAULT_MAX_SESSIONS,
    ) -> None:
        self._factory = view_model_factory
        self._max_sessions = max_sessions
        self._sessions: OrderedDict[int | str, ChatSession] = OrderedDict()

    def get(self, key: int | str) -> ChatSession:
        session = self._sessions.get(key)
        if session is not None:
            self._sessions.move_to_end(key)
            return session
        session = ChatSession(view_model=self._factory())
        self._sessions[key] = session
        while len(self._sessions) > self._max_sessions:
            evicted, _ = self._sessions.popitem(last=False)
            logger.info("Dropped idle session %s", evicted)
        return session

    def __contains__(self, key: int | str) -> bool:
        return key in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)


async def _send_people_list(bot, chat_id: int, people: list[Person], phone_region: str | None) -> None:
    for person in people:
        await bot.send_message(
            chat_id=chat_id,
            text=format_person_card(person, phone_region),
            reply_markup=person_card_keyboard(person.id),
        )


async def _run_delete(
    bot,
    chat_id: int,
    card_message_id: int | None,
    person: Person,
    view_model: PersonViewModel,
    messages: dict,
    animation_duration: float,
) -> SwipePersonListItem:
    """Hide the card, then delete after the animation delay and offer undo."""
    swipe = SwipePersonListItem(
        person=person,
        on_edit=lambda person_id: None,
        on_delete=lambda: view_model.on_process_person_intent(intents.Remove(person)),
        on_undo=lambda: view_model.handle_undo_event(
            message=messages["person_deleted"].replace("{name}", person.full_name),
            action_label=messages["undo_label"],
            on_action_perform=lambda: view_model.on_process_person_intent(intents.Undo()),
        ),
        animation_duration=animation_duration,
    )
    swipe.confirm_value_change(SwipeValue.END_TO_START)
    if card_message_id is not None:
        try:
            await bot.edit_message_text(
                chat_id=chat_id,
                message_id=card_message_id,
                text=messages["deleting"].replace("{name}", person.full_name),
            )
        except TelegramError as e:
            logger.warning("Cannot edit card of %s: %s", person.id, e)
    await swipe.run_delete_sequence()
    if card_message_id is not None:
        try:
            await bot.delete_message(chat_id=chat_id, message_id=card_message_id)
        except TelegramError as e:
            logger.warning("Cannot delete card of %s: %s", person.id, e)
    return swipe


def _snackbar(bot, chat_id: int):
    async def show(error_state: ErrorState) -> SnackbarResult:
        reply_markup = undo_keyboard(error_state.action_label) if error_state.action_label else None
        await bot.send_message(chat_id=chat_id, text=error_state.message, reply_markup=reply_markup)
        # The action (Undo) arrives later as its own callback update.
        return SnackbarResult.DISMISSED

    return show


async def process_update(
    update: Update,
    bot,
    sessions: ChatSessions,
    *,
    phone_region: str | None = None,
    animation_duration: float = 0.5,
    messages: dict | None = None,
) -> None:
    """Run one Telegram update through the flow and send the resulting screens."""
    if messages is None:
        messages = get_messages()
    chat = update.effective_chat
    if chat is None:
        logger.warning("Telegram update without chat")
        return
    chat_id = int(chat.id)
    session = sessions.get(chat_id)
    event = _update_to_event(update, session.slots)
    if event is None:
        return

    actions, new_state_value, new_slots = run_xstate_flow(
        session.state_value, event, session.slots, session.view_model, messages=messages
    )

    card_message_id = None
    if update.callback_query:
        # Stops the loading state of the tapped button
        await bot.answer_callback_query(callback_query_id=update.callback_query.id)
        if update.callback_query.message:
            card_message_id = update.callback_query.message.message_id

    for action in actions:
        if isinstance(action, SendMessage):
            await bot.send_message(
                chat_id=chat_id,
                text=action.text,
                reply_markup=_keyboard_by_name(action.keyboard),
            )
        elif isinstance(action, SendPeopleList):
            await _send_people_list(bot, chat_id, action.people, phone_region)
            if session.deleted_row is not None:
                await session.deleted_row.on_person_restored(action.people)
                if session.deleted_row.visible:
                    session.deleted_row = None
        elif isinstance(action, SendPersonForm):
            await bot.send_message(
                chat_id=chat_id,
                text=format_person_form(action.title, action.person),
                reply_markup=person_form_keyboard(),
            )
        elif isinstance(action, DeletePerson):
            session.deleted_row = await _run_delete(
                bot,
                chat_id,
                card_message_id,
                action.person,
                session.view_model,
                messages,
                animation_duration,
            )

    await ErrorHandler(
        session.view_model, _snackbar(bot, chat_id), animation_duration=animation_duration
    ).process()

    # Back on the list: no pending form state
    if new_state_value == "people_list":
        new_slots = {}
    session.state_value = new_state_value
    session.slots = new_slots
