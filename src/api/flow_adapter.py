"""
Adapter: map chat events to XState events and machine states to effects.

The machine (xstate_machine) only knows screen navigation; every effect
(intents sent to PersonViewModel, messages, forms) lives here. Effects return
actions; the Telegram layer performs them.
"""

from dataclasses import dataclass
from typing import Any

from api.flow_loader import get_messages
from api.xstate_machine import get_machine, transition
from peoplebook.domain import Person
from peoplebook.presentation import PersonViewModel, people_sorted
from peoplebook.presentation import intents


@dataclass
class SendMessage:
    text: str
    keyboard: str | None = None


@dataclass
class SendPeopleList:
    people: list[Person]


@dataclass
class SendPersonForm:
    title: str
    person: Person


@dataclass
class DeletePerson:
    """Run the swipe delete sequence for person, then offer undo."""

    person: Person


@dataclass
class SetSlots:
    slots: dict[str, Any]


@dataclass
class ClearSlots:
    keys: list[str]


WAITING_STATES = frozenset({"people_list", "editing", "awaiting_field"})

MODE_CREATE = "create"
MODE_UPDATE = "update"

# field -> (label, optional)
FORM_FIELDS: dict[str, tuple[str, bool]] = {
    "first_name": ("first name", False),
    "last_name": ("last name", False),
    "email": ("email address", True),
    "phone": ("phone number", True),
    "image_path": ("image path", True),
}

CLEAR_VALUE = "-"


def event_to_xstate(event: dict) -> str | None:
    """Map adapter event (type, subtype) to XState event string."""
    etype = event.get("type")
    subtype = event.get("subtype")
    if etype == "callback":
        return {
            "cmd_list": "CALLBACK_LIST",
            "cmd_add": "CALLBACK_ADD",
            "edit": "CALLBACK_EDIT",
            "delete": "CALLBACK_DELETE",
            "undo": "CALLBACK_UNDO",
            "field": "CALLBACK_FIELD",
            "save": "CALLBACK_SAVE",
            "cancel": "CALLBACK_CANCEL",
        }.get(subtype, None)
    if etype == "text":
        return {
            "command_start": "TEXT_COMMAND_START",
            "command_list": "TEXT_COMMAND_LIST",
            "command_add": "TEXT_COMMAND_ADD",
            "field_value": "TEXT_FIELD_VALUE",
            "unsupported": "TEXT_UNSUPPORTED",
        }.get(subtype, None)
    return None


def _format_message(messages: dict, message_id: str, template_vars: dict | None = None) -> str:
    text = messages.get(message_id) or message_id
    for k, v in (template_vars or {}).items():
        text = text.replace("{" + k + "}", str(v) if v is not None else "")
    return text


def _apply_field(view_model: PersonViewModel, field: str, value: str | None) -> None:
    if field == "first_name":
        view_model.on_process_person_intent(intents.FirstNameChange(value or ""))
    elif field == "last_name":
        view_model.on_process_person_intent(intents.LastNameChange(value or ""))
    elif field == "email":
        view_model.on_process_person_intent(intents.EmailChange(value))
    elif field == "phone":
        view_model.on_process_person_intent(intents.PhoneChange(value))
    elif field == "image_path":
        view_model.on_process_person_intent(intents.ImagePathChange(value))


def _find_person(view_model: PersonViewModel, person_id: str) -> Person | None:
    view_model.on_process_people_intent(intents.Fetch())
    for person in view_model.people_ui_state.value.people:
        if person.id == person_id:
            return person
    return None


def _run_effect(
    state_value: str,
    event: dict,
    slots: dict,
    view_model: PersonViewModel,
    messages: dict,
) -> tuple[list, str | None]:
    """
    Run effect for state_value. Return (actions, outcome_event).
    outcome_event is the XState event to send next (e.g. DONE, SAVED).
    """
    actions: list = []
    payload = event.get("payload") or {}

    if state_value == "welcome":
        actions.append(SendMessage(text=_format_message(messages, "welcome"), keyboard="main"))
        return actions, "DONE"

    if state_value == "show_list":
        view_model.on_process_people_intent(intents.Fetch())
        people = people_sorted(view_model.people_ui_state.value)
        actions.append(ClearSlots(keys=["mode", "field"]))
        if not people:
            actions.append(SendMessage(text=_format_message(messages, "empty_list"), keyboard="main"))
        else:
            actions.append(SendPeopleList(people=people))
        return actions, "DONE"

    if state_value == "open_input":
        view_model.on_process_person_intent(intents.Clear())
        actions.append(ClearSlots(keys=["field"]))
        actions.append(SetSlots(slots={"mode": MODE_CREATE}))
        actions.append(
            SendPersonForm(
                title=_format_message(messages, "form_title_create"),
                person=view_model.person_ui_state.value.person,
            )
        )
        return actions, "DONE"

    if state_value == "open_detail":
        person_id = payload.get("person_id") or ""
        view_model.on_process_person_intent(intents.FetchById(person_id))
        person = view_model.person_ui_state.value.person
        if not person_id or person.id != person_id:
            # FetchById published the error; ErrorHandler shows it.
            return actions, "NOT_FOUND"
        actions.append(ClearSlots(keys=["field"]))
        actions.append(SetSlots(slots={"mode": MODE_UPDATE}))
        actions.append(
            SendPersonForm(title=_format_message(messages, "form_title_update"), person=person)
        )
        return actions, "FOUND"

    if state_value == "prompt_field":
        field = payload.get("field") or ""
        if field not in FORM_FIELDS:
            return actions, "INVALID"
        label, optional = FORM_FIELDS[field]
        message_id = "field_prompt_optional" if optional else "field_prompt"
        actions.append(SetSlots(slots={"field": field}))
        actions.append(SendMessage(text=_format_message(messages, message_id, {"field": label})))
        return actions, "DONE"

    if state_value == "apply_field":
        field = slots.get("field") or ""
        text = (payload.get("text") or "").strip()
        value = None if text == CLEAR_VALUE else text
        _apply_field(view_model, field, value)
        actions.append(ClearSlots(keys=["field"]))
        title_id = "form_title_update" if slots.get("mode") == MODE_UPDATE else "form_title_create"
        actions.append(
            SendPersonForm(
                title=_format_message(messages, title_id),
                person=view_model.person_ui_state.value.person,
            )
        )
        return actions, "DONE"

    if state_value == "save_person":
        actions.append(ClearSlots(keys=["field"]))
        if not view_model.validate():
            return actions, "INVALID"
        if slots.get("mode") == MODE_UPDATE:
            view_model.on_process_person_intent(intents.Update())
        else:
            view_model.on_process_person_intent(intents.Create())
        if view_model.error_state.value is not None:
            return actions, "FAILED"
        person = view_model.person_ui_state.value.person
        actions.append(
            SendMessage(text=_format_message(messages, "person_saved", {"name": person.full_name}))
        )
        return actions, "SAVED"

    if state_value == "cancel_form":
        actions.append(ClearSlots(keys=["mode", "field"]))
        return actions, "DONE"

    if state_value == "delete_person":
        person_id = payload.get("person_id") or ""
        person = _find_person(view_model, person_id) if person_id else None
        actions.append(ClearSlots(keys=["mode", "field"]))
        if person is None:
            actions.append(SendMessage(text=_format_message(messages, "person_not_found")))
            return actions, "DONE"
        actions.append(DeletePerson(person=person))
        return actions, "DONE"

    if state_value == "undo_delete":
        if view_model.removed_person is None:
            actions.append(SendMessage(text=_format_message(messages, "nothing_to_undo")))
            return actions, "DONE"
        view_model.on_process_person_intent(intents.Undo())
        return actions, "DONE"

    if state_value == "unsupported_msg":
        actions.append(SendMessage(text=_format_message(messages, "unsupported"), keyboard="main"))
        return actions, "DONE"

    if state_value == "form_unsupported":
        actions.append(SendMessage(text=_format_message(messages, "form_unsupported")))
        return actions, "DONE"

    if state_value == "form_expired":
        actions.append(SendMessage(text=_format_message(messages, "form_expired"), keyboard="main"))
        return actions, "DONE"

    return actions, None


def run_xstate_flow(
    state_value: str | None,
    event: dict,
    context: dict,
    view_model: PersonViewModel,
    machine: dict | None = None,
    messages: dict | None = None,
) -> tuple[list, str, dict]:
    """
    Run one step: transition with event, run effects until we hit a waiting state.
    Returns (actions, new_state_value, new_context).
    """
    if machine is None:
        machine = get_machine()
    if messages is None:
        messages = get_messages()
    slots = dict(context or {})
    all_actions: list = []
    current = state_value or machine.get("initial", "people_list")
    xevent = event_to_xstate(event)
    if xevent is None:
        return all_actions, current, slots
    max_steps = 50
    for _ in range(max_steps):
        next_state = transition(machine, current, xevent)
        if next_state is None:
            break
        current = next_state
        if current in WAITING_STATES:
            break
        effect_actions, outcome = _run_effect(current, event, slots, view_model, messages)
        all_actions.extend(effect_actions)
        for a in effect_actions:
            if isinstance(a, SetSlots):
                slots.update(a.slots)
            if isinstance(a, ClearSlots):
                for k in a.keys:
                    slots.pop(k, None)
        if outcome is None:
            break
        xevent = outcome
    return all_actions, current, slots
