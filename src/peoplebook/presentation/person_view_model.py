"""View-model for the people list and the person input/detail form.

Intents come in through on_process_person_intent / on_process_people_intent;
state goes out through person_ui_state, people_ui_state and error_state.
"""

import logging

from peoplebook.application import Error, PersonRepository, Success
from peoplebook.domain import Person, as8, new_uuid
from peoplebook.presentation import intents
from peoplebook.presentation.base_view_model import BaseViewModel
from peoplebook.presentation.state_flow import MutableStateFlow, StateFlow
from peoplebook.presentation.ui_state import (
    PeopleUiState,
    PersonUiState,
    SnackbarDuration,
)
from peoplebook.presentation.validator import PersonValidator

logger = logging.getLogger(__name__)

TAG = "PersonViewModel"
PERSON_NOT_FOUND = "Person not found"


def _trim_optional(value: str | None) -> str | None:
    if value is None:
        return None
    return value.strip() or None


class PersonViewModel(BaseViewModel):
    def __init__(self, repository: PersonRepository, validator: PersonValidator) -> None:
        super().__init__(TAG)
        self._repository = repository
        self._validator = validator
        self._person_ui_state_flow = MutableStateFlow(PersonUiState())
        self.person_ui_state: StateFlow[PersonUiState] = self._person_ui_state_flow.as_state_flow()
        self._people_ui_state_flow = MutableStateFlow(PeopleUiState())
        self.people_ui_state: StateFlow[PeopleUiState] = self._people_ui_state_flow.as_state_flow()
        # Single-slot undo buffer for the last removed person.
        self._removed_person: Person | None = None

    @property
    def removed_person(self) -> Person | None:
        return self._removed_person

    # --- person form ---

    def on_process_person_intent(self, intent: intents.PersonIntent) -> None:
        if isinstance(intent, intents.FirstNameChange):
            self._on_field_change("first_name", intent.first_name.strip())
        elif isinstance(intent, intents.LastNameChange):
            self._on_field_change("last_name", intent.last_name.strip())
        elif isinstance(intent, intents.EmailChange):
            self._on_field_change("email", _trim_optional(intent.email))
        elif isinstance(intent, intents.PhoneChange):
            self._on_field_change("phone", _trim_optional(intent.phone))
        elif isinstance(intent, intents.ImagePathChange):
            self._on_field_change("image_path", _trim_optional(intent.image_path))
        elif isinstance(intent, intents.Clear):
            self._clear_state()
        elif isinstance(intent, intents.FetchById):
            self._fetch_by_id(intent.id)
        elif isinstance(intent, intents.Create):
            self._create()
        elif isinstance(intent, intents.Update):
            self._update()
        elif isinstance(intent, intents.Remove):
            self._remove(intent.person)
        elif isinstance(intent, intents.Undo):
            self._undo_remove()
        else:
            raise TypeError(f"Unknown person intent: {intent!r}")

    def _on_field_change(self, field_name: str, value: str | None) -> None:
        if getattr(self._person_ui_state_flow.value.person, field_name) == value:
            return
        self._person_ui_state_flow.update(
            lambda state: PersonUiState(person=state.person.copy(**{field_name: value}))
        )

    def _clear_state(self) -> None:
        self._person_ui_state_flow.value = PersonUiState(person=Person(id=new_uuid()))

    def _fetch_by_id(self, person_id: str) -> None:
        result = self._repository.get_by_id(person_id)
        if isinstance(result, Error):
            self.handle_error_event(throwable=result.throwable)
            return
        if result.data is None:
            self.handle_error_event(message=PERSON_NOT_FOUND)
            return
        logger.debug("fetch_by_id: %s", as8(result.data.id))
        self._person_ui_state_flow.value = PersonUiState(person=result.data)

    def _create(self) -> None:
        logger.debug("create")
        result = self._repository.create(self._person_ui_state_flow.value.person)
        if isinstance(result, Success):
            self._fetch()
        else:
            self.handle_error_event(throwable=result.throwable)

    def _update(self) -> None:
        logger.debug("update")
        result = self._repository.update(self._person_ui_state_flow.value.person)
        if isinstance(result, Success):
            self._fetch()
        else:
            self.handle_error_event(throwable=result.throwable)

    def _remove(self, person: Person) -> None:
        self._removed_person = person
        logger.debug("remove: %s", as8(person.id))
        result = self._repository.remove(person)
        if isinstance(result, Success):
            self._fetch()
        else:
            self.handle_error_event(throwable=result.throwable)

    def _undo_remove(self) -> None:
        person = self._removed_person
        if person is None:
            return
        logger.debug("undo_remove: %s", as8(person.id))
        result = self._repository.create(person)
        if isinstance(result, Success):
            self._removed_person = None
            self._fetch()
        else:
            self.handle_error_event(throwable=result.throwable)

    def validate(self) -> bool:
        """Validate the form person. Only the first failure is published."""
        person = self._person_ui_state_flow.value.person
        checks = (
            self._validator.validate_first_name(person.first_name),
            self._validator.validate_last_name(person.last_name),
            self._validator.validate_email(person.email),
            self._validator.validate_phone(person.phone),
        )
        for is_error, message in checks:
            if is_error:
                self.handle_error_event(
                    message=message,
                    with_dismiss_action=True,
                    on_dismissed=lambda: None,
                    duration=SnackbarDuration.LONG,
                )
                return False
        return True

    # --- people list ---

    def on_process_people_intent(self, intent: intents.PeopleIntent) -> None:
        if isinstance(intent, intents.Fetch):
            self._fetch()
        else:
            raise TypeError(f"Unknown people intent: {intent!r}")

    def _fetch(self) -> None:
        result = self._repository.get_all()
        if isinstance(result, Error):
            self.handle_error_event(throwable=result.throwable)
            return
        people = tuple(result.data)
        logger.debug("fetch: %d people", len(people))
        if people == self._people_ui_state_flow.value.people:
            logger.debug("fetch: equal data, skipping update")
            return
        self._people_ui_state_flow.value = PeopleUiState(people=people)
