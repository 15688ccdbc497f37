"""Immutable UI state snapshots published by the view-models."""

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum

from peoplebook.domain import Person, new_uuid


class SnackbarDuration(Enum):
    SHORT = "short"
    LONG = "long"
    INDEFINITE = "indefinite"


class SnackbarResult(Enum):
    DISMISSED = "dismissed"
    ACTION_PERFORMED = "action_performed"


@dataclass(frozen=True)
class PersonUiState:
    """The person currently shown in the input/detail form."""

    person: Person = field(default_factory=lambda: Person(id=new_uuid()))


@dataclass(frozen=True)
class PeopleUiState:
    people: tuple[Person, ...] = ()


@dataclass(frozen=True)
class ErrorState:
    """A transient message for the UI: shown once, then cleared.
    With action_label set it carries an action (e.g. Undo) run by on_action_perform.
    """

    message: str
    action_label: str | None = None
    with_dismiss_action: bool = False
    duration: SnackbarDuration = SnackbarDuration.SHORT
    on_action_perform: Callable[[], None] | None = field(default=None, compare=False)
    on_dismissed: Callable[[], None] | None = field(default=None, compare=False)
