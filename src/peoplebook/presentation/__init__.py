"""Presentation layer: view-models, intents, UI state, and channel-independent list behaviour."""

from peoplebook.presentation.base_view_model import BaseViewModel
from peoplebook.presentation.error_handler import ErrorHandler
from peoplebook.presentation.people_list import (
    SwipePersonListItem,
    SwipeValue,
    people_sorted,
)
from peoplebook.presentation.person_view_model import PersonViewModel
from peoplebook.presentation.state_flow import MutableStateFlow, StateFlow
from peoplebook.presentation.ui_state import (
    ErrorState,
    PeopleUiState,
    PersonUiState,
    SnackbarDuration,
    SnackbarResult,
)
from peoplebook.presentation.validator import PersonValidator

__all__ = [
    "BaseViewModel",
    "ErrorHandler",
    "ErrorState",
    "MutableStateFlow",
    "PeopleUiState",
    "PersonUiState",
    "PersonValidator",
    "PersonViewModel",
    "SnackbarDuration",
    "SnackbarResult",
    "StateFlow",
    "SwipePersonListItem",
    "SwipeValue",
    "people_sorted",
]
