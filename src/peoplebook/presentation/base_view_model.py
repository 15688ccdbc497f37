"""Shared error channel for view-models: one transient ErrorState at a time."""

import logging
from collections.abc import Callable

from peoplebook.presentation.state_flow import MutableStateFlow, StateFlow
from peoplebook.presentation.ui_state import ErrorState, SnackbarDuration

logger = logging.getLogger(__name__)


class BaseViewModel:
    def __init__(self, tag: str) -> None:
        self._tag = tag
        self._error_state_flow: MutableStateFlow[ErrorState | None] = MutableStateFlow(None)
        self.error_state: StateFlow[ErrorState | None] = self._error_state_flow.as_state_flow()

    def handle_error_event(
        self,
        throwable: BaseException | None = None,
        message: str | None = None,
        action_label: str | None = None,
        with_dismiss_action: bool = False,
        on_action_perform: Callable[[], None] | None = None,
        on_dismissed: Callable[[], None] | None = None,
        duration: SnackbarDuration = SnackbarDuration.SHORT,
    ) -> None:
        """Publish an error for the UI. The throwable's text wins over message."""
        error_message = (str(throwable) if throwable else "") or message or "Unknown error"
        logger.error("%s: %s", self._tag, error_message)
        self._error_state_flow.value = ErrorState(
            message=error_message,
            action_label=action_label,
            with_dismiss_action=with_dismiss_action,
            duration=duration,
            on_action_perform=on_action_perform,
            on_dismissed=on_dismissed,
        )

    def handle_undo_event(
        self,
        message: str,
        action_label: str,
        on_action_perform: Callable[[], None],
        duration: SnackbarDuration = SnackbarDuration.LONG,
    ) -> None:
        """Publish an offer to undo the last destructive action."""
        logger.debug("%s: undo offered: %s", self._tag, message)
        self._error_state_flow.value = ErrorState(
            message=message,
            action_label=action_label,
            with_dismiss_action=True,
            duration=duration,
            on_action_perform=on_action_perform,
        )

    def clear_error_state(self) -> None:
        self._error_state_flow.value = None
