"""Shows a view-model's pending ErrorState once, then clears it."""

import asyncio
import logging
from collections.abc import Awaitable, Callable

from peoplebook.presentation.base_view_model import BaseViewModel
from peoplebook.presentation.ui_state import ErrorState, SnackbarResult

logger = logging.getLogger(__name__)


class ErrorHandler:
    def __init__(
        self,
        view_model: BaseViewModel,
        show: Callable[[ErrorState], Awaitable[SnackbarResult]],
        animation_duration: float = 0.5,
    ) -> None:
        self._view_model = view_model
        self._show = show
        self._animation_duration = animation_duration

    async def process(self) -> bool:
        """Show the pending error if any. Returns True when something was shown."""
        error_state = self._view_model.error_state.value
        if error_state is None:
            return False
        # Let a running exit animation finish before the message appears.
        await asyncio.sleep(self._animation_duration)
        result = await self._show(error_state)
        if result is SnackbarResult.ACTION_PERFORMED:
            if error_state.on_action_perform:
                error_state.on_action_perform()
        elif error_state.on_dismissed:
            error_state.on_dismissed()
        # Callbacks may have published a newer state; keep that one.
        if self._view_model.error_state.value is error_state:
            self._view_model.clear_error_state()
        return True
