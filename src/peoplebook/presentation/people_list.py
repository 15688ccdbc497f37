"""People list behaviour independent of the rendering channel.

SwipePersonListItem models one list row: swiping start-to-end edits,
swiping end-to-start deletes. A delete is deferred until the exit animation
has run, then on_delete and on_undo (offer to undo) are called in that order.
The row stays hidden (is_delete) until on_person_restored sees it again.
"""

import asyncio
import logging
from collections.abc import Callable
from enum import Enum

from peoplebook.domain import Person
from peoplebook.presentation.ui_state import PeopleUiState

logger = logging.getLogger(__name__)

DEFAULT_ANIMATION_DURATION = 0.5
RESTORE_DELAY = 0.1


class SwipeValue(Enum):
    SETTLED = "settled"
    START_TO_END = "start_to_end"
    END_TO_START = "end_to_start"


def people_sorted(state: PeopleUiState) -> list[Person]:
    """List screen order: by first name, then last name."""
    return sorted(state.people, key=lambda p: (p.first_name.lower(), p.last_name.lower()))


class SwipePersonListItem:
    def __init__(
        self,
        person: Person,
        on_edit: Callable[[str], None],
        on_delete: Callable[[], None],
        on_undo: Callable[[], None],
        animation_duration: float = DEFAULT_ANIMATION_DURATION,
    ) -> None:
        self.person = person
        self._on_edit = on_edit
        self._on_delete = on_delete
        self._on_undo = on_undo
        self._animation_duration = animation_duration
        self.is_delete = False

    @property
    def visible(self) -> bool:
        return not self.is_delete

    def confirm_value_change(self, target: SwipeValue) -> bool:
        """Return True only when the row may settle at target."""
        if target is SwipeValue.START_TO_END:
            logger.debug("Swipe to edit %s", self.person.full_name)
            self._on_edit(self.person.id)
            return False
        if target is SwipeValue.END_TO_START:
            logger.debug("Swipe to delete %s", self.person.full_name)
            self.is_delete = True
            return False
        return True

    async def run_delete_sequence(self) -> None:
        if not self.is_delete:
            return
        await asyncio.sleep(self._animation_duration)
        logger.debug("Delete %s", self.person.full_name)
        self._on_delete()
        logger.debug("Offer undo for %s", self.person.full_name)
        self._on_undo()

    async def on_person_restored(self, people: list[Person]) -> None:
        """Reset the row once the deleted person is back in the list."""
        if not self.is_delete:
            return
        if all(p.id != self.person.id for p in people):
            return
        logger.debug("%s was restored via undo", self.person.full_name)
        await asyncio.sleep(RESTORE_DELAY)
        self.is_delete = False
