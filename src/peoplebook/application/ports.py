"""Application ports (interfaces). Implemented by infrastructure adapters."""

from typing import Protocol

from peoplebook.domain import Person


class DataStore(Protocol):
    """Persists Person records. Raises DataStoreError subclasses on failure."""

    def select_all(self) -> list[Person]:
        """Return all people in a stable order."""
        ...

    def select_by_id(self, person_id: str) -> Person | None:
        """Return the person with the given id, or None."""
        ...

    def insert(self, person: Person) -> None:
        """Store a new person. Raises PersonAlreadyExistsError if the id is taken."""
        ...

    def update(self, person: Person) -> None:
        """Replace the stored person with the same id. Raises PersonNotFoundError."""
        ...

    def delete(self, person: Person) -> None:
        """Remove the person with the same id. Raises PersonNotFoundError."""
        ...
