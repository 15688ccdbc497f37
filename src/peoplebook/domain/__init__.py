"""Domain layer: entities and errors. No dependencies on outer layers."""

from peoplebook.domain.entities import Person, as8, new_uuid
from peoplebook.domain.errors import (
    DataStoreError,
    PersonAlreadyExistsError,
    PersonNotFoundError,
)

__all__ = [
    "DataStoreError",
    "Person",
    "PersonAlreadyExistsError",
    "PersonNotFoundError",
    "as8",
    "new_uuid",
]
