"""Infrastructure layer: concrete implementations of application ports."""

from peoplebook.infrastructure.json_datastore import JsonDataStore
from peoplebook.infrastructure.memory_datastore import InMemoryDataStore
from peoplebook.infrastructure.persistence.neo4j_datastore import (
    Neo4jDataStore,
    ensure_person_constraint,
)
from peoplebook.infrastructure.phone import format_phone, normalize_phone
from peoplebook.infrastructure.seed import Seed

__all__ = [
    "InMemoryDataStore",
    "JsonDataStore",
    "Neo4jDataStore",
    "Seed",
    "ensure_person_constraint",
    "format_phone",
    "normalize_phone",
]
