"""
Peoplebook core: clean-architecture layout.

- domain: Person entity, id helpers, store errors. No outer dependencies.
- application: PersonRepository (ResultData wrapper), DataStore port.
- infrastructure: adapters (InMemoryDataStore, JsonDataStore, Neo4jDataStore).
- presentation: PersonViewModel, intents, UI state, list/error behaviour.
- di: container wiring singletons and the view-model factory.
"""

from peoplebook.application import DataStore, Error, PersonRepository, ResultData, Success
from peoplebook.domain import Person
from peoplebook.infrastructure import InMemoryDataStore, JsonDataStore, Neo4jDataStore, Seed
from peoplebook.presentation import PersonValidator, PersonViewModel

__all__ = [
    "DataStore",
    "Error",
    "InMemoryDataStore",
    "JsonDataStore",
    "Neo4jDataStore",
    "Person",
    "PersonRepository",
    "PersonValidator",
    "PersonViewModel",
    "ResultData",
    "Seed",
    "Success",
]
