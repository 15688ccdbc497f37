"""Dependency wiring: singletons and the view-model factory.

    container = define_modules(settings)
    view_model = container.get(PersonViewModel)  # new instance per call
"""

import logging
from collections.abc import Callable
from typing import Any, TypeVar

from neo4j import GraphDatabase

from peoplebook.application import DataStore, PersonRepository
from peoplebook.config import STORES, ConfigError, Settings
from peoplebook.infrastructure import (
    InMemoryDataStore,
    JsonDataStore,
    Neo4jDataStore,
    Seed,
    ensure_person_constraint,
)
from peoplebook.infrastructure.json_datastore import FILE_NAME
from peoplebook.presentation import PersonValidator, PersonViewModel

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Container:
    """Type-keyed registry. single() providers run once; factory() providers run per get()."""

    def __init__(self) -> None:
        self._providers: dict[type, Callable[["Container"], Any]] = {}
        self._singles: set[type] = set()
        self._instances: dict[type, Any] = {}
        self._closers: list[Callable[[], None]] = []

    def single(self, key: type[T], provider: Callable[["Container"], T]) -> None:
        logger.info("single    -> %s", key.__name__)
        self._providers[key] = provider
        self._singles.add(key)
        self._instances.pop(key, None)

    def factory(self, key: type[T], provider: Callable[["Container"], T]) -> None:
        logger.info("factory   -> %s", key.__name__)
        self._providers[key] = provider
        self._singles.discard(key)
        self._instances.pop(key, None)

    def get(self, key: type[T]) -> T:
        if key in self._instances:
            return self._instances[key]
        provider = self._providers.get(key)
        if provider is None:
            raise LookupError(f"No provider registered for {key.__name__}")
        instance = provider(self)
        if key in self._singles:
            self._instances[key] = instance
        return instance

    def on_close(self, closer: Callable[[], None]) -> None:
        self._closers.append(closer)

    def close(self) -> None:
        """Release resources held by singletons (e.g. the Neo4j driver)."""
        while self._closers:
            self._closers.pop()()


def _data_store(settings: Settings, container: Container) -> DataStore:
    if settings.store == "memory":
        return InMemoryDataStore(container.get(Seed).people() if settings.seed else None)
    if settings.store == "json":
        return JsonDataStore(
            settings.data_dir / FILE_NAME,
            seed=container.get(Seed) if settings.seed else None,
        )
    if settings.store == "neo4j":
        driver = GraphDatabase.driver(
            settings.neo4j_uri, auth=(settings.neo4j_user, settings.neo4j_password)
        )
        container.on_close(driver.close)
        ensure_person_constraint(driver)
        return Neo4jDataStore(driver)
    raise ConfigError(f"Unknown store {settings.store!r}")  # pragma: no cover


def define_modules(settings: Settings) -> Container:
    if settings.store not in STORES:
        raise ConfigError(f"Unknown store {settings.store!r}")
    container = Container()
    container.single(Seed, lambda c: Seed())
    container.single(DataStore, lambda c: _data_store(settings, c))
    container.single(PersonRepository, lambda c: PersonRepository(c.get(DataStore)))
    container.single(PersonValidator, lambda c: PersonValidator(settings.phone_region))
    container.factory(
        PersonViewModel,
        lambda c: PersonViewModel(c.get(PersonRepository), c.get(PersonValidator)),
    )
    return container
