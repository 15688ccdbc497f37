"""Repository over a DataStore. Every call returns ResultData instead of raising."""

import logging

from peoplebook.application.dto import Error, ResultData, Success
from peoplebook.application.ports import DataStore
from peoplebook.domain import DataStoreError, Person, as8

logger = logging.getLogger(__name__)


class PersonRepository:
    def __init__(self, data_store: DataStore) -> None:
        self._data_store = data_store

    def get_all(self) -> ResultData:
        try:
            return Success(self._data_store.select_all())
        except DataStoreError as e:
            logger.error("get_all failed: %s", e)
            return Error(e)

    def get_by_id(self, person_id: str) -> ResultData:
        """Success(None) when the id is unknown; Error only for store failures."""
        try:
            return Success(self._data_store.select_by_id(person_id))
        except DataStoreError as e:
            logger.error("get_by_id %s failed: %s", as8(person_id), e)
            return Error(e)

    def create(self, person: Person) -> ResultData:
        try:
            self._data_store.insert(person)
            return Success()
        except DataStoreError as e:
            logger.error("create %s failed: %s", as8(person.id), e)
            return Error(e)

    def update(self, person: Person) -> ResultData:
        try:
            self._data_store.update(person)
            return Success()
        except DataStoreError as e:
            logger.error("update %s failed: %s", as8(person.id), e)
            return Error(e)

    def remove(self, person: Person) -> ResultData:
        try:
            self._data_store.delete(person)
            return Success()
        except DataStoreError as e:
            logger.error("remove %s failed: %s", as8(person.id), e)
            return Error(e)
