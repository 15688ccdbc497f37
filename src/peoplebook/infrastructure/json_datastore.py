"""JSON document implementation of DataStore: one file holding all people.

Document shape: {"people": [{"id", "first_name", "last_name", "email",
"phone", "image_path"}, ...]}. The file is read on first access and
rewritten (temp file + replace) after every mutation.
"""

import json
import logging
import os
from pathlib import Path

from peoplebook.domain import (
    DataStoreError,
    Person,
    PersonAlreadyExistsError,
    PersonNotFoundError,
)
from peoplebook.infrastructure.seed import Seed

logger = logging.getLogger(__name__)

FILE_NAME = "people.json"


class JsonDataStore:
    def __init__(self, path: Path, seed: Seed | None = None) -> None:
        self._path = Path(path)
        self._seed = seed
        self._people: list[Person] | None = None

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> list[Person]:
        if self._people is not None:
            return self._people
        if not self._path.exists():
            people = self._seed.people() if self._seed else []
            logger.info(
                "Creating %s with %d seed people", self._path, len(people)
            )
            self._write(people)
            self._people = people
            return self._people
        try:
            document = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise DataStoreError(f"Cannot read {self._path}: {e}") from e
        if not isinstance(document, dict) or not isinstance(
            document.get("people"), list
        ):
            raise DataStoreError(f"{self._path} has no 'people' list")
        try:
            self._people = [Person.from_dict(item) for item in document["people"]]
        except (AttributeError, ValueError) as e:
            raise DataStoreError(f"Invalid person record in {self._path}: {e}") from e
        logger.debug("Loaded %d people from %s", len(self._people), self._path)
        return self._people

    def _write(self, people: list[Person]) -> None:
        """Write people atomically; self._people is left to the caller."""
        document = {"people": [p.to_dict() for p in people]}
        tmp = self._path.with_suffix(self._path.suffix + ".tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(
                json.dumps(document, ensure_ascii=False, indent=2), encoding="utf-8"
            )
            os.replace(tmp, self._path)
        except OSError as e:
            raise DataStoreError(f"Cannot write {self._path}: {e}") from e

    def _index_of(self, person_id: str) -> int:
        for index, person in enumerate(self._load()):
            if person.id == person_id:
                return index
        return -1

    def select_all(self) -> list[Person]:
        return list(self._load())

    def select_by_id(self, person_id: str) -> Person | None:
        index = self._index_of(person_id)
        return self._load()[index] if index >= 0 else None

    def insert(self, person: Person) -> None:
        if self._index_of(person.id) >= 0:
            raise PersonAlreadyExistsError(person.id)
        people = [*self._load(), person]
        self._write(people)
        self._people = people

    def update(self, person: Person) -> None:
        index = self._index_of(person.id)
        if index < 0:
            raise PersonNotFoundError(person.id)
        people = list(self._load())
        people[index] = person
        self._write(people)
        self._people = people

    def delete(self, person: Person) -> None:
        index = self._index_of(person.id)
        if index < 0:
            raise PersonNotFoundError(person.id)
        people = list(self._load())
        del people[index]
        self._write(people)
        self._people = people
