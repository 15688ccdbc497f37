"""In-memory implementation of DataStore (no file, no DB)."""

from peoplebook.domain import Person, PersonAlreadyExistsError, PersonNotFoundError


class InMemoryDataStore:
    """Stores people in memory. Order preserved by insertion."""

    def __init__(self, people: list[Person] | None = None) -> None:
        self._by_id: dict[str, Person] = {}
        self._order: list[str] = []
        for person in people or []:
            self.insert(person)

    def select_all(self) -> list[Person]:
        return [self._by_id[pid] for pid in self._order]

    def select_by_id(self, person_id: str) -> Person | None:
        return self._by_id.get(person_id)

    def insert(self, person: Person) -> None:
        if person.id in self._by_id:
            raise PersonAlreadyExistsError(person.id)
        self._by_id[person.id] = person
        self._order.append(person.id)

    def update(self, person: Person) -> None:
        if person.id not in self._by_id:
            raise PersonNotFoundError(person.id)
        self._by_id[person.id] = person

    def delete(self, person: Person) -> None:
        if person.id not in self._by_id:
            raise PersonNotFoundError(person.id)
        del self._by_id[person.id]
        self._order.remove(person.id)
