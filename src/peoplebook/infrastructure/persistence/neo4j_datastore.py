"""Neo4j implementation of DataStore.
Graph: one (:Person {id, first_name, last_name, email, phone, image_path, created_at}) node per contact.
Ids are unique by constraint (ensure_person_constraint); order is creation time.
"""

from datetime import datetime, timezone

from neo4j.exceptions import Neo4jError

from peoplebook.domain import (
    DataStoreError,
    Person,
    PersonAlreadyExistsError,
    PersonNotFoundError,
)

_CONSTRAINT_QUERY = """
CREATE CONSTRAINT person_id_unique IF NOT EXISTS
FOR (p:Person) REQUIRE p.id IS UNIQUE
"""

_SELECT_ALL_QUERY = """
MATCH (p:Person)
RETURN p
ORDER BY p.created_at, p.id
"""

_SELECT_BY_ID_QUERY = """
MATCH (p:Person {id: $id})
RETURN p
"""

_INSERT_QUERY = """
OPTIONAL MATCH (existing:Person {id: $id})
WITH existing
WHERE existing IS NULL
CREATE (p:Person {
    id: $id,
    first_name: $first_name,
    last_name: $last_name,
    email: $email,
    phone: $phone,
    image_path: $image_path,
    created_at: $created_at
})
RETURN p.id AS id
"""

_UPDATE_QUERY = """
MATCH (p:Person {id: $id})
SET p.first_name = $first_name,
    p.last_name = $last_name,
    p.email = $email,
    p.phone = $phone,
    p.image_path = $image_path
RETURN p.id AS id
"""

_DELETE_QUERY = """
MATCH (p:Person {id: $id})
DETACH DELETE p
RETURN count(p) AS deleted
"""


def ensure_person_constraint(driver) -> None:
    """Create unique constraint on Person(id) if missing."""
    with driver.session() as session:
        session.run(_CONSTRAINT_QUERY)


def _person_params(person: Person) -> dict:
    return {
        "id": person.id,
        "first_name": person.first_name,
        "last_name": person.last_name,
        "email": person.email or "",
        "phone": person.phone or "",
        "image_path": person.image_path or "",
    }


class Neo4jDataStore:
    """Stores people as Person nodes. Neo4j driver errors surface as DataStoreError."""

    def __init__(self, driver: object) -> None:
        self._driver = driver

    def select_all(self) -> list[Person]:
        try:
            with self._driver.session() as session:
                result = session.run(_SELECT_ALL_QUERY)
                return [_record_to_person(rec) for rec in result]
        except Neo4jError as e:
            raise DataStoreError(str(e)) from e

    def select_by_id(self, person_id: str) -> Person | None:
        try:
            with self._driver.session() as session:
                record = session.run(_SELECT_BY_ID_QUERY, id=person_id).single()
        except Neo4jError as e:
            raise DataStoreError(str(e)) from e
        if not record:
            return None
        return _record_to_person(record)

    def insert(self, person: Person) -> None:
        created_at = datetime.now(timezone.utc).isoformat()
        try:
            with self._driver.session() as session:
                record = session.run(
                    _INSERT_QUERY, created_at=created_at, **_person_params(person)
                ).single()
        except Neo4jError as e:
            raise DataStoreError(str(e)) from e
        if record is None:
            raise PersonAlreadyExistsError(person.id)

    def update(self, person: Person) -> None:
        try:
            with self._driver.session() as session:
                record = session.run(_UPDATE_QUERY, **_person_params(person)).single()
        except Neo4jError as e:
            raise DataStoreError(str(e)) from e
        if record is None:
            raise PersonNotFoundError(person.id)

    def delete(self, person: Person) -> None:
        try:
            with self._driver.session() as session:
                record = session.run(_DELETE_QUERY, id=person.id).single()
        except Neo4jError as e:
            raise DataStoreError(str(e)) from e
        if not record or not record["deleted"]:
            raise PersonNotFoundError(person.id)


def _record_to_person(record) -> Person:
    p = record["p"]
    # Empty strings are stored for missing optionals.
    return Person(
        id=p["id"],
        first_name=p.get("first_name") or "",
        last_name=p.get("last_name") or "",
        email=p.get("email") or None,
        phone=p.get("phone") or None,
        image_path=p.get("image_path") or None,
    )
