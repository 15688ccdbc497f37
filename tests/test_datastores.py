"""InMemoryDataStore, JsonDataStore, Seed, and PersonRepository error wrapping."""

import json

import pytest

from peoplebook.application import Error, PersonRepository, Success
from peoplebook.domain import (
    DataStoreError,
    Person,
    PersonAlreadyExistsError,
    PersonNotFoundError,
)
from peoplebook.infrastructure import InMemoryDataStore, JsonDataStore, Seed


@pytest.fixture(params=["memory", "json"])
def store(request, tmp_path):
    if request.param == "memory":
        return InMemoryDataStore()
    return JsonDataStore(tmp_path / "people.json")


def test_insert_select_update_delete(store):
    arne = Person(first_name="Arne", last_name="Arndt", email="arne@gmx.de")
    store.insert(arne)
    assert store.select_by_id(arne.id) == arne
    assert store.select_all() == [arne]

    changed = arne.copy(last_name="Becker", phone="0151 12345678")
    store.update(changed)
    assert store.select_by_id(arne.id) == changed

    store.delete(changed)
    assert store.select_by_id(arne.id) is None
    assert store.select_all() == []


def test_insert_keeps_order(store):
    people = [Person(first_name=n, last_name="Test") for n in ("Zoe", "Arne", "Klaus")]
    for p in people:
        store.insert(p)
    assert [p.first_name for p in store.select_all()] == ["Zoe", "Arne", "Klaus"]


def test_insert_existing_id_raises(store):
    arne = Person(first_name="Arne", last_name="Arndt")
    store.insert(arne)
    with pytest.raises(PersonAlreadyExistsError):
        store.insert(arne.copy(first_name="Other"))


def test_update_and_delete_missing_raise(store):
    ghost = Person(first_name="Ghost", last_name="Writer")
    with pytest.raises(PersonNotFoundError):
        store.update(ghost)
    with pytest.raises(PersonNotFoundError):
        store.delete(ghost)


def test_json_store_persists_across_instances(tmp_path):
    path = tmp_path / "data" / "people.json"
    arne = Person(first_name="Arne", last_name="Arndt", image_path="images/arne.jpg")
    JsonDataStore(path).insert(arne)

    assert JsonDataStore(path).select_all() == [arne]
    document = json.loads(path.read_text(encoding="utf-8"))
    assert document["people"][0]["first_name"] == "Arne"
    assert document["people"][0]["email"] is None


def test_json_store_seeds_missing_file(tmp_path):
    path = tmp_path / "people.json"
    store = JsonDataStore(path, seed=Seed(count=5))
    people = store.select_all()
    assert len(people) == 5
    assert path.exists()
    # An existing file is never re-seeded
    store.delete(people[0])
    assert len(JsonDataStore(path, seed=Seed(count=5)).select_all()) == 4


def test_json_store_corrupt_file_raises(tmp_path):
    path = tmp_path / "people.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(DataStoreError):
        JsonDataStore(path).select_all()
    path.write_text(json.dumps({"people": [{"first_name": "No id"}]}), encoding="utf-8")
    with pytest.raises(DataStoreError):
        JsonDataStore(path).select_all()


def _failing_write(people):
    raise DataStoreError("disk full")


def test_json_store_failed_write_keeps_previous_state(tmp_path, monkeypatch):
    path = tmp_path / "people.json"
    arne = Person(first_name="Arne", last_name="Arndt")
    store = JsonDataStore(path)
    store.insert(arne)
    monkeypatch.setattr(store, "_write", _failing_write)

    berta = Person(first_name="Berta", last_name="Bauer")
    with pytest.raises(DataStoreError):
        store.insert(berta)
    assert store.select_by_id(berta.id) is None
    with pytest.raises(DataStoreError):
        store.update(arne.copy(last_name="Vogel"))
    assert store.select_by_id(arne.id) == arne
    with pytest.raises(DataStoreError):
        store.delete(arne)
    assert store.select_all() == [arne]
    assert JsonDataStore(path).select_all() == [arne]


def test_json_store_failed_seed_write_is_retried(tmp_path, monkeypatch):
    store = JsonDataStore(tmp_path / "people.json", seed=Seed(count=3))
    monkeypatch.setattr(store, "_write", _failing_write)
    with pytest.raises(DataStoreError):
        store.select_all()
    monkeypatch.undo()
    assert len(store.select_all()) == 3
    assert (tmp_path / "people.json").exists()


def test_repository_reports_failed_write(tmp_path, monkeypatch):
    store = JsonDataStore(tmp_path / "people.json")
    repository = PersonRepository(store)
    monkeypatch.setattr(store, "_write", _failing_write)
    arne = Person(first_name="Arne", last_name="Arndt")
    result = repository.create(arne)
    assert isinstance(result, Error)
    assert str(result.throwable) == "disk full"
    assert repository.get_all().data == []


def test_seed_is_deterministic():
    first = Seed(count=26, rng_seed=7).people()
    second = Seed(count=26, rng_seed=7).people()
    assert first == second
    assert len({p.id for p in first}) == 26
    assert all(p.email and "@" in p.email for p in first)
    assert Seed(count=3, rng_seed=8).people() != Seed(count=3, rng_seed=7).people()


def test_repository_wraps_results():
    repo = PersonRepository(InMemoryDataStore())
    arne = Person(first_name="Arne", last_name="Arndt")
    assert repo.create(arne) == Success()
    assert repo.get_all() == Success([arne])
    assert repo.get_by_id(arne.id) == Success(arne)
    assert repo.get_by_id("nonexistent-uuid") == Success(None)

    duplicate = repo.create(arne)
    assert isinstance(duplicate, Error)
    assert isinstance(duplicate.throwable, PersonAlreadyExistsError)

    assert repo.remove(arne) == Success()
    assert isinstance(repo.update(arne), Error)
    assert isinstance(repo.remove(arne), Error)
