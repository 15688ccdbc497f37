"""Errors raised by data stores. PersonRepository turns them into ResultData.Error."""


class DataStoreError(Exception):
    """Base error for persistence failures."""


class PersonNotFoundError(DataStoreError):
    def __init__(self, person_id: str) -> None:
        super().__init__(f"Person with id {person_id} not found")
        self.person_id = person_id


class PersonAlreadyExistsError(DataStoreError):
    def __init__(self, person_id: str) -> None:
        super().__init__(f"Person with id {person_id} already exists")
        self.person_id = person_id
