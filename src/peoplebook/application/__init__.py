"""Application layer: repository, ports, and result DTOs. Depends only on domain."""

from peoplebook.application.dto import Error, ResultData, Success
from peoplebook.application.person_repository import PersonRepository
from peoplebook.application.ports import DataStore

__all__ = [
    "DataStore",
    "Error",
    "PersonRepository",
    "ResultData",
    "Success",
]
