"""Result wrapper returned by PersonRepository."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Success:
    data: Any = None


@dataclass(frozen=True)
class Error:
    throwable: BaseException


ResultData = Success | Error
