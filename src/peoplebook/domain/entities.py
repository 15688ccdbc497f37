"""Domain entity: Person."""

import uuid
from dataclasses import asdict, dataclass, field, replace


def new_uuid() -> str:
    return str(uuid.uuid4())


def as8(value: str | None) -> str:
    """Short form of an id for log lines."""
    return (value or "")[:8]


@dataclass(frozen=True)
class Person:
    """
    A contact the user keeps in the address book.
    Format rules live in PersonValidator; the entity only carries the fields.
    """

    id: str = field(default_factory=new_uuid)
    first_name: str = ""
    last_name: str = ""
    email: str | None = None
    phone: str | None = None
    image_path: str | None = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def copy(self, **changes) -> "Person":
        return replace(self, **changes)

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "Person":
        person_id = (data.get("id") or "").strip()
        if not person_id:
            raise ValueError("Person record must have an id.")
        return cls(
            id=person_id,
            first_name=data.get("first_name") or "",
            last_name=data.get("last_name") or "",
            email=data.get("email") or None,
            phone=data.get("phone") or None,
            image_path=data.get("image_path") or None,
        )
