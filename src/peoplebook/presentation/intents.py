"""User intents processed by PersonViewModel."""

from dataclasses import dataclass

from peoplebook.domain import Person


class PersonIntent:
    """Intents of the person input/detail form and the list item actions."""


@dataclass(frozen=True)
class FirstNameChange(PersonIntent):
    first_name: str


@dataclass(frozen=True)
class LastNameChange(PersonIntent):
    last_name: str


@dataclass(frozen=True)
class EmailChange(PersonIntent):
    email: str | None


@dataclass(frozen=True)
class PhoneChange(PersonIntent):
    phone: str | None


@dataclass(frozen=True)
class ImagePathChange(PersonIntent):
    image_path: str | None


@dataclass(frozen=True)
class Clear(PersonIntent):
    pass


@dataclass(frozen=True)
class FetchById(PersonIntent):
    id: str


@dataclass(frozen=True)
class Create(PersonIntent):
    pass


@dataclass(frozen=True)
class Update(PersonIntent):
    pass


@dataclass(frozen=True)
class Remove(PersonIntent):
    person: Person


@dataclass(frozen=True)
class Undo(PersonIntent):
    pass


class PeopleIntent:
    """Intents of the people list screen."""


@dataclass(frozen=True)
class Fetch(PeopleIntent):
    pass
