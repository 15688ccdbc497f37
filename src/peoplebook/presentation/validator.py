"""Form field validation. Every check returns (is_error, message)."""

from email_validator import EmailNotValidError, validate_email

from peoplebook.infrastructure.phone import normalize_phone

NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 16

FIRST_NAME_TOO_SHORT = f"First name too short (min. {NAME_MIN_LENGTH} characters)"
FIRST_NAME_TOO_LONG = f"First name too long (max. {NAME_MAX_LENGTH} characters)"
LAST_NAME_TOO_SHORT = f"Last name too short (min. {NAME_MIN_LENGTH} characters)"
LAST_NAME_TOO_LONG = f"Last name too long (max. {NAME_MAX_LENGTH} characters)"
EMAIL_INVALID = "Email address is invalid"
PHONE_INVALID = "Phone number is invalid"

OK = (False, "")


class PersonValidator:
    def __init__(self, phone_region: str | None = "DE") -> None:
        self._phone_region = phone_region

    def validate_first_name(self, first_name: str | None) -> tuple[bool, str]:
        return _validate_name(first_name, FIRST_NAME_TOO_SHORT, FIRST_NAME_TOO_LONG)

    def validate_last_name(self, last_name: str | None) -> tuple[bool, str]:
        return _validate_name(last_name, LAST_NAME_TOO_SHORT, LAST_NAME_TOO_LONG)

    def validate_email(self, email: str | None) -> tuple[bool, str]:
        """Email is optional; a given address must be syntactically valid."""
        if email is None or not email.strip():
            return OK
        try:
            validate_email(email.strip(), check_deliverability=False)
        except EmailNotValidError:
            return (True, EMAIL_INVALID)
        return OK

    def validate_phone(self, phone: str | None) -> tuple[bool, str]:
        """Phone is optional; a given number must be valid for phone_region
        unless it carries its own country code."""
        if phone is None or not phone.strip():
            return OK
        if normalize_phone(phone, default_region=self._phone_region) is None:
            return (True, PHONE_INVALID)
        return OK


def _validate_name(name: str | None, too_short: str, too_long: str) -> tuple[bool, str]:
    name = (name or "").strip()
    if len(name) < NAME_MIN_LENGTH:
        return (True, too_short)
    if len(name) > NAME_MAX_LENGTH:
        return (True, too_long)
    return OK
