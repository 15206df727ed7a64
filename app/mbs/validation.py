"""
Validation rules for everything a visitor or admin can submit.

Each validate_* function takes raw form/JSON input and returns
(record, errors): a normalized record and an empty dict on success, or None and
a {field: [messages]} mapping on failure. Malformed input never raises.
"""
from __future__ import annotations

import math
import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

FieldErrors = dict[str, list[str]]

# Same grammar the original site's form library enforced: no leading dot,
# no consecutive dots, dotted domain ending in a 2+ letter TLD.
EMAIL_RE = re.compile(
    r"^(?!\.)(?!.*\.\.)[A-Z0-9_'+\-.]*[A-Z0-9_+\-]@(?:[A-Z0-9][A-Z0-9\-]*\.)+[A-Z]{2,}$",
    re.IGNORECASE,
)

NAME_MIN_LENGTH = 2
COMMENT_MIN_LENGTH = 20
PASSWORD_MIN_LENGTH = 6
RATING_MIN = 1
RATING_MAX = 5

RATING_ERROR = "Rating must be between 1 and 5 stars."
INVALID_VALUE = "Invalid value."


@dataclass(frozen=True)
class ContactRules:
    require_name: bool = True
    name_min_length: int = NAME_MIN_LENGTH
    message_min_length: int = 10
    require_subject: bool = False

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "ContactRules":
        return cls(
            require_name=bool(config.get("CONTACT_REQUIRE_NAME", True)),
            message_min_length=int(config.get("CONTACT_MESSAGE_MIN_LENGTH", 10)),
            require_subject=bool(config.get("CONTACT_REQUIRE_SUBJECT", False)),
        )


@dataclass(frozen=True)
class ContactInput:
    name: str
    email: str
    message: str
    subject: str | None = None


@dataclass(frozen=True)
class TestimonialInput:
    client_name: str
    comment: str
    rating: int | None = None


@dataclass(frozen=True)
class Credentials:
    email: str
    password: str


@dataclass(frozen=True)
class PasswordChange:
    password: str


def _scalar(raw: Mapping[str, Any], key: str, errors: FieldErrors) -> str:
    """Read a field as text. Lists, objects and booleans from JSON bodies are a field error."""
    value = raw.get(key)
    if value is None:
        return ""
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        _add(errors, key, INVALID_VALUE)
        return ""
    return str(value)


def _text(raw: Mapping[str, Any], key: str, errors: FieldErrors) -> str:
    return _scalar(raw, key, errors).strip()


def _add(errors: FieldErrors, field: str, message: str) -> None:
    messages = errors.setdefault(field, [])
    # a malformed value gets one message, not a cascade of rule failures
    if INVALID_VALUE not in messages:
        messages.append(message)


def is_valid_email(value: str) -> bool:
    return bool(value) and len(value) <= 320 and EMAIL_RE.match(value) is not None


def coerce_rating(value: Any) -> tuple[int | None, str | None]:
    """
    Normalize an optional star rating. "" / None / whitespace mean "no rating";
    "3", "3.0", 3 and 3.0 all become 3. Anything else is an error.
    """
    if value is None:
        return None, None
    if isinstance(value, bool):
        return None, RATING_ERROR
    if isinstance(value, str):
        v = value.strip()
        if not v:
            return None, None
        try:
            number = float(v)
        except ValueError:
            return None, RATING_ERROR
    elif isinstance(value, (int, float)):
        number = float(value)
    else:
        return None, RATING_ERROR

    if not math.isfinite(number) or not number.is_integer():
        return None, RATING_ERROR
    rating = int(number)
    if rating < RATING_MIN or rating > RATING_MAX:
        return None, RATING_ERROR
    return rating, None


def validate_contact(raw: Mapping[str, Any], rules: ContactRules | None = None) -> tuple[ContactInput | None, FieldErrors]:
    rules = rules or ContactRules()
    errors: FieldErrors = {}

    name = _text(raw, "name", errors)
    email = _text(raw, "email", errors)
    message = _text(raw, "message", errors)
    subject = _text(raw, "subject", errors)

    if rules.require_name and len(name) < rules.name_min_length:
        _add(errors, "name", f"Name must be at least {rules.name_min_length} characters.")
    if not is_valid_email(email):
        _add(errors, "email", "Please enter a valid email address.")
    if len(message) < rules.message_min_length:
        if rules.message_min_length <= 1:
            _add(errors, "message", "Message is required.")
        else:
            _add(errors, "message", f"Message must be at least {rules.message_min_length} characters.")
    if rules.require_subject and not subject:
        _add(errors, "subject", "Subject is required.")

    if errors:
        return None, errors
    return ContactInput(name=name, email=email, message=message, subject=subject or None), {}


def validate_testimonial(raw: Mapping[str, Any]) -> tuple[TestimonialInput | None, FieldErrors]:
    errors: FieldErrors = {}

    client_name = _text(raw, "client_name", errors)
    comment = _text(raw, "comment", errors)

    if len(client_name) < NAME_MIN_LENGTH:
        _add(errors, "client_name", f"Name must be at least {NAME_MIN_LENGTH} characters.")
    if len(comment) < COMMENT_MIN_LENGTH:
        _add(errors, "comment", f"Comment must be at least {COMMENT_MIN_LENGTH} characters.")
    rating, rating_error = coerce_rating(raw.get("rating"))
    if rating_error:
        _add(errors, "rating", rating_error)

    if errors:
        return None, errors
    return TestimonialInput(client_name=client_name, comment=comment, rating=rating), {}


def validate_credentials(raw: Mapping[str, Any]) -> tuple[Credentials | None, FieldErrors]:
    errors: FieldErrors = {}

    email = _text(raw, "email", errors).lower()
    # Passwords are taken verbatim.
    password = _scalar(raw, "password", errors)

    if not is_valid_email(email):
        _add(errors, "email", "Please enter a valid email address.")
    if len(password) < PASSWORD_MIN_LENGTH:
        _add(errors, "password", f"Password must be at least {PASSWORD_MIN_LENGTH} characters.")

    if errors:
        return None, errors
    return Credentials(email=email, password=password), {}


def validate_password_change(raw: Mapping[str, Any]) -> tuple[PasswordChange | None, FieldErrors]:
    errors: FieldErrors = {}

    password = _scalar(raw, "password", errors)
    confirm = _scalar(raw, "confirmPassword", errors)

    if len(password) < PASSWORD_MIN_LENGTH:
        _add(errors, "password", f"Password must be at least {PASSWORD_MIN_LENGTH} characters.")
    if password != confirm:
        _add(errors, "confirmPassword", "Passwords do not match.")

    if errors:
        return None, errors
    return PasswordChange(password=password), {}
