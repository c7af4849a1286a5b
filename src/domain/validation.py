"""Input normalisation shared by the domain services.

Every helper returns the cleaned value or raises ValidationFailedError.
"""

import re

from core.exceptions import ValidationFailedError

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9_.-]{3,32}$")
SLUG_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")

MIN_DISPLAY_NAME_LENGTH = 2
MAX_DISPLAY_NAME_LENGTH = 50
MIN_PASSWORD_LENGTH = 8
MAX_SLUG_LENGTH = 64
MAX_GROUP_NAME_LENGTH = 100


def clean_display_name(display_name: str) -> str:
    name = " ".join(display_name.split())
    if len(name) < MIN_DISPLAY_NAME_LENGTH:
        raise ValidationFailedError("Please enter a name", field="display_name")
    if len(name) > MAX_DISPLAY_NAME_LENGTH:
        raise ValidationFailedError("Name is too long", field="display_name")
    return name


def clean_email(email: str) -> str:
    value = email.strip().lower()
    if not EMAIL_PATTERN.match(value):
        raise ValidationFailedError("Invalid email address", field="email")
    return value


def clean_optional_email(email: str | None) -> str | None:
    """Blank emails count as "not supplied"."""
    if email is None or not email.strip():
        return None
    return clean_email(email)


def check_password(password: str, field: str = "password") -> str:
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationFailedError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters", field=field
        )
    return password


def clean_username(username: str) -> str:
    value = username.strip()
    if not USERNAME_PATTERN.match(value):
        raise ValidationFailedError(
            "Username must be 3-32 letters, digits, '.', '_' or '-'", field="username"
        )
    return value


def clean_slug(slug: str) -> str:
    value = slug.strip().lower()
    if len(value) > MAX_SLUG_LENGTH or not SLUG_PATTERN.match(value):
        raise ValidationFailedError(
            "Slug may only contain lowercase letters, digits and single dashes", field="slug"
        )
    return value


def clean_group_name(name: str) -> str:
    value = name.strip()
    if not value or len(value) > MAX_GROUP_NAME_LENGTH:
        raise ValidationFailedError("Please enter a trip name", field="name")
    return value
