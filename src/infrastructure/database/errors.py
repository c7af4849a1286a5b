"""Helpers for interpreting database driver errors."""

from sqlalchemy.exc import IntegrityError


def is_unique_violation(exc: IntegrityError, column: str | None = None) -> bool:
    """Return True if ``exc`` is a unique-constraint violation.

    PostgreSQL reports "duplicate key value", SQLite "UNIQUE constraint failed".
    When ``column`` is given the message must also mention it.
    """
    orig = str(exc.orig).lower() if exc.orig else ""
    if "unique" not in orig and "duplicate" not in orig:
        return False
    return column is None or column in orig
