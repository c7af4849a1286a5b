"""Session domain entities."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID


@dataclass
class AccountSession:
    """Platform-wide browser session for an account."""

    id: str
    account_id: UUID
    created_at: datetime = field(default_factory=datetime.utcnow)
    expires_at: datetime | None = None

    @property
    def is_expired(self) -> bool:
        """A session without an expiry never expires."""
        return self.expires_at is not None and datetime.utcnow() > self.expires_at


@dataclass
class GuestSession:
    """Per-browser session scoped to a single group.

    ``membership_id`` stays empty while the browser has only passed the
    password gate and has not picked a display name yet.
    """

    id: str
    group_id: UUID
    membership_id: UUID | None = None
    created_at: datetime = field(default_factory=datetime.utcnow)
    expires_at: datetime | None = None

    @property
    def is_expired(self) -> bool:
        return self.expires_at is not None and datetime.utcnow() > self.expires_at
