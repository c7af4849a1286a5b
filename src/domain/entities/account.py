"""Account domain entity."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID, uuid4


@dataclass
class Account:
    """Domain entity for a durable platform account."""

    email: str
    password_hash: str
    id: UUID = field(default_factory=uuid4)
    username: str | None = None
    avatar_url: str | None = None
    created_at: datetime = field(default_factory=datetime.utcnow)

    @property
    def default_display_name(self) -> str:
        """Name used when the account creates a group without choosing one."""
        if self.username:
            return self.username
        local_part = self.email.split("@", 1)[0]
        return local_part if len(local_part) >= 2 else self.email
