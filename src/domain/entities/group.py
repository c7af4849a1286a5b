"""Group and membership domain entities."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID, uuid4


@dataclass
class Group:
    """Domain entity for a trip group."""

    slug: str
    name: str
    id: UUID = field(default_factory=uuid4)
    password_hash: str | None = None
    created_at: datetime = field(default_factory=datetime.utcnow)

    @property
    def is_password_protected(self) -> bool:
        return self.password_hash is not None


@dataclass
class Membership:
    """The acting identity of a person inside one group.

    A membership without an ``account_id`` is a guest. Once an account is
    attached the membership is linked, and it never goes back.
    """

    group_id: UUID
    display_name: str
    id: UUID = field(default_factory=uuid4)
    account_id: UUID | None = None
    email: str | None = None
    is_admin: bool = False
    created_at: datetime = field(default_factory=datetime.utcnow)

    @property
    def is_guest(self) -> bool:
        return self.account_id is None

    def link(self, account_id: UUID) -> None:
        """Attach an account. Linking is one-directional."""
        if self.account_id is not None and self.account_id != account_id:
            raise ValueError(f"Membership {self.id} is already linked to another account")
        self.account_id = account_id


@dataclass
class AccountGroup:
    """Read model for the account dashboard: a group and the account's role in it."""

    group_id: UUID
    slug: str
    name: str
    membership_id: UUID
    is_admin: bool
