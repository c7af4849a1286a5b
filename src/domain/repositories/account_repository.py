"""Account repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.account import Account


class IAccountRepository(Protocol):
    """Repository interface for Account entities."""

    async def get(self, id: UUID) -> Account | None:
        """Get an account by ID."""
        ...

    async def get_by_email(self, email: str) -> Account | None:
        """Get an account by its (normalised) email."""
        ...

    async def get_by_username(self, username: str) -> Account | None:
        """Get an account by username (case-insensitive)."""
        ...

    async def create(self, account: Account) -> Account:
        """Create a new account."""
        ...

    async def update(self, account: Account) -> Account:
        """Persist username, avatar and password changes."""
        ...
