"""Session repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.session import AccountSession, GuestSession


class ISessionRepository(Protocol):
    """Repository interface for account and guest sessions."""

    async def create_account_session(self, session: AccountSession) -> AccountSession:
        """Store a new account session."""
        ...

    async def get_account_session(self, id: str) -> AccountSession | None:
        """Look up an account session by its exact token."""
        ...

    async def delete_account_session(self, id: str) -> bool:
        """Delete a single account session."""
        ...

    async def create_guest_session(self, session: GuestSession) -> GuestSession:
        """Store a new guest session."""
        ...

    async def get_guest_session(self, id: str) -> GuestSession | None:
        """Look up a guest session by its exact token."""
        ...

    async def attach_membership(self, id: str, membership_id: UUID) -> None:
        """Point a guest session at a membership."""
        ...

    async def delete_guest_sessions_for_member(self, membership_id: UUID) -> int:
        """Delete every guest session pointing at a membership."""
        ...

    async def reassign_guest_sessions(self, from_membership_id: UUID, to_membership_id: UUID) -> int:
        """Re-point guest sessions from one membership to another."""
        ...
