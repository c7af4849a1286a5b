"""Membership repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.group import AccountGroup, Membership


class IMembershipRepository(Protocol):
    """Repository interface for Membership entities."""

    async def get(self, id: UUID) -> Membership | None:
        """Get a membership by ID."""
        ...

    async def get_for_account(self, group_id: UUID, account_id: UUID) -> Membership | None:
        """Get the membership an account holds in a group (oldest first if duplicated)."""
        ...

    async def find_unlinked_match(
        self, group_id: UUID, display_name: str, email: str | None
    ) -> Membership | None:
        """Find a guest membership matching the name or the email, case-insensitively."""
        ...

    async def list_unlinked_by_email(self, email: str) -> list[Membership]:
        """Get guest memberships across all groups whose email equals ``email``."""
        ...

    async def list_for_group(self, group_id: UUID) -> list[Membership]:
        """Get all memberships of a group, newest first."""
        ...

    async def list_groups_for_account(self, account_id: UUID) -> list[AccountGroup]:
        """Get the groups an account holds a membership in."""
        ...

    async def count_for_group(self, group_id: UUID) -> int:
        """Count memberships in a group."""
        ...

    async def create(self, membership: Membership) -> Membership:
        """Create a new membership."""
        ...

    async def update(self, membership: Membership) -> Membership:
        """Persist account link, email, display name and admin flag."""
        ...

    async def delete(self, id: UUID) -> bool:
        """Delete a membership."""
        ...
