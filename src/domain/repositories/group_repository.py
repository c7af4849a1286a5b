"""Group repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.group import Group


class IGroupRepository(Protocol):
    """Repository interface for Group entities."""

    async def get(self, id: UUID) -> Group | None:
        """Get a group by ID."""
        ...

    async def get_by_slug(self, slug: str) -> Group | None:
        """Get a group by its slug."""
        ...

    async def lock(self, id: UUID) -> Group | None:
        """Get a group and hold a row lock on it until the transaction ends."""
        ...

    async def create(self, group: Group) -> Group:
        """Create a new group."""
        ...

    async def update(self, group: Group) -> Group:
        """Update name, slug and password of an existing group."""
        ...
