"""Content repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.content import Comment, Post, Reaction


class IContentRepository(Protocol):
    """Repository interface for posts, comments and reactions."""

    async def get_post(self, id: UUID) -> Post | None:
        """Get a post by ID."""
        ...

    async def create_post(self, post: Post) -> Post:
        """Create a new post."""
        ...

    async def delete_post(self, id: UUID) -> bool:
        """Delete a post (cascades to comments and reactions)."""
        ...

    async def get_comment(self, id: UUID) -> Comment | None:
        """Get a comment by ID."""
        ...

    async def create_comment(self, comment: Comment) -> Comment:
        """Create a new comment."""
        ...

    async def delete_comment(self, id: UUID) -> bool:
        """Delete a comment (cascades to its replies)."""
        ...

    async def create_reaction(self, reaction: Reaction) -> Reaction:
        """Create a new reaction."""
        ...

    async def reassign_member(self, from_membership_id: UUID, to_membership_id: UUID) -> None:
        """Move authorship of posts, comments and reactions to another membership."""
        ...
