"""SQLAlchemy implementation of the content repository."""

from uuid import UUID

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.content import Comment, MediaItem, Post, Reaction
from infrastructure.database.models import CommentModel, PostModel, ReactionModel


class SQLAlchemyContentRepository:
    """SQLAlchemy implementation of IContentRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    # --- Posts ---

    async def get_post(self, id: UUID) -> Post | None:
        model = await self._session.get(PostModel, id)
        return self._post_to_entity(model) if model else None

    async def create_post(self, post: Post) -> Post:
        model = PostModel(
            id=post.id,
            group_id=post.group_id,
            author_id=post.author_id,
            title=post.title,
            body=post.body,
            media=[item.to_dict() for item in post.media],
            created_at=post.created_at,
        )
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._post_to_entity(model)

    async def delete_post(self, id: UUID) -> bool:
        model = await self._session.get(PostModel, id)
        if not model:
            return False

        await self._session.delete(model)
        await self._session.flush()
        return True

    # --- Comments ---

    async def get_comment(self, id: UUID) -> Comment | None:
        model = await self._session.get(CommentModel, id)
        return self._comment_to_entity(model) if model else None

    async def create_comment(self, comment: Comment) -> Comment:
        model = CommentModel(
            id=comment.id,
            post_id=comment.post_id,
            member_id=comment.member_id,
            parent_id=comment.parent_id,
            text=comment.text,
            created_at=comment.created_at,
        )
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._comment_to_entity(model)

    async def delete_comment(self, id: UUID) -> bool:
        model = await self._session.get(CommentModel, id)
        if not model:
            return False

        await self._session.delete(model)
        await self._session.flush()
        return True

    # --- Reactions ---

    async def create_reaction(self, reaction: Reaction) -> Reaction:
        model = ReactionModel(
            id=reaction.id,
            post_id=reaction.post_id,
            member_id=reaction.member_id,
            emoji=reaction.emoji,
            created_at=reaction.created_at,
        )
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return Reaction(
            id=model.id,
            post_id=model.post_id,
            member_id=model.member_id,
            emoji=model.emoji,
            created_at=model.created_at,
        )

    async def reassign_member(self, from_membership_id: UUID, to_membership_id: UUID) -> None:
        """Move everything a duplicate membership authored onto the survivor."""
        await self._session.execute(
            update(PostModel)
            .where(PostModel.author_id == from_membership_id)
            .values(author_id=to_membership_id)
        )
        await self._session.execute(
            update(CommentModel)
            .where(CommentModel.member_id == from_membership_id)
            .values(member_id=to_membership_id)
        )
        await self._session.execute(
            update(ReactionModel)
            .where(ReactionModel.member_id == from_membership_id)
            .values(member_id=to_membership_id)
        )

    def _post_to_entity(self, model: PostModel) -> Post:
        return Post(
            id=model.id,
            group_id=model.group_id,
            author_id=model.author_id,
            title=model.title,
            body=model.body,
            media=[MediaItem.from_dict(item) for item in (model.media or [])],
            created_at=model.created_at,
        )

    def _comment_to_entity(self, model: CommentModel) -> Comment:
        return Comment(
            id=model.id,
            post_id=model.post_id,
            member_id=model.member_id,
            parent_id=model.parent_id,
            text=model.text,
            created_at=model.created_at,
        )
