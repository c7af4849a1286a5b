"""Content service: posts, comments and reactions inside a group."""

from collections.abc import Callable
from typing import Any
from uuid import UUID

import structlog

from core.exceptions import (
    CommentNotFoundError,
    GroupNotFoundError,
    NotAMemberError,
    PostNotFoundError,
    ReplyDepthExceededError,
    ValidationFailedError,
)
from domain.entities.content import Comment, MediaItem, Post, Reaction
from domain.entities.group import Membership
from domain.entities.identity import SessionTokens
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.authorization_service import AuthorizationService
from domain.services.membership_resolver import MembershipResolver

logger = structlog.get_logger()

MAX_COMMENT_LENGTH = 2000
MAX_EMOJI_LENGTH = 16


class ContentService:
    """Service layer for group content.

    Posting and moderation are admin-only; commenting and reacting need a
    membership in the post's group.
    """

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        resolver: MembershipResolver,
        authorization: AuthorizationService,
    ) -> None:
        self._uow_factory = uow_factory
        self._resolver = resolver
        self._authorization = authorization

    async def create_post(
        self,
        group_id: UUID,
        tokens: SessionTokens,
        title: str | None = None,
        body: str | None = None,
        media: list[dict[str, Any]] | None = None,
    ) -> Post:
        items = [self._parse_media(item) for item in media or []]
        title = title.strip() if title else None
        body = body.strip() if body else None
        if not (title or body or items):
            raise ValidationFailedError("A post needs text or media", field="body")

        async with self._uow_factory() as uow:
            group = await uow.groups.get(group_id)
            if not group:
                raise GroupNotFoundError(str(group_id))

            author = await self._authorization.check_admin(uow, group.id, tokens)
            post = await uow.content.create_post(
                Post(
                    group_id=group.id,
                    author_id=author.id,
                    title=title or None,
                    body=body or None,
                    media=items,
                )
            )
            await uow.commit()

        logger.info("post_created", group_id=str(group_id), post_id=str(post.id))
        return post

    async def delete_post(self, post_id: UUID, tokens: SessionTokens) -> None:
        async with self._uow_factory() as uow:
            post = await uow.content.get_post(post_id)
            if not post:
                raise PostNotFoundError(str(post_id))

            await self._authorization.check_admin(uow, post.group_id, tokens)
            await uow.content.delete_post(post.id)
            await uow.commit()

        logger.info("post_deleted", group_id=str(post.group_id), post_id=str(post_id))

    async def post_comment(
        self,
        post_id: UUID,
        tokens: SessionTokens,
        text: str,
        parent_id: UUID | None = None,
    ) -> Comment:
        """Comment on a post or reply to a top-level comment.

        Replies to replies are rejected: threads are at most two levels deep.
        """
        text = text.strip()
        if not text:
            raise ValidationFailedError("Comment cannot be empty", field="text")
        if len(text) > MAX_COMMENT_LENGTH:
            raise ValidationFailedError("Comment is too long", field="text")

        async with self._uow_factory() as uow:
            post = await uow.content.get_post(post_id)
            if not post:
                raise PostNotFoundError(str(post_id))

            member = await self._require_member(uow, post.group_id, tokens)

            if parent_id is not None:
                parent = await uow.content.get_comment(parent_id)
                if not parent or parent.post_id != post.id:
                    raise CommentNotFoundError(str(parent_id))
                if parent.is_reply:
                    raise ReplyDepthExceededError()

            comment = await uow.content.create_comment(
                Comment(post_id=post.id, member_id=member.id, text=text, parent_id=parent_id)
            )
            await uow.commit()
            return comment

    async def delete_comment(self, comment_id: UUID, tokens: SessionTokens) -> None:
        async with self._uow_factory() as uow:
            comment = await uow.content.get_comment(comment_id)
            if not comment:
                raise CommentNotFoundError(str(comment_id))

            post = await uow.content.get_post(comment.post_id)
            if not post:
                raise PostNotFoundError(str(comment.post_id))

            await self._authorization.check_admin(uow, post.group_id, tokens)
            await uow.content.delete_comment(comment.id)
            await uow.commit()

        logger.info("comment_deleted", group_id=str(post.group_id), comment_id=str(comment_id))

    async def add_reaction(self, post_id: UUID, tokens: SessionTokens, emoji: str) -> Reaction:
        emoji = emoji.strip()
        if not emoji or len(emoji) > MAX_EMOJI_LENGTH:
            raise ValidationFailedError("Invalid reaction", field="emoji")

        async with self._uow_factory() as uow:
            post = await uow.content.get_post(post_id)
            if not post:
                raise PostNotFoundError(str(post_id))

            member = await self._require_member(uow, post.group_id, tokens)
            reaction = await uow.content.create_reaction(
                Reaction(post_id=post.id, member_id=member.id, emoji=emoji)
            )
            await uow.commit()
            return reaction

    async def _require_member(
        self, uow: IUnitOfWork, group_id: UUID, tokens: SessionTokens
    ) -> Membership:
        identity = await self._resolver.resolve(uow, group_id, tokens)
        if identity.membership is None:
            raise NotAMemberError(str(group_id))
        return identity.membership

    @staticmethod
    def _parse_media(item: dict[str, Any]) -> MediaItem:
        try:
            media = MediaItem.from_dict(item)
        except (KeyError, ValueError) as exc:
            raise ValidationFailedError("Invalid media item", field="media") from exc
        if not media.url:
            raise ValidationFailedError("Invalid media item", field="media")
        return media
