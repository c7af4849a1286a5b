"""Post, comment and reaction API routes."""

from uuid import UUID

from fastapi import APIRouter, Depends, Request, status

from api.dependencies.auth import Sessions
from api.v1.dependencies import get_content_service
from api.v1.schemas.content import (
    CommentCreate,
    CommentDetailResponse,
    ReactionCreate,
    ReactionDetailResponse,
)
from core.rate_limit import WRITE_LIMIT, limiter
from domain.services.content_service import ContentService

posts_router = APIRouter(prefix="/posts", tags=["posts"])
comments_router = APIRouter(prefix="/comments", tags=["posts"])


@posts_router.delete(
    "/{post_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a post",
    responses={
        204: {"description": "Post deleted"},
        403: {"description": "Admins only"},
        404: {"description": "Post not found"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def delete_post(
    request: Request,
    post_id: UUID,
    sessions: Sessions,
    service: ContentService = Depends(get_content_service),
) -> None:
    await service.delete_post(post_id, sessions)
    return None


@posts_router.post(
    "/{post_id}/comments",
    response_model=CommentDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Comment on a post",
    responses={
        201: {"description": "Comment created"},
        400: {"description": "Empty text or reply nested too deep"},
        403: {"description": "Not a member"},
        404: {"description": "Post or parent comment not found"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def post_comment(
    request: Request,
    post_id: UUID,
    body: CommentCreate,
    sessions: Sessions,
    service: ContentService = Depends(get_content_service),
) -> CommentDetailResponse:
    comment = await service.post_comment(post_id, sessions, body.text, parent_id=body.parent_id)
    return CommentDetailResponse.from_entity(comment)


@posts_router.post(
    "/{post_id}/reactions",
    response_model=ReactionDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="React to a post",
    responses={
        201: {"description": "Reaction recorded"},
        403: {"description": "Not a member"},
        404: {"description": "Post not found"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def add_reaction(
    request: Request,
    post_id: UUID,
    body: ReactionCreate,
    sessions: Sessions,
    service: ContentService = Depends(get_content_service),
) -> ReactionDetailResponse:
    reaction = await service.add_reaction(post_id, sessions, body.emoji)
    return ReactionDetailResponse.from_entity(reaction)


@comments_router.delete(
    "/{comment_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a comment",
    responses={
        204: {"description": "Comment deleted"},
        403: {"description": "Admins only"},
        404: {"description": "Comment not found"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def delete_comment(
    request: Request,
    comment_id: UUID,
    sessions: Sessions,
    service: ContentService = Depends(get_content_service),
) -> None:
    await service.delete_comment(comment_id, sessions)
    return None
