"""Pydantic schemas for posts, comments and reactions."""

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from domain.entities.content import Comment, Post, Reaction


class MediaItemSchema(BaseModel):
    """Media hosted elsewhere and referenced by URL."""

    model_config = ConfigDict(populate_by_name=True)

    type: Literal["image", "video"]
    url: str = Field(..., min_length=1, max_length=2000)
    thumbnail_url: str | None = Field(None, alias="thumbnailUrl", max_length=2000)
    width: int | None = Field(None, gt=0)
    height: int | None = Field(None, gt=0)


class PostCreate(BaseModel):
    """Schema for creating a post."""

    title: str | None = Field(None, max_length=200)
    body: str | None = Field(None, max_length=10000)
    media: list[MediaItemSchema] = Field(default_factory=list, max_length=20)


class PostResponse(BaseModel):
    id: UUID
    group_id: UUID
    author_id: UUID
    title: str | None
    body: str | None
    media: list[MediaItemSchema]
    created_at: datetime

    @classmethod
    def from_entity(cls, post: Post) -> "PostResponse":
        return cls(
            id=post.id,
            group_id=post.group_id,
            author_id=post.author_id,
            title=post.title,
            body=post.body,
            media=[MediaItemSchema.model_validate(item.to_dict()) for item in post.media],
            created_at=post.created_at,
        )


class PostDetailResponse(BaseModel):
    data: PostResponse


class CommentCreate(BaseModel):
    """Schema for a comment. ``parent_id`` makes it a reply."""

    text: str = Field(..., max_length=2000)
    parent_id: UUID | None = None


class CommentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    post_id: UUID
    member_id: UUID
    parent_id: UUID | None
    text: str
    created_at: datetime


class CommentDetailResponse(BaseModel):
    data: CommentResponse

    @classmethod
    def from_entity(cls, comment: Comment) -> "CommentDetailResponse":
        return cls(data=CommentResponse.model_validate(comment))


class ReactionCreate(BaseModel):
    emoji: str = Field(..., max_length=16)


class ReactionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    post_id: UUID
    member_id: UUID
    emoji: str
    created_at: datetime


class ReactionDetailResponse(BaseModel):
    data: ReactionResponse

    @classmethod
    def from_entity(cls, reaction: Reaction) -> "ReactionDetailResponse":
        return cls(data=ReactionResponse.model_validate(reaction))
