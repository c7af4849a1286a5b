"""Post, comment and reaction domain entities."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from typing import Any
from uuid import UUID, uuid4


class MediaType(StrEnum):
    IMAGE = "image"
    VIDEO = "video"


@dataclass
class MediaItem:
    """Reference to media hosted elsewhere."""

    type: MediaType
    url: str
    thumbnail_url: str | None = None
    width: int | None = None
    height: int | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"type": self.type.value, "url": self.url}
        if self.thumbnail_url:
            data["thumbnailUrl"] = self.thumbnail_url
        if self.width is not None:
            data["width"] = self.width
        if self.height is not None:
            data["height"] = self.height
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MediaItem":
        return cls(
            type=MediaType(data["type"]),
            url=data["url"],
            thumbnail_url=data.get("thumbnailUrl"),
            width=data.get("width"),
            height=data.get("height"),
        )


@dataclass
class Post:
    """Domain entity for a group post."""

    group_id: UUID
    author_id: UUID
    id: UUID = field(default_factory=uuid4)
    title: str | None = None
    body: str | None = None
    media: list[MediaItem] = field(default_factory=list)
    created_at: datetime = field(default_factory=datetime.utcnow)


@dataclass
class Comment:
    """Domain entity for a comment or a reply to one."""

    post_id: UUID
    member_id: UUID
    text: str
    id: UUID = field(default_factory=uuid4)
    parent_id: UUID | None = None
    created_at: datetime = field(default_factory=datetime.utcnow)

    @property
    def is_reply(self) -> bool:
        return self.parent_id is not None


@dataclass
class Reaction:
    """Domain entity for an emoji reaction on a post."""

    post_id: UUID
    member_id: UUID
    emoji: str
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=datetime.utcnow)
