"""Pydantic schemas for Group and Membership API."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from domain.entities.group import Group, Membership
from domain.entities.identity import ActingIdentity, IdentityKind


class GroupCreate(BaseModel):
    """Schema for creating a group."""

    slug: str = Field(..., min_length=1, max_length=64)
    name: str = Field(..., min_length=1, max_length=100)
    password: str | None = Field(None, max_length=256)
    display_name: str | None = Field(None, max_length=50)


class GroupUpdate(BaseModel):
    """Schema for updating group settings. Omitted fields stay unchanged."""

    name: str | None = Field(None, min_length=1, max_length=100)
    slug: str | None = Field(None, min_length=1, max_length=64)
    password: str | None = Field(None, max_length=256)
    remove_password: bool = False


class JoinRequest(BaseModel):
    """Schema for joining a group.

    Without a display name the caller only passes the password gate.
    """

    password: str | None = Field(None, max_length=256)
    display_name: str | None = Field(None, max_length=50)
    email: str | None = Field(None, max_length=255)


class MemberCreate(BaseModel):
    """Schema for choosing a display name after the password gate."""

    display_name: str = Field(..., max_length=50)
    email: str | None = Field(None, max_length=255)


class GroupResponse(BaseModel):
    """Schema for Group response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    slug: str
    name: str
    is_password_protected: bool
    created_at: datetime

    @classmethod
    def from_entity(cls, group: Group) -> "GroupResponse":
        return cls(
            id=group.id,
            slug=group.slug,
            name=group.name,
            is_password_protected=group.is_password_protected,
            created_at=group.created_at,
        )


class MembershipResponse(BaseModel):
    """Schema for Membership response. Contact emails are not exposed."""

    id: UUID
    group_id: UUID
    display_name: str
    is_admin: bool
    is_registered: bool
    is_current_user: bool = False
    created_at: datetime

    @classmethod
    def from_entity(
        cls, membership: Membership, is_current_user: bool = False
    ) -> "MembershipResponse":
        return cls(
            id=membership.id,
            group_id=membership.group_id,
            display_name=membership.display_name,
            is_admin=membership.is_admin,
            is_registered=not membership.is_guest,
            is_current_user=is_current_user,
            created_at=membership.created_at,
        )


class IdentityResponse(BaseModel):
    """Who the caller is inside one group."""

    kind: IdentityKind
    is_authenticated: bool
    passed_gate: bool
    membership: MembershipResponse | None = None

    @classmethod
    def from_identity(cls, identity: ActingIdentity) -> "IdentityResponse":
        return cls(
            kind=identity.kind,
            is_authenticated=identity.is_authenticated,
            passed_gate=identity.passed_gate,
            membership=(
                MembershipResponse.from_entity(identity.membership, is_current_user=True)
                if identity.membership
                else None
            ),
        )


class GroupDetailResponse(BaseModel):
    """Schema for single Group response."""

    data: GroupResponse
    membership: MembershipResponse | None = None


class GroupViewResponse(BaseModel):
    """Schema for a group together with the caller's identity in it."""

    data: GroupResponse
    identity: IdentityResponse


class JoinResponse(BaseModel):
    """Schema for the outcome of a join or display name request."""

    group_id: UUID
    membership_established: bool
    membership: MembershipResponse | None = None


class MemberDetailResponse(BaseModel):
    data: MembershipResponse


class MemberListResponse(BaseModel):
    """Schema for list of group members, newest first."""

    data: list[MembershipResponse]
    meta: dict[str, Any] = Field(default_factory=dict)
