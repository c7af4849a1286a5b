"""Member administration API routes."""

from uuid import UUID

from fastapi import APIRouter, Depends, Request, status

from api.dependencies.auth import Sessions
from api.v1.dependencies import get_authorization_service
from api.v1.schemas.common import CountResponse
from api.v1.schemas.group import MemberDetailResponse, MembershipResponse
from core.rate_limit import WRITE_LIMIT, limiter
from domain.services.authorization_service import AuthorizationService

router = APIRouter(prefix="/members", tags=["members"])


@router.patch(
    "/{member_id}/admin",
    response_model=MemberDetailResponse,
    summary="Toggle admin rights",
    responses={
        200: {"description": "Admin flag flipped"},
        400: {"description": "Own membership or guest target"},
        403: {"description": "Admins only"},
        404: {"description": "Member not found"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def toggle_admin(
    request: Request,
    member_id: UUID,
    sessions: Sessions,
    service: AuthorizationService = Depends(get_authorization_service),
) -> MemberDetailResponse:
    """Promote or demote another registered member."""
    member = await service.toggle_admin(member_id, sessions)
    return MemberDetailResponse(data=MembershipResponse.from_entity(member))


@router.delete(
    "/{member_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove a member",
    responses={
        204: {"description": "Member and their guest sessions deleted"},
        400: {"description": "Cannot remove yourself"},
        403: {"description": "Admins only"},
        404: {"description": "Member not found"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def delete_member(
    request: Request,
    member_id: UUID,
    sessions: Sessions,
    service: AuthorizationService = Depends(get_authorization_service),
) -> None:
    await service.delete_member(member_id, sessions)
    return None


@router.delete(
    "/{member_id}/sessions",
    response_model=CountResponse,
    summary="Sign out a member's guest browsers",
    responses={
        200: {"description": "Guest sessions deleted, membership kept"},
        403: {"description": "Admins only"},
        404: {"description": "Member not found"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def revoke_member_sessions(
    request: Request,
    member_id: UUID,
    sessions: Sessions,
    service: AuthorizationService = Depends(get_authorization_service),
) -> CountResponse:
    deleted = await service.revoke_member_sessions(member_id, sessions)
    return CountResponse(message="Sessions revoked", count=deleted)
