"""Group API routes: creation, joining, settings and membership."""

from fastapi import APIRouter, Depends, Request, Response, status

from api.dependencies.auth import Sessions, set_guest_cookie
from api.v1.dependencies import (
    get_authorization_service,
    get_content_service,
    get_membership_service,
)
from api.v1.schemas.content import PostCreate, PostDetailResponse, PostResponse
from api.v1.schemas.group import (
    GroupCreate,
    GroupDetailResponse,
    GroupResponse,
    GroupUpdate,
    GroupViewResponse,
    IdentityResponse,
    JoinRequest,
    JoinResponse,
    MemberCreate,
    MemberListResponse,
    MembershipResponse,
)
from core.rate_limit import AUTH_LIMIT, READ_LIMIT, WRITE_LIMIT, limiter
from domain.services.authorization_service import AuthorizationService
from domain.services.content_service import ContentService
from domain.services.membership_service import JoinResult, MembershipService

router = APIRouter(prefix="/groups", tags=["groups"])


def _join_response(response: Response, result: JoinResult) -> JoinResponse:
    if result.guest_token:
        set_guest_cookie(response, result.guest_token)
    return JoinResponse(
        group_id=result.group_id,
        membership_established=result.membership_established,
        membership=(
            MembershipResponse.from_entity(result.membership, is_current_user=True)
            if result.membership
            else None
        ),
    )


@router.post(
    "",
    response_model=GroupDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a group",
    responses={
        201: {"description": "Group created, caller is its first admin"},
        401: {"description": "Not logged in"},
        409: {"description": "Slug already taken"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def create_group(
    request: Request,
    body: GroupCreate,
    sessions: Sessions,
    service: MembershipService = Depends(get_membership_service),
) -> GroupDetailResponse:
    """Create a group. Requires a logged-in account."""
    group, membership = await service.create_group(
        slug=body.slug,
        name=body.name,
        tokens=sessions,
        password=body.password,
        display_name=body.display_name,
    )
    return GroupDetailResponse(
        data=GroupResponse.from_entity(group),
        membership=MembershipResponse.from_entity(membership, is_current_user=True),
    )


@router.get(
    "/{slug}",
    response_model=GroupViewResponse,
    summary="Get a group",
    responses={
        200: {"description": "Group and the caller's identity in it"},
        404: {"description": "Group not found"},
    },
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_group(
    request: Request,
    slug: str,
    sessions: Sessions,
    service: MembershipService = Depends(get_membership_service),
) -> GroupViewResponse:
    view = await service.get_group_view(slug, sessions)
    return GroupViewResponse(
        data=GroupResponse.from_entity(view.group),
        identity=IdentityResponse.from_identity(view.identity),
    )


@router.patch(
    "/{slug}",
    response_model=GroupDetailResponse,
    summary="Update group settings",
    responses={
        200: {"description": "Group updated"},
        403: {"description": "Admins only"},
        404: {"description": "Group not found"},
        409: {"description": "Slug already taken"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def update_group(
    request: Request,
    slug: str,
    body: GroupUpdate,
    sessions: Sessions,
    memberships: MembershipService = Depends(get_membership_service),
    authorization: AuthorizationService = Depends(get_authorization_service),
) -> GroupDetailResponse:
    """Rename, re-slug or change the password of a group. Admins only."""
    view = await memberships.get_group_view(slug, sessions)
    group = await authorization.update_group(
        view.group.id,
        sessions,
        name=body.name,
        slug=body.slug,
        password=body.password,
        remove_password=body.remove_password,
    )
    return GroupDetailResponse(data=GroupResponse.from_entity(group))


@router.post(
    "/{slug}/join",
    response_model=JoinResponse,
    summary="Join a group",
    responses={
        200: {"description": "Gate passed; membership established when a name was given"},
        401: {"description": "Password required"},
        403: {"description": "Invalid password"},
        404: {"description": "Group not found"},
    },
)
@limiter.limit(AUTH_LIMIT)  # type: ignore[untyped-decorator]
async def join_group(
    request: Request,
    response: Response,
    slug: str,
    body: JoinRequest,
    sessions: Sessions,
    service: MembershipService = Depends(get_membership_service),
) -> JoinResponse:
    """Pass the password gate and optionally pick a display name.

    Callers without an account, or past the gate of a protected group,
    receive a group-scoped session cookie.
    """
    result = await service.join_group(
        slug,
        sessions,
        password=body.password,
        display_name=body.display_name,
        email=body.email,
    )
    return _join_response(response, result)


@router.post(
    "/{slug}/members",
    response_model=JoinResponse,
    summary="Choose a display name",
    responses={
        200: {"description": "Membership established"},
        401: {"description": "Password gate not passed yet"},
        404: {"description": "Group not found"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def create_member(
    request: Request,
    response: Response,
    slug: str,
    body: MemberCreate,
    sessions: Sessions,
    service: MembershipService = Depends(get_membership_service),
) -> JoinResponse:
    """Become a member of a group the caller has already entered."""
    view = await service.get_group_view(slug, sessions)
    result = await service.establish_membership(
        view.group.id,
        body.display_name,
        sessions,
        email=body.email,
    )
    return _join_response(response, result)


@router.get(
    "/{slug}/members",
    response_model=MemberListResponse,
    summary="List group members",
    responses={
        200: {"description": "Members, newest first"},
        403: {"description": "Not a member"},
        404: {"description": "Group not found"},
    },
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def list_members(
    request: Request,
    slug: str,
    sessions: Sessions,
    service: MembershipService = Depends(get_membership_service),
) -> MemberListResponse:
    view = await service.get_group_view(slug, sessions)
    members = await service.list_members(view.group.id, sessions)
    data = [
        MembershipResponse.from_entity(m.membership, is_current_user=m.is_current_user)
        for m in members
    ]
    return MemberListResponse(data=data, meta={"total": len(data)})


@router.post(
    "/{slug}/posts",
    response_model=PostDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a post",
    responses={
        201: {"description": "Post created"},
        403: {"description": "Admins only"},
        404: {"description": "Group not found"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def create_post(
    request: Request,
    slug: str,
    body: PostCreate,
    sessions: Sessions,
    memberships: MembershipService = Depends(get_membership_service),
    content: ContentService = Depends(get_content_service),
) -> PostDetailResponse:
    """Publish a post with already-hosted media. Admins only."""
    view = await memberships.get_group_view(slug, sessions)
    post = await content.create_post(
        view.group.id,
        sessions,
        title=body.title,
        body=body.body,
        media=[item.model_dump(by_alias=True, exclude_none=True) for item in body.media],
    )
    return PostDetailResponse(data=PostResponse.from_entity(post))
