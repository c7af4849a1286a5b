"""Account API routes: registration, login and profile."""

from fastapi import APIRouter, Depends, Request, Response, status

from api.dependencies.auth import Sessions, clear_session_cookie, set_account_cookie
from api.v1.dependencies import get_account_service
from api.v1.schemas.account import (
    AccountDetailResponse,
    AccountGroupListResponse,
    AccountGroupResponse,
    AccountResponse,
    AvatarUpdate,
    LoginRequest,
    PasswordUpdate,
    RegisterRequest,
    UsernameUpdate,
)
from api.v1.schemas.common import MessageResponse
from core.config import settings
from core.rate_limit import AUTH_LIMIT, READ_LIMIT, WRITE_LIMIT, limiter
from domain.services.account_service import AccountService

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/register",
    response_model=AccountDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register an account",
    responses={
        201: {"description": "Account created and logged in"},
        400: {"description": "Invalid email, password or username"},
        409: {"description": "Email or username already in use"},
    },
)
@limiter.limit(AUTH_LIMIT)  # type: ignore[untyped-decorator]
async def register(
    request: Request,
    response: Response,
    body: RegisterRequest,
    service: AccountService = Depends(get_account_service),
) -> AccountDetailResponse:
    """Create an account, log it in and claim guest memberships with its email."""
    result = await service.register(
        email=body.email,
        password=body.password,
        username=body.username,
    )
    set_account_cookie(response, result.session_token)
    return AccountDetailResponse(
        data=AccountResponse.model_validate(result.account),
        meta={"linked_memberships": result.linked_memberships},
    )


@router.post(
    "/login",
    response_model=AccountDetailResponse,
    summary="Log in",
    responses={
        200: {"description": "Logged in"},
        401: {"description": "Invalid credentials"},
    },
)
@limiter.limit(AUTH_LIMIT)  # type: ignore[untyped-decorator]
async def login(
    request: Request,
    response: Response,
    body: LoginRequest,
    service: AccountService = Depends(get_account_service),
) -> AccountDetailResponse:
    """Log in with email or username and password."""
    result = await service.login(body.identifier, body.password)
    set_account_cookie(response, result.session_token)
    return AccountDetailResponse(
        data=AccountResponse.model_validate(result.account),
        meta={"linked_memberships": result.linked_memberships},
    )


@router.post(
    "/logout",
    response_model=MessageResponse,
    summary="Log out this browser",
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def logout(
    request: Request,
    response: Response,
    sessions: Sessions,
    service: AccountService = Depends(get_account_service),
) -> MessageResponse:
    """End the current account session. Other devices stay logged in."""
    await service.logout(sessions)
    clear_session_cookie(response, settings.account_session_cookie)
    return MessageResponse(message="Logged out")


@router.get(
    "/me",
    response_model=AccountDetailResponse,
    summary="Get the current account",
    responses={401: {"description": "Not logged in"}},
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_me(
    request: Request,
    sessions: Sessions,
    service: AccountService = Depends(get_account_service),
) -> AccountDetailResponse:
    account = await service.get_current_account(sessions)
    return AccountDetailResponse(data=AccountResponse.model_validate(account))


@router.patch(
    "/me/username",
    response_model=AccountDetailResponse,
    summary="Change username",
    responses={
        401: {"description": "Not logged in"},
        409: {"description": "Username already in use"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def update_username(
    request: Request,
    body: UsernameUpdate,
    sessions: Sessions,
    service: AccountService = Depends(get_account_service),
) -> AccountDetailResponse:
    account = await service.update_username(sessions, body.username)
    return AccountDetailResponse(data=AccountResponse.model_validate(account))


@router.patch(
    "/me/password",
    response_model=MessageResponse,
    summary="Change password",
    responses={
        400: {"description": "New password too short"},
        401: {"description": "Not logged in or wrong current password"},
    },
)
@limiter.limit(AUTH_LIMIT)  # type: ignore[untyped-decorator]
async def update_password(
    request: Request,
    body: PasswordUpdate,
    sessions: Sessions,
    service: AccountService = Depends(get_account_service),
) -> MessageResponse:
    await service.update_password(sessions, body.current_password, body.new_password)
    return MessageResponse(message="Password updated")


@router.patch(
    "/me/avatar",
    response_model=AccountDetailResponse,
    summary="Set or clear the avatar",
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def update_avatar(
    request: Request,
    body: AvatarUpdate,
    sessions: Sessions,
    service: AccountService = Depends(get_account_service),
) -> AccountDetailResponse:
    account = await service.update_avatar(sessions, body.avatar_url)
    return AccountDetailResponse(data=AccountResponse.model_validate(account))


@router.get(
    "/me/groups",
    response_model=AccountGroupListResponse,
    summary="List the account's groups",
    responses={401: {"description": "Not logged in"}},
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def list_my_groups(
    request: Request,
    sessions: Sessions,
    service: AccountService = Depends(get_account_service),
) -> AccountGroupListResponse:
    """Groups where the logged-in account holds a membership."""
    groups = await service.list_account_groups(sessions)
    data = [AccountGroupResponse.model_validate(g) for g in groups]
    return AccountGroupListResponse(data=data, meta={"total": len(data)})
