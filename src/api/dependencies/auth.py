"""Session cookie dependencies for FastAPI."""

from typing import Annotated

from fastapi import Depends, Request, Response

from core.config import settings
from domain.entities.identity import SessionTokens


async def get_session_tokens(request: Request) -> SessionTokens:
    """Read both session cookies from the request.

    The cookie names are configurable, so they are looked up on
    ``request.cookies`` rather than declared as ``Cookie()`` parameters.
    Validation happens in the domain layer; missing cookies become None.
    """
    return SessionTokens(
        account_token=request.cookies.get(settings.account_session_cookie) or None,
        guest_token=request.cookies.get(settings.guest_session_cookie) or None,
    )


def set_session_cookie(response: Response, name: str, token: str) -> None:
    """Store a session token in an HTTP-only, site-wide cookie."""
    response.set_cookie(
        key=name,
        value=token,
        httponly=True,
        samesite="lax",
        secure=settings.session_cookie_secure,
        path="/",
    )


def clear_session_cookie(response: Response, name: str) -> None:
    response.delete_cookie(
        key=name,
        httponly=True,
        samesite="lax",
        secure=settings.session_cookie_secure,
        path="/",
    )


def set_account_cookie(response: Response, token: str) -> None:
    set_session_cookie(response, settings.account_session_cookie, token)


def set_guest_cookie(response: Response, token: str) -> None:
    set_session_cookie(response, settings.guest_session_cookie, token)


# Type alias for convenience in route handlers
Sessions = Annotated[SessionTokens, Depends(get_session_tokens)]
