"""Session service: issuing and validating account and guest sessions."""

import secrets
from collections.abc import Callable
from uuid import UUID

import structlog

from domain.entities.account import Account
from domain.entities.session import AccountSession, GuestSession
from domain.repositories.unit_of_work import IUnitOfWork

logger = structlog.get_logger()

# 32 random bytes, hex encoded: 256 bits of entropy per token
SESSION_TOKEN_BYTES = 32


def generate_session_token() -> str:
    """Create an unguessable session token."""
    return secrets.token_hex(SESSION_TOKEN_BYTES)


class SessionService:
    """Service layer for the two session planes.

    Lookups never raise: a missing, expired or tampered token is treated
    exactly like "no session".
    """

    def __init__(self, uow_factory: Callable[[], IUnitOfWork]) -> None:
        self._uow_factory = uow_factory

    # --- In-transaction helpers (caller manages commit) ---

    async def issue_account_session(self, uow: IUnitOfWork, account_id: UUID) -> str:
        """Create an account session and return its token."""
        session = AccountSession(id=generate_session_token(), account_id=account_id)
        await uow.sessions.create_account_session(session)
        logger.info("account_session_issued", account_id=str(account_id))
        return session.id

    async def issue_guest_session(
        self,
        uow: IUnitOfWork,
        group_id: UUID,
        membership_id: UUID | None = None,
    ) -> str:
        """Create a guest session scoped to ``group_id`` and return its token."""
        session = GuestSession(
            id=generate_session_token(),
            group_id=group_id,
            membership_id=membership_id,
        )
        await uow.sessions.create_guest_session(session)
        logger.info(
            "guest_session_issued",
            group_id=str(group_id),
            membership_id=str(membership_id) if membership_id else None,
        )
        return session.id

    async def validate_account_session(
        self, uow: IUnitOfWork, token: str | None
    ) -> Account | None:
        """Return the account behind ``token``, or None."""
        if not token:
            return None

        session = await uow.sessions.get_account_session(token)
        if session is None or session.is_expired:
            return None

        return await uow.accounts.get(session.account_id)

    async def validate_guest_session(
        self,
        uow: IUnitOfWork,
        token: str | None,
        expected_group_id: UUID | None = None,
    ) -> GuestSession | None:
        """Return the guest session behind ``token``, or None.

        When ``expected_group_id`` is given, a session issued for another
        group is rejected.
        """
        if not token:
            return None

        session = await uow.sessions.get_guest_session(token)
        if session is None or session.is_expired:
            return None
        if expected_group_id is not None and session.group_id != expected_group_id:
            return None

        return session

    async def attach_membership_to_guest_session(
        self,
        uow: IUnitOfWork,
        session: GuestSession,
        membership_id: UUID,
    ) -> None:
        """Point a nameless guest session at a membership.

        The reference is written once; a session that already carries a
        membership keeps it.
        """
        if session.membership_id == membership_id:
            return
        if session.membership_id is not None:
            logger.warning(
                "guest_session_already_attached",
                group_id=str(session.group_id),
                membership_id=str(session.membership_id),
            )
            return

        await uow.sessions.attach_membership(session.id, membership_id)
        session.membership_id = membership_id

    # --- Standalone operations ---

    async def current_account(self, token: str | None) -> Account | None:
        """Validate an account session token in its own transaction."""
        async with self._uow_factory() as uow:
            return await self.validate_account_session(uow, token)

    async def revoke_account_session(self, token: str | None) -> bool:
        """Log out this browser. Other sessions of the account stay valid."""
        if not token:
            return False

        async with self._uow_factory() as uow:
            deleted = await uow.sessions.delete_account_session(token)
            await uow.commit()

        if deleted:
            logger.info("account_session_revoked")
        return deleted
