"""Account service: registration, login and profile management."""

import secrets
from collections.abc import Callable
from dataclasses import dataclass

import structlog
from sqlalchemy.exc import IntegrityError

from core.exceptions import (
    EmailAlreadyRegisteredError,
    InvalidCredentialsError,
    MustBeLoggedInError,
    UsernameTakenError,
    ValidationFailedError,
)
from domain.entities.account import Account
from domain.entities.group import AccountGroup
from domain.entities.identity import SessionTokens
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.membership_service import MembershipService
from domain.services.session_service import SessionService
from domain.validation import check_password, clean_email, clean_username
from infrastructure.auth.provider import IPasswordHasher
from infrastructure.database.errors import is_unique_violation

logger = structlog.get_logger()

MAX_AVATAR_URL_LENGTH = 500


@dataclass
class AuthResult:
    """A freshly authenticated account and its new session token."""

    account: Account
    session_token: str
    linked_memberships: int = 0


class AccountService:
    """Service layer for account lifecycle.

    Register and login both open an account session and claim the guest
    memberships recorded under the account's email in the same transaction.
    """

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        session_service: SessionService,
        membership_service: MembershipService,
        password_hasher: IPasswordHasher,
    ) -> None:
        self._uow_factory = uow_factory
        self._sessions = session_service
        self._memberships = membership_service
        self._hasher = password_hasher
        self._dummy_hash: str | None = None

    async def register(
        self,
        email: str,
        password: str,
        username: str | None = None,
    ) -> AuthResult:
        """Create an account and log it in.

        Raises:
            ValidationFailedError: If email, password or username are malformed.
            EmailAlreadyRegisteredError: If the email already has an account.
            UsernameTakenError: If the username is in use.
        """
        email = clean_email(email)
        check_password(password)
        if username is not None:
            username = clean_username(username)

        async with self._uow_factory() as uow:
            if await uow.accounts.get_by_email(email):
                raise EmailAlreadyRegisteredError()
            if username and await uow.accounts.get_by_username(username):
                raise UsernameTakenError(username)

            password_hash = await self._hasher.hash(password)

            try:
                account = await uow.accounts.create(
                    Account(email=email, password_hash=password_hash, username=username)
                )
                token = await self._sessions.issue_account_session(uow, account.id)
                linked = await self._memberships.sweep_guest_memberships(
                    uow, account.id, account.email
                )
                await uow.commit()
            except IntegrityError as exc:
                await uow.rollback()
                if is_unique_violation(exc, "username") and username:
                    raise UsernameTakenError(username) from exc
                if is_unique_violation(exc, "email"):
                    raise EmailAlreadyRegisteredError() from exc
                raise

        logger.info("account_registered", account_id=str(account.id))
        return AuthResult(account=account, session_token=token, linked_memberships=len(linked))

    async def login(self, identifier: str, password: str) -> AuthResult:
        """Log in with an email or a username.

        Every mismatch raises the same InvalidCredentialsError so the
        response does not reveal which accounts exist.
        """
        identifier = identifier.strip()
        if not identifier or not password:
            raise InvalidCredentialsError()

        async with self._uow_factory() as uow:
            if "@" in identifier:
                account = await uow.accounts.get_by_email(identifier.lower())
            else:
                account = await uow.accounts.get_by_username(identifier)

            if account is None:
                # Unknown accounts cost one verify, same as a wrong password
                await self._hasher.verify(await self._get_dummy_hash(), password)
                logger.info("login_failed")
                raise InvalidCredentialsError()

            if not await self._hasher.verify(account.password_hash, password):
                logger.info("login_failed")
                raise InvalidCredentialsError()

            token = await self._sessions.issue_account_session(uow, account.id)
            linked = await self._memberships.sweep_guest_memberships(
                uow, account.id, account.email
            )
            await uow.commit()

        logger.info("account_logged_in", account_id=str(account.id))
        return AuthResult(account=account, session_token=token, linked_memberships=len(linked))

    async def logout(self, tokens: SessionTokens) -> None:
        await self._sessions.revoke_account_session(tokens.account_token)

    async def get_current_account(self, tokens: SessionTokens) -> Account:
        """Return the logged-in account or raise MustBeLoggedInError."""
        account = await self._sessions.current_account(tokens.account_token)
        if account is None:
            raise MustBeLoggedInError()
        return account

    async def update_username(self, tokens: SessionTokens, username: str) -> Account:
        username = clean_username(username)

        async with self._uow_factory() as uow:
            account = await self._require_account(uow, tokens)
            if account.username == username:
                return account

            existing = await uow.accounts.get_by_username(username)
            if existing and existing.id != account.id:
                raise UsernameTakenError(username)

            account.username = username
            try:
                updated = await uow.accounts.update(account)
                await uow.commit()
            except IntegrityError as exc:
                await uow.rollback()
                if is_unique_violation(exc, "username"):
                    raise UsernameTakenError(username) from exc
                raise

        logger.info("account_username_updated", account_id=str(account.id))
        return updated

    async def update_password(
        self,
        tokens: SessionTokens,
        current_password: str,
        new_password: str,
    ) -> None:
        """Change the password after checking the current one.

        Existing sessions stay valid.
        """
        check_password(new_password, field="new_password")

        async with self._uow_factory() as uow:
            account = await self._require_account(uow, tokens)
            if not await self._hasher.verify(account.password_hash, current_password):
                raise InvalidCredentialsError()

            account.password_hash = await self._hasher.hash(new_password)
            await uow.accounts.update(account)
            await uow.commit()

        logger.info("account_password_updated", account_id=str(account.id))

    async def update_avatar(self, tokens: SessionTokens, avatar_url: str | None) -> Account:
        """Set or clear the avatar. The image itself is hosted elsewhere."""
        url = avatar_url.strip() if avatar_url else None
        if url:
            if not url.startswith(("https://", "http://")):
                raise ValidationFailedError("Avatar must be an http(s) URL", field="avatar_url")
            if len(url) > MAX_AVATAR_URL_LENGTH:
                raise ValidationFailedError("Avatar URL is too long", field="avatar_url")

        async with self._uow_factory() as uow:
            account = await self._require_account(uow, tokens)
            account.avatar_url = url or None
            updated = await uow.accounts.update(account)
            await uow.commit()
            return updated

    async def list_account_groups(self, tokens: SessionTokens) -> list[AccountGroup]:
        """Groups the logged-in account holds a membership in."""
        async with self._uow_factory() as uow:
            account = await self._require_account(uow, tokens)
            return await uow.memberships.list_groups_for_account(account.id)

    async def _require_account(self, uow: IUnitOfWork, tokens: SessionTokens) -> Account:
        account = await self._sessions.validate_account_session(uow, tokens.account_token)
        if account is None:
            raise MustBeLoggedInError()
        return account

    async def _get_dummy_hash(self) -> str:
        """A throwaway hash with the configured cost, made on first use."""
        if self._dummy_hash is None:
            self._dummy_hash = await self._hasher.hash(secrets.token_urlsafe(16))
        return self._dummy_hash
