"""Dependency injection factories for API v1."""

from functools import lru_cache
from typing import Callable

from domain.services.account_service import AccountService
from domain.services.authorization_service import AuthorizationService
from domain.services.content_service import ContentService
from domain.services.membership_resolver import MembershipResolver
from domain.services.membership_service import MembershipService
from domain.services.session_service import SessionService
from infrastructure.auth.password import Argon2PasswordHasher
from infrastructure.database.session import async_session_factory
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork


def get_uow_factory() -> Callable[[], SQLAlchemyUnitOfWork]:
    """Factory for creating Unit of Work instances."""

    def factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(async_session_factory)

    return factory


@lru_cache
def get_password_hasher() -> Argon2PasswordHasher:
    """Get the shared argon2 hasher."""
    return Argon2PasswordHasher()


@lru_cache
def get_session_service() -> SessionService:
    """Get Session service instance."""
    return SessionService(get_uow_factory())


@lru_cache
def get_membership_resolver() -> MembershipResolver:
    """Get Membership resolver instance."""
    return MembershipResolver(get_uow_factory(), get_session_service())


@lru_cache
def get_membership_service() -> MembershipService:
    """Get Membership service instance."""
    return MembershipService(
        get_uow_factory(),
        session_service=get_session_service(),
        resolver=get_membership_resolver(),
        password_hasher=get_password_hasher(),
    )


@lru_cache
def get_account_service() -> AccountService:
    """Get Account service instance."""
    return AccountService(
        get_uow_factory(),
        session_service=get_session_service(),
        membership_service=get_membership_service(),
        password_hasher=get_password_hasher(),
    )


@lru_cache
def get_authorization_service() -> AuthorizationService:
    """Get Authorization service instance."""
    return AuthorizationService(
        get_uow_factory(),
        resolver=get_membership_resolver(),
        password_hasher=get_password_hasher(),
    )


@lru_cache
def get_content_service() -> ContentService:
    """Get Content service instance."""
    return ContentService(
        get_uow_factory(),
        resolver=get_membership_resolver(),
        authorization=get_authorization_service(),
    )
