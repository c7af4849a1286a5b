"""Unit of Work protocol."""

from typing import Protocol

from domain.repositories.account_repository import IAccountRepository
from domain.repositories.content_repository import IContentRepository
from domain.repositories.group_repository import IGroupRepository
from domain.repositories.membership_repository import IMembershipRepository
from domain.repositories.session_repository import ISessionRepository


class IUnitOfWork(Protocol):
    """Unit of Work interface for managing transactions."""

    accounts: IAccountRepository
    groups: IGroupRepository
    memberships: IMembershipRepository
    sessions: ISessionRepository
    content: IContentRepository

    async def commit(self) -> None:
        """Commit the current transaction."""
        ...

    async def rollback(self) -> None:
        """Rollback the current transaction."""
        ...

    async def __aenter__(self) -> "IUnitOfWork":
        """Enter the context manager."""
        ...

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # type: ignore
        """Exit the context manager."""
        ...
