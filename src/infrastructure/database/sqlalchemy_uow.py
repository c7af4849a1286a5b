"""SQLAlchemy Unit of Work implementation."""

from typing import Any, Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from infrastructure.database.repositories.sqlalchemy_account_repo import SQLAlchemyAccountRepository
from infrastructure.database.repositories.sqlalchemy_content_repo import SQLAlchemyContentRepository
from infrastructure.database.repositories.sqlalchemy_group_repo import SQLAlchemyGroupRepository
from infrastructure.database.repositories.sqlalchemy_membership_repo import (
    SQLAlchemyMembershipRepository,
)
from infrastructure.database.repositories.sqlalchemy_session_repo import SQLAlchemySessionRepository


class SQLAlchemyUnitOfWork:
    """Unit of Work implementation using SQLAlchemy."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory
        self._session: Optional[AsyncSession] = None

    def _require_session(self) -> AsyncSession:
        if not self._session:
            raise RuntimeError("UnitOfWork not initialized. Use as context manager.")
        return self._session

    @property
    def accounts(self) -> SQLAlchemyAccountRepository:
        """Get account repository."""
        return SQLAlchemyAccountRepository(self._require_session())

    @property
    def groups(self) -> SQLAlchemyGroupRepository:
        """Get group repository."""
        return SQLAlchemyGroupRepository(self._require_session())

    @property
    def memberships(self) -> SQLAlchemyMembershipRepository:
        """Get membership repository."""
        return SQLAlchemyMembershipRepository(self._require_session())

    @property
    def sessions(self) -> SQLAlchemySessionRepository:
        """Get account/guest session repository."""
        return SQLAlchemySessionRepository(self._require_session())

    @property
    def content(self) -> SQLAlchemyContentRepository:
        """Get post/comment/reaction repository."""
        return SQLAlchemyContentRepository(self._require_session())

    async def commit(self) -> None:
        """Commit the current transaction."""
        if self._session:
            await self._session.commit()

    async def rollback(self) -> None:
        """Rollback the current transaction."""
        if self._session:
            await self._session.rollback()

    async def __aenter__(self) -> "SQLAlchemyUnitOfWork":
        """Enter the context manager and create session."""
        self._session = self._session_factory()
        return self

    async def __aexit__(
        self,
        exc_type: Optional[type],
        exc_val: Optional[Exception],
        exc_tb: Any,
    ) -> None:
        """Exit the context manager and cleanup."""
        if self._session:
            if exc_type:
                await self.rollback()
            await self._session.close()
            self._session = None
