"""SQLAlchemy implementation of Account repository."""

from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.account import Account
from infrastructure.database.models import AccountModel


class SQLAlchemyAccountRepository:
    """SQLAlchemy implementation of IAccountRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, id: UUID) -> Account | None:
        """Get an account by ID."""
        model = await self._session.get(AccountModel, id)
        return self._to_entity(model) if model else None

    async def get_by_email(self, email: str) -> Account | None:
        """Get an account by email (stored lower-cased)."""
        stmt = select(AccountModel).where(AccountModel.email == email.strip().lower())
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_by_username(self, username: str) -> Account | None:
        """Get an account by username, ignoring case."""
        stmt = select(AccountModel).where(
            func.lower(AccountModel.username) == username.strip().lower()
        )
        result = await self._session.execute(stmt)
        model = result.scalars().first()
        return self._to_entity(model) if model else None

    async def create(self, account: Account) -> Account:
        """Create a new account."""
        model = self._to_model(account)
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_entity(model)

    async def update(self, account: Account) -> Account:
        """Update username, avatar and password hash."""
        model = await self._session.get(AccountModel, account.id)
        if not model:
            raise ValueError(f"Account {account.id} not found")

        model.username = account.username
        model.avatar_url = account.avatar_url
        model.password_hash = account.password_hash

        await self._session.flush()
        return self._to_entity(model)

    def _to_entity(self, model: AccountModel) -> Account:
        """Convert ORM model to domain entity."""
        return Account(
            id=model.id,
            email=model.email,
            username=model.username,
            avatar_url=model.avatar_url,
            password_hash=model.password_hash,
            created_at=model.created_at,
        )

    def _to_model(self, entity: Account) -> AccountModel:
        """Convert domain entity to ORM model."""
        return AccountModel(
            id=entity.id,
            email=entity.email,
            username=entity.username,
            avatar_url=entity.avatar_url,
            password_hash=entity.password_hash,
            created_at=entity.created_at,
        )
