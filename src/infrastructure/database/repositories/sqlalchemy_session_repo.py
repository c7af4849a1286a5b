"""SQLAlchemy implementation of the session repository."""

from uuid import UUID

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.session import AccountSession, GuestSession
from infrastructure.database.models import AccountSessionModel, GuestSessionModel


class SQLAlchemySessionRepository:
    """SQLAlchemy implementation of ISessionRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    # --- Account sessions ---

    async def create_account_session(self, session: AccountSession) -> AccountSession:
        model = AccountSessionModel(
            id=session.id,
            account_id=session.account_id,
            created_at=session.created_at,
            expires_at=session.expires_at,
        )
        self._session.add(model)
        await self._session.flush()
        return self._account_to_entity(model)

    async def get_account_session(self, id: str) -> AccountSession | None:
        stmt = select(AccountSessionModel).where(AccountSessionModel.id == id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._account_to_entity(model) if model else None

    async def delete_account_session(self, id: str) -> bool:
        stmt = delete(AccountSessionModel).where(AccountSessionModel.id == id)
        result = await self._session.execute(stmt)
        return bool(result.rowcount)

    # --- Guest sessions ---

    async def create_guest_session(self, session: GuestSession) -> GuestSession:
        model = GuestSessionModel(
            id=session.id,
            group_id=session.group_id,
            membership_id=session.membership_id,
            created_at=session.created_at,
            expires_at=session.expires_at,
        )
        self._session.add(model)
        await self._session.flush()
        return self._guest_to_entity(model)

    async def get_guest_session(self, id: str) -> GuestSession | None:
        stmt = select(GuestSessionModel).where(GuestSessionModel.id == id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._guest_to_entity(model) if model else None

    async def attach_membership(self, id: str, membership_id: UUID) -> None:
        stmt = (
            update(GuestSessionModel)
            .where(GuestSessionModel.id == id)
            .values(membership_id=membership_id)
        )
        await self._session.execute(stmt)

    async def delete_guest_sessions_for_member(self, membership_id: UUID) -> int:
        stmt = delete(GuestSessionModel).where(GuestSessionModel.membership_id == membership_id)
        result = await self._session.execute(stmt)
        return result.rowcount or 0

    async def reassign_guest_sessions(self, from_membership_id: UUID, to_membership_id: UUID) -> int:
        stmt = (
            update(GuestSessionModel)
            .where(GuestSessionModel.membership_id == from_membership_id)
            .values(membership_id=to_membership_id)
        )
        result = await self._session.execute(stmt)
        return result.rowcount or 0

    def _account_to_entity(self, model: AccountSessionModel) -> AccountSession:
        return AccountSession(
            id=model.id,
            account_id=model.account_id,
            created_at=model.created_at,
            expires_at=model.expires_at,
        )

    def _guest_to_entity(self, model: GuestSessionModel) -> GuestSession:
        return GuestSession(
            id=model.id,
            group_id=model.group_id,
            membership_id=model.membership_id,
            created_at=model.created_at,
            expires_at=model.expires_at,
        )
