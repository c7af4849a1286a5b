"""SQLAlchemy implementation of Membership repository."""

from uuid import UUID

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.group import AccountGroup, Membership
from infrastructure.database.models import GroupModel, MembershipModel


class SQLAlchemyMembershipRepository:
    """SQLAlchemy implementation of IMembershipRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, id: UUID) -> Membership | None:
        """Get a membership by ID."""
        model = await self._session.get(MembershipModel, id)
        return self._to_entity(model) if model else None

    async def get_for_account(self, group_id: UUID, account_id: UUID) -> Membership | None:
        """Get the membership an account holds in a group.

        Legacy data may hold duplicates, the oldest row wins.
        """
        stmt = (
            select(MembershipModel)
            .where(
                MembershipModel.group_id == group_id,
                MembershipModel.account_id == account_id,
            )
            .order_by(MembershipModel.created_at)
            .limit(1)
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def find_unlinked_match(
        self, group_id: UUID, display_name: str, email: str | None
    ) -> Membership | None:
        """Find the oldest guest membership matching name or email, ignoring case."""
        conditions = [func.lower(MembershipModel.display_name) == display_name.strip().lower()]
        if email:
            conditions.append(func.lower(MembershipModel.email) == email.strip().lower())

        stmt = (
            select(MembershipModel)
            .where(
                MembershipModel.group_id == group_id,
                MembershipModel.account_id.is_(None),
                or_(*conditions),
            )
            .order_by(MembershipModel.created_at)
            .limit(1)
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def list_unlinked_by_email(self, email: str) -> list[Membership]:
        """Get guest memberships in every group with exactly this email."""
        stmt = (
            select(MembershipModel)
            .where(
                MembershipModel.email == email,
                MembershipModel.account_id.is_(None),
            )
            .order_by(MembershipModel.group_id, MembershipModel.created_at)
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def list_for_group(self, group_id: UUID) -> list[Membership]:
        """Get all memberships of a group, newest first."""
        stmt = (
            select(MembershipModel)
            .where(MembershipModel.group_id == group_id)
            .order_by(MembershipModel.created_at.desc())
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def list_groups_for_account(self, account_id: UUID) -> list[AccountGroup]:
        """Get the groups an account holds a membership in."""
        stmt = (
            select(GroupModel, MembershipModel)
            .join(MembershipModel, MembershipModel.group_id == GroupModel.id)
            .where(MembershipModel.account_id == account_id)
            .order_by(MembershipModel.created_at.desc())
        )
        result = await self._session.execute(stmt)
        return [
            AccountGroup(
                group_id=group.id,
                slug=group.slug,
                name=group.name,
                membership_id=membership.id,
                is_admin=membership.is_admin,
            )
            for group, membership in result.all()
        ]

    async def count_for_group(self, group_id: UUID) -> int:
        """Count memberships in a group."""
        stmt = (
            select(func.count())
            .select_from(MembershipModel)
            .where(MembershipModel.group_id == group_id)
        )
        result = await self._session.execute(stmt)
        return result.scalar_one()

    async def create(self, membership: Membership) -> Membership:
        """Create a new membership."""
        model = self._to_model(membership)
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_entity(model)

    async def update(self, membership: Membership) -> Membership:
        """Persist mutable membership fields."""
        model = await self._session.get(MembershipModel, membership.id)
        if not model:
            raise ValueError(f"Membership {membership.id} not found")

        model.account_id = membership.account_id
        model.display_name = membership.display_name
        model.email = membership.email
        model.is_admin = membership.is_admin

        await self._session.flush()
        return self._to_entity(model)

    async def delete(self, id: UUID) -> bool:
        """Delete a membership."""
        model = await self._session.get(MembershipModel, id)
        if not model:
            return False

        await self._session.delete(model)
        await self._session.flush()
        return True

    def _to_entity(self, model: MembershipModel) -> Membership:
        """Convert ORM model to domain entity."""
        return Membership(
            id=model.id,
            group_id=model.group_id,
            account_id=model.account_id,
            display_name=model.display_name,
            email=model.email,
            is_admin=model.is_admin,
            created_at=model.created_at,
        )

    def _to_model(self, entity: Membership) -> MembershipModel:
        """Convert domain entity to ORM model."""
        return MembershipModel(
            id=entity.id,
            group_id=entity.group_id,
            account_id=entity.account_id,
            display_name=entity.display_name,
            email=entity.email,
            is_admin=entity.is_admin,
            created_at=entity.created_at,
        )
