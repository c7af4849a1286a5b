"""SQLAlchemy implementation of Group repository."""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.group import Group
from infrastructure.database.models import GroupModel


class SQLAlchemyGroupRepository:
    """SQLAlchemy implementation of IGroupRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, id: UUID) -> Group | None:
        """Get a group by ID."""
        stmt = select(GroupModel).where(GroupModel.id == id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_by_slug(self, slug: str) -> Group | None:
        """Get a group by slug."""
        stmt = select(GroupModel).where(GroupModel.slug == slug)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def lock(self, id: UUID) -> Group | None:
        """Get a group with ``SELECT ... FOR UPDATE``.

        Dialects without row locks (SQLite) ignore the clause.
        """
        stmt = select(GroupModel).where(GroupModel.id == id).with_for_update()
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def create(self, group: Group) -> Group:
        """Create a new group."""
        model = self._to_model(group)
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_entity(model)

    async def update(self, group: Group) -> Group:
        """Update an existing group."""
        stmt = select(GroupModel).where(GroupModel.id == group.id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if not model:
            raise ValueError(f"Group {group.id} not found")

        model.name = group.name
        model.slug = group.slug
        model.password_hash = group.password_hash

        await self._session.flush()
        return self._to_entity(model)

    def _to_entity(self, model: GroupModel) -> Group:
        """Convert ORM model to domain entity."""
        return Group(
            id=model.id,
            slug=model.slug,
            name=model.name,
            password_hash=model.password_hash,
            created_at=model.created_at,
        )

    def _to_model(self, entity: Group) -> GroupModel:
        """Convert domain entity to ORM model."""
        return GroupModel(
            id=entity.id,
            slug=entity.slug,
            name=entity.name,
            password_hash=entity.password_hash,
            created_at=entity.created_at,
        )
