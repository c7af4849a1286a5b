"""Authorization gate and the admin-only membership operations."""

from collections.abc import Callable
from uuid import UUID

import structlog
from sqlalchemy.exc import IntegrityError

from core.exceptions import (
    CannotModifySelfError,
    GroupNotFoundError,
    MemberNotFoundError,
    NotAdminError,
    OnlyRegisteredUsersCanBeAdminsError,
    SlugAlreadyTakenError,
)
from domain.entities.group import Group, Membership
from domain.entities.identity import SessionTokens
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.membership_resolver import MembershipResolver
from domain.validation import check_password, clean_group_name, clean_slug
from infrastructure.auth.provider import IPasswordHasher
from infrastructure.database.errors import is_unique_violation

logger = structlog.get_logger()


class AuthorizationService:
    """Admin predicates on top of the membership resolver.

    Every privileged mutation goes through ``check_admin`` before it writes.
    """

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        resolver: MembershipResolver,
        password_hasher: IPasswordHasher,
    ) -> None:
        self._uow_factory = uow_factory
        self._resolver = resolver
        self._hasher = password_hasher

    async def check_admin(
        self, uow: IUnitOfWork, group_id: UUID, tokens: SessionTokens
    ) -> Membership:
        """Return the caller's membership if it is an admin of ``group_id``.

        Raises:
            NotAdminError: If no membership resolves or it is not an admin.
        """
        identity = await self._resolver.resolve(uow, group_id, tokens)
        if identity.membership is None or not identity.membership.is_admin:
            raise NotAdminError(str(group_id))
        return identity.membership

    async def require_admin(self, group_id: UUID, tokens: SessionTokens) -> Membership:
        async with self._uow_factory() as uow:
            return await self.check_admin(uow, group_id, tokens)

    async def toggle_admin(self, target_id: UUID, tokens: SessionTokens) -> Membership:
        """Flip the admin flag of another registered member.

        Raises:
            MemberNotFoundError: If the target membership does not exist.
            NotAdminError: If the caller is not an admin of the target's group.
            CannotModifySelfError: If the caller targets their own membership.
            OnlyRegisteredUsersCanBeAdminsError: If the target is a guest.
        """
        async with self._uow_factory() as uow:
            target = await self._get_member(uow, target_id)
            caller = await self.check_admin(uow, target.group_id, tokens)

            if caller.id == target.id:
                raise CannotModifySelfError("You cannot change your own role")
            if target.account_id is None:
                raise OnlyRegisteredUsersCanBeAdminsError(str(target.id))

            target.is_admin = not target.is_admin
            updated = await uow.memberships.update(target)
            await uow.commit()

        logger.info(
            "member_admin_toggled",
            group_id=str(updated.group_id),
            membership_id=str(updated.id),
            actor_id=str(caller.id),
            is_admin=updated.is_admin,
        )
        return updated

    async def delete_member(self, target_id: UUID, tokens: SessionTokens) -> None:
        """Remove a member from a group together with their guest sessions."""
        async with self._uow_factory() as uow:
            target = await self._get_member(uow, target_id)
            caller = await self.check_admin(uow, target.group_id, tokens)

            if caller.id == target.id:
                raise CannotModifySelfError("You cannot remove yourself")

            sessions = await uow.sessions.delete_guest_sessions_for_member(target.id)
            await uow.memberships.delete(target.id)
            await uow.commit()

        logger.info(
            "member_deleted",
            group_id=str(target.group_id),
            membership_id=str(target.id),
            actor_id=str(caller.id),
            sessions_deleted=sessions,
        )

    async def revoke_member_sessions(self, target_id: UUID, tokens: SessionTokens) -> int:
        """Sign a member's guest browsers out without removing the member.

        Returns:
            The number of guest sessions deleted.
        """
        async with self._uow_factory() as uow:
            target = await self._get_member(uow, target_id)
            caller = await self.check_admin(uow, target.group_id, tokens)

            deleted = await uow.sessions.delete_guest_sessions_for_member(target.id)
            await uow.commit()

        logger.info(
            "member_sessions_revoked",
            group_id=str(target.group_id),
            membership_id=str(target.id),
            actor_id=str(caller.id),
            sessions_deleted=deleted,
        )
        return deleted

    async def update_group(
        self,
        group_id: UUID,
        tokens: SessionTokens,
        name: str | None = None,
        slug: str | None = None,
        password: str | None = None,
        remove_password: bool = False,
    ) -> Group:
        """Change group settings: rename, re-slug, set or remove the password."""
        async with self._uow_factory() as uow:
            group = await uow.groups.get(group_id)
            if not group:
                raise GroupNotFoundError(str(group_id))

            await self.check_admin(uow, group.id, tokens)

            if name is not None:
                group.name = clean_group_name(name)

            if slug is not None:
                new_slug = clean_slug(slug)
                if new_slug != group.slug:
                    existing = await uow.groups.get_by_slug(new_slug)
                    if existing and existing.id != group.id:
                        raise SlugAlreadyTakenError(new_slug)
                    group.slug = new_slug

            if remove_password:
                group.password_hash = None
            elif password:
                group.password_hash = await self._hasher.hash(check_password(password))

            try:
                updated = await uow.groups.update(group)
                await uow.commit()
            except IntegrityError as exc:
                await uow.rollback()
                if is_unique_violation(exc, "slug"):
                    raise SlugAlreadyTakenError(group.slug) from exc
                raise

        logger.info(
            "group_updated",
            group_id=str(updated.id),
            password_protected=updated.is_password_protected,
        )
        return updated

    async def _get_member(self, uow: IUnitOfWork, member_id: UUID) -> Membership:
        member = await uow.memberships.get(member_id)
        if not member:
            raise MemberNotFoundError(str(member_id))
        return member
