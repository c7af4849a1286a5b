"""Membership service: joining groups and reconciling guest identities."""

from collections.abc import Callable
from dataclasses import dataclass
from uuid import UUID

import structlog
from sqlalchemy.exc import IntegrityError

from core.exceptions import (
    GroupNotFoundError,
    InvalidPasswordError,
    MustBeLoggedInError,
    NotAMemberError,
    PasswordRequiredError,
    SlugAlreadyTakenError,
)
from domain.entities.group import Group, Membership
from domain.entities.identity import ActingIdentity, SessionTokens
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.membership_resolver import MembershipResolver
from domain.services.session_service import SessionService
from domain.validation import (
    check_password,
    clean_display_name,
    clean_group_name,
    clean_optional_email,
    clean_slug,
)
from infrastructure.auth.provider import IPasswordHasher
from infrastructure.database.errors import is_unique_violation

logger = structlog.get_logger()


@dataclass
class JoinResult:
    """Outcome of joining a group or choosing a display name.

    ``guest_token`` is set when the browser must (re)store the guest cookie.
    """

    group_id: UUID
    membership_established: bool
    membership: Membership | None = None
    guest_token: str | None = None


@dataclass
class GroupView:
    """A group as seen by the caller."""

    group: Group
    identity: ActingIdentity


@dataclass
class MemberView:
    """One row of the member list."""

    membership: Membership
    is_current_user: bool

    @property
    def is_registered(self) -> bool:
        return self.membership.account_id is not None


class MembershipService:
    """Service layer for creating, inhabiting and linking memberships."""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        session_service: SessionService,
        resolver: MembershipResolver,
        password_hasher: IPasswordHasher,
    ) -> None:
        self._uow_factory = uow_factory
        self._sessions = session_service
        self._resolver = resolver
        self._hasher = password_hasher

    async def create_group(
        self,
        slug: str,
        name: str,
        tokens: SessionTokens,
        password: str | None = None,
        display_name: str | None = None,
    ) -> tuple[Group, Membership]:
        """Create a group and make the logged-in creator its first admin.

        The group and the admin membership are written in one transaction.

        Raises:
            MustBeLoggedInError: If no valid account session came with the request.
            ValidationFailedError: If slug, name, display name or password are malformed.
            SlugAlreadyTakenError: If another group uses the slug.
        """
        async with self._uow_factory() as uow:
            account = await self._sessions.validate_account_session(uow, tokens.account_token)
            if account is None:
                raise MustBeLoggedInError("You must be logged in to create a trip")

            slug = clean_slug(slug)
            name = clean_group_name(name)
            creator_name = clean_display_name(display_name or account.default_display_name)
            if password:
                check_password(password)

            if await uow.groups.get_by_slug(slug):
                raise SlugAlreadyTakenError(slug)

            password_hash = await self._hasher.hash(password) if password else None

            try:
                group = await uow.groups.create(
                    Group(slug=slug, name=name, password_hash=password_hash)
                )
                membership = await uow.memberships.create(
                    Membership(
                        group_id=group.id,
                        display_name=creator_name,
                        account_id=account.id,
                        email=account.email,
                        is_admin=True,
                    )
                )
                await uow.commit()
            except IntegrityError as exc:
                await uow.rollback()
                # Lost a race for the slug against a concurrent create
                if is_unique_violation(exc, "slug"):
                    raise SlugAlreadyTakenError(slug) from exc
                raise

        logger.info(
            "group_created",
            group_id=str(group.id),
            account_id=str(account.id),
            password_protected=group.is_password_protected,
        )
        return group, membership

    async def get_group_view(self, slug: str, tokens: SessionTokens) -> GroupView:
        """Look up a group by slug together with the caller's identity in it."""
        async with self._uow_factory() as uow:
            group = await uow.groups.get_by_slug(slug)
            if not group:
                raise GroupNotFoundError(slug)

            identity = await self._resolver.resolve(uow, group.id, tokens)
            return GroupView(group=group, identity=identity)

    async def join_group(
        self,
        slug: str,
        tokens: SessionTokens,
        password: str | None = None,
        display_name: str | None = None,
        email: str | None = None,
    ) -> JoinResult:
        """Pass the password gate of a group and, given a name, become a member.

        Re-joining is idempotent: when a membership already resolves for the
        caller nothing is written.

        Raises:
            GroupNotFoundError: If the slug is unknown.
            PasswordRequiredError: If the group needs a password and none was given.
            InvalidPasswordError: If the password does not match.
            ValidationFailedError: If display name or email are malformed.
        """
        async with self._uow_factory() as uow:
            group = await uow.groups.get_by_slug(slug)
            if not group:
                raise GroupNotFoundError(slug)

            identity = await self._resolver.resolve(uow, group.id, tokens)
            if identity.membership is not None:
                return JoinResult(
                    group_id=group.id,
                    membership_established=True,
                    membership=identity.membership,
                )

            # A guest session for this group means the gate was already passed
            if group.password_hash and identity.guest_session is None:
                if not password:
                    raise PasswordRequiredError()
                if not await self._hasher.verify(group.password_hash, password):
                    raise InvalidPasswordError()

            if not display_name:
                guest_token: str | None = None
                # Accounts only need a gate session to remember a passed password
                needs_gate = identity.account is None or group.is_password_protected
                if needs_gate and identity.guest_session is None:
                    guest_token = await self._sessions.issue_guest_session(uow, group.id)
                    await uow.commit()
                return JoinResult(
                    group_id=group.id,
                    membership_established=False,
                    guest_token=guest_token,
                )

            membership, guest_token = await self._establish(
                uow, group, identity, display_name, email
            )
            await uow.commit()

        return JoinResult(
            group_id=group.id,
            membership_established=True,
            membership=membership,
            guest_token=guest_token,
        )

    async def establish_membership(
        self,
        group_id: UUID,
        display_name: str,
        tokens: SessionTokens,
        email: str | None = None,
    ) -> JoinResult:
        """Give the caller a membership in a group they already entered.

        This is the "choose a display name" step after the password gate.

        Raises:
            GroupNotFoundError: If the group does not exist.
            PasswordRequiredError: If the group is protected and the caller has
                not passed its gate yet.
            ValidationFailedError: If display name or email are malformed.
        """
        async with self._uow_factory() as uow:
            group = await uow.groups.get(group_id)
            if not group:
                raise GroupNotFoundError(str(group_id))

            identity = await self._resolver.resolve(uow, group.id, tokens)
            if identity.membership is not None:
                return JoinResult(
                    group_id=group.id,
                    membership_established=True,
                    membership=identity.membership,
                )

            if group.is_password_protected and identity.guest_session is None:
                raise PasswordRequiredError()

            membership, guest_token = await self._establish(
                uow, group, identity, display_name, email
            )
            await uow.commit()

        return JoinResult(
            group_id=group.id,
            membership_established=True,
            membership=membership,
            guest_token=guest_token,
        )

    async def link_guest_memberships(self, account_id: UUID, email: str) -> list[Membership]:
        """Claim every guest membership registered under ``email`` for an account."""
        async with self._uow_factory() as uow:
            linked = await self.sweep_guest_memberships(uow, account_id, email)
            await uow.commit()
            return linked

    async def sweep_guest_memberships(
        self, uow: IUnitOfWork, account_id: UUID, email: str
    ) -> list[Membership]:
        """Link guest memberships to an account within an existing transaction.

        Only memberships without an account are touched. When a group ends
        up with more than one candidate for the account (duplicate guest rows,
        or the account already has a membership there), the extras are
        merged into the surviving membership.

        Returns:
            The memberships that were linked to the account.
        """
        normalized = email.strip().lower()
        candidates = await uow.memberships.list_unlinked_by_email(normalized)

        linked: list[Membership] = []
        survivors: dict[UUID, Membership] = {}
        merged = 0

        for candidate in candidates:
            survivor = survivors.get(candidate.group_id)
            if survivor is None:
                survivor = await uow.memberships.get_for_account(candidate.group_id, account_id)

            if survivor is None:
                candidate.link(account_id)
                updated = await uow.memberships.update(candidate)
                survivors[updated.group_id] = updated
                linked.append(updated)
                continue

            survivors[candidate.group_id] = await self._merge_into(uow, candidate, survivor)
            merged += 1

        if candidates:
            logger.info(
                "guest_memberships_linked",
                account_id=str(account_id),
                linked=len(linked),
                merged=merged,
            )
        return linked

    async def list_members(self, group_id: UUID, tokens: SessionTokens) -> list[MemberView]:
        """List the members of a group, newest first. Requires a membership."""
        async with self._uow_factory() as uow:
            group = await uow.groups.get(group_id)
            if not group:
                raise GroupNotFoundError(str(group_id))

            identity = await self._resolver.resolve(uow, group.id, tokens)
            if identity.membership is None:
                raise NotAMemberError(str(group.id))

            members = await uow.memberships.list_for_group(group.id)
            return [
                MemberView(
                    membership=member,
                    is_current_user=member.id == identity.membership.id,
                )
                for member in members
            ]

    # --- Internal helpers ---

    async def _establish(
        self,
        uow: IUnitOfWork,
        group: Group,
        identity: ActingIdentity,
        display_name: str,
        email: str | None,
    ) -> tuple[Membership, str | None]:
        """Inhabit a matching guest membership or create a new one.

        Returns the membership and, for callers without an account session,
        the guest token to store in the cookie.
        """
        name = clean_display_name(display_name)
        contact = clean_optional_email(email)

        # Serialise concurrent first joins so only one of them becomes admin
        await uow.groups.lock(group.id)

        membership = await uow.memberships.find_unlinked_match(group.id, name, contact)
        if membership is not None:
            changed = False
            if identity.account is not None:
                membership.link(identity.account.id)
                changed = True
            if membership.email is None and contact:
                membership.email = contact
                changed = True
            if changed:
                membership = await uow.memberships.update(membership)
            logger.info(
                "membership_inhabited",
                group_id=str(group.id),
                membership_id=str(membership.id),
                linked=identity.account is not None,
            )
        else:
            existing_count = await uow.memberships.count_for_group(group.id)
            membership = await uow.memberships.create(
                Membership(
                    group_id=group.id,
                    display_name=name,
                    email=contact,
                    account_id=identity.account.id if identity.account else None,
                    is_admin=existing_count == 0,
                )
            )
            logger.info(
                "membership_created",
                group_id=str(group.id),
                membership_id=str(membership.id),
                is_admin=membership.is_admin,
                guest=membership.is_guest,
            )

        if identity.account is not None:
            # The account session resolves this membership from now on
            return membership, None

        if identity.guest_session is not None:
            await self._sessions.attach_membership_to_guest_session(
                uow, identity.guest_session, membership.id
            )
            return membership, identity.guest_session.id

        token = await self._sessions.issue_guest_session(uow, group.id, membership.id)
        return membership, token

    async def _merge_into(
        self,
        uow: IUnitOfWork,
        duplicate: Membership,
        survivor: Membership,
    ) -> Membership:
        """Fold a duplicate guest membership into the account's membership."""
        await uow.content.reassign_member(duplicate.id, survivor.id)
        await uow.sessions.reassign_guest_sessions(duplicate.id, survivor.id)

        changed = False
        if duplicate.is_admin and not survivor.is_admin:
            survivor.is_admin = True
            changed = True
        if survivor.email is None and duplicate.email:
            survivor.email = duplicate.email
            changed = True

        await uow.memberships.delete(duplicate.id)
        if changed:
            survivor = await uow.memberships.update(survivor)

        logger.info(
            "membership_merged",
            group_id=str(survivor.group_id),
            duplicate_id=str(duplicate.id),
            survivor_id=str(survivor.id),
        )
        return survivor
