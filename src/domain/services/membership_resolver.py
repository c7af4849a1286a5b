"""Membership resolution: who is acting in this group right now."""

from collections.abc import Callable
from uuid import UUID

from domain.entities.group import Membership
from domain.entities.identity import ActingIdentity, SessionTokens, resolve_identity
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.session_service import SessionService


class MembershipResolver:
    """Maps ambient session tokens and a target group to one acting identity.

    Resolution order, first match wins:

    1. a valid account session whose account holds a membership in the group
       (a guest cookie for the same group does not matter);
    2. a valid guest session issued for this group that points at a
       membership;
    3. nobody.
    """

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        session_service: SessionService,
    ) -> None:
        self._uow_factory = uow_factory
        self._sessions = session_service

    async def resolve(
        self, uow: IUnitOfWork, group_id: UUID, tokens: SessionTokens
    ) -> ActingIdentity:
        """Resolve the acting identity within an existing UoW transaction."""
        account = await self._sessions.validate_account_session(uow, tokens.account_token)

        account_membership: Membership | None = None
        if account is not None:
            account_membership = await uow.memberships.get_for_account(group_id, account.id)

        # Filtered by group: a cookie issued for another group never resolves here
        guest_session = await self._sessions.validate_guest_session(
            uow, tokens.guest_token, expected_group_id=group_id
        )

        guest_membership: Membership | None = None
        if (
            account_membership is None
            and guest_session is not None
            and guest_session.membership_id is not None
        ):
            guest_membership = await uow.memberships.get(guest_session.membership_id)

        return resolve_identity(
            account=account,
            account_membership=account_membership,
            guest_session=guest_session,
            guest_membership=guest_membership,
        )

    async def resolve_identity(self, group_id: UUID, tokens: SessionTokens) -> ActingIdentity:
        """Resolve the acting identity in a read-only transaction."""
        async with self._uow_factory() as uow:
            return await self.resolve(uow, group_id, tokens)

    async def resolve_membership(
        self, group_id: UUID, tokens: SessionTokens
    ) -> Membership | None:
        """Return the acting membership for ``group_id``, or None."""
        identity = await self.resolve_identity(group_id, tokens)
        return identity.membership
