"""Unit tests for MembershipService (joining, inhabiting and linking)."""

from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from core.exceptions import (
    GroupNotFoundError,
    InvalidPasswordError,
    MustBeLoggedInError,
    NotAMemberError,
    PasswordRequiredError,
    SlugAlreadyTakenError,
    ValidationFailedError,
)
from domain.entities.account import Account
from domain.entities.group import Group, Membership
from domain.entities.identity import SessionTokens
from domain.services.membership_resolver import MembershipResolver
from domain.services.membership_service import MembershipService
from domain.services.session_service import SessionService
from tests.unit.conftest import (
    FakePasswordHasher,
    FakeUnitOfWork,
    hold_guest_session,
    sign_in,
)

NO_COOKIES = SessionTokens()
ACCOUNT_COOKIE = SessionTokens(account_token="account-token")
GUEST_COOKIE = SessionTokens(guest_token="guest-token")


@pytest.fixture
def service(uow: FakeUnitOfWork, hasher: FakePasswordHasher) -> MembershipService:
    sessions = SessionService(lambda: uow)
    return MembershipService(
        lambda: uow,
        session_service=sessions,
        resolver=MembershipResolver(lambda: uow, sessions),
        password_hasher=hasher,
    )


def _created_membership(uow: FakeUnitOfWork) -> Membership:
    return uow.memberships.create.call_args.args[0]


# --- join_group ---


class TestJoinGate:
    @pytest.mark.asyncio
    async def test_unknown_slug(self, service: MembershipService):
        with pytest.raises(GroupNotFoundError):
            await service.join_group("nowhere", NO_COOKIES)

    @pytest.mark.asyncio
    async def test_password_required(
        self, service: MembershipService, uow: FakeUnitOfWork, protected_group: Group
    ):
        uow.groups.get_by_slug.return_value = protected_group

        with pytest.raises(PasswordRequiredError):
            await service.join_group(protected_group.slug, NO_COOKIES, display_name="Alex")

        uow.memberships.create.assert_not_called()

    @pytest.mark.asyncio
    async def test_invalid_password(
        self, service: MembershipService, uow: FakeUnitOfWork, protected_group: Group
    ):
        uow.groups.get_by_slug.return_value = protected_group

        with pytest.raises(InvalidPasswordError):
            await service.join_group(protected_group.slug, NO_COOKIES, password="guess")

        assert not uow.committed

    @pytest.mark.asyncio
    async def test_correct_password_without_name_issues_gate_session(
        self, service: MembershipService, uow: FakeUnitOfWork, protected_group: Group
    ):
        uow.groups.get_by_slug.return_value = protected_group

        result = await service.join_group(protected_group.slug, NO_COOKIES, password="letmein")

        assert result.membership_established is False
        assert result.guest_token is not None
        gate = uow.sessions.create_guest_session.call_args.args[0]
        assert gate.group_id == protected_group.id
        assert gate.membership_id is None
        assert uow.committed

    @pytest.mark.asyncio
    async def test_gate_session_skips_password(
        self, service: MembershipService, uow: FakeUnitOfWork, protected_group: Group
    ):
        uow.groups.get_by_slug.return_value = protected_group
        hold_guest_session(uow, protected_group)

        result = await service.join_group(protected_group.slug, GUEST_COOKIE, display_name="Alex")

        assert result.membership_established is True
        assert result.guest_token == "guest-token"
        uow.sessions.attach_membership.assert_awaited_once_with(
            "guest-token", result.membership.id
        )

    @pytest.mark.asyncio
    async def test_logged_in_without_name_gets_no_guest_cookie(
        self, service: MembershipService, uow: FakeUnitOfWork, account: Account, group: Group
    ):
        uow.groups.get_by_slug.return_value = group
        sign_in(uow, account)

        result = await service.join_group(group.slug, ACCOUNT_COOKIE)

        assert result.membership_established is False
        assert result.guest_token is None
        uow.sessions.create_guest_session.assert_not_called()

    @pytest.mark.asyncio
    async def test_logged_in_past_protected_gate_gets_gate_session(
        self,
        service: MembershipService,
        uow: FakeUnitOfWork,
        account: Account,
        protected_group: Group,
    ):
        uow.groups.get_by_slug.return_value = protected_group
        sign_in(uow, account)

        result = await service.join_group(protected_group.slug, ACCOUNT_COOKIE, password="letmein")

        assert result.membership_established is False
        assert result.guest_token is not None
        gate = uow.sessions.create_guest_session.call_args.args[0]
        assert gate.group_id == protected_group.id
        assert gate.membership_id is None
        uow.memberships.create.assert_not_called()


class TestJoinIdempotent:
    @pytest.mark.asyncio
    async def test_existing_membership_is_returned_without_writes(
        self, service: MembershipService, uow: FakeUnitOfWork, group: Group
    ):
        existing = Membership(group_id=group.id, display_name="Alex")
        uow.groups.get_by_slug.return_value = group
        hold_guest_session(uow, group, existing)

        first = await service.join_group(group.slug, GUEST_COOKIE, display_name="Alex")
        second = await service.join_group(group.slug, GUEST_COOKIE, display_name="Alex")

        assert first.membership_established and second.membership_established
        assert first.membership == second.membership == existing
        uow.memberships.create.assert_not_called()
        uow.sessions.create_guest_session.assert_not_called()

    @pytest.mark.asyncio
    async def test_existing_membership_skips_password_check(
        self, service: MembershipService, uow: FakeUnitOfWork, protected_group: Group
    ):
        existing = Membership(group_id=protected_group.id, display_name="Alex")
        uow.groups.get_by_slug.return_value = protected_group
        hold_guest_session(uow, protected_group, existing)

        result = await service.join_group(protected_group.slug, GUEST_COOKIE)

        assert result.membership == existing


class TestEstablish:
    @pytest.mark.asyncio
    async def test_first_member_becomes_admin(
        self, service: MembershipService, uow: FakeUnitOfWork, group: Group
    ):
        uow.groups.get_by_slug.return_value = group
        uow.memberships.count_for_group.return_value = 0

        result = await service.join_group(
            group.slug, NO_COOKIES, display_name="Alex", email="Alex@Example.com"
        )

        created = _created_membership(uow)
        assert created.is_admin is True
        assert created.is_guest
        assert created.email == "alex@example.com"
        assert result.guest_token is not None
        session = uow.sessions.create_guest_session.call_args.args[0]
        assert session.membership_id == created.id
        uow.groups.lock.assert_awaited_once_with(group.id)

    @pytest.mark.asyncio
    async def test_later_members_are_not_admin(
        self, service: MembershipService, uow: FakeUnitOfWork, group: Group
    ):
        uow.groups.get_by_slug.return_value = group
        uow.memberships.count_for_group.return_value = 1

        await service.join_group(group.slug, NO_COOKIES, display_name="Sam")

        assert _created_membership(uow).is_admin is False

    @pytest.mark.asyncio
    async def test_inhabits_unlinked_match_instead_of_inserting(
        self, service: MembershipService, uow: FakeUnitOfWork, group: Group
    ):
        placeholder = Membership(group_id=group.id, display_name="ALEX")
        uow.groups.get_by_slug.return_value = group
        uow.memberships.find_unlinked_match.return_value = placeholder

        result = await service.join_group(group.slug, NO_COOKIES, display_name="alex")

        assert result.membership == placeholder
        uow.memberships.create.assert_not_called()
        uow.memberships.find_unlinked_match.assert_awaited_once_with(group.id, "alex", None)

    @pytest.mark.asyncio
    async def test_inhabit_backfills_email(
        self, service: MembershipService, uow: FakeUnitOfWork, group: Group
    ):
        placeholder = Membership(group_id=group.id, display_name="Alex")
        uow.groups.get_by_slug.return_value = group
        uow.memberships.find_unlinked_match.return_value = placeholder

        await service.join_group(group.slug, NO_COOKIES, display_name="Alex", email="a@x.com")

        updated = uow.memberships.update.call_args.args[0]
        assert updated.email == "a@x.com"
        assert updated.is_guest

    @pytest.mark.asyncio
    async def test_authenticated_inhabit_links_account(
        self,
        service: MembershipService,
        uow: FakeUnitOfWork,
        account: Account,
        group: Group,
    ):
        placeholder = Membership(group_id=group.id, display_name="Alex")
        uow.groups.get_by_slug.return_value = group
        uow.memberships.find_unlinked_match.return_value = placeholder
        sign_in(uow, account)

        result = await service.join_group(group.slug, ACCOUNT_COOKIE, display_name="Alex")

        assert result.membership.account_id == account.id
        assert result.guest_token is None
        uow.sessions.create_guest_session.assert_not_called()

    @pytest.mark.asyncio
    async def test_authenticated_insert_links_account(
        self,
        service: MembershipService,
        uow: FakeUnitOfWork,
        account: Account,
        group: Group,
    ):
        uow.groups.get_by_slug.return_value = group
        uow.memberships.count_for_group.return_value = 3
        sign_in(uow, account)

        await service.join_group(group.slug, ACCOUNT_COOKIE, display_name="Alex")

        created = _created_membership(uow)
        assert created.account_id == account.id
        assert created.is_admin is False

    @pytest.mark.asyncio
    async def test_invalid_display_name(
        self, service: MembershipService, uow: FakeUnitOfWork, group: Group
    ):
        uow.groups.get_by_slug.return_value = group

        with pytest.raises(ValidationFailedError):
            await service.join_group(group.slug, NO_COOKIES, display_name="A")

        assert not uow.committed


class TestEstablishMembership:
    @pytest.mark.asyncio
    async def test_protected_group_requires_gate(
        self, service: MembershipService, uow: FakeUnitOfWork, protected_group: Group
    ):
        uow.groups.get.return_value = protected_group

        with pytest.raises(PasswordRequiredError):
            await service.establish_membership(protected_group.id, "Alex", NO_COOKIES)

    @pytest.mark.asyncio
    async def test_after_gate_attaches_to_gate_session(
        self, service: MembershipService, uow: FakeUnitOfWork, protected_group: Group
    ):
        uow.groups.get.return_value = protected_group
        hold_guest_session(uow, protected_group)

        result = await service.establish_membership(protected_group.id, "Alex", GUEST_COOKIE)

        assert result.membership_established
        assert result.guest_token == "guest-token"
        uow.sessions.create_guest_session.assert_not_called()

    @pytest.mark.asyncio
    async def test_logged_in_after_gate_creates_linked_membership(
        self,
        service: MembershipService,
        uow: FakeUnitOfWork,
        account: Account,
        protected_group: Group,
    ):
        uow.groups.get.return_value = protected_group
        sign_in(uow, account)
        hold_guest_session(uow, protected_group)
        both_cookies = SessionTokens(account_token="account-token", guest_token="guest-token")

        result = await service.establish_membership(protected_group.id, "Blake", both_cookies)

        assert result.membership_established
        assert result.membership.account_id == account.id
        assert result.guest_token is None
        uow.sessions.attach_membership.assert_not_called()

    @pytest.mark.asyncio
    async def test_unknown_group(self, service: MembershipService):
        with pytest.raises(GroupNotFoundError):
            await service.establish_membership(uuid4(), "Alex", NO_COOKIES)


# --- link sweep ---


class TestLinkGuestMemberships:
    @pytest.mark.asyncio
    async def test_links_every_unlinked_match(
        self, service: MembershipService, uow: FakeUnitOfWork, account: Account
    ):
        in_a = Membership(group_id=uuid4(), display_name="Alex", email="a@x.com")
        in_b = Membership(group_id=uuid4(), display_name="Al", email="a@x.com")
        uow.memberships.list_unlinked_by_email.return_value = [in_a, in_b]

        linked = await service.link_guest_memberships(account.id, "A@X.com")

        uow.memberships.list_unlinked_by_email.assert_awaited_once_with("a@x.com")
        assert [m.account_id for m in linked] == [account.id, account.id]
        assert uow.committed

    @pytest.mark.asyncio
    async def test_no_candidates_links_nothing(
        self, service: MembershipService, uow: FakeUnitOfWork, account: Account
    ):
        linked = await service.link_guest_memberships(account.id, "a@x.com")

        assert linked == []
        uow.memberships.update.assert_not_called()

    @pytest.mark.asyncio
    async def test_duplicate_in_group_with_existing_link_is_merged(
        self, service: MembershipService, uow: FakeUnitOfWork, account: Account, group: Group
    ):
        existing = Membership(group_id=group.id, display_name="Alex", account_id=account.id)
        duplicate = Membership(
            group_id=group.id, display_name="Alex G", email="a@x.com", is_admin=True
        )
        uow.memberships.list_unlinked_by_email.return_value = [duplicate]
        uow.memberships.get_for_account.return_value = existing

        linked = await service.link_guest_memberships(account.id, "a@x.com")

        assert linked == []
        uow.content.reassign_member.assert_awaited_once_with(duplicate.id, existing.id)
        uow.sessions.reassign_guest_sessions.assert_awaited_once_with(duplicate.id, existing.id)
        uow.memberships.delete.assert_awaited_once_with(duplicate.id)
        merged = uow.memberships.update.call_args.args[0]
        assert merged.id == existing.id
        assert merged.is_admin is True
        assert merged.email == "a@x.com"
        assert duplicate.account_id is None

    @pytest.mark.asyncio
    async def test_two_guest_rows_in_one_group_keep_the_first(
        self, service: MembershipService, uow: FakeUnitOfWork, account: Account, group: Group
    ):
        older = Membership(group_id=group.id, display_name="Alex", email="a@x.com")
        newer = Membership(group_id=group.id, display_name="Alexander", email="a@x.com")
        uow.memberships.list_unlinked_by_email.return_value = [older, newer]

        linked = await service.link_guest_memberships(account.id, "a@x.com")

        assert linked == [older]
        assert older.account_id == account.id
        uow.memberships.delete.assert_awaited_once_with(newer.id)


# --- create_group ---


class TestCreateGroup:
    @pytest.mark.asyncio
    async def test_must_be_logged_in(self, service: MembershipService, uow: FakeUnitOfWork):
        with pytest.raises(MustBeLoggedInError):
            await service.create_group("iceland-2025", "Iceland", NO_COOKIES)

        uow.groups.create.assert_not_called()

    @pytest.mark.asyncio
    async def test_creator_is_linked_admin(
        self, service: MembershipService, uow: FakeUnitOfWork, account: Account
    ):
        sign_in(uow, account)

        group, membership = await service.create_group(
            "Iceland-2025", "Iceland 2025", ACCOUNT_COOKIE, password="letmein1"
        )

        assert group.slug == "iceland-2025"
        assert group.password_hash == "hashed:letmein1"
        assert membership.is_admin
        assert membership.account_id == account.id
        assert membership.group_id == group.id
        assert membership.display_name == "alex"
        assert uow.committed

    @pytest.mark.asyncio
    async def test_slug_taken(
        self, service: MembershipService, uow: FakeUnitOfWork, account: Account, group: Group
    ):
        sign_in(uow, account)
        uow.groups.get_by_slug.return_value = group

        with pytest.raises(SlugAlreadyTakenError):
            await service.create_group(group.slug, "Again", ACCOUNT_COOKIE)

    @pytest.mark.asyncio
    async def test_malformed_slug(
        self, service: MembershipService, uow: FakeUnitOfWork, account: Account
    ):
        sign_in(uow, account)

        with pytest.raises(ValidationFailedError):
            await service.create_group("no spaces!", "Trip", ACCOUNT_COOKIE)

    @pytest.mark.asyncio
    async def test_short_group_password(
        self, service: MembershipService, uow: FakeUnitOfWork, account: Account
    ):
        sign_in(uow, account)

        with pytest.raises(ValidationFailedError):
            await service.create_group("iceland-2025", "Trip", ACCOUNT_COOKIE, password="short")

        uow.groups.create.assert_not_called()


# --- list_members ---


class TestListMembers:
    @pytest.mark.asyncio
    async def test_requires_membership(
        self, service: MembershipService, uow: FakeUnitOfWork, group: Group
    ):
        uow.groups.get.return_value = group

        with pytest.raises(NotAMemberError):
            await service.list_members(group.id, NO_COOKIES)

    @pytest.mark.asyncio
    async def test_flags_current_user(
        self, service: MembershipService, uow: FakeUnitOfWork, account: Account, group: Group
    ):
        me = Membership(group_id=group.id, display_name="Alex", account_id=account.id)
        guest = Membership(group_id=group.id, display_name="Sam")
        uow.groups.get.return_value = group
        sign_in(uow, account)
        uow.memberships.get_for_account.return_value = me
        uow.memberships.list_for_group = AsyncMock(return_value=[guest, me])

        rows = await service.list_members(group.id, ACCOUNT_COOKIE)

        assert [(r.membership, r.is_current_user, r.is_registered) for r in rows] == [
            (guest, False, False),
            (me, True, True),
        ]
