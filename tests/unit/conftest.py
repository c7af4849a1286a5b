"""Shared fixtures for unit tests."""

from typing import Any
from unittest.mock import AsyncMock

import pytest

from domain.entities.account import Account
from domain.entities.group import Group, Membership
from domain.entities.session import AccountSession, GuestSession


def _echo(entity: Any, *args: Any) -> Any:
    return entity


class FakeUnitOfWork:
    """Fake Unit of Work with repository mocks for unit testing.

    Lookups default to "nothing found" and writes echo the entity back, so
    each test only configures the rows it cares about.
    """

    def __init__(self) -> None:
        self.accounts = AsyncMock()
        self.groups = AsyncMock()
        self.memberships = AsyncMock()
        self.sessions = AsyncMock()
        self.content = AsyncMock()
        self.committed = False
        self.rolled_back = False

        for repo, getters in (
            (self.accounts, ("get", "get_by_email", "get_by_username")),
            (self.groups, ("get", "get_by_slug", "lock")),
            (self.memberships, ("get", "get_for_account", "find_unlinked_match")),
            (self.sessions, ("get_account_session", "get_guest_session", "attach_membership")),
            (self.content, ("get_post", "get_comment", "reassign_member")),
        ):
            for name in getters:
                getattr(repo, name).return_value = None

        for repo, writers in (
            (self.accounts, ("create", "update")),
            (self.groups, ("create", "update")),
            (self.memberships, ("create", "update")),
            (self.sessions, ("create_account_session", "create_guest_session")),
            (self.content, ("create_post", "create_comment", "create_reaction")),
        ):
            for name in writers:
                getattr(repo, name).side_effect = _echo

        self.memberships.list_unlinked_by_email.return_value = []
        self.memberships.list_for_group.return_value = []
        self.memberships.list_groups_for_account.return_value = []
        self.memberships.count_for_group.return_value = 0
        self.memberships.delete.return_value = True
        self.sessions.delete_account_session.return_value = True
        self.sessions.delete_guest_sessions_for_member.return_value = 0
        self.sessions.reassign_guest_sessions.return_value = 0
        self.content.delete_post.return_value = True
        self.content.delete_comment.return_value = True

    async def commit(self) -> None:
        self.committed = True

    async def rollback(self) -> None:
        self.rolled_back = True

    async def __aenter__(self) -> "FakeUnitOfWork":
        return self

    async def __aexit__(self, *args: Any) -> None:
        pass


class FakePasswordHasher:
    """Reversible stand-in for argon2 so tests stay fast."""

    async def hash(self, password: str) -> str:
        return f"hashed:{password}"

    async def verify(self, password_hash: str, password: str) -> bool:
        return password_hash == f"hashed:{password}"


def sign_in(uow: FakeUnitOfWork, account: Account, token: str = "account-token") -> None:
    """Make ``token`` a valid account session for ``account``."""
    uow.sessions.get_account_session.return_value = AccountSession(
        id=token, account_id=account.id
    )
    uow.accounts.get.return_value = account


def hold_guest_session(
    uow: FakeUnitOfWork,
    group: Group,
    membership: Membership | None = None,
    token: str = "guest-token",
) -> GuestSession:
    """Make ``token`` a valid guest session for ``group``."""
    session = GuestSession(
        id=token,
        group_id=group.id,
        membership_id=membership.id if membership else None,
    )
    uow.sessions.get_guest_session.return_value = session
    if membership is not None:
        uow.memberships.get.return_value = membership
    return session


@pytest.fixture
def uow() -> FakeUnitOfWork:
    """Create a fresh FakeUnitOfWork."""
    return FakeUnitOfWork()


@pytest.fixture
def hasher() -> FakePasswordHasher:
    return FakePasswordHasher()


@pytest.fixture
def account() -> Account:
    return Account(email="alex@example.com", password_hash="hashed:correct-horse", username="alex")


@pytest.fixture
def other_account() -> Account:
    return Account(email="sam@example.com", password_hash="hashed:battery-staple")


@pytest.fixture
def group() -> Group:
    return Group(slug="iceland-2025", name="Iceland 2025")


@pytest.fixture
def protected_group() -> Group:
    return Group(slug="secret-trip", name="Secret Trip", password_hash="hashed:letmein")
