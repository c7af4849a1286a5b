"""Unit tests for acting identity resolution."""

import pytest

from domain.entities.account import Account
from domain.entities.group import Group, Membership
from domain.entities.identity import IdentityKind, resolve_identity
from domain.entities.session import GuestSession


def _membership(group: Group, **kwargs) -> Membership:
    return Membership(group_id=group.id, display_name="Alex", **kwargs)


class TestResolveIdentity:
    def test_nothing_is_anonymous(self):
        identity = resolve_identity(None, None, None, None)

        assert identity.kind == IdentityKind.ANONYMOUS
        assert identity.membership is None
        assert not identity.passed_gate
        assert not identity.is_authenticated

    def test_account_membership_wins_over_guest_membership(
        self, account: Account, group: Group
    ):
        linked = _membership(group, account_id=account.id, is_admin=True)
        guest = _membership(group)
        guest_session = GuestSession(id="g", group_id=group.id, membership_id=guest.id)

        identity = resolve_identity(account, linked, guest_session, guest)

        assert identity.kind == IdentityKind.AUTHENTICATED
        assert identity.membership is linked
        assert identity.is_admin

    def test_guest_membership_used_when_account_has_none(self, account: Account, group: Group):
        guest = _membership(group)
        guest_session = GuestSession(id="g", group_id=group.id, membership_id=guest.id)

        identity = resolve_identity(account, None, guest_session, guest)

        assert identity.kind == IdentityKind.GUEST
        assert identity.membership is guest
        assert identity.is_authenticated

    def test_nameless_gate_session_is_anonymous_but_past_gate(self, group: Group):
        gate = GuestSession(id="g", group_id=group.id)

        identity = resolve_identity(None, None, gate, None)

        assert identity.kind == IdentityKind.ANONYMOUS
        assert identity.passed_gate
        assert identity.guest_session is gate

    def test_logged_in_without_membership_keeps_account(self, account: Account):
        identity = resolve_identity(account, None, None, None)

        assert identity.kind == IdentityKind.ANONYMOUS
        assert identity.account is account
        assert not identity.is_member


class TestEntities:
    def test_link_is_one_directional(self, account: Account, other_account: Account, group: Group):
        membership = _membership(group)
        membership.link(account.id)

        assert not membership.is_guest
        membership.link(account.id)

        with pytest.raises(ValueError):
            membership.link(other_account.id)
        assert membership.account_id == account.id

    def test_default_display_name_prefers_username(self, account: Account):
        assert account.default_display_name == "alex"

    def test_default_display_name_falls_back_to_email_local_part(self):
        account = Account(email="sam.jones@example.com", password_hash="x")

        assert account.default_display_name == "sam.jones"

    def test_default_display_name_uses_full_email_for_short_local_part(self):
        account = Account(email="a@example.com", password_hash="x")

        assert account.default_display_name == "a@example.com"
