"""Acting identity within a group.

A request carries up to two session tokens. The resolver maps them, for a
given group, to exactly one of three identities:

    ANONYMOUS      no membership resolves (the caller may still be logged in
                   or past the password gate)
    GUEST          the group-scoped guest session points at a membership
    AUTHENTICATED  the logged-in account owns a membership in the group

The authenticated branch always wins over the guest branch.
"""

from dataclasses import dataclass
from enum import StrEnum

from domain.entities.account import Account
from domain.entities.group import Membership
from domain.entities.session import GuestSession


@dataclass(frozen=True)
class SessionTokens:
    """Raw session tokens read from the inbound request."""

    account_token: str | None = None
    guest_token: str | None = None


class IdentityKind(StrEnum):
    """Which plane the acting identity was resolved from."""

    ANONYMOUS = "anonymous"
    GUEST = "guest"
    AUTHENTICATED = "authenticated"


@dataclass(frozen=True)
class ActingIdentity:
    """Result of membership resolution for one group."""

    kind: IdentityKind
    membership: Membership | None = None
    account: Account | None = None
    guest_session: GuestSession | None = None

    @property
    def is_member(self) -> bool:
        return self.membership is not None

    @property
    def is_admin(self) -> bool:
        return self.membership is not None and self.membership.is_admin

    @property
    def is_authenticated(self) -> bool:
        """True when a valid account session came with the request."""
        return self.account is not None

    @property
    def passed_gate(self) -> bool:
        """True when the browser already holds a session for this group."""
        return self.membership is not None or self.guest_session is not None


def resolve_identity(
    account: Account | None,
    account_membership: Membership | None,
    guest_session: GuestSession | None,
    guest_membership: Membership | None,
) -> ActingIdentity:
    """Pick the acting identity from already validated session state.

    ``guest_session`` must already be filtered to the target group.
    """
    if account is not None and account_membership is not None:
        return ActingIdentity(
            kind=IdentityKind.AUTHENTICATED,
            membership=account_membership,
            account=account,
            guest_session=guest_session,
        )

    if guest_session is not None and guest_membership is not None:
        return ActingIdentity(
            kind=IdentityKind.GUEST,
            membership=guest_membership,
            account=account,
            guest_session=guest_session,
        )

    return ActingIdentity(
        kind=IdentityKind.ANONYMOUS,
        account=account,
        guest_session=guest_session,
    )
