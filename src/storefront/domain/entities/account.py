"""Account entities for credential and session management.

An account is the identity record behind every storefront administrator and
customer. Accounts authenticate either with a password or through a linked
OAuth provider identity.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class AccountRole(str, Enum):
    """Roles an account can hold."""

    ADMIN = "ADMIN"
    CUSTOMER = "CUSTOMER"


@dataclass(frozen=True)
class AccountProfile:
    """Public view of an account, safe to return to clients.

    Never carries the password hash or the stored refresh-token hash.

    Attributes:
        id: Numeric account identifier.
        name: Display name.
        email: Unique email address.
        role: Account role.
        image: Optional avatar URL.
        created_at: Timestamp when the account was created.
        updated_at: Timestamp when the account was last updated.
    """

    id: int
    name: str
    email: str
    role: AccountRole
    image: str | None
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class OAuthIdentity:
    """Identity asserted by an external OAuth provider.

    Produced by a provider handler's ``extract_identity`` so that the
    linking flow never needs to know which provider it is dealing with.
    """

    provider: str
    provider_account_id: str
    email: str
    name: str
    image: str | None = None
    provider_refresh_token: str | None = None

    def __post_init__(self) -> None:
        if not self.provider:
            raise ValueError("Provider is required")
        if not self.provider_account_id:
            raise ValueError("Provider account ID is required")
        if not self.email:
            raise ValueError("Email is required")


@dataclass(frozen=True)
class IssuedSession:
    """Result of a successful authentication.

    Attributes:
        profile: The authenticated account.
        access_token: Signed short-lived access token.
        encrypted_refresh_token: Refresh token encrypted for cookie transport.
        is_new_account: True when the account was created by this sign-in.
    """

    profile: AccountProfile
    access_token: str
    encrypted_refresh_token: str
    is_new_account: bool = False


@dataclass(frozen=True)
class RefreshedTokens:
    """Result of a successful refresh.

    ``encrypted_refresh_token`` is None when refresh-token rotation is disabled.
    """

    access_token: str
    encrypted_refresh_token: str | None = None
