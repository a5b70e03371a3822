"""Domain entities for Storefront."""

from storefront.domain.entities.account import (
    AccountProfile,
    AccountRole,
    IssuedSession,
    OAuthIdentity,
    RefreshedTokens,
)

__all__ = [
    "AccountProfile",
    "AccountRole",
    "IssuedSession",
    "OAuthIdentity",
    "RefreshedTokens",
]
