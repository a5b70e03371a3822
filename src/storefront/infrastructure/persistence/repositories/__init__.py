"""Persistence repositories for database operations."""

from storefront.infrastructure.persistence.repositories.account_repository import (
    AccountRepository,
)
from storefront.infrastructure.persistence.repositories.oauth_link_repository import (
    OAuthLinkRepository,
)

__all__ = [
    "AccountRepository",
    "OAuthLinkRepository",
]
