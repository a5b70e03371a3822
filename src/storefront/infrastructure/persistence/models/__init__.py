"""SQLAlchemy models for Storefront credential tables.

All models inherit from the Base class defined in database.py and are
automatically created on application startup in development mode.
"""

from storefront.infrastructure.persistence.models.account import AccountModel
from storefront.infrastructure.persistence.models.oauth_link import OAuthLinkModel

__all__ = [
    "AccountModel",
    "OAuthLinkModel",
]
