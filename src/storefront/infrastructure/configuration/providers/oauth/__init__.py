"""OAuth provider implementations."""

from storefront.infrastructure.configuration.providers.oauth.google import (
    GoogleOAuthHandler,
)
from storefront.infrastructure.configuration.providers.oauth.oauth_handler import (
    OAuthClientConfig,
    OAuthProviderError,
    OAuthProviderHandler,
)

__all__ = [
    "GoogleOAuthHandler",
    "OAuthClientConfig",
    "OAuthProviderError",
    "OAuthProviderHandler",
]
