"""Interface for OAuth 2.0 sign-in providers.

A provider handler covers the authorization-code round trip and reduces
whatever profile the provider returns to an ``OAuthIdentity``. The auth
service only ever sees the identity, so adding a provider never touches the
linking logic.
"""

import abc
from dataclasses import dataclass
from typing import Any

from storefront.domain.entities import OAuthIdentity


class OAuthProviderError(Exception):
    """Raised when a provider rejects a request or returns an unusable profile."""


@dataclass(frozen=True)
class OAuthClientConfig:
    """Client registration for one provider."""

    client_id: str
    client_secret: str
    redirect_uri: str
    scopes: tuple[str, ...] = ("openid", "email", "profile")


class OAuthProviderHandler(abc.ABC):
    """Authorization-code flow for one provider.

    Steps, in the order the routes call them:
    1. ``get_authorization_url`` for the consent redirect
    2. ``exchange_code_for_tokens`` on the callback
    3. ``get_user_info`` with the provider access token
    4. ``extract_identity`` to get the linking identity
    """

    @property
    @abc.abstractmethod
    def provider_name(self) -> str:
        """Name stored on OAuth links, e.g. ``"google"``."""

    @abc.abstractmethod
    async def get_authorization_url(self, config: OAuthClientConfig, state: str) -> str:
        """Build the consent URL carrying ``state`` for CSRF protection.

        Raises:
            ValueError: If the client ID is not configured.
        """

    @abc.abstractmethod
    async def exchange_code_for_tokens(
        self, config: OAuthClientConfig, code: str
    ) -> dict[str, Any]:
        """Trade an authorization code for provider tokens.

        Returns:
            The token response; ``access_token`` is always present and
            ``refresh_token`` may be.

        Raises:
            OAuthProviderError: If the provider rejects the code.
            httpx.HTTPError: If the provider cannot be reached.
        """

    @abc.abstractmethod
    async def get_user_info(self, access_token: str) -> dict[str, Any]:
        """Fetch the signed-in user's profile.

        Raises:
            OAuthProviderError: If the provider rejects the token.
            httpx.HTTPError: If the provider cannot be reached.
        """

    @abc.abstractmethod
    def extract_identity(
        self,
        user_info: dict[str, Any],
        tokens: dict[str, Any] | None = None,
    ) -> OAuthIdentity:
        """Reduce a provider profile to the identity used for linking.

        The provider refresh token, when ``tokens`` carries one, is kept on
        the link as given.

        Raises:
            OAuthProviderError: If the profile lacks an ID or email.
        """
