"""Google sign-in over OAuth 2.0."""

from typing import Any
from urllib.parse import urlencode

import httpx

from storefront.domain.entities import OAuthIdentity
from storefront.infrastructure.configuration.providers.oauth.oauth_handler import (
    OAuthClientConfig,
    OAuthProviderError,
    OAuthProviderHandler,
)

AUTHORIZATION_URL = "https://accounts.google.com/o/oauth2/v2/auth"
TOKEN_URL = "https://oauth2.googleapis.com/token"
USERINFO_URL = "https://www.googleapis.com/oauth2/v2/userinfo"


def _describe_error(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return f"HTTP {response.status_code}"
    return body.get("error_description") or body.get("error") or f"HTTP {response.status_code}"


class GoogleOAuthHandler(OAuthProviderHandler):
    """Google authorization-code flow.

    Offline access with forced consent is requested so Google returns a
    refresh token on every sign-in; it is stored on the link.
    """

    def __init__(self, timeout: float = 10.0) -> None:
        self.timeout = timeout

    @property
    def provider_name(self) -> str:
        return "google"

    async def get_authorization_url(self, config: OAuthClientConfig, state: str) -> str:
        if not config.client_id:
            raise ValueError("Google client_id is not configured")

        query = urlencode(
            {
                "client_id": config.client_id,
                "redirect_uri": config.redirect_uri,
                "response_type": "code",
                "scope": " ".join(config.scopes),
                "state": state,
                "access_type": "offline",
                "prompt": "consent",
            }
        )
        return f"{AUTHORIZATION_URL}?{query}"

    async def exchange_code_for_tokens(
        self, config: OAuthClientConfig, code: str
    ) -> dict[str, Any]:
        form = {
            "grant_type": "authorization_code",
            "code": code,
            "client_id": config.client_id,
            "client_secret": config.client_secret,
            "redirect_uri": config.redirect_uri,
        }
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            response = await client.post(TOKEN_URL, data=form)

        if response.status_code != 200:
            raise OAuthProviderError(
                f"Failed to exchange Google OAuth code: {_describe_error(response)}"
            )
        return response.json()

    async def get_user_info(self, access_token: str) -> dict[str, Any]:
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            response = await client.get(
                USERINFO_URL, headers={"Authorization": f"Bearer {access_token}"}
            )

        if response.status_code != 200:
            raise OAuthProviderError(
                f"Failed to fetch Google user info: {_describe_error(response)}"
            )
        return response.json()

    def extract_identity(
        self,
        user_info: dict[str, Any],
        tokens: dict[str, Any] | None = None,
    ) -> OAuthIdentity:
        """Map a userinfo v2 profile to an identity.

        Google sends numeric-looking IDs; they are kept as strings. A missing
        display name falls back to the local part of the email.
        """
        google_id = user_info.get("id")
        email = user_info.get("email")
        if google_id is None or google_id == "" or not email:
            raise OAuthProviderError("Google profile is missing an ID or email")

        return OAuthIdentity(
            provider=self.provider_name,
            provider_account_id=str(google_id),
            email=email,
            name=user_info.get("name") or email.split("@", 1)[0],
            image=user_info.get("picture"),
            provider_refresh_token=(tokens or {}).get("refresh_token"),
        )
