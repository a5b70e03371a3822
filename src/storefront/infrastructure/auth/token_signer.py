"""JWT token signer.

Creates and verifies signed, time-boxed tokens carrying ``{id, email, role}``.
Access and refresh tokens are signed with different secrets, so a token
minted for one purpose can never be verified for the other.
"""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Any

import jwt
from pydantic import ValidationError

from storefront.core.config import get_settings
from storefront.infrastructure.auth.token_types import TokenClaims, TokenPurpose


class TokenError(Exception):
    """Base exception for token-related errors."""

    pass


class InvalidOrExpiredTokenError(TokenError):
    """Raised when a token fails verification for any reason."""

    def __init__(self, message: str = "Invalid or expired token", *, reason: str = "invalid") -> None:
        super().__init__(message)
        self.reason = reason


class TokenSigner:
    """Service for signing and verifying JWT tokens.

    Supports access tokens (short-lived) and refresh tokens (long-lived).
    Secrets and lifetimes default to the configured values.
    """

    ALGORITHM = "HS256"
    ISSUER = "storefront"

    def __init__(
        self,
        access_secret: str | None = None,
        refresh_secret: str | None = None,
        access_ttl: timedelta | None = None,
        refresh_ttl: timedelta | None = None,
    ) -> None:
        """Initialize the signer.

        Args:
            access_secret: Secret for access tokens. Defaults to settings.
            refresh_secret: Secret for refresh tokens. Defaults to settings.
            access_ttl: Access token lifetime. Defaults to settings.
            refresh_ttl: Refresh token lifetime. Defaults to settings.
        """
        self._access_secret = access_secret
        self._refresh_secret = refresh_secret
        self._access_ttl = access_ttl
        self._refresh_ttl = refresh_ttl

    def secret_for(self, purpose: TokenPurpose) -> str:
        settings = get_settings()
        if purpose is TokenPurpose.ACCESS:
            return self._access_secret or settings.jwt_access_secret
        return self._refresh_secret or settings.jwt_refresh_secret

    def ttl_for(self, purpose: TokenPurpose) -> timedelta:
        settings = get_settings()
        if purpose is TokenPurpose.ACCESS:
            return self._access_ttl or timedelta(minutes=settings.access_token_expire_minutes)
        return self._refresh_ttl or timedelta(days=settings.refresh_token_expire_days)

    def sign(
        self,
        claims: TokenClaims,
        purpose: TokenPurpose,
        issued_at: datetime | None = None,
    ) -> str:
        """Sign a token for the given purpose.

        Args:
            claims: Identity to embed in the token.
            purpose: Access or refresh.
            issued_at: Issue time. Defaults to now.

        Returns:
            Encoded JWT.
        """
        now = issued_at or datetime.now(timezone.utc)
        payload: dict[str, Any] = {
            "iss": self.ISSUER,
            "sub": str(claims.id),
            "iat": now,
            "exp": now + self.ttl_for(purpose),
            # Unique per token so two tokens minted in the same second differ
            "jti": uuid.uuid4().hex,
            "type": purpose.value,
            "id": claims.id,
            "email": claims.email,
            "role": claims.role,
        }
        return jwt.encode(payload, self.secret_for(purpose), algorithm=self.ALGORITHM)

    def verify(self, token: str, purpose: TokenPurpose) -> TokenClaims:
        """Verify a token's signature, expiry and purpose.

        Args:
            token: The encoded JWT.
            purpose: The purpose the token must have been signed for.

        Returns:
            The verified claims.

        Raises:
            InvalidOrExpiredTokenError: On any verification failure.
        """
        if not token:
            raise InvalidOrExpiredTokenError(reason="missing")
        try:
            payload = jwt.decode(
                token,
                self.secret_for(purpose),
                algorithms=[self.ALGORITHM],
                issuer=self.ISSUER,
                options={"require": ["exp", "iat", "sub", "jti"]},
            )
        except jwt.ExpiredSignatureError as e:
            raise InvalidOrExpiredTokenError("Token has expired", reason="expired") from e
        except jwt.InvalidTokenError as e:
            raise InvalidOrExpiredTokenError(reason="invalid") from e

        if payload.get("type") != purpose.value:
            raise InvalidOrExpiredTokenError(reason="wrong_purpose")

        try:
            return TokenClaims(id=payload["id"], email=payload["email"], role=payload["role"])
        except (KeyError, ValidationError) as e:
            raise InvalidOrExpiredTokenError(reason="malformed") from e

    def get_expires_in(self, purpose: TokenPurpose = TokenPurpose.ACCESS) -> int:
        """Get the lifetime of a token in seconds."""
        return int(self.ttl_for(purpose).total_seconds())


# Default signer instance
token_signer = TokenSigner()
