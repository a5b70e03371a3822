"""FastAPI dependencies for authentication.

Provides dependencies for building the auth service and for extracting and
validating the access token from a request.
"""

from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends, Header, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.core.config import get_settings
from storefront.core.logging import get_logger
from storefront.domain.services import AuthService
from storefront.infrastructure.api.errors import error_content
from storefront.infrastructure.auth import (
    InvalidOrExpiredTokenError,
    TokenPurpose,
    token_signer,
)
from storefront.infrastructure.configuration.providers.oauth import (
    GoogleOAuthHandler,
    OAuthProviderHandler,
)
from storefront.infrastructure.persistence.database import get_db_session

logger = get_logger(__name__)


@dataclass
class CurrentAccount:
    """Represents the current authenticated account.

    Extracted from a valid access token.
    """

    account_id: int
    email: str
    role: str


def _unauthorized(message: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=error_content("Unauthorized", message),
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_account(
    request: Request,
    authorization: Annotated[str | None, Header()] = None,
) -> CurrentAccount:
    """Extract and validate the current account from the request.

    The access token is read from the access-token cookie, falling back to
    an ``Authorization: Bearer`` header.

    Raises:
        HTTPException: 401 if the token is missing, invalid, or expired.
    """
    settings = get_settings()
    token = request.cookies.get(settings.access_token_cookie)

    if not token and authorization:
        parts = authorization.split()
        if len(parts) != 2 or parts[0].lower() != "bearer":
            logger.info("Authentication failed: invalid Authorization header format")
            raise _unauthorized("Could not validate credentials")
        token = parts[1]

    if not token:
        logger.info("Authentication failed: missing access token")
        raise _unauthorized("Missing access token")

    try:
        claims = token_signer.verify(token, TokenPurpose.ACCESS)
    except InvalidOrExpiredTokenError as e:
        logger.info("Authentication failed: invalid access token", reason=e.reason)
        raise _unauthorized("Invalid or expired access token")

    return CurrentAccount(account_id=claims.id, email=claims.email, role=claims.role)


async def get_auth_service(
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> AuthService:
    """Build an auth service bound to the request's database session."""
    return AuthService(session)


def get_google_handler() -> OAuthProviderHandler:
    return GoogleOAuthHandler()


# Type aliases for dependency injection
AuthenticatedAccount = Annotated[CurrentAccount, Depends(get_current_account)]
AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
GoogleHandlerDep = Annotated[OAuthProviderHandler, Depends(get_google_handler)]
