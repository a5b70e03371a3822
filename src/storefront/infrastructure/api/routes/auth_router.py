"""Authentication API routes.

Provides endpoints for registration, password login, Google sign-in,
access-token refresh and logout. Tokens travel only in httpOnly cookies;
response bodies never contain them.
"""

import secrets

import httpx
from fastapi import APIRouter, Request, Response, status
from fastapi.responses import JSONResponse, RedirectResponse

from storefront.core.config import Settings, get_settings
from storefront.core.logging import get_logger
from storefront.domain.services import AuthErrorKind
from storefront.infrastructure.api.dependencies import (
    AuthenticatedAccount,
    AuthServiceDep,
    GoogleHandlerDep,
)
from storefront.infrastructure.api.errors import error_content, failure_response
from storefront.infrastructure.api.schemas import (
    ErrorResponse,
    LoginRequest,
    MessageResponse,
    ProfileResponse,
    RegisterRequest,
)
from storefront.infrastructure.auth import TokenPurpose, token_signer
from storefront.infrastructure.configuration.providers.oauth import (
    OAuthClientConfig,
    OAuthProviderError,
)

logger = get_logger(__name__)

router = APIRouter()

# Lifetime of the CSRF state cookie for the Google consent round trip
OAUTH_STATE_MAX_AGE = 600


def set_session_cookies(
    response: Response,
    access_token: str,
    encrypted_refresh_token: str | None = None,
) -> None:
    """Place the access token (and optionally the refresh token) in cookies."""
    settings = get_settings()
    response.set_cookie(
        key=settings.access_token_cookie,
        value=access_token,
        max_age=token_signer.get_expires_in(TokenPurpose.ACCESS),
        path="/",
        httponly=True,
        secure=settings.is_production,
        samesite="strict",
    )
    if encrypted_refresh_token is not None:
        response.set_cookie(
            key=settings.refresh_token_cookie,
            value=encrypted_refresh_token,
            max_age=token_signer.get_expires_in(TokenPurpose.REFRESH),
            path="/",
            httponly=True,
            secure=settings.is_production,
            samesite="strict",
        )


def clear_session_cookies(response: Response) -> None:
    settings = get_settings()
    for key in (settings.access_token_cookie, settings.refresh_token_cookie):
        response.delete_cookie(
            key=key,
            path="/",
            httponly=True,
            secure=settings.is_production,
            samesite="strict",
        )


def _google_config(settings: Settings) -> OAuthClientConfig:
    return OAuthClientConfig(
        client_id=settings.google_client_id or "",
        client_secret=settings.google_client_secret or "",
        redirect_uri=settings.google_callback_url,
        scopes=tuple(settings.google_scopes),
    )


def _unauthorized(message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_401_UNAUTHORIZED,
        content=error_content("Unauthorized", message),
    )


@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    response_model=ProfileResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Validation error or duplicate email"},
    },
)
async def register(
    request: RegisterRequest,
    auth_service: AuthServiceDep,
) -> ProfileResponse | JSONResponse:
    """Register a new customer account.

    Does not sign the caller in; use /login afterwards.
    """
    result = await auth_service.register(request.name, request.email, request.password)
    if not result.ok:
        return failure_response(result.failure)
    return ProfileResponse.from_profile(result.value)


@router.post(
    "/login",
    response_model=ProfileResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Validation error"},
        401: {"model": ErrorResponse, "description": "Invalid email or password"},
    },
)
async def login(
    request: LoginRequest,
    response: Response,
    auth_service: AuthServiceDep,
) -> ProfileResponse | JSONResponse:
    """Sign in with email and password.

    Sets the access-token and refresh-token cookies. Signing in again
    invalidates the refresh token from any earlier sign-in.
    """
    result = await auth_service.login(request.email, request.password)
    if not result.ok:
        return failure_response(result.failure)

    issued = result.value
    set_session_cookies(response, issued.access_token, issued.encrypted_refresh_token)
    return ProfileResponse.from_profile(issued.profile)


@router.get(
    "/google/login",
    status_code=status.HTTP_302_FOUND,
    responses={404: {"model": ErrorResponse, "description": "Google sign-in not configured"}},
)
async def google_login(handler: GoogleHandlerDep) -> Response:
    """Redirect the browser to Google's consent page."""
    settings = get_settings()
    if not settings.google_oauth_enabled:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content=error_content("ProviderNotConfigured", "Google sign-in is not configured"),
        )

    state = secrets.token_urlsafe(32)
    authorization_url = await handler.get_authorization_url(_google_config(settings), state)

    response = RedirectResponse(authorization_url, status_code=status.HTTP_302_FOUND)
    # Lax so the cookie survives the top-level redirect back from Google
    response.set_cookie(
        key=settings.oauth_state_cookie,
        value=state,
        max_age=OAUTH_STATE_MAX_AGE,
        path="/",
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
    )
    logger.info("OAuth authorization initiated", provider=handler.provider_name)
    return response


@router.get(
    "/google/redirect",
    status_code=status.HTTP_302_FOUND,
    responses={
        400: {"model": ErrorResponse, "description": "Email already registered"},
        401: {"model": ErrorResponse, "description": "Authentication failed"},
    },
)
async def google_redirect(
    request: Request,
    auth_service: AuthServiceDep,
    handler: GoogleHandlerDep,
    code: str | None = None,
    state: str | None = None,
) -> Response:
    """Complete Google sign-in and redirect to the frontend.

    Flow:
    1. Check the state parameter against the state cookie
    2. Exchange the authorization code for Google tokens
    3. Fetch the Google profile and reduce it to an identity
    4. Link or create the local account and start a session
    """
    settings = get_settings()
    provider = handler.provider_name

    expected_state = request.cookies.get(settings.oauth_state_cookie)
    if not code or not state or not expected_state or not secrets.compare_digest(
        state.encode("utf-8"), expected_state.encode("utf-8")
    ):
        logger.info("OAuth callback rejected", provider=provider, reason="state_mismatch")
        return _unauthorized("Authentication failed")

    config = _google_config(settings)
    try:
        tokens = await handler.exchange_code_for_tokens(config, code)
        user_info = await handler.get_user_info(tokens["access_token"])
        identity = handler.extract_identity(user_info, tokens)
    except (OAuthProviderError, httpx.HTTPError, KeyError, ValueError) as e:
        logger.info(
            "OAuth callback failed",
            provider=provider,
            error_type=type(e).__name__,
        )
        return _unauthorized("Authentication failed")

    result = await auth_service.validate_oauth(identity)
    if not result.ok:
        if result.failure.kind is AuthErrorKind.DUPLICATE_EMAIL:
            return failure_response(result.failure)
        return _unauthorized("Authentication failed")

    issued = result.value
    response = RedirectResponse(settings.frontend_url, status_code=status.HTTP_302_FOUND)
    set_session_cookies(response, issued.access_token, issued.encrypted_refresh_token)
    response.delete_cookie(
        key=settings.oauth_state_cookie,
        path="/",
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
    )
    return response


@router.post(
    "/new-token",
    response_model=MessageResponse,
    responses={401: {"model": ErrorResponse, "description": "Invalid refresh token"}},
)
async def new_token(
    request: Request,
    response: Response,
    auth_service: AuthServiceDep,
) -> MessageResponse | JSONResponse:
    """Issue a new access token from the refresh-token cookie.

    When refresh-token rotation is enabled the refresh-token cookie is
    replaced as well.
    """
    encrypted_refresh_token = request.cookies.get(get_settings().refresh_token_cookie)
    result = await auth_service.refresh_access_token(encrypted_refresh_token)
    if not result.ok:
        if result.failure.kind is AuthErrorKind.UNEXPECTED:
            return failure_response(result.failure)
        # The precise kind is logged by the service, not returned
        return _unauthorized("Invalid refresh token")

    tokens = result.value
    set_session_cookies(response, tokens.access_token, tokens.encrypted_refresh_token)
    return MessageResponse(message="Token refreshed")


@router.post(
    "/logout",
    response_model=MessageResponse,
    responses={401: {"model": ErrorResponse, "description": "Not authenticated"}},
)
async def logout(
    current_account: AuthenticatedAccount,
    response: Response,
    auth_service: AuthServiceDep,
) -> MessageResponse | JSONResponse:
    """End the current session and clear the session cookies."""
    result = await auth_service.logout(current_account.account_id)
    if not result.ok:
        return failure_response(result.failure)

    clear_session_cookies(response)
    return MessageResponse(message="Logged out")
