"""Mapping of authentication failures and exceptions to HTTP responses."""

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from storefront.core.config import get_settings
from storefront.core.logging import get_logger
from storefront.domain.services import AuthErrorKind, AuthFailure

logger = get_logger(__name__)

STATUS_BY_KIND: dict[AuthErrorKind, int] = {
    AuthErrorKind.VALIDATION_ERROR: status.HTTP_400_BAD_REQUEST,
    AuthErrorKind.DUPLICATE_EMAIL: status.HTTP_400_BAD_REQUEST,
    AuthErrorKind.INVALID_CREDENTIALS: status.HTTP_401_UNAUTHORIZED,
    AuthErrorKind.INVALID_OR_EXPIRED_TOKEN: status.HTTP_401_UNAUTHORIZED,
    AuthErrorKind.INVALID_TOKEN: status.HTTP_401_UNAUTHORIZED,
    AuthErrorKind.MISSING_TOKEN: status.HTTP_401_UNAUTHORIZED,
    AuthErrorKind.REFRESH_TOKEN_MISMATCH: status.HTTP_401_UNAUTHORIZED,
    AuthErrorKind.NO_ACTIVE_SESSION: status.HTTP_401_UNAUTHORIZED,
    AuthErrorKind.ACCOUNT_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    AuthErrorKind.UNEXPECTED: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def status_for(kind: AuthErrorKind) -> int:
    return STATUS_BY_KIND.get(kind, status.HTTP_500_INTERNAL_SERVER_ERROR)


def error_content(error: str, message: str, details: list[dict] | None = None) -> dict:
    """Build the error body shared by every endpoint."""
    content: dict = {"error": error, "message": message}
    if details:
        content["details"] = details
    return content


def failure_response(failure: AuthFailure) -> JSONResponse:
    """Render an AuthFailure with the status its kind maps to."""
    details = [
        {"field": d.field, "message": d.message, "code": d.code} for d in failure.details
    ]
    return JSONResponse(
        status_code=status_for(failure.kind),
        content=error_content(failure.kind.value, failure.message, details),
    )


def _validation_details(exc: RequestValidationError) -> list[dict]:
    details = []
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query")]
        details.append(
            {
                "field": ".".join(loc) or "body",
                "message": error.get("msg", "Invalid value"),
                "code": error.get("type", "invalid"),
            }
        )
    return details


def register_exception_handlers(app: FastAPI) -> None:
    """Render every error in the ``{"error", "message", "details"}`` shape.

    Malformed request bodies become 400 ``ValidationError`` like the
    service's own validation failures. Anything unhandled is a 500 whose
    message is generic unless debug is on.
    """

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=error_content("ValidationError", "Validation failed", _validation_details(exc)),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        # Dependencies raise with a ready-made error body as detail
        if isinstance(exc.detail, dict):
            content = exc.detail
        else:
            content = error_content("HTTPError", str(exc.detail))
        return JSONResponse(
            status_code=exc.status_code,
            content=content,
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.error(
            "Unhandled exception",
            path=request.url.path,
            method=request.method,
            error_type=type(exc).__name__,
        )
        message = str(exc) if get_settings().debug else "An unexpected error occurred"
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=error_content(AuthErrorKind.UNEXPECTED.value, message),
        )
