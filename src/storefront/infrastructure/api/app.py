"""FastAPI application for the Storefront auth backend.

``create_app()`` builds the app around the auth and users routers; ``app``
is the instance uvicorn serves.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from storefront import __version__
from storefront.core.config import Settings, get_settings
from storefront.core.logging import (
    bind_correlation_id,
    clear_context,
    configure_logging,
    get_logger,
    new_correlation_id,
)
from storefront.infrastructure.api.errors import register_exception_handlers
from storefront.infrastructure.api.routes import auth_router, users_router
from storefront.infrastructure.persistence.database import (
    close_database,
    get_db_manager,
    init_database,
)

logger = get_logger(__name__)

CORRELATION_HEADER = "X-Correlation-ID"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    settings = get_settings()
    configure_logging(settings)
    logger.info("Starting Storefront", version=__version__, environment=settings.environment)

    try:
        await init_database()
    except Exception as e:
        logger.error("Database initialization failed", error_type=type(e).__name__)
        raise

    yield

    await close_database()
    logger.info("Storefront stopped")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application.

    API docs are only served in development.
    """
    settings = settings or get_settings()
    docs_enabled = settings.is_development

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Accounts, sign-in and cookie sessions for the storefront admin",
        docs_url="/docs" if docs_enabled else None,
        redoc_url="/redoc" if docs_enabled else None,
        openapi_url="/openapi.json" if docs_enabled else None,
        lifespan=lifespan,
    )

    # Credentials are required for the session cookies to cross origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

    _add_health_routes(app, settings)
    app.include_router(auth_router, prefix=f"{settings.api_prefix}/auth", tags=["auth"])
    app.include_router(users_router, prefix=f"{settings.api_prefix}/users", tags=["users"])
    register_exception_handlers(app)
    _add_request_logging(app)

    return app


def _add_health_routes(app: FastAPI, settings: Settings) -> None:
    service = {"service": settings.app_name, "version": settings.app_version}

    @app.get("/health", tags=["health"])
    async def health():
        """Liveness check; never touches the database."""
        return {"status": "healthy", **service}

    @app.get("/ready", tags=["health"])
    async def ready():
        """Readiness check; 503 while the database is unreachable."""
        if await get_db_manager().check_connection():
            return {"status": "ready", "database": "connected", **service}
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "not_ready", "database": "disconnected", **service},
        )

    @app.get(settings.api_prefix, tags=["health"])
    async def api_root():
        return {"name": settings.app_name, "version": settings.app_version, "api_version": "v1"}


def _add_request_logging(app: FastAPI) -> None:
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Bind a correlation ID for the request and log its outcome.

        Paths and status codes are logged; cookies and bodies never are.
        """
        correlation_id = request.headers.get(CORRELATION_HEADER) or new_correlation_id()
        bind_correlation_id(correlation_id)
        try:
            response = await call_next(request)
            logger.info(
                "Request handled",
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
            )
            response.headers[CORRELATION_HEADER] = correlation_id
            return response
        finally:
            clear_context()


app = create_app()
