"""Settings for the Storefront admin backend.

Every key can be set through a ``STOREFRONT_``-prefixed environment variable
or a .env file. Token secrets, session lifetimes and cookie names live here
so the auth flows never read the environment directly.
"""

import json
from functools import lru_cache
from typing import Annotated, Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

DEFAULT_SECRET = "change-me-in-production-use-openssl-rand-hex-32"


class Settings(BaseSettings):
    """Validated application settings.

    Unsafe combinations (identical token secrets, default secrets in
    production, SQLite with several workers) fail at load time.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="STOREFRONT_",
        case_sensitive=False,
        extra="ignore",
    )

    # service
    app_name: str = "Storefront"
    app_version: str = "0.1.0"
    environment: Literal["development", "production", "testing"] = "development"
    debug: bool = False
    api_prefix: str = "/api/v1"
    frontend_url: str = "http://localhost:3000"

    # uvicorn
    host: str = "0.0.0.0"
    port: int = 8000
    workers: int = 1

    # persistence; pool options apply to PostgreSQL only
    database_url: str = "sqlite+aiosqlite:///./sf_data/storefront.db"
    db_pool_size: int = 5
    db_max_overflow: int = 10
    db_pool_timeout: int = 30
    db_pool_recycle: int = 3600
    db_echo: bool = False

    # session tokens
    jwt_access_secret: str = Field(
        default=DEFAULT_SECRET + "-access",
        description="Secret key for signing access tokens",
    )
    jwt_refresh_secret: str = Field(
        default=DEFAULT_SECRET + "-refresh",
        description="Secret key for signing refresh tokens",
    )
    token_encryption_key: str = Field(
        default=DEFAULT_SECRET,
        description="Key material for encrypting refresh tokens in transit",
    )
    access_token_expire_minutes: int = 15
    refresh_token_expire_days: int = 30
    rotate_refresh_tokens: bool = Field(
        default=True,
        description="Issue a new refresh token on every refresh and invalidate the old one",
    )

    # cookie names
    access_token_cookie: str = "access_token"
    refresh_token_cookie: str = "refresh_token"
    oauth_state_cookie: str = "oauth_state"

    # Google sign-in
    google_client_id: str | None = None
    google_client_secret: str | None = None
    google_callback_url: str = "http://localhost:8000/api/v1/auth/google/redirect"
    google_scopes: Annotated[list[str], NoDecode] = Field(default=["openid", "email", "profile"])

    # browser access from the admin frontend
    cors_origins: Annotated[list[str], NoDecode] = Field(default=["http://localhost:3000"])
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = Field(default=["*"])
    cors_allow_headers: list[str] = Field(default=["*"])

    # structlog output
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_format: Literal["json", "console"] = "json"

    @field_validator("cors_origins", "google_scopes", mode="before")
    @classmethod
    def parse_comma_separated(cls, v: str | list[str]) -> list[str]:
        """Accept ``a,b`` as well as a JSON list from the environment."""
        if not isinstance(v, str):
            return v
        if v.lstrip().startswith("["):
            return json.loads(v)
        return [item.strip() for item in v.split(",") if item.strip()]

    @model_validator(mode="after")
    def validate_secrets(self) -> "Settings":
        """Reject unsafe token secrets."""
        if self.jwt_access_secret == self.jwt_refresh_secret:
            raise ValueError("Access and refresh token secrets must differ")
        if self.is_production and any(
            secret.startswith(DEFAULT_SECRET)
            for secret in (
                self.jwt_access_secret,
                self.jwt_refresh_secret,
                self.token_encryption_key,
            )
        ):
            raise ValueError("Default secrets cannot be used in production")
        return self

    @model_validator(mode="after")
    def validate_sqlite_workers(self) -> "Settings":
        if self.uses_sqlite and self.workers > 1:
            raise ValueError(
                f"SQLite does not support multiple worker processes (workers={self.workers}); "
                "run a single worker or point STOREFRONT_DATABASE_URL at PostgreSQL"
            )
        return self

    @property
    def uses_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        """Development serves API docs and creates tables at startup."""
        return self.environment == "development"

    @property
    def google_oauth_enabled(self) -> bool:
        return bool(self.google_client_id and self.google_client_secret)


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings, loading them on first call.

    Tests that change the environment call ``get_settings.cache_clear()``.
    """
    return Settings()
