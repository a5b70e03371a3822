"""Operator commands: run the API, bootstrap the schema, seed an admin."""

import asyncio
from typing import NoReturn

import click

from storefront import __version__
from storefront.core.config import get_settings
from storefront.core.logging import configure_logging, get_logger

APP_PATH = "storefront.infrastructure.api.app:app"


def _fail(message: str) -> NoReturn:
    click.echo(message, err=True)
    raise SystemExit(1)


@click.group()
@click.version_option(version=__version__, prog_name="Storefront")
def cli() -> None:
    """Storefront admin backend.

    Settings come from STOREFRONT_* environment variables or a .env file.
    """


@cli.command()
@click.option("--host", default=None, help="Bind address; defaults to STOREFRONT_HOST.")
@click.option("--port", type=int, default=None, help="Bind port; defaults to STOREFRONT_PORT.")
@click.option("--workers", type=int, default=None, help="Worker process count.")
@click.option("--reload", is_flag=True, help="Restart on code changes (single worker).")
def serve(host: str | None, port: int | None, workers: int | None, reload: bool) -> None:
    """Run the HTTP API under uvicorn."""
    import uvicorn

    settings = get_settings()
    workers = workers or settings.workers
    if workers > 1 and settings.uses_sqlite:
        _fail(
            "Error: SQLite does not support multiple worker processes. "
            "Use --workers 1 or switch to PostgreSQL."
        )

    configure_logging(settings)
    options = {
        "host": host or settings.host,
        "port": port or settings.port,
        "workers": 1 if reload else workers,
        "reload": reload,
    }
    get_logger(__name__).info("Serving API", environment=settings.environment, **options)

    uvicorn.run(APP_PATH, log_level=settings.log_level.lower(), access_log=True, **options)


@cli.command("init-db")
@click.option("--force", is_flag=True, help="Do not ask for confirmation.")
def init_db(force: bool) -> None:
    """Create the schema directly from the ORM models.

    Meant for local setups; deployed databases are migrated with alembic.
    """
    from storefront.infrastructure.persistence import models  # noqa: F401
    from storefront.infrastructure.persistence.database import get_db_manager

    settings = get_settings()
    configure_logging(settings)

    if not force:
        if settings.is_production:
            _fail("ERROR: Running in production mode. Use migrations instead of init-db.")
        click.confirm("Create all tables now?", abort=True)

    async def create_schema() -> None:
        manager = get_db_manager()
        try:
            await manager.create_tables()
        finally:
            await manager.disconnect()

    asyncio.run(create_schema())
    click.echo("Database initialized successfully.")


@cli.command("create-admin")
@click.option("--name", default=None, help="Display name; prompted for when omitted.")
@click.option("--email", default=None, help="Login email; prompted for when omitted.")
@click.option("--password", default=None, help="Password; generated and printed when omitted.")
def create_admin(name: str | None, email: str | None, password: str | None) -> None:
    """Register an account with the admin role."""
    from storefront.domain.services import AuthService
    from storefront.infrastructure.auth import generate_random_password
    from storefront.infrastructure.persistence.database import get_db_manager

    configure_logging(get_settings())

    name = name if name is not None else click.prompt("Admin name")
    email = email if email is not None else click.prompt("Admin email")
    show_password = password is None
    if show_password:
        password = generate_random_password()

    async def register():
        manager = get_db_manager()
        try:
            async with manager.session() as session:
                return await AuthService(session).create_admin(name, email, password)
        finally:
            await manager.disconnect()

    result = asyncio.run(register())
    if not result.ok:
        for detail in result.failure.details:
            click.echo(f"  {detail.field}: {detail.message}", err=True)
        _fail(f"Error: {result.failure.message}")

    profile = result.value
    click.echo("Admin created successfully!")
    click.echo(f"  Account ID: {profile.id}")
    click.echo(f"  Email:      {profile.email}")
    if show_password:
        click.echo(f"  Password:   {password}")
        click.echo("  Store it now; it will not be shown again.")
    get_logger(__name__).info("Admin created from the command line", account_id=profile.id)


@cli.command()
def info() -> None:
    """Print the effective configuration, secrets excluded."""
    settings = get_settings()
    rows = [
        ("Environment", settings.environment),
        ("Debug", settings.debug),
        ("API prefix", settings.api_prefix),
        ("Bind", f"{settings.host}:{settings.port} x{settings.workers}"),
        ("Database", settings.database_url),
        ("Pool size", settings.db_pool_size),
        ("Access TTL", f"{settings.access_token_expire_minutes} min"),
        ("Refresh TTL", f"{settings.refresh_token_expire_days} days"),
        ("Rotate refresh", settings.rotate_refresh_tokens),
        ("Google sign-in", "enabled" if settings.google_oauth_enabled else "disabled"),
        ("Log level", settings.log_level),
        ("Log format", settings.log_format),
    ]
    click.echo(f"Storefront v{settings.app_version}")
    for label, value in rows:
        click.echo(f"  {label + ':':<16}{value}")


def main() -> NoReturn:
    """Entry point for the ``storefront`` script and ``python -m storefront``."""
    cli()
