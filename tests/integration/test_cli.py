import asyncio
import os
from unittest.mock import MagicMock, patch

import pytest
from click.testing import CliRunner

from storefront.cli import cli
from storefront.core.config import get_settings
from storefront.domain.entities import AccountRole
from storefront.infrastructure.persistence.database import DatabaseManager
from storefront.infrastructure.persistence.repositories import AccountRepository


def _sqlite_settings(**overrides):
    settings = MagicMock()
    settings.database_url = "sqlite+aiosqlite:///./sf_data/storefront.db"
    settings.uses_sqlite = True
    settings.host = "0.0.0.0"
    settings.port = 8000
    settings.workers = 1
    settings.is_production = False
    settings.log_level = "INFO"
    settings.environment = "development"
    for key, value in overrides.items():
        setattr(settings, key, value)
    return settings


def test_serve_rejects_multiple_workers_on_sqlite():
    """Verify serve fails when --workers > 1 is used with SQLite."""
    runner = CliRunner()

    with patch("storefront.cli.get_settings", return_value=_sqlite_settings()), \
         patch("uvicorn.run") as mock_run:
        result = runner.invoke(cli, ["serve", "--workers", "2"])

    assert result.exit_code == 1
    assert "SQLite does not support multiple worker processes" in result.output
    mock_run.assert_not_called()


def test_serve_starts_uvicorn():
    runner = CliRunner()

    with patch("storefront.cli.get_settings", return_value=_sqlite_settings()), \
         patch("storefront.cli.configure_logging"), \
         patch("uvicorn.run") as mock_run:
        result = runner.invoke(cli, ["serve", "--port", "9000"])

    assert result.exit_code == 0
    mock_run.assert_called_once()
    assert mock_run.call_args.args[0] == "storefront.infrastructure.api.app:app"
    assert mock_run.call_args.kwargs["port"] == 9000
    assert mock_run.call_args.kwargs["workers"] == 1


def test_init_db_refuses_production():
    runner = CliRunner()

    with patch("storefront.cli.get_settings", return_value=_sqlite_settings(is_production=True)), \
         patch("storefront.cli.configure_logging"):
        result = runner.invoke(cli, ["init-db"])

    assert result.exit_code == 1
    assert "Use migrations instead" in result.output


class TestCreateAdmin:
    @pytest.fixture
    def db_manager(self, tmp_path):
        url = f"sqlite+aiosqlite:///{tmp_path / 'storefront.db'}"
        with patch.dict(os.environ, {"STOREFRONT_DATABASE_URL": url}):
            get_settings.cache_clear()
            manager = DatabaseManager()
            with patch(
                "storefront.infrastructure.persistence.database.get_db_manager",
                return_value=manager,
            ):
                yield manager
        get_settings.cache_clear()

    @staticmethod
    def _lookup(manager: DatabaseManager, email: str):
        async def lookup():
            try:
                async with manager.session() as session:
                    return await AccountRepository(session).get_by_email(email)
            finally:
                await manager.disconnect()

        return asyncio.run(lookup())

    def test_create_admin_with_generated_password(self, db_manager):
        runner = CliRunner()

        init = runner.invoke(cli, ["init-db", "--force"])
        result = runner.invoke(
            cli, ["create-admin", "--name", "Root", "--email", "Root@Example.com"]
        )

        assert init.exit_code == 0, init.output
        assert result.exit_code == 0, result.output
        assert "Admin created successfully" in result.output
        assert "Password:" in result.output

        account = self._lookup(db_manager, "root@example.com")
        assert account is not None
        assert account.role is AccountRole.ADMIN
        assert account.refresh_token_hash is None

    def test_create_admin_rejects_duplicate(self, db_manager):
        runner = CliRunner()
        runner.invoke(cli, ["init-db", "--force"])
        args = ["create-admin", "--name", "Root", "--email", "root@example.com",
                "--password", "admin-password"]

        first = runner.invoke(cli, args)
        second = runner.invoke(cli, args)

        assert first.exit_code == 0, first.output
        assert "Password:" not in first.output
        assert second.exit_code == 1
        assert "Email already registered" in second.output

    def test_create_admin_reports_validation_errors(self, db_manager):
        runner = CliRunner()
        runner.invoke(cli, ["init-db", "--force"])

        result = runner.invoke(
            cli,
            ["create-admin", "--name", "Root", "--email", "not-an-email", "--password", "short"],
        )

        assert result.exit_code == 1
        assert "email:" in result.output
        assert "password:" in result.output
