"""Tests for application assembly and startup in main.py."""

from unittest.mock import AsyncMock, patch

import pytest
from fastapi.routing import APIRoute

import main
from core.config import Settings

PG_URL = "postgresql+asyncpg://localhost/compilations"


@pytest.mark.unit
class TestCreateApp:
    def test_docs_hidden_in_production(self):
        app = main.create_app(Settings(database_url=PG_URL, debug=False))

        assert app.docs_url is None
        assert app.openapi_url is None

    def test_docs_enabled_by_flag(self):
        app = main.create_app(
            Settings(database_url=PG_URL, debug=False, enable_docs=True)
        )

        assert app.docs_url == "/docs"

    def test_routes_registered(self):
        paths = {
            route.path
            for route in main.create_app().routes
            if isinstance(route, APIRoute)
        }

        assert {
            "/health",
            "/ready",
            "/compilations",
            "/compilations/{comp_id}",
            "/admin/compilations",
            "/admin/compilations/{comp_id}",
        } <= paths


@pytest.mark.unit
class TestLifespan:
    async def test_startup_marks_ready(self):
        app = main.create_app()

        with (
            patch.object(main, "init_db", new=AsyncMock()) as mock_init,
            patch.object(main, "_migrate_to_head", new=AsyncMock()) as mock_migrate,
        ):
            async with main.lifespan(app):
                assert app.state.init_done is True
                assert app.state.init_error is None

        mock_init.assert_awaited_once()
        mock_migrate.assert_awaited_once()

    async def test_failed_migration_recorded(self):
        app = main.create_app()

        with (
            patch.object(main, "init_db", new=AsyncMock()),
            patch.object(
                main,
                "_migrate_to_head",
                new=AsyncMock(side_effect=RuntimeError("Schema migration failed")),
            ),
        ):
            with pytest.raises(RuntimeError):
                async with main.lifespan(app):
                    pass

        assert app.state.init_done is False
        assert "Schema migration failed" in app.state.init_error
