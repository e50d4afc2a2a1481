"""Tests for exception-to-response mapping registered in main.py."""

from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient

from routes.dependencies import get_compilation_service
from services.compilations_service import CompilationService
from services.exceptions import ElementNotFoundError, UnresolvedReferenceError


@pytest.fixture
def service(app) -> AsyncMock:
    mock = AsyncMock(spec=CompilationService)
    app.dependency_overrides[get_compilation_service] = lambda: mock
    return mock


@pytest.mark.unit
class TestErrorMapping:
    async def test_unresolved_reference_is_server_error(self, client, service):
        service.create.side_effect = UnresolvedReferenceError(
            "User", 100, referenced_by="Event id=10"
        )

        response = await client.post(
            "/admin/compilations", json={"title": "T", "events": [10]}
        )

        assert response.status_code == 500
        assert "User" not in response.json()["detail"]

    async def test_not_found_lists_all_missing_ids(self, client, service):
        service.create.side_effect = ElementNotFoundError("Event", [3, 1])

        response = await client.post(
            "/admin/compilations", json={"title": "T", "events": [1, 3]}
        )

        assert response.status_code == 404
        assert response.json()["detail"] == "Event with ids [1, 3] were not found"

    async def test_unexpected_error_is_generic_500(self, app, service):
        service.get_by_id.side_effect = RuntimeError("boom")

        async with AsyncClient(
            transport=ASGITransport(app=app, raise_app_exceptions=False),
            base_url="http://test",
        ) as ac:
            response = await ac.get("/compilations/1")

        assert response.status_code == 500
        assert "boom" not in response.text
