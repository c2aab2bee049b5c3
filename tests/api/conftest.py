"""Fixtures for API tests."""

from collections.abc import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient

from batchtrace.api.dependencies import get_engine_settings, get_store
from batchtrace.api.main import app


@pytest.fixture
async def api_client(memory_store, engine_settings) -> AsyncGenerator[AsyncClient, None]:
    """Client against the app with the snapshot store kept in memory."""
    app.dependency_overrides[get_store] = lambda: memory_store
    app.dependency_overrides[get_engine_settings] = lambda: engine_settings
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.pop(get_store, None)
    app.dependency_overrides.pop(get_engine_settings, None)
