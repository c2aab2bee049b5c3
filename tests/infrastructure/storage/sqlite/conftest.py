"""Pytest fixtures for SQLite storage tests."""

from collections.abc import AsyncGenerator
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from batchtrace.infrastructure.storage.sqlite import connection as conn_module


@pytest.fixture
def temp_db_path(tmp_path: Path) -> Path:
    """Create a temporary database path."""
    return tmp_path / "test.db"


@pytest.fixture
def mock_settings(temp_db_path: Path):
    """Mock settings with temp database path."""
    mock = MagicMock()
    mock.storage.db_path = temp_db_path
    mock.storage.pool_size = 2
    mock.storage.busy_timeout = 5000
    mock.storage.snapshot_key = "default"
    return mock


@pytest.fixture
async def global_pool(mock_settings) -> AsyncGenerator[conn_module.ConnectionPool, None]:
    """Global pool pointed at a temp database, closed afterwards."""
    conn_module._pool = None
    with patch.object(conn_module, "get_settings", return_value=mock_settings):
        pool = await conn_module.get_pool()
        try:
            yield pool
        finally:
            await conn_module.close_pool()
