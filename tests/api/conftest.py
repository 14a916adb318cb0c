"""Fixtures for API tests: the app on a temporary SQLite database."""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient

from scoutboard.api.dependencies import get_board_clock, get_store
from scoutboard.api.main import app
from scoutboard.infrastructure.clock import FixedClock
from scoutboard.infrastructure.storage.sqlite import ConnectionPool, SQLiteRecordStore
from scoutboard.infrastructure.storage.sqlite.migrations import initialize_database


@pytest.fixture
async def api_pool(tmp_path: Path) -> AsyncGenerator[ConnectionPool, None]:
    """Migrated temporary database."""
    db_path = tmp_path / "api.db"
    await initialize_database(db_path)
    pool = ConnectionPool(db_path, pool_size=2)
    yield pool
    await pool.close()


@pytest.fixture
def api_store(api_pool: ConnectionPool) -> SQLiteRecordStore:
    return SQLiteRecordStore(api_pool)


@pytest.fixture
async def async_client(
    api_store: SQLiteRecordStore, clock: FixedClock
) -> AsyncGenerator[AsyncClient, None]:
    """Async client with store and clock overrides."""
    app.dependency_overrides[get_store] = lambda: api_store
    app.dependency_overrides[get_board_clock] = lambda: clock
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.pop(get_store, None)
    app.dependency_overrides.pop(get_board_clock, None)
