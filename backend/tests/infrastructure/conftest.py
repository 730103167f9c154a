"""Infrastructure test fixtures — a fresh in-memory SQLite database per test."""

import pytest

from gateway.infrastructure.database import DatabaseSessionManager


@pytest.fixture
async def db_manager():
    manager = DatabaseSessionManager("sqlite+aiosqlite:///:memory:")
    await manager.create_tables()
    yield manager
    await manager.dispose()
