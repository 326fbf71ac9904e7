"""Root conftest — shared test configuration and storage fixtures.

Invariants:
    - Every test gets a fresh in-memory SQLite database with the users table
    - Every test gets its own empty upload directory under tmp_path

Design Decisions:
    - SQLite in-memory with StaticPool: all sessions of a test share one connection,
      so rows committed by one session are visible to the next
"""

import base64
import os

import pytest
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

# Ensure tests never reach a real database by accident
os.environ.setdefault(
    "DATABASE_URL",
    "sqlite+aiosqlite:///test.db",
)

from app.infrastructure.asset_store import AssetStore  # noqa: E402
from app.infrastructure.database import DatabaseSessionManager  # noqa: E402
from app.infrastructure.user_store import ensure_schema  # noqa: E402

# 1x1 transparent PNG
PNG_1X1 = base64.b64decode(
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChwGA60e6kgAAAABJRU5ErkJggg==",
)


@pytest.fixture
def png_bytes() -> bytes:
    return PNG_1X1


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False, poolclass=StaticPool,
    )
    await ensure_schema(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def db_manager(test_engine):
    return DatabaseSessionManager.from_engine(test_engine)


@pytest.fixture
async def test_db(db_manager):
    async with db_manager.session() as session:
        yield session


@pytest.fixture
def upload_dir(tmp_path):
    path = tmp_path / "uploads"
    path.mkdir()
    return path


@pytest.fixture
def asset_store(upload_dir):
    return AssetStore(upload_dir)
