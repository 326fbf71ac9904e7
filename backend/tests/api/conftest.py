"""API test fixtures — isolated app per test with injected DB and upload dir.

Design Decisions:
    - create_app(settings) + app.state injection instead of running the lifespan,
      so every test shares the in-memory engine from the root conftest
"""

import pytest
from httpx import ASGITransport, AsyncClient

from app.config import Settings
from app.infrastructure.asset_store import AssetStore
from app.main import create_app


@pytest.fixture
def settings(upload_dir):
    return Settings(
        database_url="sqlite+aiosqlite:///:memory:",
        upload_dir=str(upload_dir),
    )


@pytest.fixture
def test_app(settings, db_manager):
    app = create_app(settings)
    app.state.db_manager = db_manager
    app.state.asset_store = AssetStore.from_settings(settings)
    return app


@pytest.fixture
async def client(test_app):
    async with AsyncClient(
        transport=ASGITransport(app=test_app), base_url="http://test",
    ) as c:
        yield c


@pytest.fixture
def post_user(client, png_bytes):
    """POST /api/users with a 1x1 PNG unless overridden."""
    async def _post(name="Alice", age="30", image=None, filename="avatar.png",
                    content_type="image/png"):
        files = {"image": (filename, png_bytes if image is None else image, content_type)}
        return await client.post(
            "/api/users", data={"name": name, "age": age}, files=files,
        )
    return _post
