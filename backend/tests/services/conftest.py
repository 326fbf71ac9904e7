"""Service test fixtures — real stores over in-memory SQLite and tmp_path uploads."""

import pytest

from app.core.domain_types import ImageUpload
from app.infrastructure.user_store import UserStore
from app.services.registration import RegistrationService
from app.services.user_query import UserQueryService


@pytest.fixture
def user_store(test_db):
    return UserStore(test_db)


@pytest.fixture
def registration(user_store, asset_store):
    return RegistrationService(user_store, asset_store)


@pytest.fixture
def query(user_store):
    return UserQueryService(user_store)


@pytest.fixture
def png_upload(png_bytes):
    return ImageUpload(content=png_bytes, filename="avatar.png", content_type="image/png")
