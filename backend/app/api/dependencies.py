"""Request Dependencies — wire lifespan-owned resources into route handlers.

Invariants:
    - Settings, DatabaseSessionManager and AssetStore are read from app.state
    - One AsyncSession per request, closed (and rolled back on error) after the response
    - Services are built per request from the injected stores

Design Decisions:
    - app.state over module globals: each app instance (including test apps) owns its resources
"""

from typing import AsyncGenerator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import Settings
from app.infrastructure.asset_store import AssetStore
from app.infrastructure.database import DatabaseSessionManager
from app.infrastructure.user_store import UserStore
from app.services.registration import RegistrationService
from app.services.user_query import UserQueryService


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_db_manager(request: Request) -> DatabaseSessionManager:
    manager = getattr(request.app.state, "db_manager", None)
    if manager is None:
        raise RuntimeError("Database not initialized")
    return manager


def get_asset_store(request: Request) -> AssetStore:
    store = getattr(request.app.state, "asset_store", None)
    if store is None:
        raise RuntimeError("Asset store not initialized")
    return store


async def get_db(
    manager: DatabaseSessionManager = Depends(get_db_manager),
) -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency for database sessions."""
    async with manager.session() as session:
        yield session


def get_user_store(db: AsyncSession = Depends(get_db)) -> UserStore:
    return UserStore(db)


def get_registration_service(
    records: UserStore = Depends(get_user_store),
    assets: AssetStore = Depends(get_asset_store),
    settings: Settings = Depends(get_app_settings),
) -> RegistrationService:
    return RegistrationService(
        records,
        assets,
        age_min=settings.age_min,
        age_max=settings.age_max,
        name_max_length=settings.name_max_length,
    )


def get_query_service(
    records: UserStore = Depends(get_user_store),
) -> UserQueryService:
    return UserQueryService(records)
