"""User Registry API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map RegistryError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database pool, schema and asset root initialized on startup via lifespan,
      disposed on shutdown
    - Stored assets served read-only under settings.upload_url_prefix

Design Decisions:
    - create_app(settings) factory: tests build isolated apps with their own
      upload directory; the module-level `app` serves uvicorn
    - Lifespan resources live on app.state and reach handlers through api/dependencies.py
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from app.api.error_handlers import register_error_handlers
from app.api.routes import health, users
from app.config import Settings, get_settings
from app.infrastructure.asset_store import AssetStore
from app.infrastructure.database import DatabaseSessionManager
from app.infrastructure.observability import setup_logging
from app.infrastructure.user_store import ensure_schema

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings: Settings = app.state.settings
    setup_logging(settings.log_level, settings.log_format)

    asset_store = AssetStore.from_settings(settings)
    asset_store.ensure_root()

    db_manager = DatabaseSessionManager(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    try:
        await ensure_schema(db_manager.engine)
    except Exception:
        await db_manager.close()
        raise

    app.state.asset_store = asset_store
    app.state.db_manager = db_manager
    logger.info("User registry API started")
    try:
        yield
    finally:
        logger.info("User registry API shutting down")
        await db_manager.close()
        app.state.db_manager = None


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    app = FastAPI(
        title="User Registry API", version="1.0.0", lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health.router)
    app.include_router(users.router)

    # check_dir=False: the lifespan creates the directory
    app.mount(
        settings.upload_url_prefix,
        StaticFiles(directory=settings.upload_dir, check_dir=False),
        name="uploads",
    )

    register_error_handlers(app)
    return app


app = create_app()
