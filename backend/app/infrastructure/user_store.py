"""User Record Store — typed CRUD over the users table.

Invariants:
    - Every write commits on success and rolls back on failure
    - SQLAlchemy faults surface as DatabaseError with the failing operation name
    - list_all orders by created_at descending, id descending as tie-breaker
    - find_by_id / delete_by_id raise ResourceNotFoundError for unknown ids,
      including ids outside the int4 key range (never sent to the driver)

Design Decisions:
    - One store instance per request session (constructor-injected AsyncSession)
    - ensure_schema uses create_all(checkfirst): create-if-absent, never destructive
"""

import logging
from contextlib import asynccontextmanager

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from app.core.domain_types import UserId
from app.core.errors import DatabaseError, ResourceNotFoundError
from app.db.base import Base
from app.models.user import User

logger = logging.getLogger(__name__)

# users.id is a 32-bit signed serial
USER_ID_MAX = 2**31 - 1


def _storable_id(user_id: int) -> bool:
    return 0 < user_id <= USER_ID_MAX


async def ensure_schema(engine: AsyncEngine) -> None:
    """Create the users table if it does not exist yet."""
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all, checkfirst=True)
    except SQLAlchemyError as e:
        logger.error(f"Schema initialization failed: {e}", extra={"operation": "init"})
        raise DatabaseError("Could not initialize schema", "init")
    logger.info("Database schema ready")


class UserStore:
    """CRUD over User rows for a single request session."""

    def __init__(self, db: AsyncSession):
        self.db = db

    @asynccontextmanager
    async def _translate_errors(self, operation: str):
        try:
            yield
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(
                f"User {operation} failed: {e}",
                extra={"operation": operation},
                exc_info=True,
            )
            raise DatabaseError("Storage layer fault", operation)

    async def insert(self, name: str, age: int, image_path: str) -> User:
        user = User(name=name, age=age, image_path=image_path)
        async with self._translate_errors("insert"):
            self.db.add(user)
            await self.db.commit()
            await self.db.refresh(user)
        logger.info(f"User {user.id} inserted", extra={"user_id": user.id})
        return user

    async def list_all(self) -> list[User]:
        async with self._translate_errors("list"):
            result = await self.db.execute(
                select(User).order_by(User.created_at.desc(), User.id.desc()),
            )
            return list(result.scalars().all())

    async def find_by_id(self, user_id: UserId) -> User:
        if not _storable_id(user_id):
            raise ResourceNotFoundError("User", str(user_id))
        async with self._translate_errors("find"):
            result = await self.db.execute(
                select(User).where(User.id == user_id),
            )
            user = result.scalar_one_or_none()
        if user is None:
            raise ResourceNotFoundError("User", str(user_id))
        return user

    async def delete_by_id(self, user_id: UserId) -> None:
        if not _storable_id(user_id):
            raise ResourceNotFoundError("User", str(user_id))
        async with self._translate_errors("delete"):
            result = await self.db.execute(
                delete(User).where(User.id == user_id),
            )
            await self.db.commit()
        if result.rowcount == 0:
            raise ResourceNotFoundError("User", str(user_id))
        logger.info(f"User {user_id} deleted", extra={"user_id": user_id})
