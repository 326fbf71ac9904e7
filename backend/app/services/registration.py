"""Registration Service — keeps user rows and their image files consistent.

Invariants:
    - create_user validates name, age and image presence BEFORE any file is written
    - If the row insert fails after the image is stored, the image is deleted
      and the insert error propagates unchanged
    - delete_user removes the row first, then the image (ghost file, never ghost reference)
    - Image deletion failures during delete_user are logged, not raised
    - A row removed concurrently between lookup and delete counts as deleted

Design Decisions:
    - Compensating delete instead of a cross-resource transaction: the filesystem
      is not transactional
"""

import logging

from app.core.domain_types import AssetRef, ImageUpload, UserId
from app.core.enforce_user import validate_user_fields
from app.core.errors import AssetStorageError, ResourceNotFoundError, ValidationError
from app.infrastructure.asset_store import AssetStore
from app.infrastructure.user_store import UserStore
from app.models.user import User

logger = logging.getLogger(__name__)


class RegistrationService:
    """Create and delete users together with their profile images."""

    def __init__(
        self,
        records: UserStore,
        assets: AssetStore,
        age_min: int = 1,
        age_max: int = 120,
        name_max_length: int = 100,
    ):
        self.records = records
        self.assets = assets
        self.age_min = age_min
        self.age_max = age_max
        self.name_max_length = name_max_length

    async def create_user(
        self,
        name: str | None,
        age: str | int | None,
        image: ImageUpload | None,
    ) -> User:
        fields = validate_user_fields(
            name, age, self.age_min, self.age_max, self.name_max_length,
        )
        if image is None or not image.filename:
            raise ValidationError("Image is required", "image")

        ref = await self.assets.put(image.content, image.filename, image.content_type)
        try:
            user = await self.records.insert(fields.name, fields.age, ref)
        except Exception:
            await self._discard_asset(ref, reason="insert failed")
            raise

        logger.info(
            f"Registered user {user.id}",
            extra={"user_id": user.id, "asset_ref": ref},
        )
        return user

    async def delete_user(self, user_id: UserId) -> None:
        user = await self.records.find_by_id(user_id)
        image_path = user.image_path

        try:
            await self.records.delete_by_id(user_id)
        except ResourceNotFoundError:
            logger.info(
                f"User {user_id} already removed by a concurrent delete",
                extra={"user_id": user_id},
            )

        await self._discard_asset(AssetRef(image_path), reason="user deleted")

    async def _discard_asset(self, ref: AssetRef, reason: str) -> None:
        """Best-effort image removal; failures leave an orphan file and are logged."""
        try:
            await self.assets.delete(ref)
        except AssetStorageError as e:
            logger.error(
                f"Orphaned asset {ref} ({reason}): {e.message}",
                extra={"asset_ref": ref, "error_code": e.code},
            )
