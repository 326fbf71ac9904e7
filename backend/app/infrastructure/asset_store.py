"""Asset Store — filesystem storage for uploaded profile images.

Invariants:
    - Files live directly under a single asset root; names are server-generated
    - put() validates type and size before touching the filesystem
    - put() never overwrites: files are created exclusively
    - delete() is idempotent: a missing file is a no-op
    - References outside the public prefix, or with non-generated names, never resolve
    - OSError surfaces as AssetStorageError

Design Decisions:
    - Blocking file IO runs in a worker thread (asyncio.to_thread) to keep the event loop free
    - The store knows nothing about users; callers own the reference
"""

import asyncio
import logging
import os
from pathlib import Path

from app.config import Settings
from app.core.domain_types import AssetRef
from app.core.enforce_asset import (
    DEFAULT_ALLOWED_TYPES,
    DEFAULT_MAX_BYTES,
    check_asset_size,
    check_asset_type,
    generate_asset_name,
    name_from_ref,
    public_ref,
)
from app.core.errors import AssetStorageError, ErrorContext

logger = logging.getLogger(__name__)


class AssetStore:
    """Stores, resolves and deletes image assets under a root directory."""

    def __init__(
        self,
        root: str | os.PathLike,
        url_prefix: str = "/uploads",
        field_label: str = "image",
        max_bytes: int = DEFAULT_MAX_BYTES,
        allowed_types: tuple[str, ...] | list[str] = DEFAULT_ALLOWED_TYPES,
    ):
        self.root = Path(root).resolve()
        self.url_prefix = url_prefix
        self.field_label = field_label
        self.max_bytes = max_bytes
        self.allowed_types = tuple(allowed_types)

    @classmethod
    def from_settings(cls, settings: Settings) -> "AssetStore":
        return cls(
            settings.upload_dir,
            url_prefix=settings.upload_url_prefix,
            field_label=settings.asset_field_label,
            max_bytes=settings.asset_max_bytes,
            allowed_types=settings.asset_allowed_types,
        )

    def ensure_root(self) -> None:
        try:
            self.root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error(f"Cannot create asset root {self.root}: {e}")
            raise AssetStorageError("Asset root unavailable", "init")

    def resolve(self, ref: str) -> Path:
        """Map a public reference to its file path under the asset root."""
        name = name_from_ref(self.url_prefix, ref)
        if name is None:
            raise AssetStorageError(
                "Reference is outside the asset namespace", "resolve",
                ErrorContext(asset_ref=ref),
            )
        return self.root / name

    async def put(
        self, content: bytes, original_filename: str, declared_type: str,
    ) -> AssetRef:
        ext = check_asset_type(original_filename, declared_type, self.allowed_types)
        check_asset_size(len(content), self.max_bytes)

        name = generate_asset_name(self.field_label, ext)
        path = self.root / name
        try:
            await asyncio.to_thread(_write_exclusive, path, content)
        except OSError as e:
            logger.error(
                f"Asset write failed for {name}: {e}",
                extra={"operation": "write"},
                exc_info=True,
            )
            raise AssetStorageError("Could not store image", "write")

        ref = AssetRef(public_ref(self.url_prefix, name))
        logger.info(
            f"Stored asset {name} ({len(content)} bytes)",
            extra={"asset_ref": ref},
        )
        return ref

    async def delete(self, ref: str) -> None:
        path = self.resolve(ref)
        try:
            removed = await asyncio.to_thread(_unlink_if_exists, path)
        except OSError as e:
            logger.error(
                f"Asset delete failed for {ref}: {e}",
                extra={"asset_ref": ref, "operation": "delete"},
            )
            raise AssetStorageError(
                "Could not delete image", "delete", ErrorContext(asset_ref=ref),
            )
        if removed:
            logger.info(f"Deleted asset {ref}", extra={"asset_ref": ref})
        else:
            logger.warning(
                f"Asset {ref} already absent", extra={"asset_ref": ref},
            )

    def exists(self, ref: str) -> bool:
        try:
            return self.resolve(ref).is_file()
        except AssetStorageError:
            return False


def _write_exclusive(path: Path, content: bytes) -> None:
    # "x" mode: an existing file is never truncated
    f = open(path, "xb")
    try:
        with f:
            f.write(content)
    except OSError:
        path.unlink(missing_ok=True)
        raise


def _unlink_if_exists(path: Path) -> bool:
    try:
        path.unlink()
    except FileNotFoundError:
        return False
    return True
