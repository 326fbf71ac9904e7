"""Asset Rule Enforcement — type, size and naming rules for stored images.

Invariants:
    - All functions are PURE: no IO, no async, no filesystem
    - An upload passes only if BOTH the declared MIME type and the filename
      extension are in the allow-list
    - Generated names never contain path separators

Design Decisions:
    - Raise typed errors (not result dicts): callers are services, not tool loops
    - Clock and RNG are injectable so naming is testable without patching
"""

import random
import re
import time
from pathlib import PurePosixPath
from typing import Callable

from app.core.errors import AssetTooLargeError, InvalidAssetTypeError

DEFAULT_ALLOWED_TYPES = ("jpeg", "jpg", "png", "gif")
DEFAULT_MAX_BYTES = 5 * 1024 * 1024
RANDOM_SUFFIX_MAX = 1_000_000_000

_LABEL_PATTERN = re.compile(r"^[A-Za-z0-9_]+$")
_NAME_PATTERN = re.compile(r"^[A-Za-z0-9_]+-\d+-\d+\.[a-z0-9]+$")


def file_extension(filename: str) -> str:
    """Lower-cased extension of a client filename without the dot ("" if none)."""
    # Client filenames may carry Windows separators
    base = PurePosixPath(filename.replace("\\", "/")).name
    return PurePosixPath(base).suffix.lower().lstrip(".")


def check_asset_type(
    filename: str,
    declared_type: str,
    allowed_types: tuple[str, ...] | list[str] = DEFAULT_ALLOWED_TYPES,
) -> str:
    """Validate declared MIME type and filename extension. Returns the extension."""
    allowed = {t.lower() for t in allowed_types}
    ext = file_extension(filename or "")
    mime = (declared_type or "").split(";", 1)[0].strip().lower()
    major, _, subtype = mime.partition("/")

    if major != "image" or subtype not in allowed:
        raise InvalidAssetTypeError(
            f"Content type '{declared_type}' is not an allowed image type",
        )
    if ext not in allowed:
        raise InvalidAssetTypeError(
            f"File extension '.{ext}' is not an allowed image type"
            if ext else "Image filename has no extension",
        )
    return ext


def check_asset_size(size: int, max_bytes: int = DEFAULT_MAX_BYTES) -> None:
    if size <= 0:
        raise InvalidAssetTypeError("Image file is empty")
    if size > max_bytes:
        raise AssetTooLargeError(size, max_bytes)


def generate_asset_name(
    field_label: str,
    ext: str,
    clock: Callable[[], float] = time.time,
    rng: Callable[[int, int], int] = random.randint,
) -> str:
    """Build "<label>-<millis>-<random>.<ext>" for a new asset."""
    if not _LABEL_PATTERN.match(field_label):
        raise ValueError(f"Invalid asset field label: {field_label!r}")
    millis = int(clock() * 1000)
    suffix = rng(0, RANDOM_SUFFIX_MAX)
    name = f"{field_label}-{millis}-{suffix}.{ext}"
    if not is_generated_name(name):
        raise ValueError(f"Generated asset name is malformed: {name!r}")
    return name


def is_generated_name(name: str) -> bool:
    """True if name has the shape produced by generate_asset_name."""
    return bool(_NAME_PATTERN.match(name))


def public_ref(url_prefix: str, name: str) -> str:
    return f"{url_prefix.rstrip('/')}/{name}"


def name_from_ref(url_prefix: str, ref: str) -> str | None:
    """Extract the asset name from a public reference, or None if foreign."""
    prefix = url_prefix.rstrip("/") + "/"
    if not ref or not ref.startswith(prefix):
        return None
    name = ref[len(prefix):]
    return name if is_generated_name(name) else None
