"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - UserId wraps the integer primary key of a User row
    - AssetRef is the public path of a stored asset (e.g. "/uploads/image-1-2.png")
    - ImageUpload is immutable once parsed from the request

Design Decisions:
    - NewType over dataclass wrappers for identifiers: zero runtime cost
    - ImageUpload is a frozen dataclass so services never see framework UploadFile objects
"""

from dataclasses import dataclass
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

UserId = NewType("UserId", int)
AssetRef = NewType("AssetRef", str)


# ─── Value Types ─────────────────────────────────────────────────

@dataclass(frozen=True)
class ImageUpload:
    """An uploaded file as received by the transport layer."""
    content: bytes
    filename: str
    content_type: str


@dataclass(frozen=True)
class UserFields:
    """Validated text fields of a user registration."""
    name: str
    age: int
