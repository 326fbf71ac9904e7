"""Error Hierarchy — typed, categorized exceptions for all registry failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (4xx) carry a descriptive, user-correctable message
    - Infrastructure errors (5xx) carry a generic message; detail goes to the log only
    - to_response() produces the REST envelope used by every error handler

Design Decisions:
    - Single hierarchy with RegistryError base: FastAPI global handler catches all (ADR: uniform error shape)
    - ErrorContext as dataclass: observability fields without coupling to logging
"""

from dataclasses import dataclass, field
from enum import Enum
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    ASSET_REJECTED = "asset_rejected"
    RESOURCE_NOT_FOUND = "resource_not_found"
    DATABASE = "database"
    STORAGE = "storage"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Context attached to an error for logs and responses."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    user_id: int | None = None
    asset_ref: str | None = None


class RegistryError(Exception):
    """Base exception for all registry errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
            }
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class ValidationError(RegistryError):
    """A submitted field is missing or malformed."""
    def __init__(self, message: str, field: str, context: ErrorContext | None = None):
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.field = field


class InvalidAssetTypeError(RegistryError):
    """Upload is not an allowed image type (MIME type or extension)."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "INVALID_ASSET_TYPE", ErrorCategory.ASSET_REJECTED,
            ErrorSeverity.ERROR, context, 400,
        )


class AssetTooLargeError(RegistryError):
    """Upload exceeds the configured size limit."""
    def __init__(self, size: int, limit: int, context: ErrorContext | None = None):
        super().__init__(
            f"Image exceeds the maximum allowed size of {limit} bytes",
            "ASSET_TOO_LARGE", ErrorCategory.ASSET_REJECTED,
            ErrorSeverity.ERROR, context, 413,
        )
        self.size = size
        self.limit = limit


class ResourceNotFoundError(RegistryError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(RegistryError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 500,
        )
        self.operation = operation


class AssetStorageError(RegistryError):
    """Filesystem operation on an asset failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Asset {operation} failed: {message}",
            "ASSET_STORAGE_ERROR", ErrorCategory.STORAGE,
            ErrorSeverity.CRITICAL, context, 500,
        )
        self.operation = operation
