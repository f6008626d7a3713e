# =============================================================================
# lib/utils.py - Shared Utilities
# =============================================================================
# Common utilities used across the application:
# - ObjectId parsing and document serialization
# - Pagination metadata
# - Base error class
# =============================================================================

import math
import re
from datetime import date, datetime, timezone
from typing import Any

from bson import ObjectId


# =============================================================================
# Time Utilities
# =============================================================================

def utcnow() -> datetime:
    """Timezone-aware current UTC time."""
    return datetime.now(timezone.utc)


def ensure_aware(value: datetime) -> datetime:
    """
    Treat naive datetimes as UTC.

    MongoDB hands back naive datetimes unless the client is tz_aware, and
    comparing those with aware ones raises TypeError.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


# =============================================================================
# ObjectId Utilities
# =============================================================================

def to_object_id(value: str | ObjectId) -> ObjectId | None:
    """
    Convert a string to ObjectId, or None when it isn't one.

    Example:
        to_object_id("65a1c0ffee0ddba11c0ffee0")  # ObjectId(...)
        to_object_id("build-school")              # None
    """
    if isinstance(value, ObjectId):
        return value
    if isinstance(value, str) and ObjectId.is_valid(value):
        return ObjectId(value)
    return None


# =============================================================================
# Serialization
# =============================================================================

def _serialize_value(value: Any) -> Any:
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, datetime):
        return ensure_aware(value).isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, dict):
        return {k: _serialize_value(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_serialize_value(v) for v in value]
    return value


def serialize_document(doc: dict[str, Any] | None) -> dict[str, Any] | None:
    """
    Make a MongoDB document JSON-friendly.

    - `_id` is exposed as `id` (string)
    - ObjectIds become strings, datetimes become ISO-8601 strings
    - Nested dicts/lists are handled recursively
    """
    if doc is None:
        return None
    out = {k: _serialize_value(v) for k, v in doc.items() if k != "_id"}
    if "_id" in doc:
        out = {"id": str(doc["_id"]), **out}
    return out


def serialize_documents(docs: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Serialize a list of documents."""
    return [serialize_document(d) for d in docs]


# =============================================================================
# Pagination
# =============================================================================

def build_pagination(page: int, limit: int, total: int) -> dict[str, Any]:
    """
    Build the pagination block returned by list endpoints.

    Example:
        build_pagination(page=2, limit=10, total=35)
        # {"current_page": 2, "total_pages": 4, "total_items": 35,
        #  "items_per_page": 10, "has_next_page": True, "has_prev_page": True}
    """
    total_pages = math.ceil(total / limit) if limit else 0
    return {
        "current_page": page,
        "total_pages": total_pages,
        "total_items": total,
        "items_per_page": limit,
        "has_next_page": page * limit < total,
        "has_prev_page": page > 1,
    }


def page_offset(page: int, limit: int) -> int:
    """Number of documents to skip for a 1-indexed page."""
    return (page - 1) * limit


def search_regex(term: str) -> dict[str, str]:
    """Case-insensitive substring match on user input, with regex chars escaped."""
    return {"$regex": re.escape(term), "$options": "i"}


# =============================================================================
# Slugs
# =============================================================================

def slugify(text: str) -> str:
    """
    Lowercase, trim, and join words with hyphens.

    Example:
        slugify("  Build a School in Rural Telangana ")
        # "build-a-school-in-rural-telangana"
    """
    slug = re.sub(r"[^a-z0-9]+", "-", text.strip().lower())
    return slug.strip("-")


# =============================================================================
# Base Error Class
# =============================================================================

class ApplicationError(Exception):
    """
    Base error class for library-level errors.

    Attributes:
        code: Error code for categorization
        message: Human-readable error message
        suggestion: Actionable suggestion for fixing the error
        details: Additional context for debugging

    Example:
        class MyServiceError(ApplicationError):
            def __init__(self, message: str, **kwargs):
                super().__init__(message, code="MY_SERVICE_ERROR", **kwargs)
    """

    def __init__(
        self,
        message: str,
        code: str = "APPLICATION_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}

    def __str__(self) -> str:
        result = f"[{self.code}] {self.message}"
        if self.suggestion:
            result += f"\n  Suggestion: {self.suggestion}"
        return result

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for API responses."""
        return {
            "code": self.code,
            "message": self.message,
            "suggestion": self.suggestion,
            "details": self.details,
        }
