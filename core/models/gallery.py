# =============================================================================
# core/models/gallery.py - Photo & Video Gallery Schemas
# =============================================================================
# Photos are uploaded as multipart forms (the image itself goes to local
# disk), so only the video schemas are used as JSON request bodies.
# Both share the category and status enums.
# =============================================================================

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field, field_validator


class GalleryCategory(str, Enum):
    EVENTS = "Events"
    CAMPAIGNS = "Campaigns"
    FESTIVALS = "Festivals"
    COMMUNITY_SERVICE = "Community Service"
    TEMPLE_ACTIVITIES = "Temple Activities"
    OTHER = "Other"


class GalleryStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


def _strip_title(v: str | None) -> str | None:
    if v is None:
        return v
    v = v.strip()
    if not v:
        raise ValueError("Title cannot be blank")
    return v


class VideoCreate(BaseModel):
    """
    Schema for adding a video.

    Example:
        {
            "video_title": "Annadaan Day 2024",
            "category": "Events",
            "video_url": "https://www.youtube.com/watch?v=abc123"
        }
    """
    video_title: str = Field(..., min_length=1, max_length=200)
    description: str = ""
    category: GalleryCategory
    video_url: str = Field(..., min_length=1)
    thumbnail_url: str = ""
    duration: str = Field(default="", description="Display duration, e.g. 03:45")
    publish_date: datetime | None = None
    featured: bool = False
    status: GalleryStatus = GalleryStatus.ACTIVE

    @field_validator("video_title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        return _strip_title(v)


class VideoUpdate(BaseModel):
    """Partial update; omitted fields are left unchanged."""
    video_title: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = None
    category: GalleryCategory | None = None
    video_url: str | None = Field(default=None, min_length=1)
    thumbnail_url: str | None = None
    duration: str | None = None
    publish_date: datetime | None = None
    featured: bool | None = None
    status: GalleryStatus | None = None

    @field_validator("video_title")
    @classmethod
    def strip_title(cls, v: str | None) -> str | None:
        return _strip_title(v)


class PhotoMetadata(BaseModel):
    """Form fields accompanying a photo upload."""
    image_title: str = Field(..., min_length=1, max_length=200)
    description: str = ""
    category: GalleryCategory
    publish_date: datetime | None = None
    featured: bool = False
    status: GalleryStatus = GalleryStatus.ACTIVE

    @field_validator("image_title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        return _strip_title(v)


class PhotoMetadataUpdate(BaseModel):
    """Form fields accepted when editing a photo."""
    image_title: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = None
    category: GalleryCategory | None = None
    publish_date: datetime | None = None
    featured: bool | None = None
    status: GalleryStatus | None = None

    @field_validator("image_title")
    @classmethod
    def strip_title(cls, v: str | None) -> str | None:
        return _strip_title(v)
