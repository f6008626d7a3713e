# =============================================================================
# core/services/gallery_service.py - Photo & Video Gallery Logic
# =============================================================================
# Photos and videos share listing, featured/category views, view counting
# and stats. They differ in where the media lives:
# - photos: uploaded image files on local disk (replaced/removed with the
#   document)
# - videos: external URLs supplied in the JSON body
# =============================================================================

import logging
from typing import Any

import pymongo
from pymongo import ReturnDocument

from app.exceptions import ResourceNotFoundError
from core.models.gallery import (
    GalleryCategory,
    GalleryStatus,
    PhotoMetadata,
    PhotoMetadataUpdate,
    VideoCreate,
    VideoUpdate,
)
from core.services.common import delete_document, find_by_id, insert_document, paginate, require_object_id, update_document
from core.services.storage_service import StorageService
from lib.mongo_client import Collections, MongoClient
from lib.utils import serialize_document, serialize_documents, utcnow

logger = logging.getLogger(__name__)

FEATURED_LIMIT = 10
PHOTO_SUBDIR = "photos"


def _enum_values(data: dict[str, Any]) -> dict[str, Any]:
    return {k: (v.value if isinstance(v, (GalleryCategory, GalleryStatus)) else v) for k, v in data.items()}


class GalleryService:
    """
    Shared gallery operations.

    Subclasses set `collection` and `resource`.
    """

    collection: str = ""
    resource: str = ""

    @classmethod
    def list_items(
        cls,
        page: int = 1,
        limit: int = 12,
        category: GalleryCategory | None = None,
        featured: bool | None = None,
        status: GalleryStatus | None = None,
    ) -> tuple[list[dict[str, Any]], int]:
        """Featured first, then newest publish date."""
        query: dict[str, Any] = {}
        if category:
            query["category"] = category.value
        if featured is not None:
            query["featured"] = featured
        if status:
            query["status"] = status.value

        return paginate(
            cls.collection,
            query,
            [("featured", pymongo.DESCENDING), ("publish_date", pymongo.DESCENDING)],
            page,
            limit,
        )

    @classmethod
    def list_featured(cls) -> list[dict[str, Any]]:
        """The newest active featured items."""
        cursor = (
            MongoClient.collection(cls.collection)
            .find({"featured": True, "status": GalleryStatus.ACTIVE.value})
            .sort("publish_date", pymongo.DESCENDING)
            .limit(FEATURED_LIMIT)
        )
        return serialize_documents(list(cursor))

    @classmethod
    def list_by_category(
        cls, category: GalleryCategory, page: int = 1, limit: int = 12
    ) -> tuple[list[dict[str, Any]], int]:
        return paginate(
            cls.collection,
            {"category": category.value, "status": GalleryStatus.ACTIVE.value},
            [("publish_date", pymongo.DESCENDING)],
            page,
            limit,
        )

    @classmethod
    def get_item(cls, item_id: str) -> dict[str, Any]:
        return serialize_document(find_by_id(cls.collection, item_id, cls.resource))

    @classmethod
    def view_item(cls, item_id: str) -> dict[str, Any]:
        """Fetch an item and count the view."""
        updated = MongoClient.collection(cls.collection).find_one_and_update(
            {"_id": require_object_id(item_id)},
            {"$inc": {"view_count": 1}},
            return_document=ReturnDocument.AFTER,
        )
        if updated is None:
            raise ResourceNotFoundError(cls.resource, item_id)
        return serialize_document(updated)

    @classmethod
    def get_stats(cls) -> dict[str, Any]:
        """Totals over active items."""
        coll = MongoClient.collection(cls.collection)
        active = {"status": GalleryStatus.ACTIVE.value}
        views = list(coll.aggregate([
            {"$match": active},
            {"$group": {"_id": None, "total": {"$sum": "$view_count"}}},
        ]))
        return {
            "total": coll.count_documents(active),
            "featured": coll.count_documents({**active, "featured": True}),
            "total_views": views[0]["total"] if views else 0,
            "total_categories": len(coll.distinct("category", active)),
        }

    @classmethod
    def _insert(cls, data: dict[str, Any]) -> dict[str, Any]:
        data = _enum_values(data)
        data["publish_date"] = data.get("publish_date") or utcnow()
        data["view_count"] = 0
        item = insert_document(cls.collection, data)
        logger.info(f"Created {cls.resource.lower()}: {item['id']}")
        return item


class PhotoService(GalleryService):
    """Photo gallery; the image file is stored by StorageService."""

    collection = Collections.PHOTO_GALLERY
    resource = "Photo"

    @classmethod
    def create_photo(cls, meta: PhotoMetadata, image_url: str) -> dict[str, Any]:
        return cls._insert({**meta.model_dump(mode="python"), "image_url": image_url})

    @classmethod
    def update_photo(
        cls, photo_id: str, meta: PhotoMetadataUpdate, new_image_url: str | None = None
    ) -> dict[str, Any]:
        """
        Update metadata and optionally swap the image.

        The old file is removed only after the document points at the new one.
        """
        existing = find_by_id(cls.collection, photo_id, cls.resource)
        changes = _enum_values(meta.model_dump(mode="python", exclude_none=True))
        if new_image_url:
            changes["image_url"] = new_image_url

        photo = update_document(cls.collection, photo_id, changes, cls.resource)

        if new_image_url and existing.get("image_url") != new_image_url:
            StorageService.delete(existing.get("image_url"))
        logger.info(f"Updated photo: {photo_id}")
        return photo

    @classmethod
    def delete_photo(cls, photo_id: str) -> None:
        deleted = delete_document(cls.collection, photo_id, cls.resource)
        StorageService.delete(deleted.get("image_url"))
        logger.info(f"Deleted photo: {photo_id}")


class VideoService(GalleryService):
    """Video gallery; videos are external links."""

    collection = Collections.VIDEO_GALLERY
    resource = "Video"

    @classmethod
    def create_video(cls, payload: VideoCreate) -> dict[str, Any]:
        return cls._insert(payload.model_dump(mode="python"))

    @classmethod
    def update_video(cls, video_id: str, payload: VideoUpdate) -> dict[str, Any]:
        changes = _enum_values(payload.model_dump(mode="python", exclude_none=True))
        video = update_document(cls.collection, video_id, changes, cls.resource)
        logger.info(f"Updated video: {video_id}")
        return video

    @classmethod
    def delete_video(cls, video_id: str) -> None:
        delete_document(cls.collection, video_id, cls.resource)
        logger.info(f"Deleted video: {video_id}")
