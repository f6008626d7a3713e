# =============================================================================
# lib/mongo_client.py - MongoDB Client Wrapper
# =============================================================================
# This module provides a thin wrapper around pymongo.
# It implements the singleton pattern to reuse a single client connection
# (pymongo pools connections internally) and owns:
# - Collection names used across the services
# - Index definitions mirroring the document schemas
#
# Usage:
#   from lib.mongo_client import MongoClient, Collections
#   donations = MongoClient.collection(Collections.DONATIONS)
# =============================================================================

from __future__ import annotations

import logging
from typing import Any

import pymongo
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import PyMongoError

from app.config import settings
from lib.utils import ApplicationError

# Set up logging for this module
logger = logging.getLogger(__name__)


class MongoClientError(ApplicationError):
    """Error during MongoDB operations."""

    def __init__(
        self,
        message: str,
        code: str = "MONGO_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, code=code, suggestion=suggestion, details=details)


class Collections:
    """Collection names, one per document type."""

    CAMPAIGNS = "campaigns"
    DONATIONS = "donations"
    DONOR_WALL = "donor_wall"
    PHOTO_GALLERY = "photo_gallery"
    VIDEO_GALLERY = "video_gallery"
    GROCERY_ITEMS = "grocery_items"
    GROCERY_SELECTIONS = "grocery_selections"
    GROCERY_DONATIONS = "grocery_donations"
    FORMS = "forms"
    FORM_SUBMISSIONS = "form_submissions"
    EMAIL_TEMPLATES = "email_templates"
    CAREER_APPLICATIONS = "career_applications"
    USERS = "users"


# (collection, keys, options)
INDEXES: list[tuple[str, list[tuple[str, int]], dict[str, Any]]] = [
    (Collections.CAMPAIGNS, [("slug", pymongo.ASCENDING)], {"unique": True}),
    (Collections.CAMPAIGNS, [("featured", pymongo.DESCENDING), ("created_at", pymongo.DESCENDING)], {}),
    (Collections.DONATIONS, [("razorpay_payment_id", pymongo.ASCENDING)], {"sparse": True}),
    (Collections.DONATIONS, [("razorpay_order_id", pymongo.ASCENDING)], {"sparse": True}),
    (Collections.DONATIONS, [("donor_email", pymongo.ASCENDING)], {}),
    (Collections.DONATIONS, [("payment_status", pymongo.ASCENDING)], {}),
    (Collections.DONATIONS, [("created_at", pymongo.DESCENDING)], {}),
    (Collections.DONATIONS, [("seva_type", pymongo.ASCENDING)], {}),
    (Collections.DONATIONS, [("donor_type", pymongo.ASCENDING)], {}),
    (Collections.DONOR_WALL, [("donation_date", pymongo.DESCENDING)], {}),
    (Collections.DONOR_WALL, [("tier", pymongo.ASCENDING), ("amount", pymongo.DESCENDING)], {}),
    (Collections.DONOR_WALL, [("is_visible", pymongo.ASCENDING), ("status", pymongo.ASCENDING)], {}),
    (Collections.DONOR_WALL, [("campaign", pymongo.ASCENDING)], {}),
    (Collections.PHOTO_GALLERY, [("category", pymongo.ASCENDING), ("publish_date", pymongo.DESCENDING)], {}),
    (Collections.PHOTO_GALLERY, [("featured", pymongo.ASCENDING), ("publish_date", pymongo.DESCENDING)], {}),
    (Collections.VIDEO_GALLERY, [("category", pymongo.ASCENDING), ("publish_date", pymongo.DESCENDING)], {}),
    (Collections.VIDEO_GALLERY, [("featured", pymongo.ASCENDING), ("publish_date", pymongo.DESCENDING)], {}),
    (Collections.GROCERY_ITEMS, [("is_active", pymongo.ASCENDING), ("display_order", pymongo.ASCENDING)], {}),
    (Collections.GROCERY_SELECTIONS, [("expires_at", pymongo.ASCENDING)], {"expireAfterSeconds": 0}),
    (Collections.GROCERY_DONATIONS, [("email", pymongo.ASCENDING), ("created_at", pymongo.DESCENDING)], {}),
    (Collections.GROCERY_DONATIONS, [("payment_status", pymongo.ASCENDING)], {}),
    (Collections.FORMS, [("page", pymongo.ASCENDING), ("is_active", pymongo.ASCENDING)], {}),
    (Collections.FORM_SUBMISSIONS, [("form_id", pymongo.ASCENDING), ("created_at", pymongo.DESCENDING)], {}),
    (Collections.CAREER_APPLICATIONS, [("created_at", pymongo.DESCENDING)], {}),
    (Collections.USERS, [("email", pymongo.ASCENDING)], {"unique": True}),
]


class MongoClient:
    """
    Singleton wrapper for the pymongo client.

    All methods are class methods for easy access without instantiation.

    Example:
        campaigns = MongoClient.collection(Collections.CAMPAIGNS)
        campaign = campaigns.find_one({"slug": "build-school"})
    """

    _instance: pymongo.MongoClient | None = None

    @classmethod
    def get_client(cls) -> pymongo.MongoClient:
        """
        Get or create the singleton pymongo client.

        Raises:
            MongoClientError: If client creation fails
        """
        if cls._instance is None:
            try:
                cls._instance = pymongo.MongoClient(
                    settings.MONGO_URI,
                    tz_aware=True,
                    serverSelectionTimeoutMS=settings.MONGO_TIMEOUT_MS,
                )
                logger.info("MongoDB client initialized")
            except PyMongoError as e:
                raise MongoClientError(
                    message=f"Failed to create MongoDB client: {e}",
                    code="CLIENT_INIT_FAILED",
                    suggestion="Check MONGO_URI in your .env file",
                )
        return cls._instance

    @classmethod
    def get_database(cls) -> Database:
        """Return the configured database."""
        return cls.get_client()[settings.MONGO_DB_NAME]

    @classmethod
    def collection(cls, name: str) -> Collection:
        """Return a collection from the configured database."""
        return cls.get_database()[name]

    @classmethod
    def ensure_indexes(cls) -> None:
        """
        Create every index in INDEXES.

        create_index is a no-op when the index already exists, so this is
        safe to run on every startup.
        """
        db = cls.get_database()
        for collection_name, keys, options in INDEXES:
            try:
                db[collection_name].create_index(keys, **options)
            except PyMongoError as e:
                raise MongoClientError(
                    message=f"Failed to create index on {collection_name}: {e}",
                    code="INDEX_CREATE_FAILED",
                    details={"collection": collection_name, "keys": [k for k, _ in keys]},
                )
        logger.info(f"Ensured {len(INDEXES)} indexes")

    @classmethod
    def ping(cls) -> bool:
        """Round-trip to the server; False when unreachable."""
        try:
            cls.get_client().admin.command("ping")
            return True
        except PyMongoError as e:
            logger.warning(f"MongoDB ping failed: {e}")
            return False

    @classmethod
    def close(cls) -> None:
        """Close the client and forget the singleton."""
        if cls._instance is not None:
            cls._instance.close()
            cls._instance = None
            logger.info("MongoDB client closed")
