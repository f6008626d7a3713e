# =============================================================================
# core/services/campaign_service.py - Campaign Business Logic
# =============================================================================
# Handles campaign CRUD, slug management and public pledges.
# Campaigns are addressed by slug on the public site and by id in the
# admin UI, so lookups accept either.
# =============================================================================

import logging
from typing import Any

import pymongo
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from app.exceptions import DuplicateResourceError, RequestValidationFailed, ResourceNotFoundError
from core.models.campaign import CampaignCreate, CampaignDonateRequest, CampaignUpdate
from core.services.common import delete_document, insert_document, paginate, update_document
from lib.mongo_client import Collections, MongoClient
from lib.utils import serialize_document, slugify, to_object_id, utcnow

logger = logging.getLogger(__name__)

RESOURCE = "Campaign"


def progress_percentage(raised: float, goal: float) -> float:
    """Share of the goal raised, capped at 100 and rounded to one decimal."""
    if not goal or goal <= 0:
        return 0.0
    return round(min(raised / goal * 100, 100.0), 1)


def with_progress(campaign: dict[str, Any]) -> dict[str, Any]:
    campaign["progress_percentage"] = progress_percentage(
        campaign.get("raised_amount", 0), campaign.get("goal_amount", 0)
    )
    return campaign


class CampaignService:
    """
    Service for campaign operations.

    All returned campaigns carry a computed `progress_percentage`.
    """

    @staticmethod
    def _slug_taken(slug: str, exclude_id: Any = None) -> bool:
        query: dict[str, Any] = {"slug": slug}
        if exclude_id is not None:
            query["_id"] = {"$ne": exclude_id}
        return MongoClient.collection(Collections.CAMPAIGNS).find_one(query, {"_id": 1}) is not None

    @staticmethod
    def create_campaign(payload: CampaignCreate) -> dict[str, Any]:
        """
        Create a campaign.

        Raises:
            RequestValidationFailed: no slug given and none can be derived
                from the title
            DuplicateResourceError: slug already used
        """
        data = payload.model_dump(mode="python")
        data["slug"] = payload.slug or slugify(payload.title)
        if not data["slug"]:
            raise RequestValidationFailed(
                "Cannot derive a slug from the title; send a slug",
                {"errors": {"slug": "Slug must contain at least one letter or digit"}},
            )

        if CampaignService._slug_taken(data["slug"]):
            raise DuplicateResourceError(RESOURCE, "slug", data["slug"])

        try:
            campaign = insert_document(Collections.CAMPAIGNS, data)
        except DuplicateKeyError:
            raise DuplicateResourceError(RESOURCE, "slug", data["slug"])

        logger.info(f"Created campaign: {campaign['id']} ({campaign['slug']})")
        return with_progress(campaign)

    @staticmethod
    def _find_raw(slug_or_id: str) -> dict[str, Any]:
        coll = MongoClient.collection(Collections.CAMPAIGNS)
        campaign = None
        oid = to_object_id(slug_or_id)
        if oid is not None:
            campaign = coll.find_one({"_id": oid})
        if campaign is None:
            campaign = coll.find_one({"slug": slug_or_id.strip().lower()})
        if campaign is None:
            raise ResourceNotFoundError(RESOURCE, slug_or_id)
        return campaign

    @staticmethod
    def get_campaign(slug_or_id: str) -> dict[str, Any]:
        """
        Get a campaign by id or slug.

        Raises:
            ResourceNotFoundError: no match for either
        """
        return with_progress(serialize_document(CampaignService._find_raw(slug_or_id)))

    @staticmethod
    def list_campaigns(
        page: int = 1,
        limit: int = 10,
        category: str | None = None,
        featured: bool | None = None,
        active_only: bool = False,
    ) -> tuple[list[dict[str, Any]], int]:
        """
        List campaigns, featured first then newest.

        Returns:
            Tuple of (campaigns list, total count)
        """
        query: dict[str, Any] = {}
        if category:
            query["category"] = category
        if featured is not None:
            query["featured"] = featured
        if active_only:
            query["deadline"] = {"$gt": utcnow()}

        items, total = paginate(
            Collections.CAMPAIGNS,
            query,
            [("featured", pymongo.DESCENDING), ("created_at", pymongo.DESCENDING)],
            page,
            limit,
        )
        return [with_progress(c) for c in items], total

    @staticmethod
    def update_campaign(campaign_id: str, payload: CampaignUpdate) -> dict[str, Any]:
        """
        Update a campaign. Only fields sent with a value change; nulls are ignored.

        Raises:
            ResourceNotFoundError: unknown campaign
            DuplicateResourceError: new slug already used
        """
        changes = payload.model_dump(mode="python", exclude_none=True)
        existing = CampaignService._find_raw(campaign_id)

        if changes.get("slug") and CampaignService._slug_taken(changes["slug"], existing["_id"]):
            raise DuplicateResourceError(RESOURCE, "slug", changes["slug"])

        try:
            campaign = update_document(Collections.CAMPAIGNS, str(existing["_id"]), changes, RESOURCE)
        except DuplicateKeyError:
            raise DuplicateResourceError(RESOURCE, "slug", changes.get("slug", ""))

        logger.info(f"Updated campaign: {campaign['id']}")
        return with_progress(campaign)

    @staticmethod
    def delete_campaign(campaign_id: str) -> None:
        """Delete a campaign by id."""
        delete_document(Collections.CAMPAIGNS, campaign_id, RESOURCE)
        logger.info(f"Deleted campaign: {campaign_id}")

    @staticmethod
    def get_donation_options(slug_or_id: str) -> dict[str, Any]:
        campaign = CampaignService.get_campaign(slug_or_id)
        return {
            "campaign_id": campaign["id"],
            "slug": campaign["slug"],
            "title": campaign["title"],
            "donation_options": campaign.get("donation_options", []),
        }

    @staticmethod
    def donate(payload: CampaignDonateRequest) -> dict[str, Any]:
        """
        Record a pledge: raised_amount += amount, supporters += 1.

        The increment is a single atomic update, so concurrent pledges
        never overwrite each other.

        Raises:
            ResourceNotFoundError: unknown campaign
        """
        existing = CampaignService._find_raw(payload.campaign_id)
        updated = MongoClient.collection(Collections.CAMPAIGNS).find_one_and_update(
            {"_id": existing["_id"]},
            {
                "$inc": {"raised_amount": payload.amount, "supporters": 1},
                "$set": {"updated_at": utcnow()},
            },
            return_document=ReturnDocument.AFTER,
        )
        if updated is None:
            raise ResourceNotFoundError(RESOURCE, payload.campaign_id)

        logger.info(f"Pledge of {payload.amount} to campaign {existing['_id']}")
        return with_progress(serialize_document(updated))
