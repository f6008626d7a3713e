# =============================================================================
# core/services/donor_wall_service.py - Donor Wall Business Logic
# =============================================================================
# Handles donor wall entries:
# - tier is derived from the amount unless an admin sets it explicitly
# - avatar initials/colour are generated on create
# - the public view hides email/phone/PAN, and amounts where show_amount
#   is off
# =============================================================================

import logging
from typing import Any

import pymongo

from core.models.donor_wall import (
    ANONYMOUS_NAME,
    DonorStatus,
    DonorTier,
    DonorWallCreate,
    DonorWallUpdate,
    assign_tier,
    avatar_initials,
    display_name,
    random_avatar_color,
)
from core.services.common import delete_document, find_by_id, insert_document, paginate, update_document
from lib.mongo_client import Collections, MongoClient
from lib.utils import search_regex, serialize_document, utcnow

logger = logging.getLogger(__name__)

RESOURCE = "Donor"

SORTABLE_FIELDS = {"donation_date", "amount", "full_name", "tier", "created_at"}

TIER_ORDER = [t.value for t in DonorTier]


def with_display_name(entry: dict[str, Any]) -> dict[str, Any]:
    entry["display_name"] = display_name(entry.get("full_name", ""), entry.get("is_anonymous", False))
    return entry


def public_entry(entry: dict[str, Any]) -> dict[str, Any]:
    """Fields safe to show on the public wall."""
    anonymous = entry.get("is_anonymous", False)
    return {
        "id": entry["id"],
        "display_name": display_name(entry.get("full_name", ""), anonymous),
        "avatar_initials": avatar_initials(ANONYMOUS_NAME) if anonymous else entry.get("avatar_initials"),
        "avatar_color": entry.get("avatar_color"),
        "tier": entry.get("tier"),
        "campaign": entry.get("campaign"),
        "message": entry.get("message", ""),
        "donation_date": entry.get("donation_date"),
        "amount": entry.get("amount") if entry.get("show_amount", True) else None,
    }


class DonorWallService:
    """Service for donor wall operations."""

    @staticmethod
    def create_entry(payload: DonorWallCreate) -> dict[str, Any]:
        data = payload.model_dump(mode="python")
        data["tier"] = (payload.tier or assign_tier(payload.amount)).value
        data["status"] = payload.status.value
        data["donation_date"] = payload.donation_date or utcnow()
        data["avatar_initials"] = payload.avatar_initials or avatar_initials(payload.full_name)
        data["avatar_color"] = payload.avatar_color or random_avatar_color()

        entry = insert_document(Collections.DONOR_WALL, data)
        logger.info(f"Added donor {entry['id']} to wall ({entry['tier']})")
        return with_display_name(entry)

    @staticmethod
    def get_entry(entry_id: str) -> dict[str, Any]:
        return with_display_name(serialize_document(find_by_id(Collections.DONOR_WALL, entry_id, RESOURCE)))

    @staticmethod
    def list_entries(
        page: int = 1,
        limit: int = 20,
        tier: DonorTier | None = None,
        campaign: str | None = None,
        is_visible: bool | None = None,
        status: DonorStatus | None = None,
        search: str | None = None,
        sort_by: str = "donation_date",
        sort_order: str = "desc",
    ) -> tuple[list[dict[str, Any]], int]:
        """
        Admin listing with filters and sorting.

        Unknown sort fields fall back to donation_date.
        """
        query: dict[str, Any] = {}
        if tier:
            query["tier"] = tier.value
        if campaign:
            query["campaign"] = campaign
        if is_visible is not None:
            query["is_visible"] = is_visible
        if status:
            query["status"] = status.value
        if search:
            pattern = search_regex(search)
            query["$or"] = [{"full_name": pattern}, {"email": pattern}]

        field = sort_by if sort_by in SORTABLE_FIELDS else "donation_date"
        direction = pymongo.ASCENDING if sort_order == "asc" else pymongo.DESCENDING

        items, total = paginate(Collections.DONOR_WALL, query, [(field, direction)], page, limit)
        return [with_display_name(e) for e in items], total

    @staticmethod
    def list_by_tier(tier: DonorTier, page: int = 1, limit: int = 20) -> tuple[list[dict[str, Any]], int]:
        """Visible, active donors of one tier; largest amounts first."""
        query = {"tier": tier.value, "status": DonorStatus.ACTIVE.value, "is_visible": True}
        items, total = paginate(
            Collections.DONOR_WALL,
            query,
            [("amount", pymongo.DESCENDING), ("donation_date", pymongo.DESCENDING)],
            page,
            limit,
        )
        return [public_entry(e) for e in items], total

    @staticmethod
    def list_by_campaign(campaign: str, page: int = 1, limit: int = 20) -> tuple[list[dict[str, Any]], int]:
        """Visible, active donors of one campaign; newest first."""
        query = {"campaign": campaign, "status": DonorStatus.ACTIVE.value, "is_visible": True}
        items, total = paginate(
            Collections.DONOR_WALL, query, [("donation_date", pymongo.DESCENDING)], page, limit
        )
        return [public_entry(e) for e in items], total

    @staticmethod
    def public_wall() -> dict[str, list[dict[str, Any]]]:
        """
        Visible, active donors grouped by tier (Platinum first).

        Every tier key is present, possibly with an empty list.
        """
        cursor = MongoClient.collection(Collections.DONOR_WALL).find(
            {"status": DonorStatus.ACTIVE.value, "is_visible": True}
        ).sort([("amount", pymongo.DESCENDING), ("donation_date", pymongo.DESCENDING)])

        grouped: dict[str, list[dict[str, Any]]] = {tier: [] for tier in TIER_ORDER}
        for doc in cursor:
            entry = public_entry(serialize_document(doc))
            grouped.setdefault(entry["tier"], []).append(entry)
        return grouped

    @staticmethod
    def get_stats() -> dict[str, Any]:
        """Counts, total raised, per-tier counts and campaign count for active donors."""
        coll = MongoClient.collection(Collections.DONOR_WALL)
        active = {"status": DonorStatus.ACTIVE.value}

        totals = list(coll.aggregate([
            {"$match": active},
            {"$group": {"_id": "$tier", "count": {"$sum": 1}, "amount": {"$sum": "$amount"}}},
        ]))
        visible = coll.count_documents({**active, "is_visible": True})
        total = sum(t["count"] for t in totals)

        return {
            "total_donors": total,
            "visible_donors": visible,
            "hidden_donors": total - visible,
            "total_raised": sum(t["amount"] for t in totals),
            "tier_counts": {tier: 0 for tier in TIER_ORDER} | {t["_id"]: t["count"] for t in totals},
            "total_campaigns": len(coll.distinct("campaign", active)),
        }

    @staticmethod
    def update_entry(entry_id: str, payload: DonorWallUpdate) -> dict[str, Any]:
        """
        Update an entry.

        A new amount re-assigns the tier unless the payload also sets one;
        a new name regenerates the initials unless they are given too.
        """
        changes = payload.model_dump(mode="python", exclude_none=True)
        for key in ("tier", "status"):
            if changes.get(key) is not None:
                changes[key] = changes[key].value

        if payload.amount is not None and payload.tier is None:
            changes["tier"] = assign_tier(payload.amount).value
        if payload.full_name and payload.avatar_initials is None:
            changes["avatar_initials"] = avatar_initials(payload.full_name)

        entry = update_document(Collections.DONOR_WALL, entry_id, changes, RESOURCE)
        logger.info(f"Updated donor {entry_id}")
        return with_display_name(entry)

    @staticmethod
    def toggle_visibility(entry_id: str) -> dict[str, Any]:
        existing = find_by_id(Collections.DONOR_WALL, entry_id, RESOURCE)
        visible = not existing.get("is_visible", True)
        entry = update_document(Collections.DONOR_WALL, entry_id, {"is_visible": visible}, RESOURCE)
        logger.info(f"Donor {entry_id} visibility -> {visible}")
        return with_display_name(entry)

    @staticmethod
    def delete_entry(entry_id: str) -> None:
        delete_document(Collections.DONOR_WALL, entry_id, RESOURCE)
        logger.info(f"Deleted donor {entry_id}")
