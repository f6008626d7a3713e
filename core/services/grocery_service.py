# =============================================================================
# core/services/grocery_service.py - Grocery Kit Business Logic
# =============================================================================
# Handles the grocery catalogue, short-lived selections (carts) and grocery
# donations.
#
# Totals:
#   subtotal       = sum(price * quantity)
#   processing_fee = subtotal * GROCERY_PROCESSING_FEE_RATE, rounded half up
#   total_amount   = subtotal + processing_fee
# =============================================================================

import logging
import math
from datetime import timedelta
from typing import Any, Iterable

import pymongo

from app.config import settings
from app.exceptions import ResourceNotFoundError
from core.models.grocery import (
    GroceryDonationCreate,
    GroceryDonationStatusUpdate,
    GroceryItemCreate,
    GroceryItemUpdate,
    GroceryLineItem,
    GroceryPaymentStatus,
    GrocerySelectionCreate,
)
from core.services.common import delete_document, find_by_id, insert_document, paginate, update_document
from lib.mongo_client import Collections, MongoClient
from lib.utils import ensure_aware, serialize_document, serialize_documents, utcnow

logger = logging.getLogger(__name__)


def round_half_up(value: float) -> int:
    """2.5 -> 3 (Python's round() would give 2)."""
    return int(math.floor(value + 0.5))


def compute_totals(items: Iterable[GroceryLineItem], fee_rate: float | None = None) -> dict[str, float]:
    """
    Compute subtotal, fee and total for a list of line items.

    Example:
        compute_totals([GroceryLineItem(name="Rice", amount="5 kg", price=350, quantity=2)])
        # {"subtotal": 700, "processing_fee": 14, "total_amount": 714}
    """
    rate = settings.GROCERY_PROCESSING_FEE_RATE if fee_rate is None else fee_rate
    subtotal = sum(item.price * item.quantity for item in items)
    fee = round_half_up(subtotal * rate)
    return {"subtotal": subtotal, "processing_fee": fee, "total_amount": subtotal + fee}


class GroceryService:
    """Service for grocery items, selections and donations."""

    # -------------------------------------------------------------------------
    # Catalogue
    # -------------------------------------------------------------------------

    @staticmethod
    def list_items(include_inactive: bool = False) -> list[dict[str, Any]]:
        """Catalogue in display order (newest first within the same order)."""
        query = {} if include_inactive else {"is_active": True}
        cursor = MongoClient.collection(Collections.GROCERY_ITEMS).find(query).sort(
            [("display_order", pymongo.ASCENDING), ("created_at", pymongo.DESCENDING)]
        )
        return serialize_documents(list(cursor))

    @staticmethod
    def get_item(item_id: str) -> dict[str, Any]:
        return serialize_document(find_by_id(Collections.GROCERY_ITEMS, item_id, "Grocery item"))

    @staticmethod
    def create_item(payload: GroceryItemCreate) -> dict[str, Any]:
        item = insert_document(Collections.GROCERY_ITEMS, payload.model_dump())
        logger.info(f"Created grocery item: {item['id']} ({item['name']})")
        return item

    @staticmethod
    def update_item(item_id: str, payload: GroceryItemUpdate) -> dict[str, Any]:
        item = update_document(
            Collections.GROCERY_ITEMS, item_id, payload.model_dump(exclude_none=True), "Grocery item"
        )
        logger.info(f"Updated grocery item: {item_id}")
        return item

    @staticmethod
    def delete_item(item_id: str) -> None:
        delete_document(Collections.GROCERY_ITEMS, item_id, "Grocery item")
        logger.info(f"Deleted grocery item: {item_id}")

    # -------------------------------------------------------------------------
    # Selections
    # -------------------------------------------------------------------------

    @staticmethod
    def create_selection(payload: GrocerySelectionCreate) -> dict[str, Any]:
        """Store a cart with computed totals; it expires after the configured TTL."""
        expires_at = utcnow() + timedelta(minutes=settings.GROCERY_SELECTION_TTL_MINUTES)
        selection = insert_document(Collections.GROCERY_SELECTIONS, {
            "items": [item.model_dump() for item in payload.items],
            **compute_totals(payload.items),
            "expires_at": expires_at,
        })
        logger.info(f"Created grocery selection: {selection['id']}")
        return selection

    @staticmethod
    def get_selection(selection_id: str) -> dict[str, Any]:
        """
        Fetch a live selection.

        Raises:
            ResourceNotFoundError: missing, or past its expiry (the TTL
                index removes expired documents only periodically)
        """
        doc = find_by_id(Collections.GROCERY_SELECTIONS, selection_id, "Selection")
        expires_at = doc.get("expires_at")
        if expires_at is not None and ensure_aware(expires_at) <= utcnow():
            raise ResourceNotFoundError("Selection", selection_id)
        return serialize_document(doc)

    # -------------------------------------------------------------------------
    # Donations
    # -------------------------------------------------------------------------

    @staticmethod
    def create_donation(payload: GroceryDonationCreate) -> dict[str, Any]:
        """
        Record a grocery donation.

        Totals the client sent are kept; missing (or zero) ones are computed.
        """
        computed = compute_totals(payload.items)
        subtotal = payload.subtotal or computed["subtotal"]
        fee = (
            payload.processing_fee
            if payload.processing_fee is not None
            else round_half_up(subtotal * settings.GROCERY_PROCESSING_FEE_RATE)
        )
        total = payload.total_amount or subtotal + fee

        data = payload.model_dump(mode="json")
        data.update({"subtotal": subtotal, "processing_fee": fee, "total_amount": total})

        donation = insert_document(Collections.GROCERY_DONATIONS, data)
        logger.info(f"Created grocery donation: {donation['id']} ({total} INR)")
        return donation

    @staticmethod
    def list_donations(
        page: int = 1,
        limit: int = 10,
        payment_status: GroceryPaymentStatus | None = None,
    ) -> tuple[list[dict[str, Any]], int]:
        query = {"payment_status": payment_status.value} if payment_status else {}
        return paginate(
            Collections.GROCERY_DONATIONS, query, [("created_at", pymongo.DESCENDING)], page, limit
        )

    @staticmethod
    def get_donation(donation_id: str) -> dict[str, Any]:
        return serialize_document(find_by_id(Collections.GROCERY_DONATIONS, donation_id, "Grocery donation"))

    @staticmethod
    def update_donation_status(donation_id: str, payload: GroceryDonationStatusUpdate) -> dict[str, Any]:
        changes: dict[str, Any] = {"payment_status": payload.payment_status.value}
        if payload.payment_id:
            changes["payment_id"] = payload.payment_id
        donation = update_document(Collections.GROCERY_DONATIONS, donation_id, changes, "Grocery donation")
        logger.info(f"Grocery donation {donation_id} status -> {payload.payment_status.value}")
        return donation
