# =============================================================================
# core/services/donation_service.py - Donation Business Logic
# =============================================================================
# Handles the seva donation flow:
# 1. submit_form: store a pending donation and open a Razorpay order
# 2. verify_payment: check the checkout signature, fetch the payment and
#    mark the donation completed when captured, then email the receipt
# Plus admin listing, statistics, notes/status edits and receipt delivery.
# =============================================================================

import logging
import time
from datetime import datetime
from typing import Any

import pymongo
from pymongo import ReturnDocument

from app.exceptions import (
    PaymentGatewayError,
    PaymentGatewayNotConfiguredError,
    PaymentSignatureError,
    RequestValidationFailed,
    ResourceNotFoundError,
)
from core.models.donation import (
    DonationFormRequest,
    PaymentStatus,
    PaymentVerificationRequest,
)
from core.services.common import (
    delete_document,
    find_by_id,
    insert_document,
    paginate,
    require_object_id,
    update_document,
)
from lib import exporter
from lib.mailer import Attachment, MailResult, send_email
from lib.mongo_client import Collections, MongoClient
from lib.payments import GatewayError, RazorpayGateway
from lib.receipts import (
    ReceiptError,
    generate_receipt_number,
    receipt_filename,
    render_receipt_html,
    render_receipt_pdf,
)
from lib.utils import search_regex, serialize_document, serialize_documents, utcnow

logger = logging.getLogger(__name__)

RESOURCE = "Donation"


def get_gateway() -> RazorpayGateway:
    """
    Gateway built from settings.

    Raises:
        PaymentGatewayNotConfiguredError: Razorpay keys missing
    """
    try:
        return RazorpayGateway.from_settings()
    except GatewayError:
        raise PaymentGatewayNotConfiguredError()


def date_range_query(start_date: datetime | None, end_date: datetime | None) -> dict[str, Any]:
    """created_at filter for optional start/end bounds."""
    if not start_date and not end_date:
        return {}
    bounds: dict[str, Any] = {}
    if start_date:
        bounds["$gte"] = start_date
    if end_date:
        bounds["$lte"] = end_date
    return {"created_at": bounds}


def order_receipt(donation_id: str) -> str:
    """Merchant receipt reference: don_<last 8 of id>_<last 8 of epoch ms>."""
    return f"don_{donation_id[-8:]}_{str(int(time.time() * 1000))[-8:]}"


def summary(donation: dict[str, Any]) -> dict[str, Any]:
    """Public subset of a donation returned by the checkout endpoints."""
    return {
        "id": donation["id"],
        "seva_name": donation.get("seva_name"),
        "seva_type": donation.get("seva_type"),
        "amount": donation.get("amount"),
        "donor_name": donation.get("donor_name"),
        "donor_email": donation.get("donor_email"),
        "payment_status": donation.get("payment_status"),
    }


class DonationService:
    """
    Service for seva donations.

    Provides a clean interface between API routes, the database and the
    payment gateway.
    """

    # -------------------------------------------------------------------------
    # Checkout
    # -------------------------------------------------------------------------

    @staticmethod
    def submit_form(payload: DonationFormRequest) -> dict[str, Any]:
        """
        Store a pending donation and create its gateway order.

        Returns:
            {"donation": summary, "order": {id, amount, currency, receipt}, "key_id"}

        Raises:
            PaymentGatewayNotConfiguredError: Razorpay keys missing
            PaymentGatewayError: order creation failed
        """
        gateway = get_gateway()

        data = payload.model_dump(mode="json")
        donation = insert_document(Collections.DONATIONS, {
            **data,
            "amount": payload.seva_amount,
            "currency": "INR",
            "payment_status": PaymentStatus.PENDING.value,
            "razorpay_order_id": None,
            "razorpay_payment_id": None,
            "payment_method": None,
            "notes": "",
            "metadata": {},
        })
        logger.info(f"Created pending donation: {donation['id']} ({payload.seva_amount} INR)")

        exporter.append_submission(data, submitted_at=donation["created_at"])

        try:
            order = gateway.create_order(
                payload.seva_amount,
                receipt=order_receipt(donation["id"]),
                notes={
                    "donation_id": donation["id"],
                    "seva_name": payload.seva_name,
                    "seva_type": payload.seva_type,
                    "donor_name": payload.donor_name,
                    "donor_email": payload.donor_email,
                },
            )
        except GatewayError as e:
            logger.error(f"Order creation failed for donation {donation['id']}: {e.message}")
            raise PaymentGatewayError(e.message)

        donation = update_document(
            Collections.DONATIONS, donation["id"], {"razorpay_order_id": order["id"]}, RESOURCE
        )

        return {
            "donation": summary(donation),
            "order": {
                "id": order["id"],
                "amount": order.get("amount"),
                "currency": order.get("currency", "INR"),
                "receipt": order.get("receipt"),
            },
            "key_id": gateway.key_id,
        }

    @staticmethod
    def verify_payment(payload: PaymentVerificationRequest) -> dict[str, Any]:
        """
        Confirm a checkout callback.

        Raises:
            PaymentSignatureError: signature mismatch, or the order is not
                the one created for this donation
            ResourceNotFoundError: unknown donation
            PaymentGatewayError: payment lookup failed
        """
        gateway = get_gateway()
        stored = find_by_id(Collections.DONATIONS, payload.donation_id, RESOURCE)

        if stored.get("razorpay_order_id") != payload.razorpay_order_id:
            logger.warning(
                f"Order {payload.razorpay_order_id} does not belong to donation {payload.donation_id}"
            )
            raise PaymentSignatureError(payload.razorpay_order_id)

        if not gateway.verify_signature(
            payload.razorpay_order_id, payload.razorpay_payment_id, payload.razorpay_signature
        ):
            logger.warning(f"Signature mismatch for order {payload.razorpay_order_id}")
            raise PaymentSignatureError(payload.razorpay_order_id)

        try:
            payment = gateway.fetch_payment(payload.razorpay_payment_id)
        except GatewayError as e:
            raise PaymentGatewayError(e.message)

        status = PaymentStatus.COMPLETED if payment.get("status") == "captured" else PaymentStatus.PENDING
        donation = update_document(Collections.DONATIONS, payload.donation_id, {
            "razorpay_payment_id": payload.razorpay_payment_id,
            "payment_status": status.value,
            "payment_method": payment.get("method"),
            "metadata": {
                "payment_method": payment.get("method"),
                "bank": payment.get("bank"),
                "card_id": payment.get("card_id"),
                "wallet": payment.get("wallet"),
                "vpa": payment.get("vpa"),
                "email": payment.get("email"),
                "contact": payment.get("contact"),
                "status": payment.get("status"),
            },
        }, RESOURCE)
        logger.info(f"Verified payment {payload.razorpay_payment_id}: donation {donation['id']} -> {status.value}")

        email_result = None
        if status == PaymentStatus.COMPLETED and donation.get("donor_email"):
            email_result = DonationService.send_receipt(donation)

        return {
            "donation": {**summary(donation), "payment_id": donation.get("razorpay_payment_id")},
            "email_sent": bool(email_result and email_result.success),
            "email_message": (
                email_result.message if email_result
                else "No email sent (payment not completed or no email provided)"
            ),
        }

    # -------------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------------

    @staticmethod
    def get_donation(donation_id: str) -> dict[str, Any]:
        return serialize_document(find_by_id(Collections.DONATIONS, donation_id, RESOURCE))

    @staticmethod
    def get_by_order_id(order_id: str) -> dict[str, Any]:
        """
        Raises:
            ResourceNotFoundError: no donation carries this order id
        """
        doc = MongoClient.collection(Collections.DONATIONS).find_one({"razorpay_order_id": order_id})
        if doc is None:
            raise ResourceNotFoundError(RESOURCE, order_id)
        return serialize_document(doc)

    @staticmethod
    def _list_query(
        status: PaymentStatus | None,
        start_date: datetime | None,
        end_date: datetime | None,
        search: str | None,
    ) -> dict[str, Any]:
        query: dict[str, Any] = date_range_query(start_date, end_date)
        if status:
            query["payment_status"] = status.value
        if search:
            pattern = search_regex(search)
            query["$or"] = [
                {"donor_name": pattern},
                {"donor_email": pattern},
                {"razorpay_payment_id": pattern},
            ]
        return query

    @staticmethod
    def list_donations(
        page: int = 1,
        limit: int = 10,
        status: PaymentStatus | None = None,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
        search: str | None = None,
    ) -> tuple[list[dict[str, Any]], int]:
        """
        List donations, newest first.

        Returns:
            Tuple of (donations list, total count)
        """
        query = DonationService._list_query(status, start_date, end_date, search)
        return paginate(
            Collections.DONATIONS, query, [("created_at", pymongo.DESCENDING)], page, limit
        )

    @staticmethod
    def export_donations(
        status: PaymentStatus | None = None,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
        search: str | None = None,
    ) -> list[dict[str, Any]]:
        """Every donation matching the filters, newest first."""
        query = DonationService._list_query(status, start_date, end_date, search)
        cursor = MongoClient.collection(Collections.DONATIONS).find(query).sort("created_at", pymongo.DESCENDING)
        return serialize_documents(list(cursor))

    # -------------------------------------------------------------------------
    # Statistics
    # -------------------------------------------------------------------------

    @staticmethod
    def get_stats(start_date: datetime | None = None, end_date: datetime | None = None) -> dict[str, Any]:
        """
        Totals, average, completed share and status/monthly breakdowns.

        Monthly breakdown covers the 12 most recent months with donations.
        """
        coll = MongoClient.collection(Collections.DONATIONS)
        match = date_range_query(start_date, end_date)

        by_status = list(coll.aggregate([
            {"$match": match},
            {"$group": {"_id": "$payment_status", "count": {"$sum": 1}, "amount": {"$sum": "$amount"}}},
        ]))
        monthly = list(coll.aggregate([
            {"$match": match},
            {"$group": {
                "_id": {"year": {"$year": "$created_at"}, "month": {"$month": "$created_at"}},
                "count": {"$sum": 1},
                "amount": {"$sum": "$amount"},
            }},
            {"$sort": {"_id.year": -1, "_id.month": -1}},
            {"$limit": 12},
        ]))

        total_count = sum(s["count"] for s in by_status)
        total_amount = sum(s["amount"] for s in by_status)
        completed = next((s for s in by_status if s["_id"] == PaymentStatus.COMPLETED.value), None)

        return {
            "total_donations": total_count,
            "total_amount": total_amount,
            "avg_amount": round(total_amount / total_count, 2) if total_count else 0,
            "completed_donations": completed["count"] if completed else 0,
            "completed_amount": completed["amount"] if completed else 0,
            "status_breakdown": [
                {"status": s["_id"], "count": s["count"], "amount": s["amount"]}
                for s in sorted(by_status, key=lambda s: str(s["_id"]))
            ],
            "monthly_breakdown": [
                {"year": m["_id"]["year"], "month": m["_id"]["month"], "count": m["count"], "amount": m["amount"]}
                for m in monthly
            ],
        }

    @staticmethod
    def get_seva_stats(start_date: datetime | None = None, end_date: datetime | None = None) -> dict[str, Any]:
        """Overall totals plus seva type and donor type breakdowns."""
        coll = MongoClient.collection(Collections.DONATIONS)
        match = date_range_query(start_date, end_date)

        rows = list(coll.aggregate([
            {"$match": match},
            {"$group": {
                "_id": {"seva_type": "$seva_type", "donor_type": "$donor_type", "status": "$payment_status"},
                "count": {"$sum": 1},
                "amount": {"$sum": "$amount"},
            }},
        ]))

        overall = {"total_donations": 0, "total_amount": 0, "completed_donations": 0, "completed_amount": 0}
        seva: dict[str, dict[str, Any]] = {}
        donor: dict[str, dict[str, Any]] = {}

        for row in rows:
            key = row["_id"]
            is_completed = key.get("status") == PaymentStatus.COMPLETED.value

            overall["total_donations"] += row["count"]
            overall["total_amount"] += row["amount"]
            if is_completed:
                overall["completed_donations"] += row["count"]
                overall["completed_amount"] += row["amount"]

            s = seva.setdefault(key.get("seva_type"), {
                "seva_type": key.get("seva_type"), "count": 0, "amount": 0,
                "completed_count": 0, "completed_amount": 0,
            })
            s["count"] += row["count"]
            s["amount"] += row["amount"]
            if is_completed:
                s["completed_count"] += row["count"]
                s["completed_amount"] += row["amount"]

            d = donor.setdefault(key.get("donor_type"), {
                "donor_type": key.get("donor_type"), "count": 0, "amount": 0,
            })
            d["count"] += row["count"]
            d["amount"] += row["amount"]

        return {
            **overall,
            "seva_type_breakdown": sorted(seva.values(), key=lambda s: s["amount"], reverse=True),
            "donor_type_breakdown": sorted(donor.values(), key=lambda d: str(d["donor_type"])),
        }

    # -------------------------------------------------------------------------
    # Admin Edits
    # -------------------------------------------------------------------------

    @staticmethod
    def update_notes(donation_id: str, notes: str) -> dict[str, Any]:
        donation = update_document(Collections.DONATIONS, donation_id, {"notes": notes}, RESOURCE)
        logger.info(f"Updated notes on donation {donation_id}")
        return donation

    @staticmethod
    def update_status(donation_id: str, status: PaymentStatus) -> dict[str, Any]:
        """Set payment_status (e.g. refunded) manually."""
        updated = MongoClient.collection(Collections.DONATIONS).find_one_and_update(
            {"_id": require_object_id(donation_id)},
            {"$set": {"payment_status": status.value, "updated_at": utcnow()}},
            return_document=ReturnDocument.AFTER,
        )
        if updated is None:
            raise ResourceNotFoundError(RESOURCE, donation_id)
        logger.info(f"Donation {donation_id} status -> {status.value}")
        return serialize_document(updated)

    @staticmethod
    def delete_donation(donation_id: str) -> None:
        delete_document(Collections.DONATIONS, donation_id, RESOURCE)
        logger.info(f"Deleted donation: {donation_id}")

    # -------------------------------------------------------------------------
    # Receipts
    # -------------------------------------------------------------------------

    @staticmethod
    def send_receipt(donation: dict[str, Any]) -> MailResult:
        """
        Email the receipt (HTML body + PDF attachment).

        A PDF failure still sends the HTML body; delivery problems come back
        as an unsuccessful MailResult.
        """
        html = render_receipt_html(donation)
        attachments = []
        try:
            attachments.append(Attachment(receipt_filename(donation), render_receipt_pdf(donation)))
        except ReceiptError as e:
            logger.error(f"PDF receipt failed for donation {donation.get('id')}: {e.message}")

        subject = f"Donation Receipt {generate_receipt_number(donation)} - Hare Krishna Movement"
        result = send_email([donation.get("donor_email")], subject, html, attachments=attachments)
        if result.success:
            logger.info(f"Receipt emailed for donation {donation.get('id')}")
        return result

    @staticmethod
    def send_receipt_for(donation_id: str) -> MailResult:
        """
        Re-send the receipt of a stored donation.

        Raises:
            RequestValidationFailed: donation has no email address
        """
        donation = DonationService.get_donation(donation_id)
        if not donation.get("donor_email"):
            raise RequestValidationFailed("No email address found for this donation")
        return DonationService.send_receipt(donation)
