# =============================================================================
# app/routers/donations.py - Seva Donation Endpoints
# =============================================================================
# Checkout flow (public):
#   POST /submit-form     -> pending donation + Razorpay order
#   POST /verify-payment  -> signature check, status update, receipt email
#
# Admin (bearer token): listing, stats, export, notes/status edits,
# receipts and deletion.
# =============================================================================

from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response, status
from fastapi.responses import HTMLResponse

from app.auth import AuthUser, get_current_user
from core.models.donation import (
    DonationFormRequest,
    DonationNotesUpdate,
    DonationStatusUpdate,
    PaymentStatus,
    PaymentVerificationRequest,
)
from core.services.donation_service import DonationService
from lib.exporter import donations_to_csv
from lib.receipts import receipt_filename, render_receipt_html, render_receipt_pdf
from lib.utils import build_pagination, utcnow

router = APIRouter()

StatusFilter = Annotated[PaymentStatus | None, Query(description="Filter by payment status")]
StartDate = Annotated[datetime | None, Query(description="Created on or after (ISO date)")]
EndDate = Annotated[datetime | None, Query(description="Created on or before (ISO date)")]
Search = Annotated[str | None, Query(description="Donor name, email or payment id")]


# =============================================================================
# Checkout
# =============================================================================

@router.post("/submit-form", status_code=status.HTTP_201_CREATED)
async def submit_donation_form(payload: DonationFormRequest):
    """
    Record a pending donation and create the Razorpay order for checkout.

    Raises:
        502: If the gateway rejected the order
        503: If the gateway is not configured
    """
    result = DonationService.submit_form(payload)
    return {"success": True, "message": "Donation form submitted successfully", **result}


@router.post("/verify-payment")
async def verify_payment(payload: PaymentVerificationRequest):
    """
    Verify the checkout signature and record the payment.

    A captured payment marks the donation completed and emails the receipt.

    Raises:
        400: If the signature does not match
        404: If the donation does not exist
    """
    result = DonationService.verify_payment(payload)
    return {"success": True, "message": "Payment verified successfully", **result}


@router.get("/order/{order_id}")
async def get_donation_by_order(order_id: str):
    return {"success": True, "data": DonationService.get_by_order_id(order_id)}


# =============================================================================
# Admin Listing & Reports
# =============================================================================

@router.get("")
async def list_donations(
    user: AuthUser = Depends(get_current_user),
    page: Annotated[int, Query(ge=1, description="Page number")] = 1,
    limit: Annotated[int, Query(ge=1, le=100, description="Items per page")] = 10,
    payment_status: StatusFilter = None,
    start_date: StartDate = None,
    end_date: EndDate = None,
    search: Search = None,
):
    """List donations, newest first."""
    donations, total = DonationService.list_donations(
        page=page,
        limit=limit,
        status=payment_status,
        start_date=start_date,
        end_date=end_date,
        search=search,
    )
    return {
        "success": True,
        "data": donations,
        "pagination": build_pagination(page, limit, total),
    }


@router.get("/stats")
async def donation_stats(
    user: AuthUser = Depends(get_current_user),
    start_date: StartDate = None,
    end_date: EndDate = None,
):
    """Totals, average, completed share and status/monthly breakdowns."""
    return {"success": True, "data": DonationService.get_stats(start_date, end_date)}


@router.get("/seva-stats")
async def seva_stats(
    user: AuthUser = Depends(get_current_user),
    start_date: StartDate = None,
    end_date: EndDate = None,
):
    return {"success": True, "data": DonationService.get_seva_stats(start_date, end_date)}


@router.get("/export")
async def export_donations(
    user: AuthUser = Depends(get_current_user),
    payment_status: StatusFilter = None,
    start_date: StartDate = None,
    end_date: EndDate = None,
    search: Search = None,
):
    """Download the filtered donations as CSV."""
    donations = DonationService.export_donations(
        status=payment_status, start_date=start_date, end_date=end_date, search=search
    )
    filename = f"donations-{utcnow().strftime('%Y%m%d')}.csv"
    return Response(
        content=donations_to_csv(donations),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


# =============================================================================
# Single Donation
# =============================================================================

@router.get("/{donation_id}")
async def get_donation(
    donation_id: str,
    user: AuthUser = Depends(get_current_user),
):
    return {"success": True, "data": DonationService.get_donation(donation_id)}


@router.patch("/{donation_id}/notes")
async def update_donation_notes(
    donation_id: str,
    payload: DonationNotesUpdate,
    user: AuthUser = Depends(get_current_user),
):
    donation = DonationService.update_notes(donation_id, payload.notes)
    return {"success": True, "message": "Notes updated successfully", "data": donation}


@router.patch("/{donation_id}/status")
async def update_donation_status(
    donation_id: str,
    payload: DonationStatusUpdate,
    user: AuthUser = Depends(get_current_user),
):
    donation = DonationService.update_status(donation_id, payload.payment_status)
    return {"success": True, "message": "Status updated successfully", "data": donation}


@router.delete("/{donation_id}")
async def delete_donation(
    donation_id: str,
    user: AuthUser = Depends(get_current_user),
):
    DonationService.delete_donation(donation_id)
    return {"success": True, "message": "Donation deleted successfully"}


# =============================================================================
# Receipts
# =============================================================================

@router.get("/{donation_id}/receipt")
async def download_receipt(
    donation_id: str,
    user: AuthUser = Depends(get_current_user),
):
    """Download the PDF receipt."""
    donation = DonationService.get_donation(donation_id)
    return Response(
        content=render_receipt_pdf(donation),
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{receipt_filename(donation)}"'},
    )


@router.get("/{donation_id}/receipt.html", response_class=HTMLResponse)
async def view_receipt(
    donation_id: str,
    user: AuthUser = Depends(get_current_user),
):
    """Printable HTML receipt."""
    return HTMLResponse(render_receipt_html(DonationService.get_donation(donation_id)))


@router.post("/{donation_id}/send-receipt")
async def send_receipt(
    donation_id: str,
    user: AuthUser = Depends(get_current_user),
):
    """
    Email the receipt to the donor again.

    Raises:
        400: If the donation has no email address
    """
    result = DonationService.send_receipt_for(donation_id)
    return {"success": result.success, "message": result.message}
