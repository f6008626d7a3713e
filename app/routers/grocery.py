# =============================================================================
# app/routers/grocery.py - Grocery Kit Endpoints
# =============================================================================
# Items:      catalogue of grocery packs (admin-managed)
# Selections: short-lived carts created by the donation page
# Donations:  completed grocery donations with computed totals
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from app.auth import AuthUser, get_current_user, get_current_user_optional
from core.models.grocery import (
    GroceryDonationCreate,
    GroceryDonationStatusUpdate,
    GroceryItemCreate,
    GroceryItemUpdate,
    GroceryPaymentStatus,
    GrocerySelectionCreate,
)
from core.services.grocery_service import GroceryService
from lib.utils import build_pagination

router = APIRouter()


# =============================================================================
# Items
# =============================================================================

@router.get("/items")
async def list_items(
    user: AuthUser | None = Depends(get_current_user_optional),
    include_inactive: Annotated[bool, Query(description="Include disabled items (admins only)")] = False,
):
    """Active catalogue items in display order."""
    items = GroceryService.list_items(include_inactive=include_inactive and user is not None)
    return {"success": True, "data": items}


@router.get("/items/{item_id}")
async def get_item(item_id: str):
    return {"success": True, "data": GroceryService.get_item(item_id)}


@router.post("/items", status_code=status.HTTP_201_CREATED)
async def create_item(payload: GroceryItemCreate, user: AuthUser = Depends(get_current_user)):
    item = GroceryService.create_item(payload)
    return {"success": True, "message": "Grocery item created successfully", "data": item}


@router.put("/items/{item_id}")
async def update_item(
    item_id: str,
    payload: GroceryItemUpdate,
    user: AuthUser = Depends(get_current_user),
):
    item = GroceryService.update_item(item_id, payload)
    return {"success": True, "message": "Grocery item updated successfully", "data": item}


@router.delete("/items/{item_id}")
async def delete_item(item_id: str, user: AuthUser = Depends(get_current_user)):
    GroceryService.delete_item(item_id)
    return {"success": True, "message": "Grocery item deleted successfully"}


# =============================================================================
# Selections
# =============================================================================

@router.post("/selections", status_code=status.HTTP_201_CREATED)
async def create_selection(payload: GrocerySelectionCreate):
    """Save a cart with its totals; it expires after an hour."""
    selection = GroceryService.create_selection(payload)
    return {"success": True, "data": selection}


@router.get("/selections/{selection_id}")
async def get_selection(selection_id: str):
    """
    Fetch a saved cart.

    Raises:
        404: If the selection is unknown or has expired
    """
    return {"success": True, "data": GroceryService.get_selection(selection_id)}


# =============================================================================
# Donations
# =============================================================================

@router.post("/donate", status_code=status.HTTP_201_CREATED)
async def create_donation(payload: GroceryDonationCreate):
    donation = GroceryService.create_donation(payload)
    return {"success": True, "message": "Grocery donation recorded successfully", "data": donation}


@router.get("/donations")
async def list_donations(
    user: AuthUser = Depends(get_current_user),
    page: Annotated[int, Query(ge=1, description="Page number")] = 1,
    limit: Annotated[int, Query(ge=1, le=100, description="Items per page")] = 10,
    payment_status: Annotated[GroceryPaymentStatus | None, Query(description="Filter by payment status")] = None,
):
    donations, total = GroceryService.list_donations(page=page, limit=limit, payment_status=payment_status)
    return {"success": True, "data": donations, "pagination": build_pagination(page, limit, total)}


@router.get("/donations/{donation_id}")
async def get_donation(donation_id: str, user: AuthUser = Depends(get_current_user)):
    return {"success": True, "data": GroceryService.get_donation(donation_id)}


@router.put("/donations/{donation_id}/status")
async def update_donation_status(
    donation_id: str,
    payload: GroceryDonationStatusUpdate,
    user: AuthUser = Depends(get_current_user),
):
    """Record the payment outcome of a grocery donation."""
    donation = GroceryService.update_donation_status(donation_id, payload)
    return {"success": True, "message": "Payment status updated successfully", "data": donation}
