# =============================================================================
# app/routers/donor_wall.py - Donor Wall Endpoints
# =============================================================================
# Public views (/public, /tier/{tier}, /campaign/{campaign}) expose only
# display fields. Full entries, stats and edits require a bearer token.
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from app.auth import AuthUser, get_current_user
from core.models.donor_wall import DonorStatus, DonorTier, DonorWallCreate, DonorWallUpdate
from core.services.donor_wall_service import DonorWallService
from lib.utils import build_pagination

router = APIRouter()

Page = Annotated[int, Query(ge=1, description="Page number")]
Limit = Annotated[int, Query(ge=1, le=100, description="Items per page")]


# =============================================================================
# Public
# =============================================================================

@router.get("/public")
async def public_wall():
    """Visible donors grouped by tier, Platinum first."""
    return {"success": True, "data": DonorWallService.public_wall()}


@router.get("/tier/{tier}")
async def donors_by_tier(tier: DonorTier, page: Page = 1, limit: Limit = 20):
    donors, total = DonorWallService.list_by_tier(tier, page=page, limit=limit)
    return {"success": True, "data": donors, "pagination": build_pagination(page, limit, total)}


@router.get("/campaign/{campaign}")
async def donors_by_campaign(campaign: str, page: Page = 1, limit: Limit = 20):
    donors, total = DonorWallService.list_by_campaign(campaign, page=page, limit=limit)
    return {"success": True, "data": donors, "pagination": build_pagination(page, limit, total)}


# =============================================================================
# Admin
# =============================================================================

@router.get("")
async def list_donors(
    user: AuthUser = Depends(get_current_user),
    page: Page = 1,
    limit: Limit = 20,
    tier: Annotated[DonorTier | None, Query(description="Filter by tier")] = None,
    campaign: Annotated[str | None, Query(description="Filter by campaign")] = None,
    is_visible: Annotated[bool | None, Query(description="Filter by visibility")] = None,
    donor_status: Annotated[DonorStatus | None, Query(alias="status", description="Filter by status")] = None,
    search: Annotated[str | None, Query(description="Name or email")] = None,
    sort_by: Annotated[str, Query(description="donation_date, amount, full_name, tier or created_at")] = "donation_date",
    sort_order: Annotated[str, Query(pattern="^(asc|desc)$")] = "desc",
):
    """List donor wall entries with filters and sorting."""
    donors, total = DonorWallService.list_entries(
        page=page,
        limit=limit,
        tier=tier,
        campaign=campaign,
        is_visible=is_visible,
        status=donor_status,
        search=search,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    return {"success": True, "data": donors, "pagination": build_pagination(page, limit, total)}


@router.get("/stats")
async def donor_stats(user: AuthUser = Depends(get_current_user)):
    return {"success": True, "data": DonorWallService.get_stats()}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_donor(
    payload: DonorWallCreate,
    user: AuthUser = Depends(get_current_user),
):
    """
    Add a donor to the wall.

    The tier is assigned from the amount unless given explicitly.
    """
    donor = DonorWallService.create_entry(payload)
    return {"success": True, "message": "Donor added successfully", "data": donor}


@router.get("/{entry_id}")
async def get_donor(entry_id: str, user: AuthUser = Depends(get_current_user)):
    return {"success": True, "data": DonorWallService.get_entry(entry_id)}


@router.put("/{entry_id}/toggle-visibility")
async def toggle_visibility(entry_id: str, user: AuthUser = Depends(get_current_user)):
    donor = DonorWallService.toggle_visibility(entry_id)
    state = "visible" if donor["is_visible"] else "hidden"
    return {"success": True, "message": f"Donor is now {state}", "data": donor}


@router.put("/{entry_id}")
async def update_donor(
    entry_id: str,
    payload: DonorWallUpdate,
    user: AuthUser = Depends(get_current_user),
):
    donor = DonorWallService.update_entry(entry_id, payload)
    return {"success": True, "message": "Donor updated successfully", "data": donor}


@router.delete("/{entry_id}")
async def delete_donor(entry_id: str, user: AuthUser = Depends(get_current_user)):
    DonorWallService.delete_entry(entry_id)
    return {"success": True, "message": "Donor deleted successfully"}
