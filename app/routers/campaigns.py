# =============================================================================
# app/routers/campaigns.py - Campaign Endpoints
# =============================================================================
# Public: list, detail (by slug or id), donation options, pledge.
# Admin (bearer token): create, update, delete.
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query, status

from app.auth import AuthUser, get_current_user
from core.models.campaign import CampaignCreate, CampaignDonateRequest, CampaignUpdate
from core.services.campaign_service import CampaignService
from lib.utils import build_pagination

router = APIRouter()


@router.get("")
async def list_campaigns(
    page: Annotated[int, Query(ge=1, description="Page number")] = 1,
    limit: Annotated[int, Query(ge=1, le=100, description="Items per page")] = 10,
    category: Annotated[str | None, Query(description="Filter by category")] = None,
    featured: Annotated[bool | None, Query(description="Only featured / non-featured")] = None,
    active: Annotated[bool, Query(description="Only campaigns whose deadline has not passed")] = False,
):
    """List campaigns, featured first then newest."""
    campaigns, total = CampaignService.list_campaigns(
        page=page, limit=limit, category=category, featured=featured, active_only=active
    )
    return {
        "success": True,
        "data": campaigns,
        "pagination": build_pagination(page, limit, total),
    }


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_campaign(
    payload: CampaignCreate,
    user: AuthUser = Depends(get_current_user),
):
    """
    Create a campaign.

    The slug is derived from the title when not supplied.

    Raises:
        409: If the slug is already used
    """
    campaign = CampaignService.create_campaign(payload)
    return {"success": True, "message": "Campaign created successfully", "data": campaign}


@router.post("/donate")
async def donate_to_campaign(payload: CampaignDonateRequest):
    """Add a pledge to a campaign's raised amount and supporter count."""
    campaign = CampaignService.donate(payload)
    return {"success": True, "message": "Donation recorded successfully", "data": campaign}


@router.get("/{slug_or_id}/donation-options")
async def get_donation_options(
    slug_or_id: Annotated[str, Path(description="Campaign slug or id")],
):
    return {"success": True, "data": CampaignService.get_donation_options(slug_or_id)}


@router.get("/{slug_or_id}")
async def get_campaign(
    slug_or_id: Annotated[str, Path(description="Campaign slug or id")],
):
    """Get one campaign with its progress percentage."""
    return {"success": True, "data": CampaignService.get_campaign(slug_or_id)}


@router.put("/{campaign_id}")
async def update_campaign(
    campaign_id: str,
    payload: CampaignUpdate,
    user: AuthUser = Depends(get_current_user),
):
    campaign = CampaignService.update_campaign(campaign_id, payload)
    return {"success": True, "message": "Campaign updated successfully", "data": campaign}


@router.delete("/{campaign_id}")
async def delete_campaign(
    campaign_id: str,
    user: AuthUser = Depends(get_current_user),
):
    CampaignService.delete_campaign(campaign_id)
    return {"success": True, "message": "Campaign deleted successfully"}
