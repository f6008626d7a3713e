# =============================================================================
# app/routers/video_gallery.py - Video Gallery Endpoints
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from app.auth import AuthUser, get_current_user
from core.models.gallery import GalleryCategory, GalleryStatus, VideoCreate, VideoUpdate
from core.services.gallery_service import VideoService
from lib.utils import build_pagination

router = APIRouter()

Page = Annotated[int, Query(ge=1, description="Page number")]
Limit = Annotated[int, Query(ge=1, le=100, description="Items per page")]


@router.get("")
async def list_videos(
    page: Page = 1,
    limit: Limit = 12,
    category: Annotated[GalleryCategory | None, Query(description="Filter by category")] = None,
    featured: Annotated[bool | None, Query(description="Only featured / non-featured")] = None,
    video_status: Annotated[GalleryStatus | None, Query(alias="status", description="Filter by status")] = None,
):
    """List videos, featured first then newest."""
    videos, total = VideoService.list_items(
        page=page, limit=limit, category=category, featured=featured, status=video_status
    )
    return {"success": True, "data": videos, "pagination": build_pagination(page, limit, total)}


@router.get("/featured")
async def featured_videos():
    return {"success": True, "data": VideoService.list_featured()}


@router.get("/stats")
async def video_stats():
    """Total, featured, total views and category count of active videos."""
    return {"success": True, "data": VideoService.get_stats()}


@router.get("/category/{category}")
async def videos_by_category(category: GalleryCategory, page: Page = 1, limit: Limit = 12):
    videos, total = VideoService.list_by_category(category, page=page, limit=limit)
    return {"success": True, "data": videos, "pagination": build_pagination(page, limit, total)}


@router.get("/{video_id}")
async def get_video(video_id: str):
    """Get a video; each call counts as a view."""
    return {"success": True, "data": VideoService.view_item(video_id)}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_video(payload: VideoCreate, user: AuthUser = Depends(get_current_user)):
    video = VideoService.create_video(payload)
    return {"success": True, "message": "Video created successfully", "data": video}


@router.put("/{video_id}")
async def update_video(
    video_id: str,
    payload: VideoUpdate,
    user: AuthUser = Depends(get_current_user),
):
    video = VideoService.update_video(video_id, payload)
    return {"success": True, "message": "Video updated successfully", "data": video}


@router.delete("/{video_id}")
async def delete_video(video_id: str, user: AuthUser = Depends(get_current_user)):
    VideoService.delete_video(video_id)
    return {"success": True, "message": "Video deleted successfully"}
