# =============================================================================
# app/routers/photo_gallery.py - Photo Gallery Endpoints
# =============================================================================
# Photos are created and updated with multipart forms: metadata fields plus
# an `image` file (image/* only). Files are served from /uploads/photos.
# =============================================================================

from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status

from app.auth import AuthUser, get_current_user
from app.dependencies import build_form_model, store_image
from app.exceptions import MissingFileError
from core.models.gallery import GalleryCategory, GalleryStatus, PhotoMetadata, PhotoMetadataUpdate
from core.services.gallery_service import PHOTO_SUBDIR, PhotoService
from core.services.storage_service import StorageService
from lib.utils import build_pagination

router = APIRouter()

Page = Annotated[int, Query(ge=1, description="Page number")]
Limit = Annotated[int, Query(ge=1, le=100, description="Items per page")]


@router.get("")
async def list_photos(
    page: Page = 1,
    limit: Limit = 12,
    category: Annotated[GalleryCategory | None, Query(description="Filter by category")] = None,
    featured: Annotated[bool | None, Query(description="Only featured / non-featured")] = None,
    photo_status: Annotated[GalleryStatus | None, Query(alias="status", description="Filter by status")] = None,
):
    """List photos, featured first then newest."""
    photos, total = PhotoService.list_items(
        page=page, limit=limit, category=category, featured=featured, status=photo_status
    )
    return {"success": True, "data": photos, "pagination": build_pagination(page, limit, total)}


@router.get("/featured")
async def featured_photos():
    return {"success": True, "data": PhotoService.list_featured()}


@router.get("/stats")
async def photo_stats():
    return {"success": True, "data": PhotoService.get_stats()}


@router.get("/category/{category}")
async def photos_by_category(category: GalleryCategory, page: Page = 1, limit: Limit = 12):
    photos, total = PhotoService.list_by_category(category, page=page, limit=limit)
    return {"success": True, "data": photos, "pagination": build_pagination(page, limit, total)}


@router.get("/{photo_id}")
async def get_photo(photo_id: str):
    """Get a photo; each call counts as a view."""
    return {"success": True, "data": PhotoService.view_item(photo_id)}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_photo(
    user: AuthUser = Depends(get_current_user),
    image: Annotated[UploadFile | None, File(description="Image file")] = None,
    image_title: Annotated[str | None, Form()] = None,
    description: Annotated[str | None, Form()] = None,
    category: Annotated[str | None, Form()] = None,
    publish_date: Annotated[datetime | None, Form()] = None,
    featured: Annotated[bool | None, Form()] = None,
    photo_status: Annotated[str | None, Form(alias="status")] = None,
):
    """
    Upload a photo with its metadata.

    Raises:
        400: If the image is missing or not an image, or metadata is invalid
        413: If the image is too large
    """
    if image is None:
        raise MissingFileError("image", "Image")

    meta = build_form_model(
        PhotoMetadata,
        image_title=image_title,
        description=description,
        category=category,
        publish_date=publish_date,
        featured=featured,
        status=photo_status,
    )
    image_url = await store_image(image, PHOTO_SUBDIR, "photo")
    try:
        photo = PhotoService.create_photo(meta, image_url)
    except Exception:
        StorageService.delete(image_url)
        raise
    return {"success": True, "message": "Photo uploaded successfully", "data": photo}


@router.put("/{photo_id}")
async def update_photo(
    photo_id: str,
    user: AuthUser = Depends(get_current_user),
    image: Annotated[UploadFile | None, File(description="Replacement image")] = None,
    image_title: Annotated[str | None, Form()] = None,
    description: Annotated[str | None, Form()] = None,
    category: Annotated[str | None, Form()] = None,
    publish_date: Annotated[datetime | None, Form()] = None,
    featured: Annotated[bool | None, Form()] = None,
    photo_status: Annotated[str | None, Form(alias="status")] = None,
):
    """Update metadata and optionally replace the image file."""
    meta = build_form_model(
        PhotoMetadataUpdate,
        image_title=image_title,
        description=description,
        category=category,
        publish_date=publish_date,
        featured=featured,
        status=photo_status,
    )
    PhotoService.get_item(photo_id)

    new_url = await store_image(image, PHOTO_SUBDIR, "photo") if image is not None else None
    try:
        photo = PhotoService.update_photo(photo_id, meta, new_image_url=new_url)
    except Exception:
        StorageService.delete(new_url)
        raise
    return {"success": True, "message": "Photo updated successfully", "data": photo}


@router.delete("/{photo_id}")
async def delete_photo(photo_id: str, user: AuthUser = Depends(get_current_user)):
    PhotoService.delete_photo(photo_id)
    return {"success": True, "message": "Photo deleted successfully"}
