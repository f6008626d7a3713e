# =============================================================================
# app/routers/uploads.py - Generic Image Upload
# =============================================================================
# Used by the admin UI for campaign images: upload first, then send the
# returned URL in the campaign body.
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Depends, File, UploadFile, status

from app.auth import AuthUser, get_current_user
from app.dependencies import store_image

router = APIRouter()

IMAGE_SUBDIR = "images"


@router.post("/image", status_code=status.HTTP_201_CREATED)
async def upload_image(
    file: Annotated[UploadFile, File(description="Image file")],
    user: AuthUser = Depends(get_current_user),
):
    """
    Store an image and return its public URL.

    Raises:
        400: If the file is not an image
        413: If the file is too large
    """
    url = await store_image(file, IMAGE_SUBDIR, "image")
    return {"success": True, "url": url, "filename": url.rsplit("/", 1)[-1]}
