# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# Helpers shared by the multipart endpoints: storing uploaded images and
# turning form fields into validated pydantic models.
# =============================================================================

from typing import Any

from fastapi import UploadFile
from pydantic import BaseModel, ValidationError

from app.exceptions import RequestValidationFailed
from core.services.storage_service import StorageService


async def store_image(file: UploadFile, subdir: str, prefix: str) -> str:
    """
    Validate an uploaded image and write it to disk.

    Returns:
        Public URL of the stored image

    Raises:
        InvalidFileTypeError: not image/*
        FileTooLargeError: over the upload limit
    """
    content = await file.read()
    StorageService.validate_image(file.filename, file.content_type, len(content))
    return StorageService.save(content, subdir, prefix, file.filename)


def build_form_model(model: type[BaseModel], **fields: Any) -> Any:
    """
    Build a pydantic model from multipart form fields.

    Unset (None) fields are dropped so model defaults apply.

    Raises:
        RequestValidationFailed: the fields do not satisfy the model
    """
    try:
        return model(**{k: v for k, v in fields.items() if v is not None})
    except ValidationError as e:
        errors = {".".join(str(p) for p in err["loc"]): err["msg"] for err in e.errors()}
        raise RequestValidationFailed("Invalid form fields", {"errors": errors})
