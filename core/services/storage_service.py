# =============================================================================
# core/services/storage_service.py - Local Disk File Storage
# =============================================================================
# Handles uploaded files (gallery images, campaign images, CVs).
# Files are written under settings.UPLOAD_DIR and served by the app at
# /uploads, so the public URL of "<UPLOAD_DIR>/photos/x.jpg" is
# "/uploads/photos/x.jpg".
# =============================================================================

import logging
import os
import random
import time
from pathlib import Path

from app.config import settings
from app.exceptions import FileTooLargeError, InvalidFileTypeError

logger = logging.getLogger(__name__)

PUBLIC_PREFIX = "/uploads"

# SVG is left out: it can carry script when served from /uploads
IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".webp"}
PDF_EXTENSIONS = {".pdf"}
ALLOWED_EXTENSIONS = IMAGE_EXTENSIONS | PDF_EXTENSIONS


class StorageService:
    """
    Service for local file storage.

    Handles validating, writing and deleting uploaded files.
    """

    @staticmethod
    def upload_root() -> Path:
        return Path(settings.UPLOAD_DIR)

    @staticmethod
    def ensure_dirs(*subdirs: str) -> None:
        """Create the upload root and any subdirectories."""
        root = StorageService.upload_root()
        root.mkdir(parents=True, exist_ok=True)
        for sub in subdirs:
            (root / sub).mkdir(parents=True, exist_ok=True)

    @staticmethod
    def extension(filename: str | None) -> str:
        return Path(filename or "").suffix.lower()

    @staticmethod
    def unique_filename(prefix: str, original_filename: str | None) -> str:
        """
        Build a collision-resistant filename.

        The extension is kept only when it is on the allow-list.

        Example:
            unique_filename("photo", "Diwali.JPG")
            # "photo-1718000000000-482913377.jpg"
        """
        ext = StorageService.extension(original_filename)
        if ext not in ALLOWED_EXTENSIONS:
            ext = ""
        stamp = int(time.time() * 1000)
        return f"{prefix}-{stamp}-{random.randint(0, 10**9 - 1)}{ext}"

    @staticmethod
    def validate_image(filename: str | None, content_type: str | None, size: int) -> None:
        """
        Accept only image/* uploads with an allowed extension within the
        size limit.

        Raises:
            InvalidFileTypeError: not an image
            FileTooLargeError: over MAX_UPLOAD_SIZE_MB
        """
        name = filename or "upload"
        if (
            not (content_type or "").startswith("image/")
            or StorageService.extension(name) not in IMAGE_EXTENSIONS
        ):
            raise InvalidFileTypeError(name, "image")
        StorageService._check_size(size)

    @staticmethod
    def validate_pdf(filename: str | None, content_type: str | None, size: int) -> None:
        """
        Accept only .pdf uploads within the size limit.

        Raises:
            InvalidFileTypeError: not a PDF
            FileTooLargeError: over MAX_UPLOAD_SIZE_MB
        """
        name = filename or "upload"
        if StorageService.extension(name) not in PDF_EXTENSIONS:
            raise InvalidFileTypeError(name, "PDF")
        StorageService._check_size(size)

    @staticmethod
    def _check_size(size: int) -> None:
        if size > settings.max_upload_size_bytes:
            raise FileTooLargeError(size / (1024 * 1024), settings.MAX_UPLOAD_SIZE_MB)

    @staticmethod
    def save(content: bytes, subdir: str, prefix: str, original_filename: str | None) -> str:
        """
        Write bytes to disk.

        Returns:
            Public URL of the stored file
        """
        StorageService.ensure_dirs(subdir)
        filename = StorageService.unique_filename(prefix, original_filename)
        path = StorageService.upload_root() / subdir / filename
        path.write_bytes(content)
        logger.info(f"Stored upload: {path} ({len(content)} bytes)")
        return f"{PUBLIC_PREFIX}/{subdir}/{filename}"

    @staticmethod
    def path_for_url(url: str) -> Path | None:
        """
        Map a public URL back to its path on disk.

        Returns None for URLs outside /uploads (external links) or paths
        that would escape the upload root.
        """
        if not url or not url.startswith(PUBLIC_PREFIX + "/"):
            return None
        relative = url[len(PUBLIC_PREFIX) + 1:]
        root = StorageService.upload_root().resolve()
        path = (root / relative).resolve()
        if os.path.commonpath([root, path]) != str(root):
            return None
        return path

    @staticmethod
    def delete(url: str | None) -> bool:
        """
        Delete the file behind a public URL.

        Returns:
            True when a file was removed
        """
        path = StorageService.path_for_url(url or "")
        if path is None or not path.is_file():
            return False
        path.unlink()
        logger.info(f"Deleted upload: {path}")
        return True
