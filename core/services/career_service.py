# =============================================================================
# core/services/career_service.py - Career Application Logic
# =============================================================================

import logging
from typing import Any

import pymongo

from core.models.career import ApplicantStatus, ApplicantStatusUpdate, CareerApplicationForm
from core.services.common import delete_document, find_by_id, insert_document, paginate, update_document
from core.services.storage_service import StorageService
from lib.utils import search_regex, serialize_document
from lib.mongo_client import Collections

logger = logging.getLogger(__name__)

CV_SUBDIR = "cv"
RESOURCE = "Application"


class CareerService:
    """Service for job applications and their CVs."""

    @staticmethod
    def apply(form: CareerApplicationForm, cv_content: bytes, cv_filename: str | None) -> dict[str, Any]:
        """
        Store the CV and record the application.

        The CV must already be validated (StorageService.validate_pdf).
        """
        pdf_url = StorageService.save(cv_content, CV_SUBDIR, "cv", cv_filename)
        application = insert_document(Collections.CAREER_APPLICATIONS, {
            **form.model_dump(),
            "pdf_url": pdf_url,
            "status": ApplicantStatus.NEW.value,
        })
        logger.info(f"New application {application['id']} for {form.position}")
        return application

    @staticmethod
    def list_applications(
        page: int = 1,
        limit: int = 20,
        position: str | None = None,
        status: ApplicantStatus | None = None,
        search: str | None = None,
    ) -> tuple[list[dict[str, Any]], int]:
        """Applications newest first."""
        query: dict[str, Any] = {}
        if position:
            query["position"] = position
        if status:
            query["status"] = status.value
        if search:
            pattern = search_regex(search)
            query["$or"] = [{"name": pattern}, {"email": pattern}]
        return paginate(
            Collections.CAREER_APPLICATIONS, query, [("created_at", pymongo.DESCENDING)], page, limit
        )

    @staticmethod
    def get_application(application_id: str) -> dict[str, Any]:
        return serialize_document(find_by_id(Collections.CAREER_APPLICATIONS, application_id, RESOURCE))

    @staticmethod
    def update_status(application_id: str, payload: ApplicantStatusUpdate) -> dict[str, Any]:
        application = update_document(
            Collections.CAREER_APPLICATIONS, application_id, {"status": payload.status.value}, RESOURCE
        )
        logger.info(f"Application {application_id} status -> {payload.status.value}")
        return application

    @staticmethod
    def delete_application(application_id: str) -> None:
        deleted = delete_document(Collections.CAREER_APPLICATIONS, application_id, RESOURCE)
        StorageService.delete(deleted.get("pdf_url"))
        logger.info(f"Deleted application {application_id}")
