# =============================================================================
# app/routers/careers.py - Career Application Endpoints
# =============================================================================
# POST /apply is a public multipart form with a PDF `cv`; the rest is for
# admins reviewing applicants.
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status

from app.auth import AuthUser, get_current_user
from app.dependencies import build_form_model
from app.exceptions import MissingFileError
from core.models.career import ApplicantStatus, ApplicantStatusUpdate, CareerApplicationForm
from core.services.career_service import CareerService
from core.services.storage_service import StorageService
from lib.utils import build_pagination

router = APIRouter()


@router.post("/apply", status_code=status.HTTP_201_CREATED)
async def apply(
    cv: Annotated[UploadFile | None, File(description="CV as PDF")] = None,
    name: Annotated[str | None, Form()] = None,
    email: Annotated[str | None, Form()] = None,
    phone: Annotated[str | None, Form()] = None,
    position: Annotated[str | None, Form()] = None,
    dob: Annotated[str | None, Form()] = None,
    gender: Annotated[str | None, Form()] = None,
):
    """
    Submit a job application.

    Raises:
        400: If the CV is missing or not a PDF, or a field is invalid
        413: If the CV is too large
    """
    form = build_form_model(
        CareerApplicationForm,
        name=name,
        email=email,
        phone=phone,
        position=position,
        dob=dob,
        gender=gender,
    )
    if cv is None:
        raise MissingFileError("cv", "CV")

    content = await cv.read()
    StorageService.validate_pdf(cv.filename, cv.content_type, len(content))

    application = CareerService.apply(form, content, cv.filename)
    return {"success": True, "message": "Application submitted successfully", "data": application}


@router.get("/applicants")
async def list_applicants(
    user: AuthUser = Depends(get_current_user),
    page: Annotated[int, Query(ge=1, description="Page number")] = 1,
    limit: Annotated[int, Query(ge=1, le=100, description="Items per page")] = 20,
    position: Annotated[str | None, Query(description="Filter by position")] = None,
    applicant_status: Annotated[ApplicantStatus | None, Query(alias="status")] = None,
    search: Annotated[str | None, Query(description="Name or email")] = None,
):
    """List applications, newest first."""
    applicants, total = CareerService.list_applications(
        page=page, limit=limit, position=position, status=applicant_status, search=search
    )
    return {"success": True, "data": applicants, "pagination": build_pagination(page, limit, total)}


@router.get("/applicants/{application_id}")
async def get_applicant(application_id: str, user: AuthUser = Depends(get_current_user)):
    return {"success": True, "data": CareerService.get_application(application_id)}


@router.patch("/applicants/{application_id}/status")
async def update_applicant_status(
    application_id: str,
    payload: ApplicantStatusUpdate,
    user: AuthUser = Depends(get_current_user),
):
    application = CareerService.update_status(application_id, payload)
    return {"success": True, "message": "Status updated successfully", "data": application}


@router.delete("/applicants/{application_id}")
async def delete_applicant(application_id: str, user: AuthUser = Depends(get_current_user)):
    CareerService.delete_application(application_id)
    return {"success": True, "message": "Application deleted successfully"}
