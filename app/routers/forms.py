# =============================================================================
# app/routers/forms.py - Dynamic Form Endpoints
# =============================================================================
# Public:
#   GET  /page/{page}     -> active form for a site page
#   POST /{id}/submit     -> validate + store a submission
#   POST /{id}/validate   -> dry-run validation
#
# Admin (bearer token): form CRUD, submissions, email templates.
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, status

from app.auth import AuthUser, get_current_user
from core.models.form import (
    EmailTemplateCreate,
    FormCreate,
    FormSubmissionRequest,
    FormUpdate,
    FormValidationResult,
)
from core.services.form_service import FormService
from lib.utils import build_pagination

router = APIRouter()

Page = Annotated[int, Query(ge=1, description="Page number")]
Limit = Annotated[int, Query(ge=1, le=100, description="Items per page")]


# =============================================================================
# Public
# =============================================================================

@router.get("/page/{page}")
async def get_form_for_page(page: str):
    """
    Get the active form shown on a site page.

    Raises:
        404: If the page has no active form
    """
    return {"success": True, "data": FormService.get_form_for_page(page)}


@router.post("/{form_id}/submit", status_code=status.HTTP_201_CREATED)
async def submit_form(form_id: str, payload: FormSubmissionRequest, request: Request):
    """
    Submit values for a form.

    Only values of fields visible under the submitted answers are stored.

    Raises:
        400: If validation fails (`errors` maps field name to message)
        404: If the form is missing or inactive
    """
    submission = FormService.submit(
        form_id,
        payload.data,
        ip_address=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent"),
    )
    return {"success": True, "message": "Form submitted successfully", "data": submission}


@router.post("/{form_id}/validate", response_model=FormValidationResult)
async def validate_form(form_id: str, payload: FormSubmissionRequest) -> FormValidationResult:
    """Validate values without storing them."""
    return FormService.validate(form_id, payload.data)


# =============================================================================
# Email Templates
# =============================================================================

@router.get("/email-templates")
async def list_email_templates(user: AuthUser = Depends(get_current_user)):
    return {"success": True, "data": FormService.list_email_templates()}


@router.post("/email-templates", status_code=status.HTTP_201_CREATED)
async def create_email_template(
    payload: EmailTemplateCreate,
    user: AuthUser = Depends(get_current_user),
):
    """Create a notification template; `{{field}}` placeholders are filled from submissions."""
    template = FormService.create_email_template(payload, created_by=user.id)
    return {"success": True, "message": "Email template created successfully", "data": template}


# =============================================================================
# Submissions
# =============================================================================

@router.get("/submissions/{submission_id}")
async def get_submission(submission_id: str, user: AuthUser = Depends(get_current_user)):
    return {"success": True, "data": FormService.get_submission(submission_id)}


@router.delete("/submissions/{submission_id}")
async def delete_submission(submission_id: str, user: AuthUser = Depends(get_current_user)):
    FormService.delete_submission(submission_id)
    return {"success": True, "message": "Submission deleted successfully"}


@router.get("/{form_id}/submissions")
async def list_submissions(
    form_id: str,
    user: AuthUser = Depends(get_current_user),
    page: Page = 1,
    limit: Limit = 20,
):
    submissions, total = FormService.list_submissions(form_id, page=page, limit=limit)
    return {"success": True, "data": submissions, "pagination": build_pagination(page, limit, total)}


# =============================================================================
# Form Definitions
# =============================================================================

@router.get("")
async def list_forms(
    user: AuthUser = Depends(get_current_user),
    page: Page = 1,
    limit: Limit = 20,
):
    """List forms with their submission counts."""
    forms, total = FormService.list_forms(page=page, limit=limit)
    return {"success": True, "data": forms, "pagination": build_pagination(page, limit, total)}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_form(payload: FormCreate, user: AuthUser = Depends(get_current_user)):
    """
    Create a form definition.

    Raises:
        400: If field names repeat or a conditional references an unknown field
    """
    form = FormService.create_form(payload, created_by=user.id)
    return {"success": True, "message": "Form created successfully", "data": form}


@router.get("/{form_id}")
async def get_form(form_id: str):
    return {"success": True, "data": FormService.get_form(form_id)}


@router.put("/{form_id}")
async def update_form(
    form_id: str,
    payload: FormUpdate,
    user: AuthUser = Depends(get_current_user),
):
    form = FormService.update_form(form_id, payload, updated_by=user.id)
    return {"success": True, "message": "Form updated successfully", "data": form}


@router.delete("/{form_id}")
async def delete_form(form_id: str, user: AuthUser = Depends(get_current_user)):
    """Delete a form together with its submissions."""
    removed = FormService.delete_form(form_id)
    return {
        "success": True,
        "message": "Form deleted successfully",
        "deleted_submissions": removed,
    }
