# =============================================================================
# core/models/career.py - Career Application Schemas
# =============================================================================
# Applications arrive as multipart forms with a PDF CV; the CV is stored on
# local disk and the application document keeps its public URL.
# =============================================================================

from enum import Enum

from pydantic import BaseModel, EmailStr, Field


class ApplicantStatus(str, Enum):
    """Review pipeline for an application."""
    NEW = "new"
    REVIEWED = "reviewed"
    SHORTLISTED = "shortlisted"
    REJECTED = "rejected"


class CareerApplicationForm(BaseModel):
    """Text fields of the application form."""
    name: str = Field(..., min_length=1, max_length=200)
    email: EmailStr
    phone: str = Field(..., min_length=1, max_length=30)
    position: str = Field(..., min_length=1, max_length=200)
    dob: str | None = Field(default=None, description="Date of birth as entered (YYYY-MM-DD)")
    gender: str | None = None


class ApplicantStatusUpdate(BaseModel):
    status: ApplicantStatus
