# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for request validation:
# - campaign.py: Fundraising campaigns and pledges
# - donation.py: Seva donation checkout and admin edits
# - donor_wall.py: Donor wall entries, tiers and avatars
# - gallery.py: Photo and video gallery metadata
# - grocery.py: Grocery items, selections and donations
# - form.py: Dynamic form definitions and submissions
# - career.py: Job applications
#
# These models define the "contract" between API and clients.
# =============================================================================

# -----------------------------------------------------------------------------
# Campaigns
# -----------------------------------------------------------------------------
from .campaign import (
    DEFAULT_DONATION_OPTIONS,
    CampaignCreate,
    CampaignDonateRequest,
    CampaignUpdate,
    DonationOption,
)

# -----------------------------------------------------------------------------
# Donations
# -----------------------------------------------------------------------------
from .donation import (
    DonationFormRequest,
    DonationNotesUpdate,
    DonationStatusUpdate,
    DonorType,
    PaymentStatus,
    PaymentVerificationRequest,
)

# -----------------------------------------------------------------------------
# Donor Wall
# -----------------------------------------------------------------------------
from .donor_wall import (
    DonorStatus,
    DonorTier,
    DonorWallCreate,
    DonorWallUpdate,
    assign_tier,
)

# -----------------------------------------------------------------------------
# Galleries
# -----------------------------------------------------------------------------
from .gallery import (
    GalleryCategory,
    GalleryStatus,
    PhotoMetadata,
    PhotoMetadataUpdate,
    VideoCreate,
    VideoUpdate,
)

# -----------------------------------------------------------------------------
# Grocery
# -----------------------------------------------------------------------------
from .grocery import (
    GroceryDonationCreate,
    GroceryDonationStatusUpdate,
    GroceryItemCreate,
    GroceryItemUpdate,
    GroceryLineItem,
    GroceryPaymentMethod,
    GroceryPaymentStatus,
    GrocerySelectionCreate,
)

# -----------------------------------------------------------------------------
# Dynamic Forms
# -----------------------------------------------------------------------------
from .form import (
    EmailSettings,
    EmailTemplateCreate,
    FieldConditional,
    FieldOption,
    FieldType,
    FieldValidation,
    FormCreate,
    FormField,
    FormSubmissionRequest,
    FormUpdate,
    FormValidationResult,
)

# -----------------------------------------------------------------------------
# Careers
# -----------------------------------------------------------------------------
from .career import ApplicantStatus, ApplicantStatusUpdate, CareerApplicationForm

__all__ = [
    # Campaigns
    "DEFAULT_DONATION_OPTIONS",
    "CampaignCreate",
    "CampaignDonateRequest",
    "CampaignUpdate",
    "DonationOption",
    # Donations
    "DonationFormRequest",
    "DonationNotesUpdate",
    "DonationStatusUpdate",
    "DonorType",
    "PaymentStatus",
    "PaymentVerificationRequest",
    # Donor Wall
    "DonorStatus",
    "DonorTier",
    "DonorWallCreate",
    "DonorWallUpdate",
    "assign_tier",
    # Galleries
    "GalleryCategory",
    "GalleryStatus",
    "PhotoMetadata",
    "PhotoMetadataUpdate",
    "VideoCreate",
    "VideoUpdate",
    # Grocery
    "GroceryDonationCreate",
    "GroceryDonationStatusUpdate",
    "GroceryItemCreate",
    "GroceryItemUpdate",
    "GroceryLineItem",
    "GroceryPaymentMethod",
    "GroceryPaymentStatus",
    "GrocerySelectionCreate",
    # Forms
    "EmailSettings",
    "EmailTemplateCreate",
    "FieldConditional",
    "FieldOption",
    "FieldType",
    "FieldValidation",
    "FormCreate",
    "FormField",
    "FormSubmissionRequest",
    "FormUpdate",
    "FormValidationResult",
    # Careers
    "ApplicantStatus",
    "ApplicantStatusUpdate",
    "CareerApplicationForm",
]
