# =============================================================================
# core/models/donation.py - Donation Schemas
# =============================================================================
# A donation is a seva (named donation category) paid through Razorpay.
#
# Lifecycle:
#   submit-form -> pending (order created)
#   verify-payment -> completed when the gateway reports "captured"
#   admin -> failed / refunded
#
# Donors may ask for Maha Prasadam delivery and an 80G tax receipt; both
# need a postal address, and 80G also needs a PAN.
# =============================================================================

from enum import Enum

from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator


class DonorType(str, Enum):
    """Citizenship of the donor (drives 80G eligibility)."""
    INDIAN = "Indian Citizen"
    FOREIGN = "Foreign Citizen"


class PaymentStatus(str, Enum):
    """
    Payment states.

    - pending: order created, payment not confirmed
    - completed: gateway captured the payment
    - failed: payment attempt failed
    - refunded: money returned to donor
    """
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    REFUNDED = "refunded"


# Order of fields in the donation form CSV export
EXPORT_FIELDS = [
    "seva_name",
    "seva_type",
    "seva_amount",
    "donor_name",
    "donor_email",
    "donor_phone",
    "donor_type",
    "description",
    "campaign",
    "is_anonymous",
    "wants_maha_prasadam",
    "wants_80g",
    "address",
    "house_apartment",
    "village",
    "district",
    "state",
    "pin_code",
    "landmark",
    "pan_number",
    "utm_source",
    "utm_medium",
    "utm_campaign",
    "utm_term",
    "utm_content",
]


class DonationFormRequest(BaseModel):
    """
    Donation form submitted by the site.

    Example:
        {
            "seva_name": "Annadaan",
            "seva_type": "food",
            "seva_amount": 1000,
            "donor_name": "Asha Rao",
            "donor_email": "asha@example.org",
            "donor_phone": "+919800000000",
            "donor_type": "Indian Citizen"
        }
    """

    # Seva
    seva_name: str = Field(..., min_length=1)
    seva_type: str = Field(..., min_length=1)
    seva_amount: float = Field(..., ge=1, description="Amount in rupees")

    # Donor
    donor_name: str = Field(..., min_length=1)
    donor_email: EmailStr
    donor_phone: str = Field(..., min_length=1)
    donor_type: DonorType

    description: str | None = None
    is_anonymous: bool = False
    campaign: str | None = None

    # Attribution
    utm_source: str | None = None
    utm_medium: str | None = None
    utm_campaign: str | None = None
    utm_term: str | None = None
    utm_content: str | None = None

    # Maha Prasadam / 80G
    wants_maha_prasadam: bool = False
    wants_80g: bool = False
    address: str | None = None
    house_apartment: str | None = None
    village: str | None = None
    district: str | None = None
    state: str | None = None
    pin_code: str | None = None
    landmark: str | None = None
    pan_number: str | None = None

    @field_validator("seva_name", "seva_type", "donor_name", "donor_phone")
    @classmethod
    def strip_required(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Field cannot be blank")
        return v

    @field_validator("donor_email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.strip().lower()

    @field_validator("pan_number")
    @classmethod
    def upper_pan(cls, v: str | None) -> str | None:
        return v.strip().upper() if v else v

    @model_validator(mode="after")
    def check_80g(self) -> "DonationFormRequest":
        if self.wants_80g and not self.pan_number:
            raise ValueError("PAN number is required for an 80G receipt")
        return self


class PaymentVerificationRequest(BaseModel):
    """Callback payload from the Razorpay checkout widget."""
    razorpay_order_id: str = Field(..., min_length=1)
    razorpay_payment_id: str = Field(..., min_length=1)
    razorpay_signature: str = Field(..., min_length=1)
    donation_id: str = Field(..., min_length=1)


class DonationNotesUpdate(BaseModel):
    """Admin notes on a donation."""
    notes: str = Field(default="", max_length=2000)


class DonationStatusUpdate(BaseModel):
    """Manual status change (e.g. marking a refund)."""
    payment_status: PaymentStatus
