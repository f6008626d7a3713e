# =============================================================================
# core/models/campaign.py - Campaign Schemas
# =============================================================================
# A campaign is a fundraising goal shown on the site with a progress bar.
# - CampaignCreate / CampaignUpdate: admin input
# - CampaignDonateRequest: public pledge that bumps raised_amount/supporters
#
# Slugs are unique, lowercase and trimmed; when omitted they are derived from
# the title by the service layer.
# =============================================================================

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from lib.utils import ensure_aware, slugify, utcnow


class DonationOption(BaseModel):
    """A suggested donation amount shown on the campaign page."""
    amount: float = Field(..., gt=0)
    description: str = ""


DEFAULT_DONATION_OPTIONS = [
    DonationOption(amount=100, description="Small contribution"),
    DonationOption(amount=500, description="Medium contribution"),
    DonationOption(amount=1000, description="Large contribution"),
]


def _clean_slug(v: str | None) -> str | None:
    if v is None:
        return v
    slug = slugify(v)
    if not slug:
        raise ValueError("Slug must contain at least one letter or digit")
    return slug


class CampaignCreate(BaseModel):
    """
    Schema for creating a campaign.

    Example:
        {
            "title": "Build a School",
            "image": "/uploads/campaigns/campaign-1718000000000-123456789.jpg",
            "goal_amount": 500000,
            "deadline": "2027-03-31T00:00:00Z"
        }
    """

    slug: str | None = Field(
        default=None,
        max_length=200,
        description="URL slug; derived from the title when omitted"
    )
    title: str = Field(..., min_length=1, max_length=200)
    description: str | None = None
    category: str = Field(default="General")
    image: str = Field(..., min_length=1, description="Public image URL")
    goal_amount: float = Field(..., gt=0)
    raised_amount: float = Field(default=0, ge=0)
    supporters: int = Field(default=0, ge=0)
    deadline: datetime
    donation_options: list[DonationOption] = Field(
        default_factory=lambda: [o.model_copy() for o in DEFAULT_DONATION_OPTIONS]
    )
    featured: bool = False

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Title cannot be blank")
        return v

    @field_validator("slug")
    @classmethod
    def clean_slug(cls, v: str | None) -> str | None:
        return _clean_slug(v)

    @field_validator("deadline")
    @classmethod
    def deadline_in_future(cls, v: datetime) -> datetime:
        v = ensure_aware(v)
        if v <= utcnow():
            raise ValueError("Deadline must be a future date.")
        return v


class CampaignUpdate(BaseModel):
    """Partial update; omitted fields are left unchanged."""

    slug: str | None = Field(default=None, max_length=200)
    title: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = None
    category: str | None = None
    image: str | None = Field(default=None, min_length=1)
    goal_amount: float | None = Field(default=None, gt=0)
    raised_amount: float | None = Field(default=None, ge=0)
    supporters: int | None = Field(default=None, ge=0)
    deadline: datetime | None = None
    donation_options: list[DonationOption] | None = None
    featured: bool | None = None

    @field_validator("slug")
    @classmethod
    def clean_slug(cls, v: str | None) -> str | None:
        return _clean_slug(v)

    @field_validator("deadline")
    @classmethod
    def aware_deadline(cls, v: datetime | None) -> datetime | None:
        return ensure_aware(v) if v is not None else v


class CampaignDonateRequest(BaseModel):
    """Pledge against a campaign."""
    campaign_id: str = Field(..., min_length=1)
    amount: float = Field(..., gt=0)
