# =============================================================================
# core/models/donor_wall.py - Donor Wall Schemas
# =============================================================================
# The donor wall is the public listing of donors grouped by tier.
# Tier brackets (amount in rupees):
#   Platinum >= 100000, Gold >= 50000, Silver >= 25000, Bronze >= 10000,
#   everything else is a Supporter.
# =============================================================================

import random
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, EmailStr, Field, field_validator


class DonorTier(str, Enum):
    """Donor wall tiers, highest first."""
    PLATINUM = "Platinum"
    GOLD = "Gold"
    SILVER = "Silver"
    BRONZE = "Bronze"
    SUPPORTER = "Supporter"


class DonorStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    PENDING = "pending"


TIER_THRESHOLDS: list[tuple[float, DonorTier]] = [
    (100000, DonorTier.PLATINUM),
    (50000, DonorTier.GOLD),
    (25000, DonorTier.SILVER),
    (10000, DonorTier.BRONZE),
]

AVATAR_COLORS = [
    "#FF6B6B", "#4ECDC4", "#45B7D1", "#FFA07A", "#98D8C8",
    "#F7DC6F", "#BB8FCE", "#85C1E2", "#F8B739", "#52B788",
]

ANONYMOUS_NAME = "Anonymous Donor"


def assign_tier(amount: float) -> DonorTier:
    """Map a donation amount to its tier."""
    for threshold, tier in TIER_THRESHOLDS:
        if amount >= threshold:
            return tier
    return DonorTier.SUPPORTER


def avatar_initials(full_name: str) -> str:
    """
    First and last initials, or the first two letters of a single name.

    Example:
        avatar_initials("Asha Devi Rao")  # "AR"
        avatar_initials("madhav")         # "MA"
    """
    names = full_name.split()
    if not names:
        return ""
    if len(names) >= 2:
        return (names[0][0] + names[-1][0]).upper()
    return names[0][:2].upper()


def random_avatar_color() -> str:
    return random.choice(AVATAR_COLORS)


def display_name(full_name: str, is_anonymous: bool) -> str:
    return ANONYMOUS_NAME if is_anonymous else full_name


class DonorWallCreate(BaseModel):
    """
    Schema for adding a donor to the wall.

    `tier` is computed from `amount` when omitted.
    """

    full_name: str = Field(..., min_length=1, max_length=200)
    email: EmailStr
    phone: str = ""
    amount: float = Field(..., ge=0)
    donation_date: datetime | None = None
    campaign: str = "General Donation"
    tier: DonorTier | None = None
    is_visible: bool = True
    is_anonymous: bool = False
    show_amount: bool = True
    message: str = Field(default="", max_length=500)
    avatar_color: str | None = None
    avatar_initials: str | None = Field(default=None, max_length=3)
    status: DonorStatus = DonorStatus.ACTIVE
    address: str = ""
    pan_number: str = ""
    notes: str = ""

    @field_validator("full_name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Full name cannot be blank")
        return v

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.lower()


class DonorWallUpdate(BaseModel):
    """Partial update. Changing `amount` re-tiers the entry unless `tier` is given."""

    full_name: str | None = Field(default=None, min_length=1, max_length=200)
    email: EmailStr | None = None
    phone: str | None = None
    amount: float | None = Field(default=None, ge=0)
    donation_date: datetime | None = None
    campaign: str | None = None
    tier: DonorTier | None = None
    is_visible: bool | None = None
    is_anonymous: bool | None = None
    show_amount: bool | None = None
    message: str | None = Field(default=None, max_length=500)
    avatar_color: str | None = None
    avatar_initials: str | None = Field(default=None, max_length=3)
    status: DonorStatus | None = None
    address: str | None = None
    pan_number: str | None = None
    notes: str | None = None
