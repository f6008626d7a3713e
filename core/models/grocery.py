# =============================================================================
# core/models/grocery.py - Grocery Kit Schemas
# =============================================================================
# Donors build a kit from catalogue items (rice, dal, oil, ...):
# - GroceryItem*: the admin-managed catalogue
# - GroceryLineItem: one catalogue item with a quantity, as stored on
#   selections and donations (a snapshot, not a reference)
# - GrocerySelectionCreate: a cart kept for one hour between pages
# - GroceryDonationCreate: the submitted donation
#
# Totals: subtotal = sum(price * quantity), processing_fee = 2% rounded,
# total_amount = subtotal + processing_fee.
# =============================================================================

from enum import Enum

from pydantic import BaseModel, EmailStr, Field, field_validator

DEFAULT_ICON = "\U0001F6D2"


class GroceryPaymentStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


class GroceryPaymentMethod(str, Enum):
    ONLINE = "online"
    OFFLINE = "offline"
    OTHER = "other"


class GroceryItemCreate(BaseModel):
    """
    Catalogue item.

    Example:
        {"name": "Rice", "amount": "5 kg", "price": 350, "description": "Sona masoori"}
    """
    name: str = Field(..., min_length=1, max_length=100)
    amount: str = Field(..., min_length=1, description="Pack size shown to donors, e.g. '5 kg'")
    price: float = Field(..., ge=0)
    icon: str = DEFAULT_ICON
    description: str = Field(..., min_length=1)
    is_active: bool = True
    display_order: int = 0


class GroceryItemUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    amount: str | None = Field(default=None, min_length=1)
    price: float | None = Field(default=None, ge=0)
    icon: str | None = None
    description: str | None = Field(default=None, min_length=1)
    is_active: bool | None = None
    display_order: int | None = None


class GroceryLineItem(BaseModel):
    """A catalogue item with the chosen quantity."""
    name: str = Field(..., min_length=1)
    amount: str = Field(..., min_length=1)
    price: float = Field(..., ge=0)
    icon: str = DEFAULT_ICON
    description: str = ""
    quantity: int = Field(..., ge=1)


class GrocerySelectionCreate(BaseModel):
    """Cart contents; totals are always computed server-side."""
    items: list[GroceryLineItem] = Field(..., min_length=1)


class GroceryDonationCreate(BaseModel):
    """
    Grocery donation.

    Totals left out (or zero) are computed from the items.
    """
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    email: EmailStr
    phone: str = Field(..., min_length=1)
    message: str = ""
    items: list[GroceryLineItem] = Field(..., min_length=1)
    subtotal: float | None = Field(default=None, ge=0)
    processing_fee: float | None = Field(default=None, ge=0)
    total_amount: float | None = Field(default=None, ge=0)
    payment_status: GroceryPaymentStatus = GroceryPaymentStatus.PENDING
    payment_id: str | None = None
    payment_method: GroceryPaymentMethod = GroceryPaymentMethod.ONLINE

    @field_validator("first_name", "last_name", "phone")
    @classmethod
    def strip_required(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Field cannot be blank")
        return v

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.lower()


class GroceryDonationStatusUpdate(BaseModel):
    payment_status: GroceryPaymentStatus
    payment_id: str | None = None
