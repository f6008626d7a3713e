# =============================================================================
# app/auth/models.py - Authentication Models
# =============================================================================
# Pydantic models for admin users and their tokens.
# =============================================================================

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


class UserRole(str, Enum):
    ADMIN = "admin"
    EDITOR = "editor"


class AuthUser(BaseModel):
    """
    Authenticated user extracted from the access token.

    This is the minimal user info available from the token itself,
    without querying the database.
    """
    model_config = ConfigDict(frozen=True)

    id: str
    email: Optional[str] = None
    role: UserRole = UserRole.ADMIN


class UserRegister(BaseModel):
    """Request body for creating an admin user."""
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)
    full_name: str = Field(..., min_length=1, max_length=200)
    role: UserRole = UserRole.ADMIN

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.lower()


class UserLogin(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.lower()


class UserResponse(BaseModel):
    """User profile returned by the API (never includes the password hash)."""
    id: str
    email: str
    full_name: Optional[str] = None
    role: UserRole = UserRole.ADMIN
    created_at: Optional[datetime] = None


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int = Field(..., description="Token lifetime in seconds")
    user: UserResponse


class TokenPayload(BaseModel):
    """Decoded access token claims."""
    sub: str  # User ID
    email: Optional[str] = None
    role: Optional[str] = None
    exp: int  # Expiration timestamp
    iat: int  # Issued at timestamp
