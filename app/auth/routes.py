# =============================================================================
# app/auth/routes.py - Authentication Routes
# =============================================================================
# Admin account endpoints:
# - POST /api/users/register
# - POST /api/users/login  -> bearer token for admin endpoints
# - GET  /api/users/me
# - GET  /api/users/verify
# =============================================================================

import logging

from fastapi import APIRouter, Depends, status

from app.auth.dependencies import get_current_user
from app.auth.models import AuthUser, TokenResponse, UserLogin, UserRegister, UserResponse
from app.auth.security import create_access_token
from app.config import settings
from core.services.user_service import UserService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["Auth"])


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register(payload: UserRegister) -> UserResponse:
    """
    Create an admin user.

    Raises:
        409: If the email is already registered
    """
    user = UserService.register(payload)
    return UserResponse(**user)


@router.post("/login", response_model=TokenResponse)
async def login(payload: UserLogin) -> TokenResponse:
    """
    Exchange email and password for an access token.

    Raises:
        401: If the credentials are wrong
    """
    user = UserService.authenticate(payload)
    token = create_access_token(user["id"], email=user["email"], role=user.get("role"))
    logger.info(f"User logged in: {user['id']}")
    return TokenResponse(
        access_token=token,
        expires_in=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        user=UserResponse(**user),
    )


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(
    user: AuthUser = Depends(get_current_user)
) -> UserResponse:
    """
    Get the current authenticated user's profile.

    Raises:
        401: If not authenticated
        404: If the account was deleted after the token was issued
    """
    return UserResponse(**UserService.get_user(user.id))


@router.get("/verify")
async def verify_token(
    user: AuthUser = Depends(get_current_user)
) -> dict:
    """
    Verify that the current token is valid.

    Useful for checking if a stored token is still valid.
    """
    return {
        "valid": True,
        "user_id": user.id,
        "email": user.email,
        "role": user.role.value,
    }
