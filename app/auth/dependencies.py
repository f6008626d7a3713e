# =============================================================================
# app/auth/dependencies.py - FastAPI Auth Dependencies
# =============================================================================
# Provides dependency injection for authentication.
# Admin endpoints require a Bearer token issued by POST /api/users/login.
#
# Usage:
#   from app.auth import get_current_user, AuthUser
#
#   @router.delete("/{id}")
#   async def delete(id: str, user: AuthUser = Depends(get_current_user)):
#       ...
# =============================================================================

import logging
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError

from app.auth.models import AuthUser, UserRole
from app.auth.security import decode_access_token

logger = logging.getLogger(__name__)

# HTTP Bearer token extractor
security = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> AuthUser:
    """
    Extract and validate the admin user from the access token.

    This dependency:
    1. Extracts the Bearer token from the Authorization header
    2. Verifies the HS256 signature and expiry
    3. Returns an AuthUser with the user's id, email and role

    Raises:
        HTTPException: 401 if the token is missing, invalid or expired
    """
    if credentials is None:
        raise _unauthorized("Not authorized, no token")

    try:
        payload = decode_access_token(credentials.credentials)
    except ExpiredSignatureError:
        logger.warning("Access token has expired")
        raise _unauthorized("Token has expired")
    except JWTError as e:
        logger.warning(f"Token validation failed: {e}")
        raise _unauthorized("Not authorized, token failed")

    user_id = payload.get("sub")
    if not user_id:
        logger.warning("Token missing 'sub' claim")
        raise _unauthorized("Invalid token: missing user ID")

    try:
        role = UserRole(payload.get("role") or UserRole.ADMIN.value)
    except ValueError:
        raise _unauthorized("Invalid token: unknown role")

    logger.debug(f"Authenticated user: {user_id}")
    return AuthUser(id=user_id, email=payload.get("email"), role=role)


async def get_current_user_optional(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> Optional[AuthUser]:
    """
    Optionally get the current user.

    Returns None when no token (or an invalid one) is sent, so public
    endpoints can widen their results for signed-in admins.
    """
    if credentials is None:
        return None

    try:
        return await get_current_user(credentials)
    except HTTPException:
        return None
