# =============================================================================
# app/auth/security.py - Password Hashing & Token Signing
# =============================================================================
# - Passwords: PBKDF2-HMAC-SHA256 with a per-user random salt
#   Stored as "pbkdf2_sha256$<iterations>$<salt hex>$<hash hex>"
# - Tokens: HS256 JWTs signed with SECRET_KEY
# =============================================================================

import hashlib
import hmac
import secrets
from datetime import timedelta
from typing import Any

from jose import jwt

from app.config import settings
from lib.utils import utcnow

ALGORITHM = "HS256"
PBKDF2_ITERATIONS = 260_000


def hash_password(password: str, iterations: int = PBKDF2_ITERATIONS) -> str:
    """Hash a password for storage."""
    salt = secrets.token_bytes(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, iterations)
    return f"pbkdf2_sha256${iterations}${salt.hex()}${digest.hex()}"


def verify_password(password: str, stored: str) -> bool:
    """Check a password against a stored hash. Malformed hashes never match."""
    try:
        scheme, iterations, salt_hex, digest_hex = stored.split("$")
        if scheme != "pbkdf2_sha256":
            return False
        digest = hashlib.pbkdf2_hmac(
            "sha256", password.encode("utf-8"), bytes.fromhex(salt_hex), int(iterations)
        )
    except ValueError:
        return False
    return hmac.compare_digest(digest.hex(), digest_hex)


def create_access_token(
    user_id: str,
    email: str | None = None,
    role: str | None = None,
    expires_minutes: int | None = None,
) -> str:
    """
    Sign an access token.

    Example:
        token = create_access_token("65a1...", email="admin@example.org", role="admin")
    """
    now = utcnow()
    lifetime = timedelta(minutes=expires_minutes or settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    claims: dict[str, Any] = {
        "sub": user_id,
        "email": email,
        "role": role,
        "iat": int(now.timestamp()),
        "exp": int((now + lifetime).timestamp()),
    }
    return jwt.encode(claims, settings.SECRET_KEY, algorithm=ALGORITHM)


def decode_access_token(token: str) -> dict[str, Any]:
    """
    Verify and decode an access token.

    Raises:
        jose.ExpiredSignatureError: token expired
        jose.JWTError: bad signature or malformed token
    """
    return jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGORITHM])
