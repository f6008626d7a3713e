# =============================================================================
# core/services/user_service.py - Admin User Management
# =============================================================================

import logging
from typing import Any

from pymongo.errors import DuplicateKeyError

from app.auth.models import UserLogin, UserRegister
from app.auth.security import hash_password, verify_password
from app.exceptions import AuthenticationError, DuplicateResourceError
from core.services.common import find_by_id, insert_document
from lib.mongo_client import Collections, MongoClient
from lib.utils import serialize_document

logger = logging.getLogger(__name__)


def _public(user: dict[str, Any]) -> dict[str, Any]:
    data = serialize_document(user)
    data.pop("password_hash", None)
    return data


class UserService:
    """Registration, login and lookup of admin users."""

    @staticmethod
    def register(payload: UserRegister) -> dict[str, Any]:
        """
        Create a user.

        Raises:
            DuplicateResourceError: email already registered
        """
        users = MongoClient.collection(Collections.USERS)
        if users.find_one({"email": payload.email}):
            raise DuplicateResourceError("User", "email", payload.email)

        try:
            user = insert_document(Collections.USERS, {
                "email": payload.email,
                "full_name": payload.full_name,
                "role": payload.role.value,
                "password_hash": hash_password(payload.password),
            })
        except DuplicateKeyError:
            raise DuplicateResourceError("User", "email", payload.email)

        logger.info(f"Registered user: {user['id']}")
        user.pop("password_hash", None)
        return user

    @staticmethod
    def authenticate(payload: UserLogin) -> dict[str, Any]:
        """
        Check credentials.

        Unknown email and wrong password produce the same error.

        Raises:
            AuthenticationError: bad credentials
        """
        user = MongoClient.collection(Collections.USERS).find_one({"email": payload.email})
        if user is None or not verify_password(payload.password, user.get("password_hash", "")):
            logger.warning(f"Failed login for {payload.email}")
            raise AuthenticationError()
        return _public(user)

    @staticmethod
    def get_user(user_id: str) -> dict[str, Any]:
        return _public(find_by_id(Collections.USERS, user_id, "User"))
