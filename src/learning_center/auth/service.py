from __future__ import annotations

from typing import Any

from ..common.logging import get_logger
from ..common.validators import optional_str, require_body, require_non_empty
from ..core.exceptions import AuthenticationError
from ..users.model import IdentityClaims, User
from ..users.repository import UserRepository

logger = get_logger(__name__)


def parse_claims(payload: Any) -> IdentityClaims:
    """Map identity-provider claims (OIDC names or camelCase) to IdentityClaims."""
    body = require_body(payload)
    return IdentityClaims(
        sub=require_non_empty(body.get("sub") or body.get("id"), "sub", max_len=64),
        email=optional_str(body.get("email"), "email", max_len=255),
        first_name=optional_str(body.get("first_name", body.get("firstName")), "firstName", max_len=100),
        last_name=optional_str(body.get("last_name", body.get("lastName")), "lastName", max_len=100),
        profile_image_url=optional_str(
            body.get("profile_image_url", body.get("profileImageUrl")), "profileImageUrl", max_len=500
        ),
    )


class AuthService:
    """Use case: sign a person in from identity-provider claims."""

    def __init__(self, users: UserRepository):
        self._users = users

    def sign_in(self, claims: IdentityClaims) -> User:
        user = self._users.upsert(claims)
        logger.info("user_signed_in", user_id=user.id, role=user.role.value)
        return user

    def get_user(self, user_id: str) -> User:
        user = self._users.get_by_id(str(user_id))
        if not user:
            raise AuthenticationError("Unauthorized")
        return user
