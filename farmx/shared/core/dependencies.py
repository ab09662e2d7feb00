"""
Common FastAPI dependencies for the FarmX application.
Provides the authenticated caller extracted by AuthenticationMiddleware.
"""

import logging
from typing import Any, Dict, Optional

from fastapi import Request

from .exceptions import AuthenticationError

logger = logging.getLogger(__name__)


class CurrentUser:
    """User information for the authenticated caller."""

    def __init__(
        self,
        user_id: str,
        email: Optional[str] = None,
        username: Optional[str] = None,
        role: str = "user",
        is_active: bool = True,
        token_payload: Optional[Dict[str, Any]] = None
    ):
        self.user_id = user_id
        self.email = email
        self.username = username
        self.role = role
        self.is_active = is_active
        self.token_payload = token_payload or {}

    def has_role(self, role: str) -> bool:
        """Check if user has specific role."""
        return self.role == role

    def is_admin(self) -> bool:
        """Check if user has admin privileges."""
        return self.has_role("admin")

    def to_dict(self) -> Dict[str, Any]:
        """Convert user info to dictionary."""
        return {
            "user_id": self.user_id,
            "email": self.email,
            "username": self.username,
            "role": self.role,
            "is_active": self.is_active,
        }


async def get_current_user(request: Request) -> CurrentUser:
    """
    Get current authenticated user from request state.
    This dependency assumes AuthenticationMiddleware has already validated the token.

    The role here is the token's claim; handlers that make privilege decisions
    should use get_current_active_user, which reloads the user from the store.

    Raises:
        AuthenticationError: If user is not authenticated
    """
    user_id = getattr(request.state, "user_id", None)
    if not user_id:
        logger.warning("User ID not found in request state")
        raise AuthenticationError("User not authenticated")

    token_payload = getattr(request.state, "token_payload", {}) or {}
    return CurrentUser(
        user_id=user_id,
        email=token_payload.get("email"),
        role=token_payload.get("role", "user"),
        token_payload=token_payload,
    )
