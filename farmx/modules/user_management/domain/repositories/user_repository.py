# 📄 File: farmx/modules/user_management/domain/repositories/user_repository.py
# 🧭 Purpose (Layman Explanation):
# Lists the things the app can do with stored users, like loading one
# or saving a new cart, without caring which database sits underneath.
# 🧪 Purpose (Technical Summary):
# Abstract repository interface for the User aggregate, including the
# optimistic, version-checked update used by the cart and checkout.
# 🔗 Dependencies:
# - abc (Abstract Base Classes)
# - User domain model
# 🔄 Connected Modules / Calls From:
# - Cart, checkout and subscription services
# - Presentation dependencies (current user loading)
# - Repository Implementation (concrete implementation)

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from farmx.modules.user_management.domain.models.user import User


class UserRepository(ABC):
    """
    Abstract repository interface for user data access operations.
    """

    @abstractmethod
    async def get_by_id(self, user_id: str) -> Optional[User]:
        """Get user by ID (fresh from the store, never a cached copy)."""
        pass

    @abstractmethod
    async def create(self, user: User) -> User:
        """Persist a new user."""
        pass

    @abstractmethod
    async def update_versioned(
        self,
        user_id: str,
        expected_version: int,
        changes: Dict[str, Any]
    ) -> User:
        """
        Apply changes only if the stored version still equals expected_version.

        Bumps the version on success.

        Raises:
            ConflictError: if another writer got there first
            NotFoundError: if the user does not exist
        """
        pass

    @abstractmethod
    async def set_subscription(self, user_id: str, subscription_id: str) -> None:
        """Link the user to their subscription (does not touch the cart version)."""
        pass
