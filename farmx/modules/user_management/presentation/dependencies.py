# 📄 File: farmx/modules/user_management/presentation/dependencies.py
# 🧭 Purpose (Layman Explanation):
# Makes sure the person calling the API is a real, active user of the farm app
# and looks up their current role (regular user, expert or admin).
# 🧪 Purpose (Technical Summary):
# FastAPI dependencies that turn the token identity set by AuthenticationMiddleware into
# a CurrentUser backed by the stored user record (role and active flag come from the store).
# 🔗 Dependencies:
# FastAPI, farmx.shared.core.dependencies, user repository
# 🔄 Connected Modules / Calls From:
# Cart, order, subscription and analytics endpoints

import logging

from fastapi import Depends

from farmx.modules.user_management.domain.repositories.user_repository import UserRepository
from farmx.shared.core.dependencies import CurrentUser, get_current_user
from farmx.shared.core.exceptions import AuthenticationError, AuthorizationError
from farmx.shared.utils.logging import user_id_var

logger = logging.getLogger(__name__)


async def get_current_active_user(
    current_user: CurrentUser = Depends(get_current_user),
    user_repository: UserRepository = Depends(),
) -> CurrentUser:
    """
    Get the current user, reloaded from the store.

    Raises:
        AuthenticationError: token subject does not exist
        AuthorizationError: account is deactivated
    """
    user = await user_repository.get_by_id(current_user.user_id)
    if user is None:
        logger.warning(f"Token subject not found: {current_user.user_id}")
        raise AuthenticationError("User not found", user_id=current_user.user_id)

    if not user.is_active:
        logger.warning(f"Inactive user attempted access: {current_user.user_id}")
        raise AuthorizationError(
            "Your account is currently disabled. Please contact support.",
            user_id=current_user.user_id,
        )

    user_id_var.set(user.user_id)
    return CurrentUser(
        user_id=user.user_id,
        email=user.email,
        username=user.username,
        role=user.role,
        is_active=user.is_active,
        token_payload=current_user.token_payload,
    )
