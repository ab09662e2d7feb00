# 📄 File: farmx/modules/user_management/infrastructure/database/user_repository_impl.py
# 🧭 Purpose (Layman Explanation):
# Does the actual database work for users: loading them, creating them, and saving
# cart or ownership changes only when nobody else changed the user in the meantime.
# 🧪 Purpose (Technical Summary):
# SQLAlchemy implementation of UserRepository with compare-and-swap updates on the
# version column and identity-map refresh on every read.
# 🔗 Dependencies:
# SQLAlchemy, farmx.shared.infrastructure.database.session, farmx.shared.core.exceptions
# 🔄 Connected Modules / Calls From:
# Cart, checkout and subscription services; presentation dependencies; reconciliation task

import logging
from typing import Any, Dict, Optional

from fastapi import Depends
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from farmx.modules.user_management.domain.models.user import CartLine, User
from farmx.modules.user_management.domain.repositories.user_repository import UserRepository
from farmx.modules.user_management.infrastructure.database.models import UserModel
from farmx.shared.config.database import utcnow
from farmx.shared.core.exceptions import ConflictError, NotFoundError
from farmx.shared.infrastructure.database.session import get_db_session

logger = logging.getLogger(__name__)


class UserRepositoryImpl(UserRepository):
    """
    SQLAlchemy implementation of user repository.
    """

    def __init__(self, session: AsyncSession = Depends(get_db_session)):
        self.session = session

    async def get_by_id(self, user_id: str) -> Optional[User]:
        query = (
            select(UserModel)
            .where(UserModel.user_id == user_id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(query)
        model = result.scalar_one_or_none()
        return self._to_domain(model) if model else None

    async def create(self, user: User) -> User:
        model = UserModel(
            user_id=user.user_id,
            username=user.username,
            email=user.email,
            role=user.role,
            cart_items=[line.model_dump() for line in user.cart_items],
            owned_products=list(user.owned_products),
            fulfilled_orders=list(user.fulfilled_orders),
            subscription_id=user.subscription_id,
            is_active=user.is_active,
            version=user.version,
        )
        self.session.add(model)
        await self.session.flush()
        logger.info(f"User created: {user.user_id}")
        return self._to_domain(model)

    async def update_versioned(
        self,
        user_id: str,
        expected_version: int,
        changes: Dict[str, Any]
    ) -> User:
        values = self._serialize_changes(changes)
        values["version"] = UserModel.version + 1
        values["updated_at"] = utcnow()

        stmt = (
            update(UserModel)
            .where(UserModel.user_id == user_id, UserModel.version == expected_version)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)

        if result.rowcount == 0:
            current = await self.get_by_id(user_id)
            if current is None:
                raise NotFoundError("User not found", resource_type="user", resource_id=user_id)
            logger.warning(
                f"Version conflict on user {user_id}: expected {expected_version}, found {current.version}"
            )
            raise ConflictError(
                "User was modified concurrently, re-read and retry",
                resource_type="user",
                conflict_field="version",
                existing_value=current.version,
            )

        updated = await self.get_by_id(user_id)
        return updated

    async def set_subscription(self, user_id: str, subscription_id: str) -> None:
        stmt = (
            update(UserModel)
            .where(UserModel.user_id == user_id)
            .values(subscription_id=subscription_id, updated_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        await self.session.execute(stmt)

    @staticmethod
    def _serialize_changes(changes: Dict[str, Any]) -> Dict[str, Any]:
        values = dict(changes)
        if "cart_items" in values:
            values["cart_items"] = [
                line.model_dump() if isinstance(line, CartLine) else dict(line)
                for line in values["cart_items"]
            ]
        for key in ("owned_products", "fulfilled_orders"):
            if key in values:
                values[key] = list(values[key])
        return values

    @staticmethod
    def _to_domain(model: UserModel) -> User:
        return User(
            user_id=model.user_id,
            username=model.username,
            email=model.email,
            role=model.role,
            cart_items=[CartLine(**line) for line in (model.cart_items or [])],
            owned_products=list(model.owned_products or []),
            fulfilled_orders=list(model.fulfilled_orders or []),
            subscription_id=model.subscription_id,
            is_active=model.is_active,
            version=model.version,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
