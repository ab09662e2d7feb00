# 📄 File: farmx/modules/storefront/infrastructure/database/order_repository_impl.py
# 🧭 Purpose (Layman Explanation):
# Does the actual database work for orders: saving a new purchase for good, finding
# orders, paging through history and recording status changes.
# 🧪 Purpose (Technical Summary):
# SQLAlchemy implementation of OrderRepository. Translates checkout_key unique violations
# into ConflictError and supports durable (committed) order creation for the checkout saga.
# 🔗 Dependencies:
# SQLAlchemy, farmx.shared.infrastructure.database.session, farmx.shared.core.exceptions
# 🔄 Connected Modules / Calls From:
# Checkout, order and fulfillment services; reconciliation task

import logging
from typing import List, Optional, Tuple

from fastapi import Depends
from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from farmx.modules.storefront.domain.models.order import Order, OrderItem, OrderStatus
from farmx.modules.storefront.domain.repositories.order_repository import OrderRepository
from farmx.modules.storefront.infrastructure.database.models import OrderItemModel, OrderModel
from farmx.shared.config.database import utcnow
from farmx.shared.core.exceptions import ConflictError, NotFoundError
from farmx.shared.infrastructure.database.session import get_db_session

logger = logging.getLogger(__name__)


class OrderRepositoryImpl(OrderRepository):
    """
    SQLAlchemy implementation of order repository.
    """

    def __init__(self, session: AsyncSession = Depends(get_db_session)):
        self.session = session

    async def create(self, order: Order, commit: bool = False) -> Order:
        model = OrderModel(
            order_id=order.order_id,
            user_id=order.user_id,
            total=order.total,
            currency=order.currency,
            status=order.status,
            is_active=order.is_active,
            checkout_key=order.checkout_key,
            ownership_transferred=order.ownership_transferred,
            items=[
                OrderItemModel(
                    position=position,
                    product_id=item.product_id,
                    qty=item.qty,
                    price_at_purchase=item.price_at_purchase,
                )
                for position, item in enumerate(order.items)
            ],
        )
        self.session.add(model)

        try:
            await self.session.flush()
            if commit:
                await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            if order.checkout_key:
                logger.warning(f"Duplicate checkout rejected for key {order.checkout_key}: {e.orig}")
                raise ConflictError(
                    "A checkout for this cart is already in progress or complete",
                    resource_type="order",
                    conflict_field="checkout_key",
                    existing_value=order.checkout_key,
                )
            raise

        logger.info(f"Order created: {order.order_id} (user {order.user_id}, total {order.total})")
        return order

    async def get_by_id(self, order_id: str) -> Optional[Order]:
        query = (
            select(OrderModel)
            .where(OrderModel.order_id == order_id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(query)
        model = result.scalar_one_or_none()
        return self._to_domain(model) if model else None

    async def list_orders(
        self,
        user_id: Optional[str],
        status: Optional[str],
        is_active: Optional[bool],
        page: int,
        limit: int,
    ) -> Tuple[List[Order], int]:
        filters = []
        if user_id:
            filters.append(OrderModel.user_id == user_id)
        if status:
            filters.append(OrderModel.status == status)
        if is_active is not None:
            filters.append(OrderModel.is_active == is_active)

        count_query = select(func.count()).select_from(OrderModel).where(*filters)
        total = (await self.session.execute(count_query)).scalar_one()

        query = (
            select(OrderModel)
            .where(*filters)
            .order_by(OrderModel.created_at.desc(), OrderModel.order_id)
            .offset((page - 1) * limit)
            .limit(limit)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(query)
        return [self._to_domain(model) for model in result.scalars().all()], total

    async def update_status(
        self,
        order_id: str,
        status: str,
        is_active: bool,
        expected_status: str,
    ) -> Order:
        stmt = (
            update(OrderModel)
            .where(OrderModel.order_id == order_id, OrderModel.status == expected_status)
            .values(status=status, is_active=is_active, updated_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        if result.rowcount == 0:
            current = await self.get_by_id(order_id)
            if current is None:
                raise NotFoundError("Order not found", resource_type="order", resource_id=order_id)
            logger.warning(
                f"Status conflict on order {order_id}: expected {expected_status}, found {current.status}"
            )
            raise ConflictError(
                "Order status changed concurrently, re-read and retry",
                resource_type="order",
                conflict_field="status",
                existing_value=current.status,
            )
        return await self.get_by_id(order_id)

    async def mark_ownership_transferred(self, order_id: str) -> None:
        stmt = (
            update(OrderModel)
            .where(OrderModel.order_id == order_id)
            .values(ownership_transferred=True, updated_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        await self.session.execute(stmt)

    async def list_unfulfilled(self, limit: int) -> List[Order]:
        query = (
            select(OrderModel)
            .where(
                OrderModel.status == OrderStatus.COMPLETED.value,
                OrderModel.is_active.is_(True),
                OrderModel.ownership_transferred.is_(False),
            )
            .order_by(OrderModel.created_at)
            .limit(limit)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(query)
        return [self._to_domain(model) for model in result.scalars().all()]

    @staticmethod
    def _to_domain(model: OrderModel) -> Order:
        return Order(
            order_id=model.order_id,
            user_id=model.user_id,
            items=[
                OrderItem(
                    product_id=item.product_id,
                    qty=item.qty,
                    price_at_purchase=item.price_at_purchase,
                )
                for item in model.items
            ],
            total=model.total,
            currency=model.currency,
            status=model.status,
            is_active=model.is_active,
            checkout_key=model.checkout_key,
            ownership_transferred=model.ownership_transferred,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
