# 📄 File: farmx/modules/storefront/domain/services/order_service.py
# 🧭 Purpose (Layman Explanation):
# Lets people look at their orders, place an order directly, and move an order along
# (complete it or cancel it) while making sure only the right people can do so.
# 🧪 Purpose (Technical Summary):
# Order domain service: ownership/role checks, paginated listing, manual order creation
# with price snapshots, and the status state machine. Completing an order runs the
# shared idempotent fulfillment step; cancelling never reverses ownership.
# 🔗 Dependencies:
# Order/product repositories, FulfillmentService, farmx.shared.core.exceptions
# 🔄 Connected Modules / Calls From:
# Orders API endpoints

import logging
from typing import List, Optional, Tuple

from fastapi import Depends

from farmx.modules.storefront.domain.models.order import Order, OrderItem, OrderStatus
from farmx.modules.storefront.domain.repositories.order_repository import OrderRepository
from farmx.modules.storefront.domain.repositories.product_repository import ProductRepository
from farmx.modules.storefront.domain.services.fulfillment_service import FulfillmentService
from farmx.shared.config.settings import get_settings
from farmx.shared.core.dependencies import CurrentUser
from farmx.shared.core.exceptions import (
    AuthorizationError,
    ConflictError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)


class OrderService:
    """
    Domain service for order queries and lifecycle changes.
    """

    def __init__(
        self,
        order_repository: OrderRepository = Depends(),
        product_repository: ProductRepository = Depends(),
        fulfillment_service: FulfillmentService = Depends(),
    ):
        self.order_repository = order_repository
        self.product_repository = product_repository
        self.fulfillment_service = fulfillment_service

    async def list_orders(
        self,
        caller: CurrentUser,
        page: int = 1,
        limit: int = 20,
        status: Optional[str] = None,
        is_active: Optional[bool] = None,
        user_id: Optional[str] = None,
    ) -> Tuple[List[Order], int]:
        """
        Paginated order listing. Admins see every order and may filter by user;
        everyone else only sees their own.
        """
        max_limit = get_settings().ORDERS_MAX_PAGE_SIZE
        if page < 1:
            raise ValidationError("Page must be at least 1", field="page", value=page)
        if limit < 1 or limit > max_limit:
            raise ValidationError(
                f"Limit must be between 1 and {max_limit}",
                field="limit",
                value=limit,
            )
        if status is not None and status not in {s.value for s in OrderStatus}:
            raise ValidationError("Unknown order status", field="status", value=status)

        owner = user_id if caller.is_admin() else caller.user_id
        return await self.order_repository.list_orders(owner, status, is_active, page, limit)

    async def get_order(self, caller: CurrentUser, order_id: str) -> Order:
        order = await self.order_repository.get_by_id(order_id)
        if order is None:
            raise NotFoundError("Order not found", resource_type="order", resource_id=order_id)
        if order.user_id != caller.user_id and not caller.is_admin():
            raise AuthorizationError(
                "You can only view your own orders",
                resource_type="order",
                resource_id=order_id,
                required_action="read",
                user_id=caller.user_id,
            )
        return order

    async def create_manual_order(
        self,
        caller: CurrentUser,
        lines: List[Tuple[str, int]],
        status: str = OrderStatus.PENDING.value,
    ) -> Order:
        """
        Create an order directly from (product_id, qty) lines, outside the cart.

        Every product is re-fetched and must be active; the first failing line
        rejects the whole request. Prices are snapshotted at creation.
        """
        if not lines:
            raise ValidationError("Order must contain at least one item", field="items")
        if status not in (OrderStatus.PENDING.value, OrderStatus.COMPLETED.value):
            raise ValidationError(
                "Orders can only be created as pending or completed",
                field="status",
                value=status,
            )
        if status == OrderStatus.COMPLETED.value and not caller.is_admin():
            raise AuthorizationError(
                "Only administrators can create completed orders",
                resource_type="order",
                required_action="complete",
                user_id=caller.user_id,
            )

        products = await self.product_repository.get_many(product_id for product_id, _ in lines)
        items = []
        for product_id, qty in lines:
            if qty < 1:
                raise ValidationError("Quantity must be at least 1", field="qty", value=qty, constraint="qty >= 1")
            product = products.get(product_id)
            if product is None or not product.is_active:
                raise NotFoundError(
                    "Product not found or inactive",
                    resource_type="product",
                    resource_id=product_id,
                )
            items.append(OrderItem(product_id=product_id, qty=qty, price_at_purchase=product.price))

        currencies = {products[item.product_id].currency for item in items}
        if len(currencies) > 1:
            raise ValidationError(
                "Order contains products priced in different currencies",
                field="currency",
                value=",".join(sorted(currencies)),
            )

        order = Order.place(
            user_id=caller.user_id,
            items=items,
            status=OrderStatus(status),
            currency=currencies.pop(),
        )
        order = await self.order_repository.create(order)
        logger.info(f"Manual order {order.order_id} created by {caller.user_id} as {status}")

        if order.is_completed():
            await self.fulfillment_service.fulfill(order)
            return await self.order_repository.get_by_id(order.order_id)
        return order

    async def update_status(self, caller: CurrentUser, order_id: str, new_status: str) -> Order:
        """
        Move an order through its state machine.

        Raises:
            NotFoundError: order does not exist
            AuthorizationError: not the owner, or a non-admin acting on a non-pending order
            InvalidStateError: the transition is not allowed from the current status
            ConflictError: the status changed since it was read, or a completed order
                still awaits its ownership transfer
        """
        order = await self.order_repository.get_by_id(order_id)
        if order is None:
            raise NotFoundError("Order not found", resource_type="order", resource_id=order_id)

        by_admin = caller.is_admin()
        if not by_admin:
            if order.user_id != caller.user_id:
                raise AuthorizationError(
                    "You can only modify your own orders",
                    resource_type="order",
                    resource_id=order_id,
                    required_action="update",
                    user_id=caller.user_id,
                )
            if not order.is_pending():
                raise AuthorizationError(
                    "Only pending orders can be changed",
                    resource_type="order",
                    resource_id=order_id,
                    required_action="update",
                    user_id=caller.user_id,
                )
            if new_status == OrderStatus.COMPLETED.value:
                raise AuthorizationError(
                    "Only administrators can complete orders",
                    resource_type="order",
                    resource_id=order_id,
                    required_action="complete",
                    user_id=caller.user_id,
                )

        if not order.can_transition_to(new_status, by_admin=by_admin):
            raise InvalidStateError(
                f"Cannot change order from {order.status} to {new_status}",
                current_state=order.status,
            )

        if order.is_completed() and not order.ownership_transferred:
            # a paid order keeps its units even when cancelled
            if not await self.fulfillment_service.fulfill(order):
                raise ConflictError(
                    "Ownership transfer for this order is still pending, retry shortly",
                    resource_type="order",
                    conflict_field="ownership_transferred",
                    existing_value=False,
                )

        is_active = new_status != OrderStatus.CANCELLED.value
        order = await self.order_repository.update_status(
            order_id, new_status, is_active, expected_status=order.status
        )
        logger.info(f"Order {order_id} moved to {new_status} by {caller.user_id}")

        if order.is_completed():
            await self.fulfillment_service.fulfill(order)
            return await self.order_repository.get_by_id(order_id)
        return order

    async def cancel_order(self, caller: CurrentUser, order_id: str) -> Order:
        return await self.update_status(caller, order_id, OrderStatus.CANCELLED.value)
