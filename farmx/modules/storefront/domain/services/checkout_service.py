# 📄 File: farmx/modules/storefront/domain/services/checkout_service.py
# 🧭 Purpose (Layman Explanation):
# Turns everything in a shopper's cart into a finished order: checks every product can
# still be bought, records the order with today's prices, then hands the products over.
# 🧪 Purpose (Technical Summary):
# Checkout saga: Validate (zero writes on failure) -> durably commit the Order (unique
# checkout_key per cart version) -> idempotent fulfillment keyed by order id. A failed
# fulfillment leaves the order for the reconciliation pass; the paid order is never lost.
# 🔗 Dependencies:
# User, product and order repositories, FulfillmentService, structured logging
# 🔄 Connected Modules / Calls From:
# Cart API checkout endpoint

from typing import List, Tuple

from fastapi import Depends

from farmx.modules.storefront.domain.models.order import Order, OrderItem, OrderStatus
from farmx.modules.storefront.domain.repositories.order_repository import OrderRepository
from farmx.modules.storefront.domain.repositories.product_repository import ProductRepository
from farmx.modules.storefront.domain.services.fulfillment_service import FulfillmentService
from farmx.modules.user_management.domain.models.user import User
from farmx.modules.user_management.domain.repositories.user_repository import UserRepository
from farmx.shared.core.exceptions import (
    ConflictError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)
from farmx.shared.utils.logging import get_logger

logger = get_logger(__name__)


class CheckoutService:
    """
    Converts a user's cart into a completed order.
    """

    def __init__(
        self,
        user_repository: UserRepository = Depends(),
        product_repository: ProductRepository = Depends(),
        order_repository: OrderRepository = Depends(),
        fulfillment_service: FulfillmentService = Depends(),
    ):
        self.user_repository = user_repository
        self.product_repository = product_repository
        self.order_repository = order_repository
        self.fulfillment_service = fulfillment_service

    async def checkout(self, user_id: str) -> Order:
        """
        Run the checkout saga for the user's current cart.

        Raises:
            InvalidStateError: cart is empty (EMPTY_CART)
            NotFoundError: a cart product no longer exists
            ConflictError: a cart product is inactive, or this cart version was already checked out
            ValidationError: cart mixes currencies
        """
        user = await self.user_repository.get_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found", resource_type="user", resource_id=user_id)

        items, currency = await self._validate_cart(user)

        order = Order.place(
            user_id=user.user_id,
            items=items,
            status=OrderStatus.COMPLETED,
            currency=currency,
            checkout_key=f"{user.user_id}:{user.version}",
        )
        order = await self.order_repository.create(order, commit=True)

        logger.log_business_event(
            'order_placed',
            f"Checkout created order {order.order_id} for {order.total} {order.currency}",
            entity_id=order.order_id,
            entity_type='order',
            extra={'user_id': user.user_id, 'lines': len(items), 'total': str(order.total)},
        )

        await self.fulfillment_service.fulfill(order)
        return await self.order_repository.get_by_id(order.order_id)

    async def _validate_cart(self, user: User) -> Tuple[List[OrderItem], str]:
        if not user.cart_items:
            raise InvalidStateError("Cart is empty", current_state="empty", error_code="EMPTY_CART")

        products = await self.product_repository.get_many(line.product_id for line in user.cart_items)

        items = []
        for line in user.cart_items:
            product = products.get(line.product_id)
            if product is None:
                raise NotFoundError(
                    "Product in cart no longer exists",
                    resource_type="product",
                    resource_id=line.product_id,
                )
            if not product.is_active:
                raise ConflictError(
                    f"Product {product.name} is no longer available",
                    resource_type="product",
                    conflict_field="is_active",
                    existing_value=False,
                    error_code="PRODUCT_UNAVAILABLE",
                    details={"product_id": product.product_id, "retryable": False},
                )
            items.append(OrderItem(
                product_id=product.product_id,
                qty=line.qty,
                price_at_purchase=product.price,
            ))

        currencies = {products[item.product_id].currency for item in items}
        if len(currencies) > 1:
            raise ValidationError(
                "Cart contains products priced in different currencies",
                field="currency",
                value=",".join(sorted(currencies)),
            )
        return items, currencies.pop()
