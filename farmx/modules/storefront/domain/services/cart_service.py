# 📄 File: farmx/modules/storefront/domain/services/cart_service.py
# 🧭 Purpose (Layman Explanation):
# Handles the shopping cart: putting products in, changing how many, taking them out,
# emptying it, and showing it with today's prices.
# 🧪 Purpose (Technical Summary):
# Cart Manager domain service over the user's embedded cart. Lines are set (not incremented),
# validated against current product availability, and written with a version check.
# 🔗 Dependencies:
# User and product repositories, farmx.shared.core.exceptions
# 🔄 Connected Modules / Calls From:
# Cart API endpoints

import logging

from fastapi import Depends

from farmx.modules.storefront.domain.models.cart import CartView, CartViewLine
from farmx.modules.storefront.domain.models.order import CENTS
from farmx.modules.storefront.domain.models.product import Product
from farmx.modules.storefront.domain.repositories.product_repository import ProductRepository
from farmx.modules.user_management.domain.models.user import User
from farmx.modules.user_management.domain.repositories.user_repository import UserRepository
from farmx.shared.core.exceptions import NotFoundError, ValidationError

logger = logging.getLogger(__name__)


class CartService:
    """
    Domain service for the user's cart.
    """

    def __init__(
        self,
        user_repository: UserRepository = Depends(),
        product_repository: ProductRepository = Depends(),
    ):
        self.user_repository = user_repository
        self.product_repository = product_repository

    async def view(self, user_id: str) -> CartView:
        """Cart lines priced with current product prices."""
        user = await self._get_user(user_id)
        return await self._build_view(user)

    async def add_or_set_line(self, user_id: str, product_id: str, qty: int) -> CartView:
        """Set the quantity for product_id, adding the line if needed."""
        self._validate_qty(qty)
        await self._get_active_product(product_id)

        user = await self._get_user(user_id)
        user = await self.user_repository.update_versioned(
            user.user_id,
            user.version,
            {"cart_items": user.cart_with_line(product_id, qty)},
        )
        logger.info(f"Cart line set for user {user_id}: {product_id} x{qty}")
        return await self._build_view(user)

    async def update_line(self, user_id: str, product_id: str, qty: int) -> CartView:
        """Change the quantity of an existing line."""
        self._validate_qty(qty)
        user = await self._get_user(user_id)
        if user.get_cart_line(product_id) is None:
            raise NotFoundError(
                "Product not in cart",
                resource_type="cart_line",
                resource_id=product_id,
            )
        await self._get_active_product(product_id)

        user = await self.user_repository.update_versioned(
            user.user_id,
            user.version,
            {"cart_items": user.cart_with_line(product_id, qty)},
        )
        return await self._build_view(user)

    async def remove_line(self, user_id: str, product_id: str) -> CartView:
        """Remove a line; removing a line that is not there succeeds."""
        user = await self._get_user(user_id)
        if user.get_cart_line(product_id) is None:
            return await self._build_view(user)

        user = await self.user_repository.update_versioned(
            user.user_id,
            user.version,
            {"cart_items": user.cart_without_line(product_id)},
        )
        return await self._build_view(user)

    async def clear(self, user_id: str) -> CartView:
        user = await self._get_user(user_id)
        if user.cart_items:
            user = await self.user_repository.update_versioned(
                user.user_id, user.version, {"cart_items": []}
            )
        return await self._build_view(user)

    # Helpers

    @staticmethod
    def _validate_qty(qty: int) -> None:
        if qty < 1:
            raise ValidationError("Quantity must be at least 1", field="qty", value=qty, constraint="qty >= 1")

    async def _get_user(self, user_id: str) -> User:
        user = await self.user_repository.get_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found", resource_type="user", resource_id=user_id)
        return user

    async def _get_active_product(self, product_id: str) -> Product:
        product = await self.product_repository.get_by_id(product_id)
        if product is None or not product.is_active:
            raise NotFoundError(
                "Product not found or inactive",
                resource_type="product",
                resource_id=product_id,
            )
        return product

    async def _build_view(self, user: User) -> CartView:
        products = await self.product_repository.get_many(line.product_id for line in user.cart_items)

        lines = []
        for line in user.cart_items:
            product = products.get(line.product_id)
            if product is None:
                lines.append(CartViewLine(product_id=line.product_id, qty=line.qty, available=False))
                continue
            lines.append(CartViewLine(
                product_id=product.product_id,
                name=product.name,
                price=product.price,
                currency=product.currency,
                qty=line.qty,
                item_total=(product.price * line.qty).quantize(CENTS),
                available=product.is_active,
            ))

        return CartView.build(user.user_id, lines)
