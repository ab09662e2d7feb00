# 📄 File: farmx/modules/storefront/presentation/api/v1/cart.py
# 🧭 Purpose (Layman Explanation):
# The web endpoints behind the shopping cart: see it, add or change products, remove
# them, empty it, and check out to create an order.
#
# 🧪 Purpose (Technical Summary):
# FastAPI cart router delegating to CartService and CheckoutService. Checkout is rate
# limited with the shared slowapi limiter and answers 201 with the created order.
#
# 🔗 Dependencies:
# - FastAPI router, status codes
# - farmx.modules.storefront.domain.services (cart and checkout services)
# - farmx.modules.storefront.presentation.api.schemas (cart and order schemas)
# - farmx.api.middleware.rate_limiting (shared limiter)
#
# 🔄 Connected Modules / Calls From:
# - farmx.api.v1.router (mounted under /cart)

"""
Cart API Endpoints

Endpoints:
- GET /: Current cart priced with current product prices
- POST /: Add a product or set its quantity
- PUT /{product_id}: Change the quantity of a line
- DELETE /{product_id}: Remove a line (idempotent)
- DELETE /: Empty the cart
- POST /checkout: Turn the cart into a completed order
"""

import logging

from fastapi import APIRouter, Depends, Request, status

from farmx.api.middleware.rate_limiting import limiter
from farmx.modules.storefront.domain.services.cart_service import CartService
from farmx.modules.storefront.domain.services.checkout_service import CheckoutService
from farmx.modules.storefront.presentation.api.schemas.cart_schemas import (
    CartLineRequest,
    CartQuantityRequest,
    CartResponse,
)
from farmx.modules.storefront.presentation.api.schemas.order_schemas import OrderResponse
from farmx.modules.user_management.presentation.dependencies import get_current_active_user
from farmx.shared.config.settings import get_settings
from farmx.shared.core.dependencies import CurrentUser

logger = logging.getLogger(__name__)
settings = get_settings()

# Create router
cart_router = APIRouter()


@cart_router.get(
    "",
    response_model=CartResponse,
    summary="Get cart",
    description="Get the current user's cart with live prices",
    responses={
        200: {"description": "Cart contents"},
        401: {"description": "Authentication required"},
    }
)
async def get_cart(
    current_user: CurrentUser = Depends(get_current_active_user),
    cart_service: CartService = Depends(),
) -> CartResponse:
    view = await cart_service.view(current_user.user_id)
    return CartResponse.from_view(view)


@cart_router.post(
    "",
    response_model=CartResponse,
    summary="Add to cart",
    description="Add a product to the cart, or set its quantity if it is already there",
    responses={
        200: {"description": "Updated cart"},
        400: {"description": "Quantity below 1"},
        404: {"description": "Product missing or inactive"},
        409: {"description": "Cart changed concurrently, retry"},
    }
)
async def add_to_cart(
    payload: CartLineRequest,
    current_user: CurrentUser = Depends(get_current_active_user),
    cart_service: CartService = Depends(),
) -> CartResponse:
    view = await cart_service.add_or_set_line(current_user.user_id, payload.product_id, payload.qty)
    return CartResponse.from_view(view)


@cart_router.put(
    "/{product_id}",
    response_model=CartResponse,
    summary="Update cart line",
    description="Change the quantity of a product already in the cart",
    responses={
        200: {"description": "Updated cart"},
        400: {"description": "Quantity below 1"},
        404: {"description": "Line or product not found"},
    }
)
async def update_cart_line(
    product_id: str,
    payload: CartQuantityRequest,
    current_user: CurrentUser = Depends(get_current_active_user),
    cart_service: CartService = Depends(),
) -> CartResponse:
    view = await cart_service.update_line(current_user.user_id, product_id, payload.qty)
    return CartResponse.from_view(view)


@cart_router.delete(
    "/{product_id}",
    response_model=CartResponse,
    summary="Remove cart line",
    description="Remove a product from the cart; removing a missing line still succeeds",
)
async def remove_cart_line(
    product_id: str,
    current_user: CurrentUser = Depends(get_current_active_user),
    cart_service: CartService = Depends(),
) -> CartResponse:
    view = await cart_service.remove_line(current_user.user_id, product_id)
    return CartResponse.from_view(view)


@cart_router.delete(
    "",
    response_model=CartResponse,
    summary="Clear cart",
    description="Remove every line from the cart",
)
async def clear_cart(
    current_user: CurrentUser = Depends(get_current_active_user),
    cart_service: CartService = Depends(),
) -> CartResponse:
    view = await cart_service.clear(current_user.user_id)
    return CartResponse.from_view(view)


@cart_router.post(
    "/checkout",
    response_model=OrderResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Checkout",
    description="Convert the cart into a completed order and transfer ownership of its products",
    responses={
        201: {"description": "Order created"},
        400: {"description": "Cart is empty"},
        404: {"description": "A product in the cart no longer exists"},
        409: {"description": "A product is unavailable, or this cart was already checked out"},
        429: {"description": "Too many checkout attempts"},
    }
)
@limiter.limit(settings.CHECKOUT_RATE_LIMIT)
async def checkout(
    request: Request,
    current_user: CurrentUser = Depends(get_current_active_user),
    checkout_service: CheckoutService = Depends(),
) -> OrderResponse:
    """
    Checkout the current cart.

    Validation failures leave no trace. Once the order is committed it is
    returned even if the ownership transfer has to be finished later by the
    reconciliation job.
    """
    logger.info(f"Checkout requested by user {current_user.user_id}")
    order = await checkout_service.checkout(current_user.user_id)
    return OrderResponse.from_domain(order)
