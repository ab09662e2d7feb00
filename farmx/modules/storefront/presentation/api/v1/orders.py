# 📄 File: farmx/modules/storefront/presentation/api/v1/orders.py
# 🧭 Purpose (Layman Explanation):
# The web endpoints for orders: list past orders, look at one, place an order directly,
# and change or cancel an order.
#
# 🧪 Purpose (Technical Summary):
# FastAPI orders router delegating to OrderService. Pagination and filters come in as
# camelCase query parameters; authorization (owner vs admin) is enforced in the service.
#
# 🔗 Dependencies:
# - FastAPI router, Query parameters, status codes
# - farmx.modules.storefront.domain.services.order_service
# - farmx.modules.storefront.presentation.api.schemas.order_schemas
#
# 🔄 Connected Modules / Calls From:
# - farmx.api.v1.router (mounted under /orders)

"""
Orders API Endpoints

Endpoints:
- GET /: Paginated orders (own orders, or all for admins)
- GET /{order_id}: One order
- POST /: Manual order from product/quantity lines
- PUT /{order_id}: Status transition
- DELETE /{order_id}: Cancel (soft delete)
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from farmx.modules.storefront.domain.services.order_service import OrderService
from farmx.modules.storefront.presentation.api.schemas.order_schemas import (
    OrderCreateRequest,
    OrderListResponse,
    OrderResponse,
    OrderStatusUpdateRequest,
)
from farmx.modules.user_management.presentation.dependencies import get_current_active_user
from farmx.shared.core.dependencies import CurrentUser

logger = logging.getLogger(__name__)

# Create router
orders_router = APIRouter()


@orders_router.get(
    "",
    response_model=OrderListResponse,
    summary="List orders",
    description="List the caller's orders; administrators see every order and may filter by user",
    responses={
        200: {"description": "Paginated order list"},
        400: {"description": "Invalid pagination or filter"},
    }
)
async def list_orders(
    page: int = Query(1, description="Page number, starting at 1"),
    limit: int = Query(20, description="Page size"),
    order_status: Optional[str] = Query(None, alias="status", description="Filter by status"),
    is_active: Optional[bool] = Query(None, alias="isActive", description="Filter by active flag"),
    user_id: Optional[str] = Query(None, alias="userId", description="Filter by owner (admin only)"),
    current_user: CurrentUser = Depends(get_current_active_user),
    order_service: OrderService = Depends(),
) -> OrderListResponse:
    orders, total = await order_service.list_orders(
        current_user,
        page=page,
        limit=limit,
        status=order_status,
        is_active=is_active,
        user_id=user_id,
    )
    return OrderListResponse.build(orders, total, page, limit)


@orders_router.get(
    "/{order_id}",
    response_model=OrderResponse,
    summary="Get order",
    responses={
        200: {"description": "Order"},
        403: {"description": "Order belongs to another user"},
        404: {"description": "Order not found"},
    }
)
async def get_order(
    order_id: str,
    current_user: CurrentUser = Depends(get_current_active_user),
    order_service: OrderService = Depends(),
) -> OrderResponse:
    order = await order_service.get_order(current_user, order_id)
    return OrderResponse.from_domain(order)


@orders_router.post(
    "",
    response_model=OrderResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create order",
    description="Create an order directly from product lines, priced at current product prices",
    responses={
        201: {"description": "Order created"},
        403: {"description": "Only administrators can create completed orders"},
        404: {"description": "A product is missing or inactive"},
    }
)
async def create_order(
    payload: OrderCreateRequest,
    current_user: CurrentUser = Depends(get_current_active_user),
    order_service: OrderService = Depends(),
) -> OrderResponse:
    order = await order_service.create_manual_order(
        current_user,
        [(line.product_id, line.qty) for line in payload.items],
        status=payload.status,
    )
    return OrderResponse.from_domain(order)


@orders_router.put(
    "/{order_id}",
    response_model=OrderResponse,
    summary="Update order status",
    description="Move an order to a new status; completing an order transfers ownership",
    responses={
        200: {"description": "Updated order"},
        400: {"description": "Transition not allowed"},
        403: {"description": "Not permitted to change this order"},
        404: {"description": "Order not found"},
    }
)
async def update_order_status(
    order_id: str,
    payload: OrderStatusUpdateRequest,
    current_user: CurrentUser = Depends(get_current_active_user),
    order_service: OrderService = Depends(),
) -> OrderResponse:
    order = await order_service.update_status(current_user, order_id, payload.status)
    return OrderResponse.from_domain(order)


@orders_router.delete(
    "/{order_id}",
    response_model=OrderResponse,
    summary="Cancel order",
    description="Cancel an order. Products already transferred stay owned.",
    responses={
        200: {"description": "Cancelled order"},
        400: {"description": "Order already cancelled"},
        403: {"description": "Not permitted to cancel this order"},
        404: {"description": "Order not found"},
    }
)
async def cancel_order(
    order_id: str,
    current_user: CurrentUser = Depends(get_current_active_user),
    order_service: OrderService = Depends(),
) -> OrderResponse:
    order = await order_service.cancel_order(current_user, order_id)
    logger.info(f"Order {order_id} cancelled by {current_user.user_id}")
    return OrderResponse.from_domain(order)
