# 📄 File: farmx/modules/storefront/presentation/api/schemas/order_schemas.py
# 🧭 Purpose (Layman Explanation):
# Describes what an order looks like when the app asks for it, how to place an order
# directly, and how to ask for an order's status to change.
# 🧪 Purpose (Technical Summary):
# Pydantic v2 schemas for order endpoints: manual creation, status update, single order
# and paginated list responses, all with camelCase aliases and money as numbers.
# 🔗 Dependencies:
# pydantic, farmx.shared.utils.formatters, farmx.modules.storefront.domain.models.order
# 🔄 Connected Modules / Calls From:
# farmx.modules.storefront.presentation.api.v1.orders, farmx.modules.storefront.presentation.api.v1.cart

"""
Order API Schemas

Request Schemas:
- OrderCreateRequest: manual order from product/quantity lines
- OrderStatusUpdateRequest: status transition

Response Schemas:
- OrderResponse: order with price-snapshotted lines
- OrderListResponse: paginated order list with metadata
"""

import math
from datetime import datetime
from typing import List

from pydantic import ConfigDict, Field

from farmx.modules.storefront.domain.models.order import Order, OrderStatus
from farmx.shared.utils.formatters import CamelModel, Money


# =============================================================================
# REQUEST SCHEMAS
# =============================================================================

class OrderLineRequest(CamelModel):
    product_id: str = Field(..., min_length=1)
    qty: int = Field(..., ge=1)


class OrderCreateRequest(CamelModel):
    """
    Manual order request. Prices are always taken from the current products,
    never from the client.
    """
    items: List[OrderLineRequest] = Field(..., min_length=1)
    status: OrderStatus = Field(default=OrderStatus.PENDING, description="pending or completed (admin only)")

    model_config = ConfigDict(
        use_enum_values=True,
        json_schema_extra={
            "example": {
                "items": [{"productId": "b6d1c7a2-0f6e-4c1e-9d0a-2b0f5a8e9c11", "qty": 1}],
                "status": "pending",
            }
        },
    )


class OrderStatusUpdateRequest(CamelModel):
    status: OrderStatus

    model_config = ConfigDict(use_enum_values=True)


# =============================================================================
# RESPONSE SCHEMAS
# =============================================================================

class OrderItemResponse(CamelModel):
    product_id: str
    qty: int
    price_at_purchase: Money
    line_total: Money


class OrderResponse(CamelModel):
    order_id: str
    user_id: str
    items: List[OrderItemResponse]
    total: Money
    currency: str
    status: str
    is_active: bool
    ownership_transferred: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, order: Order) -> "OrderResponse":
        return cls(
            order_id=order.order_id,
            user_id=order.user_id,
            items=[
                OrderItemResponse(
                    product_id=item.product_id,
                    qty=item.qty,
                    price_at_purchase=item.price_at_purchase,
                    line_total=item.line_total,
                )
                for item in order.items
            ],
            total=order.total,
            currency=order.currency,
            status=order.status,
            is_active=order.is_active,
            ownership_transferred=order.ownership_transferred,
            created_at=order.created_at,
            updated_at=order.updated_at,
        )


class OrderListResponse(CamelModel):
    orders: List[OrderResponse]
    total: int
    page: int
    limit: int
    total_pages: int
    has_next: bool

    @classmethod
    def build(cls, orders: List[Order], total: int, page: int, limit: int) -> "OrderListResponse":
        total_pages = math.ceil(total / limit) if limit else 0
        return cls(
            orders=[OrderResponse.from_domain(order) for order in orders],
            total=total,
            page=page,
            limit=limit,
            total_pages=total_pages,
            has_next=page < total_pages,
        )
