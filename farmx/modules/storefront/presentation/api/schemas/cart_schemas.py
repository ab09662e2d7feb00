# 📄 File: farmx/modules/storefront/presentation/api/schemas/cart_schemas.py
# 🧭 Purpose (Layman Explanation):
# Defines what the app sends when changing the cart and what it gets back when looking
# at the cart, with prices shown as plain numbers.
# 🧪 Purpose (Technical Summary):
# Pydantic v2 request/response schemas for the cart endpoints with camelCase aliases.
# 🔗 Dependencies:
# pydantic, farmx.shared.utils.formatters, farmx.modules.storefront.domain.models.cart
# 🔄 Connected Modules / Calls From:
# farmx.modules.storefront.presentation.api.v1.cart

"""
Cart API Schemas

Request Schemas:
- CartLineRequest: add a product or set its quantity
- CartQuantityRequest: change the quantity of an existing line

Response Schemas:
- CartResponse: cart lines priced with current product prices
"""

from typing import List, Optional

from pydantic import ConfigDict, Field

from farmx.modules.storefront.domain.models.cart import CartView
from farmx.shared.utils.formatters import CamelModel, Money


# =============================================================================
# REQUEST SCHEMAS
# =============================================================================

class CartLineRequest(CamelModel):
    product_id: str = Field(..., min_length=1, description="Product to put in the cart")
    qty: int = Field(..., description="Quantity to set (not added to the existing quantity)")

    model_config = ConfigDict(
        json_schema_extra={"example": {"productId": "b6d1c7a2-0f6e-4c1e-9d0a-2b0f5a8e9c11", "qty": 2}}
    )


class CartQuantityRequest(CamelModel):
    qty: int = Field(..., description="New quantity for the line")


# =============================================================================
# RESPONSE SCHEMAS
# =============================================================================

class CartLineResponse(CamelModel):
    product_id: str
    name: Optional[str] = None
    price: Money
    currency: Optional[str] = None
    qty: int
    item_total: Money
    available: bool


class CartResponse(CamelModel):
    user_id: str
    items: List[CartLineResponse]
    total: Money
    item_count: int

    @classmethod
    def from_view(cls, view: CartView) -> "CartResponse":
        return cls(
            user_id=view.user_id,
            items=[CartLineResponse(**line.model_dump()) for line in view.items],
            total=view.total,
            item_count=sum(line.qty for line in view.items),
        )
