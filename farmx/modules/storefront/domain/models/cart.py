# 📄 File: farmx/modules/storefront/domain/models/cart.py
# 🧭 Purpose (Layman Explanation):
# What a shopper sees when opening their cart: each product, how many, and the
# price worked out with today's prices.
# 🧪 Purpose (Technical Summary):
# Read model for the cart view. Totals are recomputed live from current product
# prices on every read, unlike Order.total which is frozen.
# 🔗 Dependencies:
# pydantic, decimal
# 🔄 Connected Modules / Calls From:
# cart_service.py, cart API endpoints

from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel

from farmx.modules.storefront.domain.models.order import CENTS


class CartViewLine(BaseModel):
    product_id: str
    name: Optional[str] = None
    price: Decimal = Decimal("0")
    currency: Optional[str] = None
    qty: int
    item_total: Decimal = Decimal("0")
    available: bool = True


class CartView(BaseModel):
    user_id: str
    items: List[CartViewLine]
    total: Decimal

    @classmethod
    def build(cls, user_id: str, lines: List[CartViewLine]) -> "CartView":
        total = sum((line.item_total for line in lines), Decimal("0")).quantize(CENTS)
        return cls(user_id=user_id, items=lines, total=total)
