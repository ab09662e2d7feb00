# 📄 File: farmx/modules/user_management/domain/models/user.py
# 🧭 Purpose (Layman Explanation):
# Describes a farm app user: who they are, what is sitting in their shopping cart,
# which products they own, and which plan they are on.
# 🧪 Purpose (Technical Summary):
# User aggregate domain model with the embedded cart (one line per product), the owned-products
# multiset, the set of fulfilled order ids and an optimistic concurrency version.
# 🔗 Dependencies:
# pydantic, datetime, typing, enum
# 🔄 Connected Modules / Calls From:
# user_repository_impl.py, cart_service.py, checkout_service.py, presentation dependencies

from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class UserRole(str, Enum):
    """User role enumeration"""
    USER = "user"
    ADMIN = "admin"
    EXPERT = "expert"


class CartLine(BaseModel):
    """A single cart entry; at most one per product."""
    model_config = ConfigDict(frozen=True)

    product_id: str
    qty: int = Field(ge=1)


class User(BaseModel):
    """
    User domain model.

    The cart and owned_products are owned exclusively by the user and are
    only changed through the cart manager and checkout fulfillment, always
    via a version-checked write.
    """

    model_config = ConfigDict(use_enum_values=True)

    user_id: str
    username: str
    email: str
    role: UserRole = UserRole.USER

    cart_items: List[CartLine] = Field(default_factory=list)
    owned_products: List[str] = Field(default_factory=list)
    fulfilled_orders: List[str] = Field(default_factory=list)

    subscription_id: Optional[str] = None
    is_active: bool = True
    version: int = 1

    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    # Business Logic Methods

    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN.value

    def get_cart_line(self, product_id: str) -> Optional[CartLine]:
        for line in self.cart_items:
            if line.product_id == product_id:
                return line
        return None

    def cart_with_line(self, product_id: str, qty: int) -> List[CartLine]:
        """Cart after setting product_id to qty (replaces, never accumulates)."""
        lines = []
        replaced = False
        for line in self.cart_items:
            if line.product_id == product_id:
                lines.append(CartLine(product_id=product_id, qty=qty))
                replaced = True
            else:
                lines.append(line)
        if not replaced:
            lines.append(CartLine(product_id=product_id, qty=qty))
        return lines

    def cart_without_line(self, product_id: str) -> List[CartLine]:
        return [line for line in self.cart_items if line.product_id != product_id]

    def has_fulfilled(self, order_id: str) -> bool:
        return order_id in self.fulfilled_orders
