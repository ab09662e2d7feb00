# 📄 File: farmx/modules/storefront/domain/models/order.py
# 🧭 Purpose (Layman Explanation):
# Describes a purchase: which products, how many, what each cost at the moment of buying,
# and whether the order is waiting, done or cancelled.
# 🧪 Purpose (Technical Summary):
# Order aggregate with price-snapshotted line items, a total frozen at creation and the
# status state machine (pending -> completed | cancelled; admins may cancel completed orders).
# 🔗 Dependencies:
# pydantic, decimal, datetime, uuid, enum
# 🔄 Connected Modules / Calls From:
# checkout_service.py, order_service.py, fulfillment_service.py, order_repository_impl.py

import uuid
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Dict, FrozenSet, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator

CENTS = Decimal("0.01")


class OrderStatus(str, Enum):
    """Order status enumeration"""
    PENDING = "pending"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


# Transitions open to every owner of a pending order, and the extra ones admins get.
USER_TRANSITIONS: Dict[str, FrozenSet[str]] = {
    OrderStatus.PENDING.value: frozenset({OrderStatus.CANCELLED.value}),
}
ADMIN_TRANSITIONS: Dict[str, FrozenSet[str]] = {
    OrderStatus.PENDING.value: frozenset({OrderStatus.COMPLETED.value, OrderStatus.CANCELLED.value}),
    OrderStatus.COMPLETED.value: frozenset({OrderStatus.CANCELLED.value}),
}


class OrderItem(BaseModel):
    """Order line with the unit price captured at purchase time."""
    model_config = ConfigDict(frozen=True)

    product_id: str
    qty: int = Field(ge=1)
    price_at_purchase: Decimal = Field(ge=0)

    @property
    def line_total(self) -> Decimal:
        return (self.price_at_purchase * self.qty).quantize(CENTS, rounding=ROUND_HALF_UP)


def compute_total(items: List[OrderItem]) -> Decimal:
    """Σ qty × price_at_purchase, in cents."""
    total = sum((item.price_at_purchase * item.qty for item in items), Decimal("0"))
    return total.quantize(CENTS, rounding=ROUND_HALF_UP)


class Order(BaseModel):
    """
    Order domain model.

    Immutable after creation except for status, is_active and the
    ownership_transferred saga flag. The total is never recomputed
    from current product prices.
    """

    model_config = ConfigDict(use_enum_values=True)

    order_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    user_id: str
    items: List[OrderItem]
    total: Decimal
    currency: str = "USD"
    status: OrderStatus = OrderStatus.PENDING
    is_active: bool = True

    checkout_key: Optional[str] = None
    ownership_transferred: bool = False

    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @model_validator(mode="after")
    def validate_total(self) -> "Order":
        if not self.items:
            raise ValueError("Order must contain at least one item")
        if compute_total(self.items) != Decimal(self.total).quantize(CENTS, rounding=ROUND_HALF_UP):
            raise ValueError("Order total must equal the sum of its line totals")
        return self

    @classmethod
    def place(
        cls,
        user_id: str,
        items: List[OrderItem],
        status: OrderStatus = OrderStatus.PENDING,
        currency: str = "USD",
        checkout_key: Optional[str] = None,
    ) -> "Order":
        """Build a new order, freezing its total from the snapshotted prices."""
        return cls(
            user_id=user_id,
            items=items,
            total=compute_total(items),
            currency=currency,
            status=status,
            checkout_key=checkout_key,
        )

    # Business Logic Methods

    def is_completed(self) -> bool:
        return self.status == OrderStatus.COMPLETED.value

    def is_pending(self) -> bool:
        return self.status == OrderStatus.PENDING.value

    def owned_units(self) -> List[str]:
        """Product ids granted by this order, one per unit."""
        units: List[str] = []
        for item in self.items:
            units.extend([item.product_id] * item.qty)
        return units

    def purchased_lines(self) -> FrozenSet[Tuple[str, int]]:
        return frozenset((item.product_id, item.qty) for item in self.items)

    def can_transition_to(self, new_status: str, by_admin: bool) -> bool:
        table = ADMIN_TRANSITIONS if by_admin else USER_TRANSITIONS
        return new_status in table.get(self.status, frozenset())
