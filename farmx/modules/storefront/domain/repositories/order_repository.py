# 📄 File: farmx/modules/storefront/domain/repositories/order_repository.py
# 🧭 Purpose (Layman Explanation):
# Lists what the app can do with stored orders: record a new one, look one up,
# page through a history, and change an order's status.
# 🧪 Purpose (Technical Summary):
# Abstract repository interface for the Order aggregate, including the saga
# bookkeeping (ownership_transferred flag, unreconciled order scan).
# 🔗 Dependencies:
# - abc (Abstract Base Classes)
# - Order domain model
# 🔄 Connected Modules / Calls From:
# - Checkout, order and fulfillment services
# - Repository Implementation (concrete implementation)

from abc import ABC, abstractmethod
from typing import List, Optional, Tuple

from farmx.modules.storefront.domain.models.order import Order


class OrderRepository(ABC):
    """Abstract repository interface for order data access."""

    @abstractmethod
    async def create(self, order: Order, commit: bool = False) -> Order:
        """
        Persist a new order.

        With commit=True the order is durably committed before returning.

        Raises:
            ConflictError: checkout_key already used by another order
        """
        pass

    @abstractmethod
    async def get_by_id(self, order_id: str) -> Optional[Order]:
        """Get order by ID (soft-deleted orders included)."""
        pass

    @abstractmethod
    async def list_orders(
        self,
        user_id: Optional[str],
        status: Optional[str],
        is_active: Optional[bool],
        page: int,
        limit: int,
    ) -> Tuple[List[Order], int]:
        """Return one page of orders (newest first) and the total match count."""
        pass

    @abstractmethod
    async def update_status(
        self,
        order_id: str,
        status: str,
        is_active: bool,
        expected_status: str,
    ) -> Order:
        """
        Change status/active flag, only if the order is still in expected_status.

        Raises ConflictError when the status moved since it was read.
        """
        pass

    @abstractmethod
    async def mark_ownership_transferred(self, order_id: str) -> None:
        """Record that the fulfillment step completed for this order."""
        pass

    @abstractmethod
    async def list_unfulfilled(self, limit: int) -> List[Order]:
        """Completed, active orders whose ownership transfer never completed."""
        pass
