# 📄 File: farmx/modules/storefront/domain/services/fulfillment_service.py
# 🧭 Purpose (Layman Explanation):
# Hands the purchased products over to the buyer once an order is complete, and empties
# the purchased lines from their cart. Safe to run twice for the same order.
# 🧪 Purpose (Technical Summary):
# Idempotent ownership-transfer step of the checkout saga, keyed by order id. Applies a
# version-checked user update (retried with tenacity on conflicts) and flags the order.
# Also hosts the reconciliation pass for orders whose transfer never completed.
# 🔗 Dependencies:
# tenacity (retry on ConflictError), user and order repositories, structured logging
# 🔄 Connected Modules / Calls From:
# checkout_service.py, order_service.py, background_jobs.tasks.order_reconciliation

from typing import Dict

from fastapi import Depends
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from farmx.modules.storefront.domain.models.order import Order
from farmx.modules.storefront.domain.repositories.order_repository import OrderRepository
from farmx.modules.user_management.domain.models.user import User
from farmx.modules.user_management.domain.repositories.user_repository import UserRepository
from farmx.shared.config.settings import get_settings
from farmx.shared.core.exceptions import ConflictError, NotFoundError
from farmx.shared.utils.logging import get_logger

logger = get_logger(__name__)
settings = get_settings()


class FulfillmentService:
    """
    Applies completed orders to their buyer.

    The user's fulfilled_orders list is the idempotency record: an order id
    already present there is never applied again.
    """

    def __init__(
        self,
        user_repository: UserRepository = Depends(),
        order_repository: OrderRepository = Depends(),
    ):
        self.user_repository = user_repository
        self.order_repository = order_repository

    async def fulfill(self, order: Order) -> bool:
        """
        Run the transfer step for a completed order.

        Returns False (leaving the order for reconciliation) when the user
        kept changing underneath us for every attempt.
        """
        try:
            await self._apply_to_user(order)
        except ConflictError:
            logger.warning(
                f"Ownership transfer for order {order.order_id} deferred to reconciliation",
                extra={'order_id': order.order_id, 'user_id': order.user_id},
            )
            return False

        await self.order_repository.mark_ownership_transferred(order.order_id)
        logger.log_business_event(
            'order_fulfilled',
            f"Ownership transferred for order {order.order_id}",
            entity_id=order.order_id,
            entity_type='order',
            extra={'user_id': order.user_id, 'units': len(order.owned_units())},
        )
        return True

    @retry(
        stop=stop_after_attempt(settings.CHECKOUT_FULFILLMENT_ATTEMPTS),
        wait=wait_exponential(multiplier=0.05, max=0.5),
        retry=retry_if_exception_type(ConflictError),
        reraise=True,
    )
    async def _apply_to_user(self, order: Order) -> User:
        user = await self.user_repository.get_by_id(order.user_id)
        if user is None:
            raise NotFoundError("User not found", resource_type="user", resource_id=order.user_id)

        if user.has_fulfilled(order.order_id):
            return user

        changes: Dict[str, list] = {
            "owned_products": user.owned_products + order.owned_units(),
            "fulfilled_orders": user.fulfilled_orders + [order.order_id],
        }
        if order.checkout_key:
            # lines edited after the order snapshot stay in the cart
            purchased = order.purchased_lines()
            changes["cart_items"] = [
                line for line in user.cart_items if (line.product_id, line.qty) not in purchased
            ]

        return await self.user_repository.update_versioned(user.user_id, user.version, changes)

    async def reconcile(self, limit: int = None) -> Dict[str, int]:
        """
        Re-run the transfer step for completed orders still flagged as not transferred.
        """
        limit = limit or settings.RECONCILIATION_BATCH_SIZE
        pending = await self.order_repository.list_unfulfilled(limit)

        summary = {"scanned": len(pending), "fulfilled": 0, "deferred": 0}
        for order in pending:
            if await self.fulfill(order):
                summary["fulfilled"] += 1
            else:
                summary["deferred"] += 1

        logger.info(
            f"Checkout reconciliation pass: {summary['fulfilled']} fulfilled, {summary['deferred']} deferred",
            extra={'event_type': 'reconciliation', **summary},
        )
        return summary
