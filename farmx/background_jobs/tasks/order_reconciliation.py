# 📄 File: farmx/background_jobs/tasks/order_reconciliation.py
#
# 🧭 Purpose (Layman Explanation):
# A scheduled clean-up job that finishes any purchases whose money hand-over got
# interrupted, so no paid order is left half done.
#
# 🧪 Purpose (Technical Summary):
# Celery task wrapping FulfillmentService.reconcile. Each run opens its own engine and
# session (worker processes do not share the API's lifespan), re-runs the idempotent
# transfer step for completed-but-unfulfilled orders and returns the pass summary.
#
# 🔗 Dependencies:
# - celery (shared_task), asyncio
# - farmx.modules.storefront.domain.services.fulfillment_service
# - farmx.shared.infrastructure.database (connection, session)
#
# 🔄 Connected Modules / Calls From:
# - celery_config.py beat schedule ("reconcile-checkout-orders")

import asyncio
import logging
from typing import Dict, Optional

from celery import shared_task

from farmx.modules.storefront.domain.services.fulfillment_service import FulfillmentService
from farmx.modules.storefront.infrastructure.database.order_repository_impl import OrderRepositoryImpl
from farmx.modules.user_management.infrastructure.database.user_repository_impl import UserRepositoryImpl
from farmx.shared.infrastructure.database.connection import close_database, init_database
from farmx.shared.infrastructure.database.session import initialize_sessions, session_manager

logger = logging.getLogger(__name__)


async def run_reconciliation(limit: Optional[int] = None) -> Dict[str, int]:
    """Open a session, reconcile one batch and commit it."""
    async with session_manager.get_session() as session:
        service = FulfillmentService(
            user_repository=UserRepositoryImpl(session),
            order_repository=OrderRepositoryImpl(session),
        )
        return await service.reconcile(limit)


async def _reconcile_in_worker(limit: Optional[int]) -> Dict[str, int]:
    await init_database()
    try:
        await initialize_sessions()
        return await run_reconciliation(limit)
    finally:
        session_manager.reset()
        await close_database()


@shared_task(name="farmx.background_jobs.tasks.order_reconciliation.reconcile_checkout_orders")
def reconcile_checkout_orders(limit: Optional[int] = None) -> Dict[str, int]:
    """
    Finish the transfer step for checkout orders that were left unfulfilled.
    """
    summary = asyncio.run(_reconcile_in_worker(limit))
    if summary["deferred"]:
        logger.warning(f"{summary['deferred']} checkout orders still awaiting fulfillment")
    return summary
