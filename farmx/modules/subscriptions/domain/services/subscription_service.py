# 📄 File: farmx/modules/subscriptions/domain/services/subscription_service.py
# 🧭 Purpose (Layman Explanation):
# Manages memberships: gives every user a free plan the first time, lets them move to a
# paid plan (recording the payment), cancel, see their payments and check premium access.
# 🧪 Purpose (Technical Summary):
# Subscription lifecycle service over SubscriptionRepository and the injected PlanCatalog.
# Plan changes are version-checked writes retried with tenacity after re-reading the
# aggregate; paid plan changes append exactly one ledger entry per successful write.
# 🔗 Dependencies:
# tenacity, subscription and user repositories, PlanCatalog, structured logging
# 🔄 Connected Modules / Calls From:
# Subscriptions API endpoints

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List

from fastapi import Depends
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from farmx.modules.subscriptions.domain.models.plan import PlanCatalog, PlanType, get_plan_catalog
from farmx.modules.subscriptions.domain.models.subscription import (
    PaymentRecord,
    Subscription,
    SubscriptionStatus,
)
from farmx.modules.subscriptions.domain.repositories.subscription_repository import SubscriptionRepository
from farmx.modules.user_management.domain.repositories.user_repository import UserRepository
from farmx.shared.config.settings import get_settings
from farmx.shared.core.exceptions import ConflictError, InvalidStateError, NotFoundError, ValidationError
from farmx.shared.utils.logging import get_logger

logger = get_logger(__name__)
settings = get_settings()

_write_retry = retry(
    stop=stop_after_attempt(settings.SUBSCRIPTION_WRITE_ATTEMPTS),
    wait=wait_exponential(multiplier=0.05, max=0.5),
    retry=retry_if_exception_type(ConflictError),
    reraise=True,
)


class SubscriptionService:
    """
    Subscription lifecycle: lazy free plan, plan changes, cancellation and ledger.
    """

    def __init__(
        self,
        subscription_repository: SubscriptionRepository = Depends(),
        user_repository: UserRepository = Depends(),
        catalog: PlanCatalog = Depends(get_plan_catalog),
    ):
        self.subscription_repository = subscription_repository
        self.user_repository = user_repository
        self.catalog = catalog

    async def get_current(self, user_id: str) -> Subscription:
        """Return the user's subscription, creating the free one on first access."""
        subscription = await self.subscription_repository.get_by_user(user_id)
        if subscription is not None:
            return subscription

        free_plan = self.catalog.get(PlanType.FREE.value)
        subscription = await self.subscription_repository.create_if_absent(
            Subscription.create_free_subscription(user_id, free_plan)
        )
        await self.user_repository.set_subscription(user_id, subscription.subscription_id)
        return subscription

    @_write_retry
    async def subscribe(self, user_id: str, plan: str) -> Subscription:
        """
        Move the user onto plan, charging it if it is a paid plan.

        Raises:
            ValidationError: plan is not in the catalog
        """
        selected = self.catalog.get(plan)
        if selected is None:
            raise ValidationError(
                f"Unknown plan: {plan}",
                field="plan",
                value=plan,
                constraint=f"one of {', '.join(self.catalog.as_dict())}",
            )

        current = await self.get_current(user_id)
        now = datetime.now(timezone.utc)
        changes: Dict[str, Any] = {
            "plan": selected.plan,
            "status": SubscriptionStatus.ACTIVE.value,
            "price": selected.price,
            "currency": selected.currency,
            "start_date": now,
            "end_date": now + timedelta(days=self.catalog.period_days) if selected.is_paid else None,
            "auto_renew": True,
        }
        updated = await self.subscription_repository.update_versioned(
            current.subscription_id, current.version, changes
        )

        if selected.is_paid:
            record = PaymentRecord.charge(selected, now)
            await self.subscription_repository.append_payment(updated.subscription_id, record)
            updated = await self.subscription_repository.get_by_user(user_id)
            logger.log_business_event(
                'subscription_charged',
                f"User {user_id} subscribed to {selected.plan} for {selected.price} {selected.currency}",
                entity_id=updated.subscription_id,
                entity_type='subscription',
                extra={'transaction_id': record.transaction_id, 'plan': selected.plan},
            )
        else:
            logger.info(f"User {user_id} moved to the free plan")

        return updated

    @_write_retry
    async def cancel(self, user_id: str) -> Subscription:
        """
        Cancel a paid subscription. The plan and ledger stay as they are.

        Raises:
            NotFoundError: the user never had a subscription
            InvalidStateError: the user is on the free plan
        """
        current = await self.subscription_repository.get_by_user(user_id)
        if current is None:
            raise NotFoundError("No subscription found", resource_type="subscription", resource_id=user_id)
        if current.is_free():
            raise InvalidStateError(
                "The free plan cannot be cancelled",
                current_state=current.plan,
                error_code="FREE_PLAN",
            )

        updated = await self.subscription_repository.update_versioned(
            current.subscription_id,
            current.version,
            {"status": SubscriptionStatus.CANCELLED.value, "auto_renew": False},
        )
        logger.log_user_action(
            'subscription_cancelled',
            user_id=user_id,
            resource=f"subscription:{updated.subscription_id}",
            extra={'plan': updated.plan},
        )
        return updated

    async def payment_history(self, user_id: str) -> List[PaymentRecord]:
        subscription = await self.subscription_repository.get_by_user(user_id)
        return list(subscription.payment_history) if subscription else []

    async def access(self, user_id: str) -> Dict[str, Any]:
        """Capability check used by other features to gate premium functionality."""
        subscription = await self.get_current(user_id)
        return {
            "plan": subscription.plan,
            "status": subscription.status,
            "premium": subscription.has_premium_access(),
        }

    async def has_premium_access(self, user_id: str) -> bool:
        subscription = await self.subscription_repository.get_by_user(user_id)
        return subscription is not None and subscription.has_premium_access()
