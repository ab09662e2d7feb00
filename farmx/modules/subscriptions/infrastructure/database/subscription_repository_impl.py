# 📄 File: farmx/modules/subscriptions/infrastructure/database/subscription_repository_impl.py
# 🧭 Purpose (Layman Explanation):
# Does the actual database work for memberships: finding a member's plan, creating
# the free plan the first time, saving plan changes and recording payments.
# 🧪 Purpose (Technical Summary):
# SQLAlchemy implementation of SubscriptionRepository. Lazy creation leans on the
# unique user_id constraint (rollback and re-read on IntegrityError); updates are
# compare-and-swap on the version column; the ledger is insert-only.
# 🔗 Dependencies:
# SQLAlchemy, farmx.shared.infrastructure.database.session, farmx.shared.core.exceptions
# 🔄 Connected Modules / Calls From:
# subscription_service.py

import logging
from typing import Any, Dict, Optional

from fastapi import Depends
from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from farmx.modules.subscriptions.domain.models.subscription import PaymentRecord, Subscription
from farmx.modules.subscriptions.domain.repositories.subscription_repository import SubscriptionRepository
from farmx.modules.subscriptions.infrastructure.database.models import (
    SubscriptionModel,
    SubscriptionPaymentModel,
)
from farmx.shared.config.database import utcnow
from farmx.shared.core.exceptions import ConflictError, NotFoundError
from farmx.shared.infrastructure.database.session import get_db_session

logger = logging.getLogger(__name__)


class SubscriptionRepositoryImpl(SubscriptionRepository):
    """
    SQLAlchemy implementation of subscription repository.
    """

    def __init__(self, session: AsyncSession = Depends(get_db_session)):
        self.session = session

    async def get_by_user(self, user_id: str) -> Optional[Subscription]:
        query = (
            select(SubscriptionModel)
            .where(SubscriptionModel.user_id == user_id, SubscriptionModel.is_active.is_(True))
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(query)
        model = result.scalar_one_or_none()
        return self._to_domain(model) if model else None

    async def create_if_absent(self, subscription: Subscription) -> Subscription:
        model = SubscriptionModel(
            subscription_id=subscription.subscription_id,
            user_id=subscription.user_id,
            plan=subscription.plan,
            status=subscription.status,
            start_date=subscription.start_date,
            end_date=subscription.end_date,
            auto_renew=subscription.auto_renew,
            price=subscription.price,
            currency=subscription.currency,
            is_active=subscription.is_active,
            version=subscription.version,
        )
        self.session.add(model)

        try:
            await self.session.flush()
        except IntegrityError:
            await self.session.rollback()
            existing = await self.get_by_user(subscription.user_id)
            if existing is None:
                raise
            logger.info(f"Subscription for user {subscription.user_id} created concurrently, using the stored one")
            return existing

        logger.info(f"Created {subscription.plan} subscription {subscription.subscription_id} for user {subscription.user_id}")
        return await self.get_by_user(subscription.user_id)

    async def update_versioned(
        self,
        subscription_id: str,
        expected_version: int,
        changes: Dict[str, Any]
    ) -> Subscription:
        values = dict(changes)
        values["version"] = SubscriptionModel.version + 1
        values["updated_at"] = utcnow()

        stmt = (
            update(SubscriptionModel)
            .where(
                SubscriptionModel.subscription_id == subscription_id,
                SubscriptionModel.version == expected_version,
            )
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)

        if result.rowcount == 0:
            current = await self._get_model(subscription_id)
            if current is None:
                raise NotFoundError(
                    "Subscription not found",
                    resource_type="subscription",
                    resource_id=subscription_id,
                )
            raise ConflictError(
                "Subscription was modified concurrently, re-read and retry",
                resource_type="subscription",
                conflict_field="version",
                existing_value=current.version,
            )

        return self._to_domain(await self._get_model(subscription_id))

    async def append_payment(self, subscription_id: str, record: PaymentRecord) -> None:
        self.session.add(SubscriptionPaymentModel(
            subscription_id=subscription_id,
            paid_at=record.date,
            amount=record.amount,
            transaction_id=record.transaction_id,
            status=record.status,
        ))
        await self.session.flush()
        logger.info(f"Payment {record.transaction_id} of {record.amount} recorded for subscription {subscription_id}")

    async def _get_model(self, subscription_id: str) -> Optional[SubscriptionModel]:
        query = (
            select(SubscriptionModel)
            .where(SubscriptionModel.subscription_id == subscription_id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    @staticmethod
    def _to_domain(model: SubscriptionModel) -> Subscription:
        return Subscription(
            subscription_id=model.subscription_id,
            user_id=model.user_id,
            plan=model.plan,
            status=model.status,
            start_date=model.start_date,
            end_date=model.end_date,
            auto_renew=model.auto_renew,
            price=model.price,
            currency=model.currency,
            payment_history=[
                PaymentRecord(
                    date=payment.paid_at,
                    amount=payment.amount,
                    transaction_id=payment.transaction_id,
                    status=payment.status,
                )
                for payment in model.payments
            ],
            is_active=model.is_active,
            version=model.version,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
