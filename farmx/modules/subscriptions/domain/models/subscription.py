# 📄 File: farmx/modules/subscriptions/domain/models/subscription.py
# 🧭 Purpose (Layman Explanation):
# Describes a member's plan: which plan they are on, whether it is active, when it
# started and ends, and a record of every payment they made.
# 🧪 Purpose (Technical Summary):
# Subscription aggregate (one per user) with an append-only payment ledger and an
# optimistic concurrency version. Capability checks live here.
# 🔗 Dependencies:
# pydantic, datetime, decimal, uuid, enum
# 🔄 Connected Modules / Calls From:
# subscription_service.py, subscription_repository_impl.py, subscriptions API

import uuid
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from farmx.modules.subscriptions.domain.models.plan import Plan, PlanType


class SubscriptionStatus(str, Enum):
    """Subscription status enumeration"""
    ACTIVE = "active"
    CANCELLED = "cancelled"
    EXPIRED = "expired"
    PENDING = "pending"


class PaymentRecord(BaseModel):
    """One ledger entry. Entries are only ever appended."""
    model_config = ConfigDict(frozen=True)

    date: datetime
    amount: Decimal
    transaction_id: str
    status: str = "success"

    @classmethod
    def charge(cls, plan: Plan, at: datetime) -> "PaymentRecord":
        return cls(date=at, amount=plan.price, transaction_id=f"txn_{uuid.uuid4().hex}")


class Subscription(BaseModel):
    """
    Subscription domain model.

    Exactly one per user; created lazily on the free plan the first time
    anything asks for it.
    """

    model_config = ConfigDict(use_enum_values=True)

    subscription_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    user_id: str

    plan: PlanType = PlanType.FREE
    status: SubscriptionStatus = SubscriptionStatus.ACTIVE
    start_date: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    end_date: Optional[datetime] = None
    auto_renew: bool = True
    price: Decimal = Decimal("0")
    currency: str = "USD"

    payment_history: List[PaymentRecord] = Field(default_factory=list)

    is_active: bool = True
    version: int = 1
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def create_free_subscription(cls, user_id: str, plan: Plan) -> "Subscription":
        return cls(
            user_id=user_id,
            plan=PlanType.FREE,
            status=SubscriptionStatus.ACTIVE,
            price=plan.price,
            currency=plan.currency,
        )

    # Business Logic Methods

    def is_free(self) -> bool:
        return self.plan == PlanType.FREE.value

    def has_premium_access(self) -> bool:
        return self.status == SubscriptionStatus.ACTIVE.value and not self.is_free()
