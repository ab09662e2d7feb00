# 📄 File: farmx/modules/subscriptions/presentation/api/schemas/subscription_schemas.py
# 🧭 Purpose (Layman Explanation):
# Describes how plans, a member's subscription and their payment history look when
# the app asks for them, and what to send to pick a plan.
# 🧪 Purpose (Technical Summary):
# Pydantic v2 request/response schemas for the subscription endpoints, camelCase on the wire.
# 🔗 Dependencies:
# pydantic, farmx.shared.utils.formatters, subscription domain models
# 🔄 Connected Modules / Calls From:
# farmx.modules.subscriptions.presentation.api.v1.subscriptions

"""
Subscription API Schemas

Request Schemas:
- SubscribeRequest: plan selection

Response Schemas:
- PlanResponse / PlanListResponse: catalog
- SubscriptionResponse: the member's subscription
- PaymentHistoryResponse: ledger entries in insertion order
- AccessResponse: premium capability check
"""

from datetime import datetime
from typing import List, Optional

from pydantic import ConfigDict, Field

from farmx.modules.subscriptions.domain.models.plan import Plan
from farmx.modules.subscriptions.domain.models.subscription import PaymentRecord, Subscription
from farmx.shared.utils.formatters import CamelModel, Money


class SubscribeRequest(CamelModel):
    plan: str = Field(..., min_length=1, description="free, premium or enterprise")

    model_config = ConfigDict(json_schema_extra={"example": {"plan": "premium"}})


class PlanResponse(CamelModel):
    plan: str
    price: Money
    currency: str
    features: List[str]

    @classmethod
    def from_domain(cls, plan: Plan) -> "PlanResponse":
        return cls(plan=plan.plan, price=plan.price, currency=plan.currency, features=list(plan.features))


class PlanListResponse(CamelModel):
    plans: List[PlanResponse]
    period_days: int


class PaymentResponse(CamelModel):
    date: datetime
    amount: Money
    transaction_id: str
    status: str

    @classmethod
    def from_domain(cls, record: PaymentRecord) -> "PaymentResponse":
        return cls(**record.model_dump())


class SubscriptionResponse(CamelModel):
    subscription_id: str
    user_id: str
    plan: str
    status: str
    start_date: datetime
    end_date: Optional[datetime] = None
    auto_renew: bool
    price: Money
    currency: str
    payment_history: List[PaymentResponse]
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, subscription: Subscription) -> "SubscriptionResponse":
        return cls(
            subscription_id=subscription.subscription_id,
            user_id=subscription.user_id,
            plan=subscription.plan,
            status=subscription.status,
            start_date=subscription.start_date,
            end_date=subscription.end_date,
            auto_renew=subscription.auto_renew,
            price=subscription.price,
            currency=subscription.currency,
            payment_history=[PaymentResponse.from_domain(p) for p in subscription.payment_history],
            created_at=subscription.created_at,
            updated_at=subscription.updated_at,
        )


class PaymentHistoryResponse(CamelModel):
    payments: List[PaymentResponse]
    count: int


class AccessResponse(CamelModel):
    plan: str
    status: str
    premium: bool
