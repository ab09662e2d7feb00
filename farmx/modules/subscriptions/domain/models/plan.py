# 📄 File: farmx/modules/subscriptions/domain/models/plan.py
# 🧭 Purpose (Layman Explanation):
# The price list for FarmX memberships: what each plan costs and what it unlocks.
# 🧪 Purpose (Technical Summary):
# Immutable plan catalog built once from settings and handed to the subscription
# service as a FastAPI dependency, so tests can inject their own catalog.
# 🔗 Dependencies:
# pydantic, decimal, farmx.shared.config.settings
# 🔄 Connected Modules / Calls From:
# subscription_service.py, subscriptions API (GET /plans)

from decimal import Decimal
from enum import Enum
from functools import lru_cache
from typing import Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict

from farmx.shared.config.settings import get_settings


class PlanType(str, Enum):
    """Plan type enumeration"""
    FREE = "free"
    PREMIUM = "premium"
    ENTERPRISE = "enterprise"


class Plan(BaseModel):
    model_config = ConfigDict(frozen=True, use_enum_values=True)

    plan: PlanType
    price: Decimal
    currency: str
    features: Tuple[str, ...]

    @property
    def is_paid(self) -> bool:
        return self.price > 0


class PlanCatalog(BaseModel):
    """Read-only mapping of plan name to Plan."""
    model_config = ConfigDict(frozen=True)

    plans: Tuple[Plan, ...]
    period_days: int

    def get(self, plan: str) -> Optional[Plan]:
        return self.as_dict().get(plan)

    def as_dict(self) -> Dict[str, Plan]:
        return {entry.plan: entry for entry in self.plans}


def build_plan_catalog(currency: str, period_days: int) -> PlanCatalog:
    return PlanCatalog(
        period_days=period_days,
        plans=(
            Plan(
                plan=PlanType.FREE,
                price=Decimal("0"),
                currency=currency,
                features=("Limited scans", "Basic analytics"),
            ),
            Plan(
                plan=PlanType.PREMIUM,
                price=Decimal("29.99"),
                currency=currency,
                features=(
                    "Unlimited scans",
                    "Priority expert support",
                    "Advanced analytics",
                    "Multi-farm management",
                ),
            ),
            Plan(
                plan=PlanType.ENTERPRISE,
                price=Decimal("99.99"),
                currency=currency,
                features=(
                    "Everything in Premium",
                    "Custom integrations",
                    "Dedicated support",
                    "API access",
                ),
            ),
        ),
    )


@lru_cache()
def get_plan_catalog() -> PlanCatalog:
    """FastAPI dependency returning the catalog configured in settings."""
    settings = get_settings()
    return build_plan_catalog(settings.SUBSCRIPTION_CURRENCY, settings.SUBSCRIPTION_PERIOD_DAYS)
