# 📄 File: farmx/modules/subscriptions/presentation/api/v1/subscriptions.py
# 🧭 Purpose (Layman Explanation):
# The web endpoints for memberships: see the plans, see your own plan, pick a plan,
# cancel, see your payments and check whether you have premium features.
#
# 🧪 Purpose (Technical Summary):
# FastAPI subscriptions router over SubscriptionService. GET /plans is public (listed in
# the authentication middleware's public paths); subscribe is rate limited.
#
# 🔗 Dependencies:
# - FastAPI router, Request
# - farmx.modules.subscriptions.domain.services.subscription_service
# - farmx.modules.subscriptions.presentation.api.schemas.subscription_schemas
# - farmx.api.middleware.rate_limiting (shared limiter)
#
# 🔄 Connected Modules / Calls From:
# - farmx.api.v1.router (mounted under /subscriptions)

"""
Subscriptions API Endpoints

Endpoints:
- GET /plans: Plan catalog (public)
- GET /current: Current subscription (created as free on first access)
- POST /subscribe: Change plan
- PUT /cancel: Cancel a paid plan
- GET /history: Payment ledger
- GET /access: Premium capability check
"""

import logging

from fastapi import APIRouter, Depends, Request

from farmx.api.middleware.rate_limiting import limiter
from farmx.modules.subscriptions.domain.models.plan import PlanCatalog, get_plan_catalog
from farmx.modules.subscriptions.domain.services.subscription_service import SubscriptionService
from farmx.modules.subscriptions.presentation.api.schemas.subscription_schemas import (
    AccessResponse,
    PaymentHistoryResponse,
    PaymentResponse,
    PlanListResponse,
    PlanResponse,
    SubscribeRequest,
    SubscriptionResponse,
)
from farmx.modules.user_management.presentation.dependencies import get_current_active_user
from farmx.shared.config.settings import get_settings
from farmx.shared.core.dependencies import CurrentUser

logger = logging.getLogger(__name__)
settings = get_settings()

# Create router
subscriptions_router = APIRouter()


@subscriptions_router.get(
    "/plans",
    response_model=PlanListResponse,
    summary="List plans",
    description="Available subscription plans with prices and features",
)
async def list_plans(catalog: PlanCatalog = Depends(get_plan_catalog)) -> PlanListResponse:
    return PlanListResponse(
        plans=[PlanResponse.from_domain(plan) for plan in catalog.plans],
        period_days=catalog.period_days,
    )


@subscriptions_router.get(
    "/current",
    response_model=SubscriptionResponse,
    summary="Get current subscription",
    description="The caller's subscription; a free subscription is created on first access",
)
async def get_current_subscription(
    current_user: CurrentUser = Depends(get_current_active_user),
    subscription_service: SubscriptionService = Depends(),
) -> SubscriptionResponse:
    subscription = await subscription_service.get_current(current_user.user_id)
    return SubscriptionResponse.from_domain(subscription)


@subscriptions_router.post(
    "/subscribe",
    response_model=SubscriptionResponse,
    summary="Subscribe to a plan",
    description="Switch to a plan. Paid plans run for the configured period and record a payment.",
    responses={
        200: {"description": "Updated subscription"},
        400: {"description": "Unknown plan"},
        409: {"description": "Subscription kept changing concurrently"},
        429: {"description": "Too many subscription attempts"},
    }
)
@limiter.limit(settings.SUBSCRIBE_RATE_LIMIT)
async def subscribe(
    request: Request,
    payload: SubscribeRequest,
    current_user: CurrentUser = Depends(get_current_active_user),
    subscription_service: SubscriptionService = Depends(),
) -> SubscriptionResponse:
    logger.info(f"User {current_user.user_id} subscribing to {payload.plan}")
    subscription = await subscription_service.subscribe(current_user.user_id, payload.plan)
    return SubscriptionResponse.from_domain(subscription)


@subscriptions_router.put(
    "/cancel",
    response_model=SubscriptionResponse,
    summary="Cancel subscription",
    description="Cancel a paid subscription and turn off auto-renewal",
    responses={
        200: {"description": "Cancelled subscription"},
        400: {"description": "Free plan cannot be cancelled"},
        404: {"description": "No subscription"},
    }
)
async def cancel_subscription(
    current_user: CurrentUser = Depends(get_current_active_user),
    subscription_service: SubscriptionService = Depends(),
) -> SubscriptionResponse:
    subscription = await subscription_service.cancel(current_user.user_id)
    return SubscriptionResponse.from_domain(subscription)


@subscriptions_router.get(
    "/history",
    response_model=PaymentHistoryResponse,
    summary="Payment history",
)
async def payment_history(
    current_user: CurrentUser = Depends(get_current_active_user),
    subscription_service: SubscriptionService = Depends(),
) -> PaymentHistoryResponse:
    records = await subscription_service.payment_history(current_user.user_id)
    return PaymentHistoryResponse(
        payments=[PaymentResponse.from_domain(record) for record in records],
        count=len(records),
    )


@subscriptions_router.get(
    "/access",
    response_model=AccessResponse,
    summary="Premium access check",
)
async def check_access(
    current_user: CurrentUser = Depends(get_current_active_user),
    subscription_service: SubscriptionService = Depends(),
) -> AccessResponse:
    return AccessResponse(**await subscription_service.access(current_user.user_id))
