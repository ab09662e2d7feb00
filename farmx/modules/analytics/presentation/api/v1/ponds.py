# 📄 File: farmx/modules/analytics/presentation/api/v1/ponds.py
# 🧭 Purpose (Layman Explanation):
# The web endpoint that shows one pond's water readings over a chosen time range.
#
# 🧪 Purpose (Technical Summary):
# FastAPI pond analytics router: totals, per-metric means and a per-day trend between
# `from` and `to` (default: the last 30 days).
#
# 🔗 Dependencies:
# - FastAPI router, Query parameters
# - farmx.modules.analytics.domain.services.analytics_service
#
# 🔄 Connected Modules / Calls From:
# - farmx.api.v1.router (mounted under /ponds)

import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query

from farmx.modules.analytics.domain.services.analytics_service import AnalyticsService
from farmx.modules.analytics.presentation.api.schemas.analytics_schemas import (
    PeriodResponse,
    PondAnalyticsResponse,
    PondSummaryResponse,
    PondTrendPointResponse,
)
from farmx.modules.user_management.presentation.dependencies import get_current_active_user
from farmx.shared.core.dependencies import CurrentUser

logger = logging.getLogger(__name__)

# Create router
ponds_router = APIRouter()


@ponds_router.get(
    "/{pond_id}/analytics",
    response_model=PondAnalyticsResponse,
    summary="Pond analytics",
    description="Scan totals, metric averages and daily trend for one pond",
    responses={
        400: {"description": "Invalid window"},
        403: {"description": "Pond belongs to another user"},
        404: {"description": "Pond not found"},
    }
)
async def get_pond_analytics(
    pond_id: str,
    from_date: Optional[datetime] = Query(None, alias="from"),
    to_date: Optional[datetime] = Query(None, alias="to"),
    current_user: CurrentUser = Depends(get_current_active_user),
    analytics_service: AnalyticsService = Depends(),
) -> PondAnalyticsResponse:
    pond, period, analytics = await analytics_service.pond_analytics(current_user, pond_id, from_date, to_date)
    return PondAnalyticsResponse(
        pond=PondSummaryResponse.from_domain(pond),
        period=PeriodResponse.from_domain(period),
        total_scans=analytics.total_scans,
        avg_metrics=analytics.avg_metrics,
        trend=[PondTrendPointResponse(**point.model_dump()) for point in analytics.trend],
    )
