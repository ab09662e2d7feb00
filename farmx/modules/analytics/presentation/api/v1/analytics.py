# 📄 File: farmx/modules/analytics/presentation/api/v1/analytics.py
# 🧭 Purpose (Layman Explanation):
# The web endpoints for farm charts: health over time, how often ponds were scanned,
# and a download of all the scan data.
#
# 🧪 Purpose (Technical Summary):
# FastAPI analytics router over AnalyticsService. Scope is one pond (pondId) or all of
# the caller's active ponds; the window is the last `days` days.
#
# 🔗 Dependencies:
# - FastAPI router, Query parameters
# - farmx.modules.analytics.domain.services.analytics_service
# - farmx.modules.analytics.presentation.api.schemas.analytics_schemas
#
# 🔄 Connected Modules / Calls From:
# - farmx.api.v1.router (mounted under /analytics)

"""
Analytics API Endpoints

Endpoints:
- GET /health-trends: Daily mean health score
- GET /scan-frequency: Scans per day and the daily average
- GET /export: Scans in the window as a JSON download
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response

from farmx.modules.analytics.domain.services.analytics_service import AnalyticsService
from farmx.modules.analytics.presentation.api.schemas.analytics_schemas import (
    ExportPeriodResponse,
    ExportResponse,
    ExportScanResponse,
    FrequencyPointResponse,
    HealthTrendPointResponse,
    HealthTrendsResponse,
    PeriodResponse,
    ScanFrequencyResponse,
)
from farmx.modules.user_management.presentation.dependencies import get_current_active_user
from farmx.shared.core.dependencies import CurrentUser

logger = logging.getLogger(__name__)

# Create router
analytics_router = APIRouter()

_POND_RESPONSES = {
    400: {"description": "Invalid window"},
    403: {"description": "Pond belongs to another user"},
    404: {"description": "Pond not found"},
}


@analytics_router.get(
    "/health-trends",
    response_model=HealthTrendsResponse,
    summary="Health score trends",
    description="Mean health score per UTC day over the last `days` days",
    responses=_POND_RESPONSES,
)
async def get_health_trends(
    pond_id: Optional[str] = Query(None, alias="pondId"),
    days: Optional[int] = Query(None, description="Window length in days"),
    current_user: CurrentUser = Depends(get_current_active_user),
    analytics_service: AnalyticsService = Depends(),
) -> HealthTrendsResponse:
    period, trends = await analytics_service.health_trends(current_user, pond_id, days)
    return HealthTrendsResponse(
        period=PeriodResponse.from_domain(period),
        trends=[HealthTrendPointResponse(**point.model_dump()) for point in trends],
    )


@analytics_router.get(
    "/scan-frequency",
    response_model=ScanFrequencyResponse,
    summary="Scan frequency",
    description="Scans per UTC day and the average over the whole window",
    responses=_POND_RESPONSES,
)
async def get_scan_frequency(
    pond_id: Optional[str] = Query(None, alias="pondId"),
    days: Optional[int] = Query(None, description="Window length in days"),
    current_user: CurrentUser = Depends(get_current_active_user),
    analytics_service: AnalyticsService = Depends(),
) -> ScanFrequencyResponse:
    period, stats = await analytics_service.scan_frequency(current_user, pond_id, days)
    return ScanFrequencyResponse(
        period=PeriodResponse.from_domain(period),
        total_scans=stats.total_scans,
        avg_daily_scans=stats.avg_daily_scans,
        frequency=[FrequencyPointResponse(**point.model_dump()) for point in stats.frequency],
    )


@analytics_router.get(
    "/export",
    response_model=ExportResponse,
    summary="Export analytics data",
    description="All scans in scope for the window, newest first, as a JSON attachment",
    responses=_POND_RESPONSES,
)
async def export_analytics(
    response: Response,
    pond_id: Optional[str] = Query(None, alias="pondId"),
    days: Optional[int] = Query(None, description="Window length in days"),
    current_user: CurrentUser = Depends(get_current_active_user),
    analytics_service: AnalyticsService = Depends(),
) -> ExportResponse:
    data = await analytics_service.export(current_user, pond_id, days)

    stamp = datetime.now(timezone.utc).strftime("%Y%m%d%H%M%S")
    response.headers["Content-Disposition"] = f'attachment; filename="analytics-{stamp}.json"'

    return ExportResponse(
        exported_at=data["exported_at"],
        period=ExportPeriodResponse(from_date=data["period"]["from"], to_date=data["period"]["to"]),
        farms=data["farms"],
        ponds=data["ponds"],
        total_scans=data["total_scans"],
        scans=[ExportScanResponse.from_domain(scan) for scan in data["scans"]],
    )
