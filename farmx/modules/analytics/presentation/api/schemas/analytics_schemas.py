# 📄 File: farmx/modules/analytics/presentation/api/schemas/analytics_schemas.py
# 🧭 Purpose (Layman Explanation):
# Describes how the chart data and the data export look when sent to the app.
# 🧪 Purpose (Technical Summary):
# Pydantic v2 response schemas for analytics and pond analytics endpoints (camelCase).
# 🔗 Dependencies:
# pydantic, farmx.shared.utils.formatters, analytics domain models
# 🔄 Connected Modules / Calls From:
# farmx.modules.analytics.presentation.api.v1.analytics, farmx.modules.analytics.presentation.api.v1.ponds

"""
Analytics API Schemas

Response Schemas:
- HealthTrendsResponse: daily mean health score
- ScanFrequencyResponse: scans per day and daily average
- ExportResponse: raw scans for the scope and window
- PondAnalyticsResponse: one pond's totals, metric means and daily trend
"""

from datetime import date, datetime
from typing import Any, Dict, List, Optional

from pydantic import Field

from farmx.modules.analytics.domain.models.analytics import Period, Pond, ScanRecord
from farmx.shared.utils.formatters import CamelModel


class PeriodResponse(CamelModel):
    from_date: date = Field(..., serialization_alias="from")
    to_date: date = Field(..., serialization_alias="to")

    @classmethod
    def from_domain(cls, period: Period) -> "PeriodResponse":
        return cls(from_date=period.from_date, to_date=period.to_date)


class ExportPeriodResponse(CamelModel):
    from_date: datetime = Field(..., serialization_alias="from")
    to_date: datetime = Field(..., serialization_alias="to")


class HealthTrendPointResponse(CamelModel):
    date: str
    avg_health_score: int
    count: int


class HealthTrendsResponse(CamelModel):
    period: PeriodResponse
    trends: List[HealthTrendPointResponse]


class FrequencyPointResponse(CamelModel):
    date: str
    count: int


class ScanFrequencyResponse(CamelModel):
    period: PeriodResponse
    total_scans: int
    avg_daily_scans: float
    frequency: List[FrequencyPointResponse]


class ExportScanResponse(CamelModel):
    id: str
    pond: Optional[str] = None
    device_id: Optional[str] = None
    health_score: Any = None
    disease_prediction: Any = None
    metrics: Any = None
    image_url: Optional[str] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_domain(cls, scan: ScanRecord) -> "ExportScanResponse":
        return cls(
            id=scan.scan_id,
            pond=scan.pond_id,
            device_id=scan.device_id,
            health_score=scan.health_score,
            disease_prediction=scan.disease_prediction,
            metrics=scan.metrics,
            image_url=scan.image_url,
            created_at=scan.timestamp,
        )


class ExportResponse(CamelModel):
    exported_at: datetime
    period: ExportPeriodResponse
    farms: int
    ponds: int
    total_scans: int
    scans: List[ExportScanResponse]


class PondSummaryResponse(CamelModel):
    pond_id: str
    farm_id: str
    name: str

    @classmethod
    def from_domain(cls, pond: Pond) -> "PondSummaryResponse":
        return cls(pond_id=pond.pond_id, farm_id=pond.farm_id, name=pond.name)


class PondTrendPointResponse(CamelModel):
    date: str
    count: int
    avg_metrics: Dict[str, float]


class PondAnalyticsResponse(CamelModel):
    pond: PondSummaryResponse
    period: PeriodResponse
    total_scans: int
    avg_metrics: Dict[str, float]
    trend: List[PondTrendPointResponse]
