# 📄 File: farmx/modules/analytics/domain/models/analytics.py
# 🧭 Purpose (Layman Explanation):
# Describes farms, ponds and the water-quality scans taken in them, plus the shapes of
# the charts we build from those scans (health over time, scans per day, averages).
# 🧪 Purpose (Technical Summary):
# Domain models for the analytics module. ScanRecord deliberately keeps loosely typed
# score/metric fields: scans arrive from devices and the aggregator decides per record
# what is usable.
# 🔗 Dependencies:
# pydantic, datetime
# 🔄 Connected Modules / Calls From:
# aggregator.py, analytics_service.py, analytics_repository_impl.py, analytics API schemas

from datetime import date, datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Farm(BaseModel):
    farm_id: str
    owner_id: str
    name: str
    location: Optional[str] = None
    status: str = "active"
    is_active: bool = True


class Pond(BaseModel):
    pond_id: str
    farm_id: str
    name: str
    area: Optional[float] = None
    status: str = "active"
    is_active: bool = True


class ScanRecord(BaseModel):
    """A device scan as stored; fields may be missing or malformed."""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    scan_id: str
    pond_id: Optional[str] = None
    device_id: Optional[str] = None
    timestamp: Optional[datetime] = None
    health_score: Any = None
    metrics: Any = Field(default_factory=dict)
    disease_prediction: Any = None
    image_url: Optional[str] = None


class Period(BaseModel):
    from_date: date
    to_date: date


# =============================================================================
# AGGREGATION RESULTS
# =============================================================================

class HealthTrendPoint(BaseModel):
    date: str
    avg_health_score: int
    count: int


class FrequencyPoint(BaseModel):
    date: str
    count: int


class ScanFrequency(BaseModel):
    total_scans: int
    avg_daily_scans: float
    frequency: List[FrequencyPoint]


class PondTrendPoint(BaseModel):
    date: str
    count: int
    avg_metrics: Dict[str, float]


class PondAnalytics(BaseModel):
    total_scans: int
    avg_metrics: Dict[str, float]
    trend: List[PondTrendPoint]
