# 📄 File: farmx/modules/analytics/domain/services/analytics_service.py
# 🧭 Purpose (Layman Explanation):
# Works out which ponds a farmer is allowed to see, fetches their scans for the chosen
# time range and hands them to the number cruncher for the charts and exports.
# 🧪 Purpose (Technical Summary):
# Analytics application service: access scoping (pond ownership, admin override),
# window resolution and delegation to the pure aggregator functions.
# 🔗 Dependencies:
# AnalyticsRepository, aggregator, farmx.shared.core.exceptions, settings
# 🔄 Connected Modules / Calls From:
# Analytics and pond API endpoints

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Tuple

from fastapi import Depends

from farmx.modules.analytics.domain.models.analytics import (
    HealthTrendPoint,
    Period,
    Pond,
    PondAnalytics,
    ScanFrequency,
    ScanRecord,
)
from farmx.modules.analytics.domain.repositories.analytics_repository import AnalyticsRepository
from farmx.modules.analytics.domain.services import aggregator
from farmx.shared.config.settings import get_settings
from farmx.shared.core.dependencies import CurrentUser
from farmx.shared.core.exceptions import AuthorizationError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)


class AnalyticsService:
    """
    Scoped analytics queries over scan results.
    """

    def __init__(self, analytics_repository: AnalyticsRepository = Depends()):
        self.analytics_repository = analytics_repository
        self.settings = get_settings()

    # Scoping

    async def get_accessible_pond(self, caller: CurrentUser, pond_id: str) -> Pond:
        """
        Raises:
            NotFoundError: pond missing or inactive
            AuthorizationError: pond's farm is not the caller's (admins exempt)
        """
        pond = await self.analytics_repository.get_pond(pond_id)
        if pond is None or not pond.is_active:
            raise NotFoundError("Pond not found", resource_type="pond", resource_id=pond_id)

        if caller.is_admin():
            return pond

        farm = await self.analytics_repository.get_farm(pond.farm_id)
        if farm is None or not farm.is_active or farm.owner_id != caller.user_id:
            raise AuthorizationError(
                "Access denied",
                resource_type="pond",
                resource_id=pond_id,
                required_action="read",
                user_id=caller.user_id,
            )
        return pond

    async def resolve_scope(self, caller: CurrentUser, pond_id: Optional[str]) -> Tuple[int, List[str]]:
        """(farm count, pond ids) the query covers."""
        if pond_id:
            pond = await self.get_accessible_pond(caller, pond_id)
            return 1, [pond.pond_id]

        farms = await self.analytics_repository.list_active_farms(caller.user_id)
        ponds = await self.analytics_repository.list_active_ponds([farm.farm_id for farm in farms])
        return len(farms), [pond.pond_id for pond in ponds]

    def resolve_days(self, days: Optional[int]) -> int:
        if days is None:
            return self.settings.ANALYTICS_DEFAULT_DAYS
        if days < 1 or days > self.settings.ANALYTICS_MAX_DAYS:
            raise ValidationError(
                f"days must be between 1 and {self.settings.ANALYTICS_MAX_DAYS}",
                field="days",
                value=days,
            )
        return days

    @staticmethod
    def window(days: int, now: Optional[datetime] = None) -> Tuple[datetime, datetime]:
        end = now or datetime.now(timezone.utc)
        return end - timedelta(days=days), end

    async def _scans_for(
        self, caller: CurrentUser, pond_id: Optional[str], days: Optional[int]
    ) -> Tuple[int, List[str], int, datetime, datetime, List[ScanRecord]]:
        days = self.resolve_days(days)
        farms, pond_ids = await self.resolve_scope(caller, pond_id)
        start, end = self.window(days)
        scans = await self.analytics_repository.list_scans(pond_ids, start, end)
        return farms, pond_ids, days, start, end, scans

    # Queries

    async def health_trends(
        self, caller: CurrentUser, pond_id: Optional[str] = None, days: Optional[int] = None
    ) -> Tuple[Period, List[HealthTrendPoint]]:
        _, _, _, start, end, scans = await self._scans_for(caller, pond_id, days)
        return Period(from_date=start.date(), to_date=end.date()), aggregator.health_trend(scans)

    async def scan_frequency(
        self, caller: CurrentUser, pond_id: Optional[str] = None, days: Optional[int] = None
    ) -> Tuple[Period, ScanFrequency]:
        _, _, days, start, end, scans = await self._scans_for(caller, pond_id, days)
        return Period(from_date=start.date(), to_date=end.date()), aggregator.scan_frequency(scans, days)

    async def export(
        self, caller: CurrentUser, pond_id: Optional[str] = None, days: Optional[int] = None
    ) -> Dict[str, Any]:
        farms, pond_ids, _, start, end, scans = await self._scans_for(caller, pond_id, days)
        logger.info(f"Analytics export for {caller.user_id}: {len(scans)} scans across {len(pond_ids)} ponds")
        return {
            "exported_at": datetime.now(timezone.utc),
            "period": {"from": start, "to": end},
            "farms": farms,
            "ponds": len(pond_ids),
            "total_scans": len(scans),
            "scans": scans,
        }

    async def pond_analytics(
        self,
        caller: CurrentUser,
        pond_id: str,
        from_date: Optional[datetime] = None,
        to_date: Optional[datetime] = None,
    ) -> Tuple[Pond, Period, PondAnalytics]:
        pond = await self.get_accessible_pond(caller, pond_id)

        end = _as_utc(to_date) if to_date else datetime.now(timezone.utc)
        start = _as_utc(from_date) if from_date else end - timedelta(days=self.settings.ANALYTICS_DEFAULT_DAYS)
        if start > end:
            raise ValidationError("from must not be after to", field="from", value=start.isoformat())

        scans = await self.analytics_repository.list_scans([pond.pond_id], start, end)
        return pond, Period(from_date=start.date(), to_date=end.date()), aggregator.pond_analytics(scans)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
