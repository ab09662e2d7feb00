# 📄 File: farmx/modules/analytics/infrastructure/database/analytics_repository_impl.py
# 🧭 Purpose (Layman Explanation):
# Reads farms, ponds and scans out of the database for the analytics charts.
# 🧪 Purpose (Technical Summary):
# SQLAlchemy implementation of AnalyticsRepository; read-only windowed scan queries.
# 🔗 Dependencies:
# SQLAlchemy, farmx.shared.infrastructure.database.session
# 🔄 Connected Modules / Calls From:
# analytics_service.py

import logging
from datetime import datetime
from typing import List, Optional, Sequence

from fastapi import Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from farmx.modules.analytics.domain.models.analytics import Farm, Pond, ScanRecord
from farmx.modules.analytics.domain.repositories.analytics_repository import AnalyticsRepository
from farmx.modules.analytics.infrastructure.database.models import FarmModel, PondModel, ScanResultModel
from farmx.shared.infrastructure.database.session import get_db_session

logger = logging.getLogger(__name__)


class AnalyticsRepositoryImpl(AnalyticsRepository):
    """SQLAlchemy implementation of analytics repository."""

    def __init__(self, session: AsyncSession = Depends(get_db_session)):
        self.session = session

    async def get_pond(self, pond_id: str) -> Optional[Pond]:
        model = await self.session.get(PondModel, pond_id)
        return self._pond_to_domain(model) if model else None

    async def get_farm(self, farm_id: str) -> Optional[Farm]:
        model = await self.session.get(FarmModel, farm_id)
        return self._farm_to_domain(model) if model else None

    async def list_active_farms(self, owner_id: str) -> List[Farm]:
        query = (
            select(FarmModel)
            .where(FarmModel.owner_id == owner_id, FarmModel.is_active.is_(True))
            .order_by(FarmModel.created_at)
        )
        result = await self.session.execute(query)
        return [self._farm_to_domain(model) for model in result.scalars().all()]

    async def list_active_ponds(self, farm_ids: Sequence[str]) -> List[Pond]:
        if not farm_ids:
            return []
        query = (
            select(PondModel)
            .where(PondModel.farm_id.in_(list(farm_ids)), PondModel.is_active.is_(True))
            .order_by(PondModel.created_at)
        )
        result = await self.session.execute(query)
        return [self._pond_to_domain(model) for model in result.scalars().all()]

    async def list_scans(
        self,
        pond_ids: Sequence[str],
        start: datetime,
        end: datetime,
    ) -> List[ScanRecord]:
        if not pond_ids:
            return []
        query = (
            select(ScanResultModel)
            .where(
                ScanResultModel.pond_id.in_(list(pond_ids)),
                ScanResultModel.is_active.is_(True),
                ScanResultModel.timestamp >= start,
                ScanResultModel.timestamp <= end,
            )
            .order_by(ScanResultModel.timestamp.desc())
        )
        result = await self.session.execute(query)
        scans = [self._scan_to_domain(model) for model in result.scalars().all()]
        logger.debug(f"Loaded {len(scans)} scans for {len(pond_ids)} ponds between {start} and {end}")
        return scans

    @staticmethod
    def _farm_to_domain(model: FarmModel) -> Farm:
        return Farm(
            farm_id=model.farm_id,
            owner_id=model.owner_id,
            name=model.name,
            location=model.location,
            status=model.status,
            is_active=model.is_active,
        )

    @staticmethod
    def _pond_to_domain(model: PondModel) -> Pond:
        return Pond(
            pond_id=model.pond_id,
            farm_id=model.farm_id,
            name=model.name,
            area=model.area,
            status=model.status,
            is_active=model.is_active,
        )

    @staticmethod
    def _scan_to_domain(model: ScanResultModel) -> ScanRecord:
        return ScanRecord(
            scan_id=model.scan_id,
            pond_id=model.pond_id,
            device_id=model.device_id,
            timestamp=model.timestamp,
            health_score=model.health_score,
            metrics=model.metrics if model.metrics is not None else {},
            disease_prediction=model.disease_prediction,
            image_url=model.image_url,
        )
