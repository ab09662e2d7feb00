# 📄 File: farmx/modules/analytics/domain/repositories/analytics_repository.py
# 🧭 Purpose (Layman Explanation):
# Lists what the charts need from storage: farms, ponds and the scans in a time range.
# 🧪 Purpose (Technical Summary):
# Read-only repository interface for the analytics module.
# 🔗 Dependencies:
# abc, farmx.modules.analytics.domain.models.analytics
# 🔄 Connected Modules / Calls From:
# analytics_service.py, AnalyticsRepositoryImpl

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional, Sequence

from farmx.modules.analytics.domain.models.analytics import Farm, Pond, ScanRecord


class AnalyticsRepository(ABC):
    """
    Abstract repository interface for analytics reads.
    """

    @abstractmethod
    async def get_pond(self, pond_id: str) -> Optional[Pond]:
        pass

    @abstractmethod
    async def get_farm(self, farm_id: str) -> Optional[Farm]:
        pass

    @abstractmethod
    async def list_active_farms(self, owner_id: str) -> List[Farm]:
        pass

    @abstractmethod
    async def list_active_ponds(self, farm_ids: Sequence[str]) -> List[Pond]:
        pass

    @abstractmethod
    async def list_scans(
        self,
        pond_ids: Sequence[str],
        start: datetime,
        end: datetime,
    ) -> List[ScanRecord]:
        """Active scans for the ponds with start <= timestamp <= end, newest first."""
        pass
