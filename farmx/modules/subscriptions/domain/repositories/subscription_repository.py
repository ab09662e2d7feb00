# 📄 File: farmx/modules/subscriptions/domain/repositories/subscription_repository.py
# 🧭 Purpose (Layman Explanation):
# Lists what the app needs to be able to do with stored subscriptions, without
# saying how the database does it.
# 🧪 Purpose (Technical Summary):
# Abstract repository for the Subscription aggregate: race-safe lazy creation,
# version-checked updates and the append-only payment ledger.
# 🔗 Dependencies:
# abc, farmx.modules.subscriptions.domain.models.subscription
# 🔄 Connected Modules / Calls From:
# subscription_service.py, SubscriptionRepositoryImpl

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from farmx.modules.subscriptions.domain.models.subscription import PaymentRecord, Subscription


class SubscriptionRepository(ABC):
    """
    Abstract repository interface for subscription data access operations.
    """

    @abstractmethod
    async def get_by_user(self, user_id: str) -> Optional[Subscription]:
        """Current subscription for the user, including its ledger."""
        pass

    @abstractmethod
    async def create_if_absent(self, subscription: Subscription) -> Subscription:
        """
        Insert the subscription unless the user already has one.

        Returns whichever subscription ends up stored; a concurrent creator
        that wins the race is re-read and returned.
        """
        pass

    @abstractmethod
    async def update_versioned(
        self,
        subscription_id: str,
        expected_version: int,
        changes: Dict[str, Any]
    ) -> Subscription:
        """
        Raises:
            ConflictError: stored version differs from expected_version
            NotFoundError: subscription does not exist
        """
        pass

    @abstractmethod
    async def append_payment(self, subscription_id: str, record: PaymentRecord) -> None:
        """Append one ledger entry; existing entries are never touched."""
        pass
