from __future__ import annotations

from datetime import datetime
from typing import List, Optional, Protocol
from uuid import UUID

from ..models import Subscription


class SubscriptionRepository(Protocol):
    """Durable keyed storage for subscription records.

    Driver failures surface as ``StoreError``; a missing row is reported through
    the return value, never raised.
    """

    def insert(self, subscription: Subscription) -> Subscription:
        ...

    def select_by_id(self, subscription_id: UUID) -> Optional[Subscription]:
        ...

    def update_by_id(self, subscription: Subscription) -> int:
        ...

    def delete_by_id(self, subscription_id: UUID) -> int:
        ...

    def select_by_user(self, user_id: UUID) -> List[Subscription]:
        ...

    def sum_by_overlap(
        self,
        window_start: datetime,
        window_end: datetime,
        user_id: Optional[UUID] = None,
        service_name: Optional[str] = None,
    ) -> int:
        ...


class PersistenceGateway(SubscriptionRepository, Protocol):
    """Composite gateway combining every persistence concern used by the app."""

    def ping(self) -> bool:
        ...

    def close(self) -> None:
        ...
