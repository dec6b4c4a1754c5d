"""Subscription domain model tracking a user's spend on a paid service."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from uuid import UUID


@dataclass(slots=True)
class Subscription:
    """
    Subscription entity representing a recurring payment to a service.

    Attributes:
        id: Unique identifier, assigned at creation
        service_name: Name of the paid service
        price: Monthly price in whole currency units
        user_id: Owner of the subscription
        start_date: First day of the starting month, 00:00:00 UTC
        end_date: Last day of the final month, 23:59:59 UTC, or None when open-ended
        created_at: Set by the store on insert
        updated_at: Refreshed by the store on every overwrite
    """

    id: UUID
    service_name: str
    price: int
    user_id: UUID
    start_date: datetime
    end_date: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def is_open_ended(self) -> bool:
        """Check if the subscription has no end date."""
        return self.end_date is None

    def __repr__(self) -> str:
        return (
            f"<Subscription id={self.id} user_id={self.user_id} "
            f"service={self.service_name!r} price={self.price}>"
        )


@dataclass(slots=True)
class SubscriptionPatch:
    """Partial update for a subscription.

    ``None`` means "leave untouched". For ``end_month`` the empty string means
    "clear the end date".
    """

    service_name: Optional[str] = None
    price: Optional[int] = None
    start_month: Optional[str] = None
    end_month: Optional[str] = None
