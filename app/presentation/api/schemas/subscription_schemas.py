"""Pydantic schemas for subscription API endpoints."""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from ....domain.dates import format_month
from ....domain.models import Subscription, SubscriptionPatch


class SubscriptionCreateRequest(BaseModel):
    """Request schema for creating a subscription."""

    service_name: str = Field(..., max_length=120)
    price: int = Field(..., strict=True)
    user_id: UUID
    start_date: str = Field(..., description="Start month, MM-YYYY", examples=["07-2025"])


class SubscriptionUpdateRequest(BaseModel):
    """Request schema for a partial subscription update.

    Omitted fields are left untouched; ``end_date`` set to ``""`` or ``null``
    clears the end date.
    """

    service_name: Optional[str] = Field(default=None, max_length=120)
    price: Optional[int] = Field(default=None, strict=True)
    start_date: Optional[str] = Field(default=None, description="Start month, MM-YYYY")
    end_date: Optional[str] = Field(default=None, description="End month, MM-YYYY, or empty")

    def to_patch(self) -> SubscriptionPatch:
        fields = self.model_dump(exclude_unset=True)
        end_month: Optional[str] = None
        if "end_date" in fields:
            end_month = fields["end_date"] or ""
        return SubscriptionPatch(
            service_name=fields.get("service_name"),
            price=fields.get("price"),
            start_month=fields.get("start_date"),
            end_month=end_month,
        )


class SubscriptionResponse(BaseModel):
    """Response schema for subscription data."""

    id: UUID
    service_name: str
    price: int
    user_id: UUID
    start_date: datetime
    end_date: Optional[datetime]
    start_month: str
    end_month: Optional[str]
    is_open_ended: bool
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    @classmethod
    def from_entity(cls, subscription: Subscription) -> "SubscriptionResponse":
        return cls(
            id=subscription.id,
            service_name=subscription.service_name,
            price=subscription.price,
            user_id=subscription.user_id,
            start_date=subscription.start_date,
            end_date=subscription.end_date,
            start_month=format_month(subscription.start_date),
            end_month=format_month(subscription.end_date) if subscription.end_date else None,
            is_open_ended=subscription.is_open_ended(),
            created_at=subscription.created_at,
            updated_at=subscription.updated_at,
        )


class SubscriptionListResponse(BaseModel):
    """Response schema for a user's subscriptions."""

    items: List[SubscriptionResponse]
    count: int


class TotalSpentResponse(BaseModel):
    """Response schema for the spend aggregation."""

    total: int
