from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from ....application.services.subscription_service import SubscriptionService
from ....core.dependencies import get_subscription_service
from ....domain.errors import SubscriptionError
from ...api.errors import to_http_exception
from ...api.schemas.subscription_schemas import TotalSpentResponse

router = APIRouter(prefix="/analytics", tags=["Analytics"])


@router.get("/total", response_model=TotalSpentResponse)
async def get_total_spent(
    from_month: str = Query(..., alias="from", description="First month, MM-YYYY"),
    to_month: str = Query(..., alias="to", description="Last month, MM-YYYY"),
    user_id: Optional[UUID] = Query(default=None, description="Filter by user"),
    service_name: Optional[str] = Query(default=None, description="Filter by service name"),
    service: SubscriptionService = Depends(get_subscription_service),
) -> TotalSpentResponse:
    """Total price of the subscriptions active at some point in the period."""
    try:
        total = service.total_spent(
            from_month,
            to_month,
            user_id=user_id,
            service_name=service_name,
        )
    except SubscriptionError as exc:
        raise to_http_exception(exc) from exc
    return TotalSpentResponse(total=total)
