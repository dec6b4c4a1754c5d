from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status

from ....application.services.subscription_service import SubscriptionService
from ....core.dependencies import get_subscription_service
from ....domain.errors import SubscriptionError
from ...api.errors import to_http_exception
from ...api.schemas.subscription_schemas import (
    SubscriptionCreateRequest,
    SubscriptionListResponse,
    SubscriptionResponse,
    SubscriptionUpdateRequest,
)

router = APIRouter(prefix="/subscriptions", tags=["Subscriptions"])


@router.post("", status_code=status.HTTP_201_CREATED, response_model=SubscriptionResponse)
async def create_subscription(
    payload: SubscriptionCreateRequest,
    service: SubscriptionService = Depends(get_subscription_service),
) -> SubscriptionResponse:
    try:
        subscription = service.create(
            service_name=payload.service_name,
            price=payload.price,
            user_id=payload.user_id,
            start_month=payload.start_date,
        )
    except SubscriptionError as exc:
        raise to_http_exception(exc) from exc
    return SubscriptionResponse.from_entity(subscription)


@router.get("", response_model=SubscriptionListResponse)
async def list_user_subscriptions(
    user_id: UUID = Query(..., description="Owner of the subscriptions"),
    service: SubscriptionService = Depends(get_subscription_service),
) -> SubscriptionListResponse:
    try:
        subscriptions = service.list_by_user(user_id)
    except SubscriptionError as exc:
        raise to_http_exception(exc) from exc
    items = [SubscriptionResponse.from_entity(item) for item in subscriptions]
    return SubscriptionListResponse(items=items, count=len(items))


@router.get("/{subscription_id}", response_model=SubscriptionResponse)
async def get_subscription(
    subscription_id: UUID,
    service: SubscriptionService = Depends(get_subscription_service),
) -> SubscriptionResponse:
    try:
        subscription = service.get(subscription_id)
    except SubscriptionError as exc:
        raise to_http_exception(exc) from exc
    return SubscriptionResponse.from_entity(subscription)


@router.patch("/{subscription_id}", response_model=SubscriptionResponse)
@router.put("/{subscription_id}", response_model=SubscriptionResponse)
async def update_subscription(
    subscription_id: UUID,
    payload: SubscriptionUpdateRequest,
    service: SubscriptionService = Depends(get_subscription_service),
) -> SubscriptionResponse:
    try:
        subscription = service.update(subscription_id, payload.to_patch())
    except SubscriptionError as exc:
        raise to_http_exception(exc) from exc
    return SubscriptionResponse.from_entity(subscription)


@router.delete("/{subscription_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_subscription(
    subscription_id: UUID,
    service: SubscriptionService = Depends(get_subscription_service),
) -> Response:
    try:
        service.delete(subscription_id)
    except SubscriptionError as exc:
        raise to_http_exception(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)
