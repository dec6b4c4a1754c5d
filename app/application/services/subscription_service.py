from __future__ import annotations

import logging
import uuid
from dataclasses import replace
from typing import List, Optional
from uuid import UUID

from ...domain.dates import format_month, normalize_end, normalize_start
from ...domain.errors import NotFound, ValidationError
from ...domain.models import Subscription, SubscriptionPatch
from ...domain.ports.persistence import SubscriptionRepository


class SubscriptionService:
    """Owns the subscription lifecycle and the spend aggregation query.

    The service keeps no state between calls. ``update`` reads then writes
    without a version token, so concurrent writers to the same id resolve
    last-writer-wins, and an update racing a delete ends in ``NotFound``.
    """

    MIN_PRICE = 1
    # Largest value an SQLite INTEGER column holds.
    MAX_PRICE = 2**63 - 1

    def __init__(
        self,
        repository: SubscriptionRepository,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._repository = repository
        self._logger = logger or logging.getLogger(__name__)

    # CRUD operations ------------------------------------------------------
    def create(
        self,
        service_name: str,
        price: int,
        user_id: UUID,
        start_month: str,
    ) -> Subscription:
        clean_name = self._validate_service_name(service_name)
        self._validate_price(price)
        start_date = normalize_start(start_month)

        subscription = self._repository.insert(
            Subscription(
                id=uuid.uuid4(),
                service_name=clean_name,
                price=price,
                user_id=user_id,
                start_date=start_date,
                end_date=None,
            )
        )
        self._logger.info(
            "Subscription %s created for user %s (%s, %d from %s)",
            subscription.id,
            user_id,
            clean_name,
            price,
            format_month(start_date),
        )
        return subscription

    def get(self, subscription_id: UUID) -> Subscription:
        subscription = self._repository.select_by_id(subscription_id)
        if subscription is None:
            self._logger.warning("Subscription %s not found", subscription_id)
            raise NotFound(subscription_id)
        return subscription

    def update(self, subscription_id: UUID, patch: SubscriptionPatch) -> Subscription:
        current = self.get(subscription_id)
        merged = self._merge(current, patch)

        if self._repository.update_by_id(merged) == 0:
            # Deleted between our read and our write.
            self._logger.warning("Subscription %s vanished before update", subscription_id)
            raise NotFound(subscription_id)

        stored = self._repository.select_by_id(subscription_id)
        self._logger.info("Subscription %s updated", subscription_id)
        return stored if stored is not None else merged

    def delete(self, subscription_id: UUID) -> None:
        if self._repository.delete_by_id(subscription_id) == 0:
            self._logger.warning("Subscription %s not found for deletion", subscription_id)
            raise NotFound(subscription_id)
        self._logger.info("Subscription %s deleted", subscription_id)

    # Queries --------------------------------------------------------------
    def list_by_user(self, user_id: UUID) -> List[Subscription]:
        subscriptions = self._repository.select_by_user(user_id)
        self._logger.debug("Found %d subscriptions for user %s", len(subscriptions), user_id)
        return subscriptions

    def total_spent(
        self,
        from_month: str,
        to_month: str,
        user_id: Optional[UUID] = None,
        service_name: Optional[str] = None,
    ) -> int:
        """
        Sum the price of every subscription active at some point in the window.

        The window covers whole months: ``from_month`` starts at its first day
        and ``to_month`` ends at its last second. A subscription counts when it
        starts on or before the window end and is open-ended or ends on or after
        the window start.

        Args:
            from_month: First month of the window, ``MM-YYYY``
            to_month: Last month of the window, ``MM-YYYY``
            user_id: Only count this user's subscriptions
            service_name: Only count subscriptions to this service

        Returns:
            Total price, 0 when nothing matches

        Raises:
            InvalidDateFormat: If either token is malformed
        """
        window_start = normalize_start(from_month)
        window_end = normalize_end(to_month)

        total = self._repository.sum_by_overlap(
            window_start,
            window_end,
            user_id=user_id,
            service_name=service_name,
        )
        self._logger.info(
            "Total spent %s..%s (user=%s, service=%s): %d",
            from_month,
            to_month,
            user_id,
            service_name,
            total,
        )
        return total

    # Helpers ----------------------------------------------------------------
    def _merge(self, current: Subscription, patch: SubscriptionPatch) -> Subscription:
        merged = replace(current)
        if patch.service_name is not None:
            merged.service_name = self._validate_service_name(patch.service_name)
        if patch.price is not None:
            self._validate_price(patch.price)
            merged.price = patch.price
        if patch.start_month is not None:
            merged.start_date = normalize_start(patch.start_month)
        if patch.end_month is not None:
            merged.end_date = normalize_end(patch.end_month) if patch.end_month else None

        if merged.end_date is not None and merged.end_date < merged.start_date:
            raise ValidationError(
                f"End month {format_month(merged.end_date)} precedes "
                f"start month {format_month(merged.start_date)}"
            )
        return merged

    @staticmethod
    def _validate_service_name(service_name: str) -> str:
        clean_name = (service_name or "").strip()
        if not clean_name:
            raise ValidationError("Service name must not be empty.")
        return clean_name

    def _validate_price(self, price: int) -> None:
        if isinstance(price, bool) or not isinstance(price, int):
            raise ValidationError("Price must be an integer.")
        if price < self.MIN_PRICE:
            raise ValidationError(f"Price must be at least {self.MIN_PRICE}.")
        if price > self.MAX_PRICE:
            raise ValidationError(f"Price must be at most {self.MAX_PRICE}.")
