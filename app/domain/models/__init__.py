"""Domain models for the subscription service."""

from .subscription import Subscription, SubscriptionPatch

__all__ = [
    "Subscription",
    "SubscriptionPatch",
]
