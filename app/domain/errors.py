"""Errors raised by the subscription domain."""


class SubscriptionError(Exception):
    """Base class for every error the subscription domain raises."""


class ValidationError(SubscriptionError, ValueError):
    """A field value is malformed or out of range."""


class InvalidDateFormat(ValidationError):
    """A month-year token does not match ``MM-YYYY`` or names a month outside 1-12."""

    def __init__(self, token: str) -> None:
        super().__init__(f"Invalid date format {token!r}, expected MM-YYYY")
        self.token = token


class NotFound(SubscriptionError, LookupError):
    """The targeted subscription does not exist."""

    def __init__(self, subscription_id: object) -> None:
        super().__init__(f"Subscription {subscription_id} not found")
        self.subscription_id = subscription_id


class StoreError(SubscriptionError, RuntimeError):
    """The record store failed; not interpreted or retried by the domain."""
