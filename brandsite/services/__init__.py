"""Services package for Brandsite: data gateway, change feed, content and live views."""

from .gateway import DataGateway, classify_error
from .realtime import ChangeFeed, Subscription
from .retry import RetryOptions, with_retry

__all__ = [
    "DataGateway",
    "classify_error",
    "ChangeFeed",
    "Subscription",
    "RetryOptions",
    "with_retry",
]
