"""Core module exports."""

from .exceptions import (
    ContentError,
    ValidationError,
    NotFoundError,
    ConstraintError,
    TransientError,
)
from .icons import DEFAULT_ICON, ServiceIcon, resolve_icon
from .slug import estimate_reading_time, slugify

__all__ = [
    "ContentError",
    "ValidationError",
    "NotFoundError",
    "ConstraintError",
    "TransientError",
    "DEFAULT_ICON",
    "ServiceIcon",
    "resolve_icon",
    "estimate_reading_time",
    "slugify",
]
