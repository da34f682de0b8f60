"""Closed set of service icons and the lookup used when rendering services."""

from enum import Enum
from typing import Optional


class ServiceIcon(str, Enum):
    """Icons a service may reference. Values are the icon component names."""
    BRIEFCASE = "Briefcase"
    USERS = "Users"
    TARGET = "Target"
    TRENDING_UP = "TrendingUp"
    LIGHTBULB = "Lightbulb"
    AWARD = "Award"
    BOOK_OPEN = "BookOpen"
    COMPASS = "Compass"
    HEART = "Heart"
    MESSAGE_CIRCLE = "MessageCircle"
    PRESENTATION = "Presentation"
    ROCKET = "Rocket"


DEFAULT_ICON = ServiceIcon.BRIEFCASE

_BY_NAME = {icon.value.lower(): icon for icon in ServiceIcon}
_BY_NAME.update({icon.name.lower(): icon for icon in ServiceIcon})


def resolve_icon(name: Optional[str]) -> ServiceIcon:
    """Map a stored icon name to a known icon, falling back to the default."""
    if not name:
        return DEFAULT_ICON
    return _BY_NAME.get(name.strip().lower(), DEFAULT_ICON)
