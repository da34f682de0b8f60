"""Slug and reading-time helpers shared by the content types."""

import math
import re

_NON_ALNUM = re.compile(r"[^a-z0-9]+")

WORDS_PER_MINUTE = 200


def slugify(title: str) -> str:
    """
    Derive a URL-safe slug from a title.

    Lowercases, collapses every run of characters outside ``[a-z0-9]`` into a
    single ``-`` and strips leading/trailing separators.

        >>> slugify("¡Hola, Mundo!  2024")
        'hola-mundo-2024'
    """
    return _NON_ALNUM.sub("-", (title or "").lower()).strip("-")


def estimate_reading_time(content: str) -> int:
    """Minutes needed to read `content`, never less than one."""
    words = len((content or "").split())
    return max(1, math.ceil(words / WORDS_PER_MINUTE))
