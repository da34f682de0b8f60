"""Tests for slug derivation, reading time and service icon lookup."""

import re

import pytest

from brandsite.core.icons import DEFAULT_ICON, ServiceIcon, resolve_icon
from brandsite.core.slug import estimate_reading_time, slugify

SLUG_RE = re.compile(r"^([a-z0-9]+(-[a-z0-9]+)*)?$")


@pytest.mark.parametrize(
    "title, expected",
    [
        ("¡Hola, Mundo!  2024", "hola-mundo-2024"),
        ("Liderazgo Estratégico", "liderazgo-estrat-gico"),
        ("  --Coaching__Ejecutivo--  ", "coaching-ejecutivo"),
        ("Plan 2025: Crecer + Innovar", "plan-2025-crecer-innovar"),
        ("ABC", "abc"),
        ("!!!", ""),
        ("", ""),
    ],
)
def test_slugify_examples(title, expected):
    assert slugify(title) == expected


@pytest.mark.parametrize(
    "title",
    [
        "Cómo negociar tu salario",
        "10 hábitos... de gente exitosa!!",
        "\tTabs\nand newlines\r",
        "Ñandú 🚀 rocket",
        "a--b__c  d",
    ],
)
def test_slug_is_url_safe(title):
    slug = slugify(title)
    assert SLUG_RE.match(slug)
    assert slug == slug.lower()
    assert not slug.startswith("-") and not slug.endswith("-")


def test_slugify_is_deterministic():
    assert slugify("Mismo Título") == slugify("Mismo Título")


def test_reading_time():
    assert estimate_reading_time("") == 1
    assert estimate_reading_time("palabra " * 200) == 1
    assert estimate_reading_time("palabra " * 201) == 2
    assert estimate_reading_time("palabra " * 1000) == 5


def test_resolve_icon_known_names():
    assert resolve_icon("Users") is ServiceIcon.USERS
    assert resolve_icon("trendingup") is ServiceIcon.TRENDING_UP
    assert resolve_icon("TRENDING_UP") is ServiceIcon.TRENDING_UP


@pytest.mark.parametrize("name", [None, "", "NoSuchIcon", "   "])
def test_resolve_icon_falls_back_to_default(name):
    assert resolve_icon(name) is DEFAULT_ICON
    assert DEFAULT_ICON is ServiceIcon.BRIEFCASE
