"""
Tests for name directives.
"""

import pytest

from mailframe.engine import directives


@pytest.mark.parametrize("name,directive,expected", [
    ("[table] Prices", directives.TABLE, True),
    ("[table]", directives.TABLE, True),
    ("Prices [table]", directives.TABLE, False),
    ("[Table] Prices", directives.TABLE, False),
    ("", directives.TABLE, False),
    ("[transparent] logo", directives.TRANSPARENT, True),
])
def test_has_directive(name, directive, expected):
    assert directives.has_directive(name, directive) is expected


@pytest.mark.parametrize("name,expected", [
    ("[link] https://example.com", "https://example.com"),
    ("[link]https://example.com/a b  ", "https://example.com/a b"),
    ("[link]", "#"),
    ("[link]    ", "#"),
    ("Button", None),
])
def test_link_url(name, expected):
    assert directives.link_url(name) == expected


@pytest.mark.parametrize("name,expected", [
    ("[gif] promo-1", "promo-1"),
    ("[gif]", ""),
    ("gif promo", None),
])
def test_gif_id(name, expected):
    assert directives.gif_id(name) == expected
