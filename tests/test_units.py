"""
Tests for numeric and color helpers.
"""

import pytest

from mailframe.utils.color_utils import (
    brightness,
    channel_to_byte,
    hex_brightness,
    hex_to_rgb,
    rgb_to_hex,
    rgba_css,
)
from mailframe.utils.units import format_number, js_round, parse_px, px, px_to_pt


class TestUnits:
    @pytest.mark.parametrize("value,expected", [(0.5, 1), (1.5, 2), (2.5, 3), (-0.5, 0), (-1.5, -1), (2.49, 2)])
    def test_js_round_half_up(self, value, expected):
        assert js_round(value) == expected

    @pytest.mark.parametrize("value,expected", [(12.0, "12"), (9.75, "9.75"), (0, "0"), (True, "1")])
    def test_format_number(self, value, expected):
        assert format_number(value) == expected

    def test_px(self):
        assert px(12.5) == "13px"
        assert px_to_pt(16) == "12pt"
        assert px_to_pt(13) == "9.75pt"

    @pytest.mark.parametrize("value,expected", [
        ("12px", 12),
        ("12.9px", 12),
        (" 40 ", 40),
        ("-3px", -3),
        ("auto", 0),
        (None, 0),
        ("", 0),
    ])
    def test_parse_px(self, value, expected):
        assert parse_px(value) == expected

    def test_parse_px_default(self):
        assert parse_px("auto", default=100) == 100


class TestColors:
    def test_channel_clamps(self):
        assert channel_to_byte(1.2) == 255
        assert channel_to_byte(-0.1) == 0
        assert channel_to_byte(0.5) == 128

    def test_hex(self):
        assert rgb_to_hex((1.0, 0.5, 0.0)) == "#ff8000"
        assert rgba_css((0.0, 0.0, 0.0), 0.5) == "rgba(0, 0, 0, 0.5)"

    @pytest.mark.parametrize("value,expected", [
        ("#fff", (1.0, 1.0, 1.0)),
        ("000000", (0.0, 0.0, 0.0)),
        ("#12345", None),
        ("#gggggg", None),
        ("", None),
    ])
    def test_hex_to_rgb(self, value, expected):
        assert hex_to_rgb(value) == expected

    def test_brightness(self):
        assert brightness((1.0, 1.0, 1.0)) == pytest.approx(255)
        assert hex_brightness("#f06522") == pytest.approx(240 * 0.299 + 101 * 0.587 + 34 * 0.114)
        assert hex_brightness("nope") is None
