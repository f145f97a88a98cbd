"""
Tests for the Color value type
"""

import pytest

from docraster.drawing import Color


class TestColorConstruction:
    """Parsing and packing"""

    def test_channels_validated(self):
        with pytest.raises(ValueError):
            Color(256, 0, 0, 0)
        with pytest.raises(ValueError):
            Color(255, -1, 0, 0)

    def test_from_rgb_defaults_opaque(self):
        assert Color.from_rgb(1, 2, 3) == Color(255, 1, 2, 3)

    @pytest.mark.parametrize(
        "code,expected",
        [
            ("#FF8800", Color(255, 255, 136, 0)),
            ("ff8800", Color(255, 255, 136, 0)),
            ("#f80", Color(255, 255, 136, 0)),
            ("#80FF8800", Color(128, 255, 136, 0)),
        ],
    )
    def test_from_hex(self, code, expected):
        assert Color.from_hex(code) == expected

    @pytest.mark.parametrize("code", ["", "#12", "#12345", "#GGGGGG"])
    def test_from_hex_invalid(self, code):
        with pytest.raises(ValueError):
            Color.from_hex(code)

    def test_argb_packing(self):
        color = Color(0x80, 0x12, 0x34, 0x56)
        assert color.to_argb() == 0x80123456
        assert Color.from_argb(0x80123456) == color

    def test_to_hex(self):
        color = Color(0x80, 0x12, 0x34, 0x56)
        assert color.to_hex() == "#123456"
        assert color.to_hex(include_alpha=True) == "#80123456"
        assert str(color) == "#80123456"


class TestColorProperties:
    """Derived measurements"""

    def test_rgba_order(self, red):
        assert red.rgba == (255, 0, 0, 255)

    def test_luminance(self):
        assert Color.WHITE.luminance == pytest.approx(255.0)
        assert Color.BLACK.luminance == 0.0
        assert Color.from_rgb(0, 255, 0).luminance == pytest.approx(0.587 * 255)

    def test_luminance_percentage(self):
        assert Color.WHITE.luminance_percentage == 100
        assert Color.BLACK.luminance_percentage == 0
        assert Color.from_rgb(128, 128, 128).luminance_percentage == 50

    def test_brightness(self):
        assert Color.from_rgb(0, 51, 0).brightness == pytest.approx(0.2)

    def test_pure_white_ignores_alpha(self):
        assert Color.TRANSPARENT.is_pure_white
        assert not Color.from_rgb(255, 255, 254).is_pure_white

    def test_immutable(self, red):
        with pytest.raises(AttributeError):
            red.r = 0
