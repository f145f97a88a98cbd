"""
ARGB color value type.
"""

import math
from dataclasses import dataclass


def _channel(value: int, name: str) -> int:
    if not 0 <= value <= 255:
        raise ValueError(f"{name} must be between 0 and 255, got {value}")
    return int(value)


@dataclass(frozen=True)
class Color:
    """A 32-bit color with alpha, red, green and blue bytes."""

    a: int
    r: int
    g: int
    b: int

    def __post_init__(self):
        for name in ("a", "r", "g", "b"):
            object.__setattr__(self, name, _channel(getattr(self, name), name))

    @classmethod
    def from_rgb(cls, red: int, green: int, blue: int, alpha: int = 255) -> "Color":
        return cls(alpha, red, green, blue)

    @classmethod
    def from_argb(cls, argb: int) -> "Color":
        """Unpack a 0xAARRGGBB integer."""
        argb &= 0xFFFFFFFF
        return cls((argb >> 24) & 0xFF, (argb >> 16) & 0xFF, (argb >> 8) & 0xFF, argb & 0xFF)

    @classmethod
    def from_hex(cls, code: str) -> "Color":
        """
        Parse a web color code.

        Accepts ``rgb``, ``rrggbb`` and ``aarrggbb``, with or without a
        leading ``#``.
        """
        digits = code.strip().lstrip("#")

        try:
            if len(digits) == 8:
                return cls(int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16), int(digits[6:8], 16))
            if len(digits) == 6:
                return cls(255, int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16))
            if len(digits) == 3:
                # Each digit is doubled: "f80" -> "ff8800"
                return cls(255, *(int(d * 2, 16) for d in digits))
        except ValueError as e:
            raise ValueError(f"{code!r} is not a valid color code") from e

        raise ValueError(f"{code!r} is not a valid color code: expected 3, 6 or 8 hex digits")

    def to_argb(self) -> int:
        """Pack into a 0xAARRGGBB integer."""
        return (self.a << 24) | (self.r << 16) | (self.g << 8) | self.b

    def to_hex(self, include_alpha: bool = False) -> str:
        if include_alpha:
            return f"#{self.a:02X}{self.r:02X}{self.g:02X}{self.b:02X}"
        return f"#{self.r:02X}{self.g:02X}{self.b:02X}"

    @property
    def rgba(self) -> tuple[int, int, int, int]:
        """Channel tuple in the order pixel buffers store them."""
        return (self.r, self.g, self.b, self.a)

    @property
    def luminance(self) -> float:
        """Perceived luminance (0-255) using Rec. 601 weights."""
        return 0.299 * self.r + 0.587 * self.g + 0.114 * self.b

    @property
    def luminance_percentage(self) -> int:
        """Luminance as a percentage of full white, rounded half away from zero."""
        return int(math.floor(self.luminance * 100 / 255 + 0.5))

    @property
    def brightness(self) -> float:
        """Brightness (0.0 to 1.0): the largest channel over 255."""
        return max(self.r, self.g, self.b) / 255.0

    @property
    def is_pure_white(self) -> bool:
        return self.r == 255 and self.g == 255 and self.b == 255

    def __str__(self) -> str:
        return self.to_hex(include_alpha=True)


Color.WHITE = Color(255, 255, 255, 255)
Color.BLACK = Color(255, 0, 0, 0)
Color.TRANSPARENT = Color(0, 255, 255, 255)
Color.RED = Color(255, 255, 0, 0)
Color.GREEN = Color(255, 0, 128, 0)
Color.BLUE = Color(255, 0, 0, 255)
Color.GRAY = Color(255, 128, 128, 128)
