"""
Geometry primitives with unit-aware conversion.

Raster operations work in pixel space. Rectangles measured in physical
units must be converted with ``convert_to(MeasurementUnits.PIXELS, dpi)``
before they are passed to an operation.
"""

from dataclasses import dataclass
from enum import Enum


MILLIMETERS_PER_INCH = 25.4
POINTS_PER_INCH = 72.0


class MeasurementUnits(str, Enum):
    """Units of measurement."""

    PIXELS = "pixels"
    MILLIMETERS = "millimeters"
    CENTIMETERS = "centimeters"
    INCHES = "inches"
    POINTS = "points"


# Length of one unit, in inches. Pixels depend on DPI and are handled apart.
_INCHES_PER_UNIT = {
    MeasurementUnits.MILLIMETERS: 1.0 / MILLIMETERS_PER_INCH,
    MeasurementUnits.CENTIMETERS: 10.0 / MILLIMETERS_PER_INCH,
    MeasurementUnits.INCHES: 1.0,
    MeasurementUnits.POINTS: 1.0 / POINTS_PER_INCH,
}


def conversion_factor(
    from_units: MeasurementUnits,
    to_units: MeasurementUnits,
    dpi: int = 96,
) -> float:
    """
    Factor that converts a length in ``from_units`` into ``to_units``.

    Args:
        from_units: Source unit.
        to_units: Target unit.
        dpi: Dots per inch used when either side is in pixels.

    Returns:
        Multiplicative conversion factor.
    """
    if dpi <= 0:
        raise ValueError(f"DPI must be positive, got {dpi}")

    if from_units == to_units:
        return 1.0

    from_inches = 1.0 / dpi if from_units == MeasurementUnits.PIXELS else _INCHES_PER_UNIT.get(from_units)
    to_inches = 1.0 / dpi if to_units == MeasurementUnits.PIXELS else _INCHES_PER_UNIT.get(to_units)

    if from_inches is None or to_inches is None:
        raise NotImplementedError(f"Conversion from {from_units} to {to_units} is not implemented")

    return from_inches / to_inches


@dataclass(frozen=True)
class Point:
    """A position on the canvas."""

    x: int = 0
    y: int = 0
    units: MeasurementUnits = MeasurementUnits.PIXELS

    def convert_to(self, units: MeasurementUnits, dpi: int = 96) -> "Point":
        factor = conversion_factor(self.units, units, dpi)
        return Point(int(self.x * factor), int(self.y * factor), units)


@dataclass(frozen=True)
class Size:
    """A width/height pair."""

    width: int = 0
    height: int = 0
    units: MeasurementUnits = MeasurementUnits.PIXELS

    @property
    def area(self) -> int:
        return self.width * self.height

    def convert_to(self, units: MeasurementUnits, dpi: int = 96) -> "Size":
        factor = conversion_factor(self.units, units, dpi)
        return Size(int(self.width * factor), int(self.height * factor), units)


@dataclass(frozen=True)
class Rectangle:
    """
    Axis-aligned rectangle.

    Bounds are not checked here: raster operations validate a rectangle
    against the buffer they are applied to.
    """

    x: int = 0
    """X coordinate of the upper-left corner."""

    y: int = 0
    """Y coordinate of the upper-left corner."""

    width: int = 0
    """Width of the rectangle."""

    height: int = 0
    """Height of the rectangle."""

    units: MeasurementUnits = MeasurementUnits.PIXELS
    """Measurement unit of all four values."""

    @classmethod
    def from_ltrb(
        cls,
        left: int,
        top: int,
        right: int,
        bottom: int,
        units: MeasurementUnits = MeasurementUnits.PIXELS,
    ) -> "Rectangle":
        """Create a rectangle from its edges (right and bottom exclusive)."""
        return cls(left, top, right - left, bottom - top, units)

    @classmethod
    def from_point_size(cls, location: Point, size: Size) -> "Rectangle":
        if location.units != size.units:
            size = size.convert_to(location.units)
        return cls(location.x, location.y, size.width, size.height, location.units)

    @property
    def left(self) -> int:
        return self.x

    @property
    def top(self) -> int:
        return self.y

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height

    @property
    def location(self) -> Point:
        return Point(self.x, self.y, self.units)

    @property
    def size(self) -> Size:
        return Size(self.width, self.height, self.units)

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0

    def contains(self, x: int, y: int) -> bool:
        """Whether the point lies inside (right and bottom edges excluded)."""
        return self.x <= x < self.right and self.y <= y < self.bottom

    def convert_to(self, units: MeasurementUnits, dpi: int = 96) -> "Rectangle":
        """
        Convert this rectangle to another unit of measurement.

        Args:
            units: Target unit.
            dpi: Dots per inch used for pixel conversions.

        Returns:
            A new rectangle in the requested unit (values truncated).
        """
        if units == self.units:
            return self

        factor = conversion_factor(self.units, units, dpi)
        return Rectangle(
            int(self.x * factor),
            int(self.y * factor),
            int(self.width * factor),
            int(self.height * factor),
            units,
        )

    def to_tuple(self) -> tuple[int, int, int, int]:
        """Return (x, y, width, height)."""
        return (self.x, self.y, self.width, self.height)
