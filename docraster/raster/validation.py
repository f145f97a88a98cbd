"""
Error taxonomy and bounds checking shared by raster operations.

Clamping a crop rectangle to the buffer is normal behaviour, not an error.
Only degenerate targets (nothing left to allocate) and targets too large to
allocate are reported.
"""

import logging
from typing import Optional

from docraster.config import settings
from docraster.drawing.geometry import MeasurementUnits, Rectangle

logger = logging.getLogger(__name__)

BYTES_PER_PIXEL = 4


class RasterError(Exception):
    """Base class for raster operation failures."""

    pass


class ValidationError(RasterError, ValueError):
    """Raised when operation parameters produce a degenerate target."""

    pass


class AllocationError(RasterError, MemoryError):
    """Raised when an output buffer would exceed the memory ceiling."""

    pass


def validate_crop_area(width: int, height: int, area: Rectangle) -> Rectangle:
    """
    Clamp a crop rectangle to a buffer of the given size.

    - negative x/y are clamped to 0
    - width/height <= 0 mean "the rest of the buffer"
    - right/bottom edges past the buffer are truncated

    Args:
        width: Buffer width.
        height: Buffer height.
        area: Requested crop area in pixels.

    Returns:
        A rectangle fully inside the buffer.

    Raises:
        ValidationError: If the area is not in pixels or lies entirely
            outside the buffer.
    """
    if area.units != MeasurementUnits.PIXELS:
        raise ValidationError(
            f"Crop area is in {area.units.value}; convert it to pixels with Rectangle.convert_to() first"
        )

    x = area.x if area.x > 0 else 0
    y = area.y if area.y > 0 else 0
    crop_width = area.width if area.width > 0 else width
    crop_height = area.height if area.height > 0 else height

    if x + crop_width > width:
        crop_width = width - x
    if y + crop_height > height:
        crop_height = height - y

    if crop_width <= 0 or crop_height <= 0:
        raise ValidationError(
            f"Crop area {area.to_tuple()} leaves nothing of a {width}x{height} buffer"
        )

    validated = Rectangle(x, y, crop_width, crop_height)
    if validated != area:
        logger.debug(f"Crop area {area.to_tuple()} clamped to {validated.to_tuple()}")

    return validated


def ensure_target_size(width: int, height: int, operation: str) -> None:
    """Reject an output size with a non-positive dimension."""
    if width <= 0 or height <= 0:
        raise ValidationError(f"{operation} would produce a degenerate {width}x{height} buffer")


def ensure_allocatable(width: int, height: int, limit: Optional[int] = None) -> None:
    """
    Check that a width x height buffer fits under the allocation ceiling.

    Args:
        width: Target width.
        height: Target height.
        limit: Ceiling in bytes. Defaults to the configured maximum.

    Raises:
        AllocationError: If the buffer would be larger than the ceiling.
    """
    limit = limit if limit is not None else settings.raster.max_allocation_bytes
    requested = width * height * BYTES_PER_PIXEL

    if requested > limit:
        raise AllocationError(
            f"A {width}x{height} buffer needs {requested} bytes, above the {limit} byte limit"
        )
