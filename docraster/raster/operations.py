"""
Geometric raster operations.

Every function takes a PixelBuffer and returns a new one; inputs are never
modified. Crop rectangles are clamped to the buffer; only degenerate or
oversized targets raise.
"""

import logging
import math
from enum import Enum
from typing import Optional, Union

import cv2
import numpy as np

from docraster.config import SkewDetectionConfig, settings
from docraster.drawing.color import Color
from docraster.drawing.geometry import Rectangle
from docraster.drawing.pixel_buffer import PixelBuffer
from docraster.raster.skew import SkewDetector
from docraster.raster.validation import (
    AllocationError,
    ValidationError,
    ensure_allocatable,
    ensure_target_size,
    validate_crop_area,
)

logger = logging.getLogger(__name__)

# Grayscale weights matching common "luma" filters for screen images
GRAYSCALE_WEIGHTS = np.array([0.21, 0.72, 0.07], dtype=np.float64)

RectangleLike = Union[Rectangle, tuple[int, int, int, int]]


class RotateMode(str, Enum):
    """Quarter-turn rotations, clockwise."""

    NONE = "none"
    ROTATE_90 = "rotate_90"
    ROTATE_180 = "rotate_180"
    ROTATE_270 = "rotate_270"


class FlipMode(str, Enum):
    """Mirror axes."""

    NONE = "none"
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


def _as_rectangle(area: RectangleLike) -> Rectangle:
    if isinstance(area, Rectangle):
        return area
    return Rectangle(*area)


def _allocate(operation: str, width: int, height: int, build) -> PixelBuffer:
    """Run ``build`` and wrap its RGBA array, translating MemoryError."""
    ensure_allocatable(width, height)
    try:
        return PixelBuffer.adopt(build())
    except MemoryError as e:
        raise AllocationError(f"{operation} failed to allocate a {width}x{height} buffer") from e


def _resample(buffer: PixelBuffer, width: int, height: int, operation: str) -> PixelBuffer:
    ensure_target_size(width, height, operation)

    # Area averaging when shrinking, cubic when enlarging
    if width * height < buffer.width * buffer.height:
        interpolation = cv2.INTER_AREA
    else:
        interpolation = cv2.INTER_CUBIC

    logger.debug(f"{operation}: {buffer.width}x{buffer.height} -> {width}x{height}")

    return _allocate(
        operation,
        width,
        height,
        lambda: cv2.resize(buffer.pixels, (width, height), interpolation=interpolation),
    )


def resize(buffer: PixelBuffer, scale: float) -> PixelBuffer:
    """
    Scale both axes by the same factor.

    Args:
        buffer: Source buffer.
        scale: Scale factor (> 0). New dimensions are truncated to integers.

    Returns:
        Resampled buffer.

    Raises:
        ValidationError: If scale <= 0 or the result has no pixels.
        AllocationError: If the result is too large to allocate.
    """
    if not scale > 0:
        raise ValidationError(f"Scale must be positive, got {scale}")

    width = int(buffer.width * scale)
    height = int(buffer.height * scale)

    return _resample(buffer, width, height, "Resize")


def resize_to(buffer: PixelBuffer, width: int, height: int) -> PixelBuffer:
    """
    Resample to exact dimensions with independent x and y factors.

    Args:
        buffer: Source buffer.
        width: Target width (> 0).
        height: Target height (> 0).

    Returns:
        Resampled buffer.
    """
    return _resample(buffer, int(width), int(height), "Resize")


def crop(buffer: PixelBuffer, area: RectangleLike) -> PixelBuffer:
    """
    Copy a rectangular region.

    The area is clamped first: negative x/y become 0, width/height <= 0
    mean "to the edge", and edges beyond the buffer are truncated.

    Args:
        buffer: Source buffer.
        area: Region in pixels, as a Rectangle or (x, y, width, height).

    Returns:
        Cropped buffer.

    Raises:
        ValidationError: If the area is not in pixels or starts outside
            the buffer.
        AllocationError: If the result is too large to allocate.
    """
    validated = validate_crop_area(buffer.width, buffer.height, _as_rectangle(area))

    return _allocate(
        "Crop",
        validated.width,
        validated.height,
        lambda: buffer.pixels[validated.top:validated.bottom, validated.left:validated.right].copy(),
    )


def rotated_size(width: int, height: int, angle: float) -> tuple[int, int]:
    """
    Bounding box of a width x height image rotated by ``angle`` degrees.

    Returns:
        (new_width, new_height), truncated.
    """
    radians = math.radians(angle)
    sine = abs(math.sin(radians))
    cosine = abs(math.cos(radians))

    # Rounding first keeps cos(90) ~ 6e-17 from leaking into the truncation
    new_width = int(round(cosine * width + sine * height, 6))
    new_height = int(round(sine * width + cosine * height, 6))
    return new_width, new_height


def rotate(
    buffer: PixelBuffer,
    angle: Optional[float] = None,
    background: Optional[Color] = None,
    skew_config: Optional[SkewDetectionConfig] = None,
) -> PixelBuffer:
    """
    Rotate onto a canvas large enough to hold the whole image.

    Positive angles rotate counter-clockwise as displayed. The source is
    centered on the new canvas and the exposed corners are filled with the
    background color.

    Args:
        buffer: Source buffer.
        angle: Rotation in degrees. If omitted, the buffer's estimated skew
            is used, which levels its text lines.
        background: Canvas fill. Defaults to the configured background
            (opaque white).
        skew_config: Detector settings used to estimate a missing angle.
            Defaults to ``settings.skew``.

    Returns:
        Rotated buffer.
    """
    if angle is None:
        angle = SkewDetector(skew_config).estimate(buffer)
        logger.info(f"Rotating by estimated skew of {angle:.2f} degrees")

    fill = background or Color.from_hex(settings.raster.background)

    width, height = buffer.width, buffer.height
    new_width, new_height = rotated_size(width, height, angle)
    ensure_target_size(new_width, new_height, "Rotate")

    # Rotate about the pixel-grid center, then shift onto the new canvas
    center = ((width - 1) / 2.0, (height - 1) / 2.0)
    rotation_matrix = cv2.getRotationMatrix2D(center, angle, 1.0)
    rotation_matrix[0, 2] += (new_width - width) / 2.0
    rotation_matrix[1, 2] += (new_height - height) / 2.0

    return _allocate(
        "Rotate",
        new_width,
        new_height,
        lambda: cv2.warpAffine(
            buffer.pixels,
            rotation_matrix,
            (new_width, new_height),
            flags=cv2.INTER_CUBIC,
            borderMode=cv2.BORDER_CONSTANT,
            borderValue=fill.rgba,
        ),
    )


def content_bounds(buffer: PixelBuffer) -> Optional[Rectangle]:
    """
    Tightest rectangle around every pixel that is not pure white.

    Alpha is ignored. Returns None when the whole buffer is white.
    """
    content = np.any(buffer.pixels[..., :3] != 255, axis=2)

    rows = np.flatnonzero(content.any(axis=1))
    if rows.size == 0:
        return None
    cols = np.flatnonzero(content.any(axis=0))

    return Rectangle.from_ltrb(int(cols[0]), int(rows[0]), int(cols[-1]) + 1, int(rows[-1]) + 1)


def trim(buffer: PixelBuffer) -> PixelBuffer:
    """
    Remove pure-white margins.

    Args:
        buffer: Source buffer.

    Returns:
        The buffer cropped to its non-white content, or a copy of the
        buffer when it is entirely white.
    """
    bounds = content_bounds(buffer)

    if bounds is None:
        logger.debug("Trim found no content; returning a copy")
        return buffer.clone()

    logger.debug(f"Trim: {buffer.width}x{buffer.height} -> {bounds.to_tuple()}")
    return crop(buffer, bounds)


def add_border(buffer: PixelBuffer, color: Color, width: int) -> PixelBuffer:
    """
    Surround the buffer with a solid border.

    Args:
        buffer: Source buffer.
        color: Border color.
        width: Border thickness in pixels (>= 0).

    Returns:
        Buffer of size (w + 2*width, h + 2*width) with the original centered.
    """
    if width < 0:
        raise ValidationError(f"Border width must be non-negative, got {width}")

    new_width = buffer.width + 2 * width
    new_height = buffer.height + 2 * width

    return _allocate(
        "AddBorder",
        new_width,
        new_height,
        lambda: cv2.copyMakeBorder(
            buffer.pixels, width, width, width, width, cv2.BORDER_CONSTANT, value=color.rgba
        ),
    )


def rotate_flip(
    buffer: PixelBuffer,
    rotate_mode: RotateMode = RotateMode.NONE,
    flip_mode: FlipMode = FlipMode.NONE,
) -> PixelBuffer:
    """
    Lossless quarter-turn rotation followed by a mirror.

    Args:
        buffer: Source buffer.
        rotate_mode: Clockwise quarter turns.
        flip_mode: Axis to mirror across after rotating.

    Returns:
        Transformed buffer.
    """
    # np.rot90 turns counter-clockwise for positive k
    turns = {
        RotateMode.NONE: 0,
        RotateMode.ROTATE_90: -1,
        RotateMode.ROTATE_180: 2,
        RotateMode.ROTATE_270: 1,
    }[RotateMode(rotate_mode)]

    pixels = np.rot90(buffer.pixels, k=turns)

    flip_mode = FlipMode(flip_mode)
    if flip_mode == FlipMode.HORIZONTAL:
        pixels = pixels[:, ::-1]
    elif flip_mode == FlipMode.VERTICAL:
        pixels = pixels[::-1]

    return PixelBuffer.adopt(pixels.copy())


def redact(buffer: PixelBuffer, area: RectangleLike, color: Color = Color.BLACK) -> PixelBuffer:
    """
    Copy the buffer with a rectangular region painted over.

    Args:
        buffer: Source buffer.
        area: Region to cover; clamped like a crop area.
        color: Fill color.

    Returns:
        Redacted copy.
    """
    validated = validate_crop_area(buffer.width, buffer.height, _as_rectangle(area))

    pixels = buffer.pixels.copy()
    pixels[validated.top:validated.bottom, validated.left:validated.right] = color.rgba
    return PixelBuffer.adopt(pixels)


def grayscale(buffer: PixelBuffer) -> PixelBuffer:
    """Weighted grayscale conversion; alpha is kept."""
    gray = np.clip(np.rint(buffer.pixels[..., :3] @ GRAYSCALE_WEIGHTS), 0, 255).astype(np.uint8)

    pixels = np.empty_like(buffer.pixels)
    pixels[..., 0] = gray
    pixels[..., 1] = gray
    pixels[..., 2] = gray
    pixels[..., 3] = buffer.pixels[..., 3]
    return PixelBuffer.adopt(pixels)


def binarize(buffer: PixelBuffer, threshold: int = 50) -> PixelBuffer:
    """
    Map every pixel to opaque black or white.

    Args:
        buffer: Source buffer.
        threshold: Luminance percentage (0-100). Pixels above it become white.

    Returns:
        Black-and-white buffer.
    """
    # Percentage rounded half away from zero, as Color.luminance_percentage
    percentage = np.floor(buffer.luminance() * 100.0 / 255.0 + 0.5)
    white = percentage > threshold

    pixels = np.zeros_like(buffer.pixels)
    pixels[white] = Color.WHITE.rgba
    pixels[~white] = Color.BLACK.rgba
    return PixelBuffer.adopt(pixels)
