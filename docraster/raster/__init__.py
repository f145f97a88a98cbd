"""
Skew estimation and geometric raster operations on pixel buffers.
"""

from .validation import RasterError, ValidationError, AllocationError, validate_crop_area
from .skew import SkewDetector, HoughAccumulator, HoughLine, estimate_skew
from .operations import (
    RotateMode,
    FlipMode,
    resize,
    resize_to,
    crop,
    rotate,
    rotated_size,
    trim,
    content_bounds,
    add_border,
    rotate_flip,
    redact,
    grayscale,
    binarize,
)

__all__ = [
    "RasterError",
    "ValidationError",
    "AllocationError",
    "validate_crop_area",
    "SkewDetector",
    "HoughAccumulator",
    "HoughLine",
    "estimate_skew",
    "RotateMode",
    "FlipMode",
    "resize",
    "resize_to",
    "crop",
    "rotate",
    "rotated_size",
    "trim",
    "content_bounds",
    "add_border",
    "rotate_flip",
    "redact",
    "grayscale",
    "binarize",
]
