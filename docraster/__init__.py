"""
Pixel buffers, skew estimation and raster operations for document imaging.
"""

from docraster.drawing import Color, MeasurementUnits, PixelBuffer, Point, Rectangle, Size
from docraster.raster import (
    AllocationError,
    FlipMode,
    RasterError,
    RotateMode,
    SkewDetector,
    ValidationError,
    add_border,
    binarize,
    crop,
    estimate_skew,
    grayscale,
    redact,
    resize,
    resize_to,
    rotate,
    rotate_flip,
    trim,
)

__version__ = "1.0.0"

__all__ = [
    "Color",
    "MeasurementUnits",
    "PixelBuffer",
    "Point",
    "Rectangle",
    "Size",
    "AllocationError",
    "RasterError",
    "ValidationError",
    "SkewDetector",
    "estimate_skew",
    "RotateMode",
    "FlipMode",
    "add_border",
    "binarize",
    "crop",
    "grayscale",
    "redact",
    "resize",
    "resize_to",
    "rotate",
    "rotate_flip",
    "trim",
]
