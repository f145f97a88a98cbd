"""
Value types shared by the raster core: colors, geometry and pixel buffers.
"""

from .color import Color
from .geometry import MeasurementUnits, Point, Rectangle, Size, conversion_factor
from .pixel_buffer import PixelBuffer

__all__ = [
    "Color",
    "MeasurementUnits",
    "Point",
    "Rectangle",
    "Size",
    "conversion_factor",
    "PixelBuffer",
]
