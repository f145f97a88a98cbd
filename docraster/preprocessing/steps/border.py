"""
Quiet-zone border step.
"""

from typing import Optional

from docraster.drawing.color import Color
from docraster.drawing.pixel_buffer import PixelBuffer
from docraster.raster.operations import add_border

from ..base import PreprocessingStep, ImageAnalysis


class BorderStep(PreprocessingStep):
    """
    Adds a white border around the page.

    OCR engines tend to miss glyphs touching the image edge; a few pixels
    of white after trimming restores a margin of known size.
    """

    @property
    def name(self) -> str:
        return "border"

    def should_apply(self, image: PixelBuffer, analysis: ImageAnalysis) -> bool:
        return self.config.border_width > 0

    def apply(self, image: PixelBuffer, analysis: Optional[ImageAnalysis] = None) -> PixelBuffer:
        return add_border(image, Color.WHITE, self.config.border_width)
