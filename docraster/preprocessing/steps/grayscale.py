"""
Grayscale conversion step.
"""

from typing import Optional

from docraster.drawing.pixel_buffer import PixelBuffer
from docraster.raster.operations import grayscale

from ..base import PreprocessingStep, ImageAnalysis


class GrayscaleStep(PreprocessingStep):
    """
    Converts color images to grayscale.

    Alpha is preserved so that transparent regions stay transparent.
    """

    @property
    def name(self) -> str:
        return "grayscale"

    def should_apply(self, image: PixelBuffer, analysis: ImageAnalysis) -> bool:
        return self.config.grayscale and not analysis.is_grayscale

    def apply(self, image: PixelBuffer, analysis: Optional[ImageAnalysis] = None) -> PixelBuffer:
        return grayscale(image)
