"""
White margin removal step.
"""

from typing import Optional

from docraster.drawing.pixel_buffer import PixelBuffer
from docraster.raster.operations import trim

from ..base import PreprocessingStep, ImageAnalysis


class TrimStep(PreprocessingStep):
    """
    Crops the image to its non-white content.

    Deskewing fills the exposed corners with white, so trimming after it
    removes them again along with the scanner margins.
    """

    @property
    def name(self) -> str:
        return "trim"

    def should_apply(self, image: PixelBuffer, analysis: ImageAnalysis) -> bool:
        """Apply if enabled and the page has content and margins."""
        if not self.config.auto_trim:
            return False

        # Deskewing changes the margins, so only a blank page is ruled out
        return not analysis.is_blank

    def apply(self, image: PixelBuffer, analysis: Optional[ImageAnalysis] = None) -> PixelBuffer:
        return trim(image)
