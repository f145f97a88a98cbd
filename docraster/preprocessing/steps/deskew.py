"""
Deskew/rotation correction step.
"""

from typing import Optional

from docraster.config import PreprocessingConfig, SkewDetectionConfig
from docraster.drawing.color import Color
from docraster.drawing.pixel_buffer import PixelBuffer
from docraster.raster.operations import rotate
from docraster.raster.skew import SkewDetector

from ..base import PreprocessingStep, ImageAnalysis

# Rotations smaller than this leave the page unchanged
MIN_ROTATION = 0.1


class DeskewStep(PreprocessingStep):
    """
    Corrects image skew.

    Rotates the page by the skew angle from its analysis so that text lines
    run horizontally. The canvas grows to fit the rotated page and the
    exposed corners are filled with white. The step keeps no per-page state,
    so one instance can serve any number of pages.
    """

    def __init__(
        self,
        config: Optional[PreprocessingConfig] = None,
        skew_config: Optional[SkewDetectionConfig] = None,
    ):
        """
        Args:
            config: Preprocessing configuration.
            skew_config: Detector settings used when no analysis is supplied.
        """
        super().__init__(config)
        self.detector = SkewDetector(skew_config)

    @property
    def name(self) -> str:
        return "deskew"

    def should_apply(self, image: PixelBuffer, analysis: ImageAnalysis) -> bool:
        """Apply if enabled and the analysed skew exceeds the threshold."""
        if not self.config.auto_deskew:
            return False

        return analysis.needs_deskewing

    def apply(self, image: PixelBuffer, analysis: Optional[ImageAnalysis] = None) -> PixelBuffer:
        """Rotate the page by its own skew angle."""
        if analysis is not None:
            angle = analysis.skew_angle
        else:
            angle = self.detector.estimate(image)

        if abs(angle) < MIN_ROTATION:
            return image

        return self.deskew_with_angle(image, angle)

    def deskew_with_angle(self, image: PixelBuffer, angle: float) -> PixelBuffer:
        """
        Deskew image with a specific angle.

        Args:
            image: Input image.
            angle: Skew angle as reported by SkewDetector.

        Returns:
            Deskewed image.
        """
        return rotate(image, angle, background=Color.WHITE)
