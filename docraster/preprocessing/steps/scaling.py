"""
Image scaling/DPI normalization step.
"""

from typing import Optional

from docraster.config import PreprocessingConfig
from docraster.drawing.pixel_buffer import PixelBuffer
from docraster.raster.operations import resize

from ..base import PreprocessingStep, ImageAnalysis

MAX_SCALE_FACTOR = 3.0


class ScalingStep(PreprocessingStep):
    """
    Scales images to target DPI for optimal OCR performance.

    Most OCR engines perform best at 300 DPI. This step upscales
    low-resolution scans, never by more than 3x.
    """

    def __init__(self, config: Optional[PreprocessingConfig] = None):
        """Initialize with configuration."""
        super().__init__(config)
        self.target_dpi = self.config.target_dpi
        self.source_dpi = self.config.source_dpi

    @property
    def name(self) -> str:
        return "scaling"

    @property
    def scale_factor(self) -> float:
        """Upscale factor from source to target DPI, capped."""
        return min(self.target_dpi / self.source_dpi, MAX_SCALE_FACTOR)

    def should_apply(self, image: PixelBuffer, analysis: ImageAnalysis) -> bool:
        """Apply if the source DPI is noticeably below target."""
        # Don't scale if factor is too small to matter
        return self.scale_factor >= 1.1

    def apply(self, image: PixelBuffer, analysis: Optional[ImageAnalysis] = None) -> PixelBuffer:
        """Scale image to target DPI."""
        if self.scale_factor <= 1.0:
            return image

        return resize(image, self.scale_factor)

    def scale_to_dpi(
        self,
        image: PixelBuffer,
        current_dpi: int,
        target_dpi: Optional[int] = None,
    ) -> PixelBuffer:
        """
        Scale image to specific DPI.

        Args:
            image: Input image.
            current_dpi: Current DPI of the image.
            target_dpi: Target DPI (defaults to config target).

        Returns:
            Scaled image.
        """
        target = target_dpi or self.target_dpi

        if current_dpi >= target:
            return image

        return resize(image, min(target / current_dpi, MAX_SCALE_FACTOR))
