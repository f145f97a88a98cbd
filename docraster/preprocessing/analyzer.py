"""
Image quality analyzer for preprocessing decisions.
"""

import logging
from typing import Optional

from docraster.config import PreprocessingConfig, SkewDetectionConfig, settings
from docraster.drawing.pixel_buffer import PixelBuffer
from docraster.raster.operations import content_bounds
from docraster.raster.skew import SkewDetector

from .base import ImageAnalysis

logger = logging.getLogger(__name__)


class ImageQualityAnalyzer:
    """
    Analyzes a document image to determine which preprocessing steps are needed.

    Measures:
    - Skew angle (Hough transform on lower ink edges)
    - Contrast ratio
    - Brightness
    - White margins
    """

    def __init__(
        self,
        config: Optional[PreprocessingConfig] = None,
        skew_config: Optional[SkewDetectionConfig] = None,
    ):
        """Initialize the analyzer."""
        self.config = config or settings.preprocessing
        self.detector = SkewDetector(skew_config)

    def analyze(self, image: PixelBuffer) -> ImageAnalysis:
        """
        Perform image analysis.

        Args:
            image: Document image.

        Returns:
            ImageAnalysis with all quality metrics.
        """
        bounds = content_bounds(image)
        is_blank = bounds is None

        # A blank page has nothing to level
        skew_angle = 0.0 if is_blank else self.detector.estimate(image)

        luminance = image.luminance()
        contrast_ratio = self._measure_contrast(float(luminance.min()), float(luminance.max()))
        brightness = float(luminance.mean() / 255.0)

        needs_deskewing = not is_blank and abs(skew_angle) > self.config.skew_threshold
        needs_trimming = not is_blank and (bounds.width, bounds.height) != (image.width, image.height)

        analysis = ImageAnalysis(
            width=image.width,
            height=image.height,
            is_grayscale=image.is_grayscale,
            skew_angle=skew_angle,
            contrast_ratio=contrast_ratio,
            brightness=brightness,
            is_blank=is_blank,
            content_bounds=bounds,
            needs_deskewing=needs_deskewing,
            needs_trimming=needs_trimming,
        )

        logger.debug(
            f"Analysis: {image.width}x{image.height}, skew={skew_angle:.2f}, "
            f"blank={is_blank}, contrast={contrast_ratio:.2f}"
        )

        return analysis

    def _measure_contrast(self, min_val: float, max_val: float) -> float:
        """
        Measure contrast using Michelson contrast formula.

        Returns contrast ratio (0.0 to 1.0).
        """
        if max_val + min_val == 0:
            return 0.0

        return (max_val - min_val) / (max_val + min_val)
