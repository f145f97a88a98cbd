"""
Binarization/thresholding step.
"""

from typing import Optional

import numpy as np

from docraster.config import PreprocessingConfig
from docraster.drawing.pixel_buffer import PixelBuffer
from docraster.raster.operations import binarize

from ..base import PreprocessingStep, ImageAnalysis


class BinarizationStep(PreprocessingStep):
    """
    Converts image to binary (black and white).

    Supports:
    - 'threshold': fixed luminance percentage cut-off
    - 'none': skip binarization
    """

    def __init__(self, config: Optional[PreprocessingConfig] = None):
        """Initialize with configuration."""
        super().__init__(config)
        self.method = self.config.binarization_method
        self.threshold = self.config.binarization_threshold

    @property
    def name(self) -> str:
        return "binarization"

    def should_apply(self, image: PixelBuffer, analysis: ImageAnalysis) -> bool:
        """Apply based on configuration method."""
        if self.method == "none":
            return False

        # Don't binarize if image is already black and white
        if analysis.is_grayscale:
            unique_values = np.unique(image.pixels[..., 0])
            if np.isin(unique_values, (0, 255)).all():
                return False

        return True

    def apply(self, image: PixelBuffer, analysis: Optional[ImageAnalysis] = None) -> PixelBuffer:
        """Apply binarization."""
        return binarize(image, self.threshold)
