"""
Base classes for document preprocessing.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional

from docraster.config import PreprocessingConfig, settings
from docraster.drawing.geometry import Rectangle
from docraster.drawing.pixel_buffer import PixelBuffer

logger = logging.getLogger(__name__)


@dataclass
class ImageAnalysis:
    """Analysis results for preprocessing decisions."""

    width: int
    """Image width in pixels."""

    height: int
    """Image height in pixels."""

    is_grayscale: bool
    """Whether red, green and blue are equal everywhere."""

    skew_angle: float
    """Estimated skew angle in degrees."""

    contrast_ratio: float
    """Michelson contrast of the luminance (0.0 to 1.0)."""

    brightness: float
    """Average luminance (0.0 to 1.0)."""

    is_blank: bool
    """Whether the image is entirely pure white."""

    content_bounds: Optional[Rectangle] = None
    """Bounding box of non-white content (None when blank)."""

    needs_deskewing: bool = False
    """Whether deskewing is recommended."""

    needs_trimming: bool = False
    """Whether the image has white margins to remove."""


@dataclass
class StepResult:
    """Result of applying a preprocessing step."""

    image: PixelBuffer
    """Processed image."""

    applied: bool
    """Whether the step was actually applied."""

    step_name: str
    """Name of the step."""

    metadata: dict = field(default_factory=dict)
    """Additional information about the processing."""


class PreprocessingStep(ABC):
    """
    One stage of the preprocessing pipeline.

    Subclasses name themselves, decide from the page analysis whether they
    have work to do, and transform a buffer into a new one.
    """

    def __init__(self, config: Optional[PreprocessingConfig] = None):
        self.config = config or settings.preprocessing

    @property
    @abstractmethod
    def name(self) -> str:
        """Short identifier used in pipeline results and remove_step()."""

    @abstractmethod
    def should_apply(self, image: PixelBuffer, analysis: ImageAnalysis) -> bool:
        """Whether the page needs this step, given the current buffer and the analysis of the input."""

    @abstractmethod
    def apply(self, image: PixelBuffer, analysis: Optional[ImageAnalysis] = None) -> PixelBuffer:
        """
        Return the transformed buffer. Must not modify ``image``.

        ``analysis`` describes the page being processed; steps that need a
        measurement from it fall back to measuring ``image`` when it is None.
        """

    def process(
        self,
        image: PixelBuffer,
        analysis: ImageAnalysis,
        force: bool = False,
    ) -> StepResult:
        """
        Apply the step when needed (or forced) and report what happened.

        Args:
            image: Current buffer.
            analysis: Analysis of the pipeline input.
            force: Skip the should_apply() check.

        Returns:
            StepResult; ``image`` is the input itself when the step was skipped.
        """
        if not (force or self.should_apply(image, analysis)):
            logger.debug(f"Step {self.name} skipped")
            return StepResult(image=image, applied=False, step_name=self.name, metadata={"reason": "not_needed"})

        processed = self.apply(image, analysis)
        logger.debug(f"Step {self.name}: {image.width}x{image.height} -> {processed.width}x{processed.height}")

        return StepResult(
            image=processed,
            applied=True,
            step_name=self.name,
            metadata={"forced": force, "size": (processed.width, processed.height)},
        )
