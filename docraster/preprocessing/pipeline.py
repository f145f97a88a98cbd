"""
Preprocessing pipeline.

Runs a page through an ordered list of steps. The page is analysed once up
front and every step decides from that analysis whether it has work to do.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union

import numpy as np
from PIL import Image

from docraster.config import PreprocessingConfig, SkewDetectionConfig, settings
from docraster.drawing.pixel_buffer import PixelBuffer

from .base import PreprocessingStep, ImageAnalysis, StepResult
from .analyzer import ImageQualityAnalyzer
from .steps import (
    GrayscaleStep,
    DeskewStep,
    TrimStep,
    BorderStep,
    BinarizationStep,
    ScalingStep,
)

logger = logging.getLogger(__name__)

ImageInput = Union[PixelBuffer, np.ndarray, Image.Image, Path, str]


@dataclass
class PipelineResult:
    """Outcome of one pipeline run."""

    image: PixelBuffer
    """Page after every applied step."""

    original_size: tuple[int, int]
    """(width, height) of the input."""

    final_size: tuple[int, int]
    """(width, height) of ``image``."""

    analysis: ImageAnalysis
    """Analysis of the input page that drove the step decisions."""

    steps_applied: list[str]
    steps_skipped: list[str]

    step_results: list[StepResult] = field(default_factory=list)
    """Per-step results in execution order."""

    @property
    def was_modified(self) -> bool:
        return bool(self.steps_applied)


class PreprocessingPipeline:
    """
    Ordered chain of preprocessing steps for OCR input.

    The default chain is grayscale, deskew, trim, border, binarization and
    scaling. Trim runs after deskew so that the white corners exposed by the
    rotation are cut away again.
    """

    def __init__(
        self,
        config: Optional[PreprocessingConfig] = None,
        steps: Optional[list[PreprocessingStep]] = None,
        skew_config: Optional[SkewDetectionConfig] = None,
    ):
        """
        Args:
            config: Preprocessing configuration. Defaults to ``settings.preprocessing``.
            steps: Steps to run instead of the default chain.
            skew_config: Skew detector settings shared by the analyzer and
                the deskew step. Defaults to ``settings.skew``.
        """
        self.config = config or settings.preprocessing
        self.analyzer = ImageQualityAnalyzer(self.config, skew_config)
        self._steps = steps if steps is not None else self._default_steps()

    def _default_steps(self) -> list[PreprocessingStep]:
        return [
            GrayscaleStep(self.config),
            DeskewStep(self.config, self.analyzer.detector.config),
            TrimStep(self.config),
            BorderStep(self.config),
            BinarizationStep(self.config),
            ScalingStep(self.config),
        ]

    @property
    def steps(self) -> list[PreprocessingStep]:
        return self._steps

    def process(self, image: ImageInput, force_all: bool = False) -> PipelineResult:
        """
        Analyse a page and run it through the steps.

        Args:
            image: PixelBuffer, numpy array, Pillow image or image path.
            force_all: Run every step even where the analysis says it is
                not needed.

        Returns:
            PipelineResult holding the processed page.
        """
        page = self._to_buffer(image)
        original_size = (page.width, page.height)
        analysis = self.analyzer.analyze(page)

        if not self.config.enabled:
            logger.debug("Preprocessing disabled; returning input unchanged")
            return PipelineResult(
                image=page,
                original_size=original_size,
                final_size=original_size,
                analysis=analysis,
                steps_applied=[],
                steps_skipped=[step.name for step in self._steps],
            )

        results = []
        for step in self._steps:
            result = step.process(page, analysis, force=force_all)
            if result.applied:
                page = result.image
            results.append(result)

        applied = [r.step_name for r in results if r.applied]
        skipped = [r.step_name for r in results if not r.applied]
        final_size = (page.width, page.height)

        logger.info(
            f"Preprocessed {original_size[0]}x{original_size[1]} -> {final_size[0]}x{final_size[1]}, "
            f"applied: {applied or 'none'}"
        )

        return PipelineResult(
            image=page,
            original_size=original_size,
            final_size=final_size,
            analysis=analysis,
            steps_applied=applied,
            steps_skipped=skipped,
            step_results=results,
        )

    def add_step(self, step: PreprocessingStep, position: Optional[int] = None) -> None:
        """Insert a step at ``position``, or append it."""
        if position is None:
            self._steps.append(step)
        else:
            self._steps.insert(position, step)

    def remove_step(self, name: str) -> bool:
        """Drop the first step called ``name``. Returns False if there is none."""
        for step in self._steps:
            if step.name == name:
                self._steps.remove(step)
                return True
        return False

    @staticmethod
    def _to_buffer(image: ImageInput) -> PixelBuffer:
        if isinstance(image, PixelBuffer):
            return image
        if isinstance(image, np.ndarray):
            return PixelBuffer.from_array(image)
        if isinstance(image, Image.Image):
            return PixelBuffer.from_pil(image)
        if isinstance(image, (str, Path)):
            return PixelBuffer.from_file(image)

        raise TypeError(f"Unsupported image type: {type(image)}")


def create_pipeline(
    enabled: bool = True,
    auto_deskew: bool = True,
    auto_trim: bool = True,
    border_width: int = 0,
    binarization_method: str = "none",
    **kwargs,
) -> PreprocessingPipeline:
    """
    Build a pipeline from keyword options.

    Any further keyword is passed to PreprocessingConfig, e.g.
    ``create_pipeline(grayscale=True, source_dpi=150)``.
    """
    config = PreprocessingConfig(
        enabled=enabled,
        auto_deskew=auto_deskew,
        auto_trim=auto_trim,
        border_width=border_width,
        binarization_method=binarization_method,
        **kwargs,
    )
    return PreprocessingPipeline(config)
