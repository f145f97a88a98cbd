"""
Document preprocessing for OCR.

Provides a modular preprocessing pipeline built on the raster operations,
with steps selected from an analysis of the input page.
"""

from .base import PreprocessingStep, ImageAnalysis, StepResult
from .analyzer import ImageQualityAnalyzer
from .pipeline import PreprocessingPipeline, PipelineResult, create_pipeline

__all__ = [
    "PreprocessingStep",
    "ImageAnalysis",
    "StepResult",
    "ImageQualityAnalyzer",
    "PreprocessingPipeline",
    "PipelineResult",
    "create_pipeline",
]
