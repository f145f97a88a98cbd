"""
Individual preprocessing steps.
"""

from .grayscale import GrayscaleStep
from .deskew import DeskewStep
from .trim import TrimStep
from .border import BorderStep
from .binarization import BinarizationStep
from .scaling import ScalingStep

__all__ = [
    "GrayscaleStep",
    "DeskewStep",
    "TrimStep",
    "BorderStep",
    "BinarizationStep",
    "ScalingStep",
]
