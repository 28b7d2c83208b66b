"""
Common module - shared constants, enums and base models.

This package contains fundamental types used throughout the system.
It must NOT import from core, algorithms, image, services or vision.
"""

from .base import Point, Rect
from .constants import (
    BlobDetectionConstants,
    BufferConstants,
    Colors,
    ConvolutionConstants,
    FeatureConstants,
    GradientConstants,
    HistogramConstants,
    LabelingConstants,
    ScanConstants,
    SystemConstants,
)
from .enums import PipelineStep, TieBreakPolicy

__all__ = [
    # Base models
    "Point",
    "Rect",
    # Constants
    "BufferConstants",
    "LabelingConstants",
    "GradientConstants",
    "ConvolutionConstants",
    "HistogramConstants",
    "ScanConstants",
    "FeatureConstants",
    "BlobDetectionConstants",
    "SystemConstants",
    "Colors",
    # Enums
    "TieBreakPolicy",
    "PipelineStep",
]
