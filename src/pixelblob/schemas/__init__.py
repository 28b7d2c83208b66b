"""
Schemas Package

Pydantic models for the values that leave the analysis engine: blob shape
descriptors, keypoints, window-scan matches, auxiliary blob candidates and
preprocessing step definitions.
"""

from .params import PipelineStepParams
from .results import BlobMetrics, WindowMatch
from .vision import BlobCandidate, Keypoint

__all__ = [
    "BlobMetrics",
    "WindowMatch",
    "Keypoint",
    "BlobCandidate",
    "PipelineStepParams",
]
