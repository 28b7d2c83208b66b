"""
Centralized enums for the pixel analysis engine.

This module contains all enumeration types used throughout the system,
providing a single source of truth for enum definitions.
"""

from enum import Enum


# Region labeling enums
class TieBreakPolicy(str, Enum):
    """Which causal neighbor label a pixel takes when its neighbors disagree."""

    # First known color in the order left, top-left, top, top-right
    NEIGHBOR_ORDER = "neighbor_order"
    # Smallest label index among the known neighbor colors
    MIN_LABEL = "min_label"


# Preprocessing enums
class PipelineStep(str, Enum):
    """Available preprocessing pipeline steps."""

    GRAYSCALE = "grayscale"
    GAUSSIAN_BLUR = "gaussian_blur"
    FINITE_DIFFERENCE = "finite_difference"
    VECTOR_SUM = "vector_sum"
    GREY_COLLAPSE = "grey_collapse"
    THRESHOLD = "threshold"
    CROP_BORDER = "crop_border"
    ERODE = "erode"
    DILATE = "dilate"
