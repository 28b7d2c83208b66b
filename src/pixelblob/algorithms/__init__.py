"""
Pixel algorithms - labeling, morphology, tracing, convolution, gradients,
shape metrics and color histograms over :class:`~pixelblob.core.PixelBuffer`.

These functions are single-threaded and own their scratch arrays for the
duration of one call.
"""

from .blob_metrics import compute_blob_metrics, perimeter_length
from .boundary_tracing import trace_boundary
from .color_histogram import (
    bin_distance,
    color_bins,
    color_bins_within_blob,
    normalize_bins,
    quantize,
)
from .convolution import build_kernel, build_multiplication_table, gaussian_blur
from .disjoint_set import DisjointSet
from .gradient import finite_difference_gradient, grey_collapse, vector_sum_refinement
from .morphology import dilate, erode, exclusive_or, perimeter_mask
from .region_labeling import LabelingResult, RegionLabeler

__all__ = [
    "DisjointSet",
    "erode",
    "dilate",
    "exclusive_or",
    "perimeter_mask",
    "RegionLabeler",
    "LabelingResult",
    "trace_boundary",
    "build_kernel",
    "build_multiplication_table",
    "gaussian_blur",
    "finite_difference_gradient",
    "vector_sum_refinement",
    "grey_collapse",
    "compute_blob_metrics",
    "perimeter_length",
    "quantize",
    "color_bins",
    "color_bins_within_blob",
    "normalize_bins",
    "bin_distance",
]
