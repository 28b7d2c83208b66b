"""
Geometric shape descriptors of a labeled region.

All statistics are taken over the pixels exactly matching one label color in a
fully merged labeling (see :mod:`pixelblob.algorithms.region_labeling`). The
perimeter comes from tracing the boundary of that region alone, so the region
must be a single blob that does not touch the image border.
"""

import logging
import math
from typing import List

import numpy as np

from pixelblob.common.base import Point
from pixelblob.common.constants import BufferConstants
from pixelblob.core.buffer import PixelBuffer
from pixelblob.core.color import Color
from pixelblob.exceptions import EmptyRegionError
from pixelblob.image.transform import erase_all_but_color
from pixelblob.schemas.results import BlobMetrics

from .boundary_tracing import trace_boundary
from .morphology import perimeter_mask

logger = logging.getLogger(__name__)

DIAGONAL_STEP_WEIGHT = 1.4


def perimeter_length(path: List[int], stride: int) -> float:
    """
    Length of a boundary path of byte addresses.

    Consecutive addresses (wrapping from the last back to the first) one row or
    one pixel apart add 1; diagonal neighbors add 1.4. Any other step adds
    nothing.

    Args:
        path: Addresses from :func:`~pixelblob.algorithms.boundary_tracing.trace_boundary`
        stride: Row pitch of the traced buffer in bytes

    Returns:
        Perimeter length in pixels
    """
    bpp = BufferConstants.BYTES_PER_PIXEL
    straight = {stride, -stride, bpp, -bpp}
    diagonal = {stride + bpp, stride - bpp, -stride + bpp, -stride - bpp}

    length = 0.0
    for i, address in enumerate(path):
        delta = address - path[(i + 1) % len(path)]
        if delta in straight:
            length += 1
        elif delta in diagonal:
            length += DIAGONAL_STEP_WEIGHT
    return length


def _principal_angle(row_moment: float, mixed_moment: float, column_moment: float) -> float:
    """Half the arctangent of ``2 * mixed / (column - row)``, defined for equal moments too."""
    denominator = column_moment - row_moment
    if denominator == 0:
        if mixed_moment == 0:
            return 0.0
        return math.copysign(math.pi / 4, mixed_moment)
    return 0.5 * math.atan(2 * mixed_moment / denominator)


def _inertia(theta: float, row_moment: float, mixed_moment: float, column_moment: float) -> float:
    sin_t, cos_t = math.sin(theta), math.cos(theta)
    return sin_t**2 * column_moment + sin_t * cos_t * mixed_moment + cos_t**2 * row_moment


def compute_blob_metrics(buffer: PixelBuffer, color: Color) -> BlobMetrics:
    """
    Compute area, centroid, moments, inertia, circularity and perimeter of a region.

    Args:
        buffer: Labeled buffer (not modified)
        color: Label color of the region

    Returns:
        BlobMetrics for the region

    Raises:
        EmptyRegionError: If no pixel has ``color``
        UnclosedBoundaryError: If tracing the boundary exceeds its iteration limit
    """
    rows, columns = np.nonzero(buffer.color_mask(color))
    area = int(rows.size)
    if area == 0:
        raise EmptyRegionError("compute_blob_metrics", f"no pixels of color {color}")

    rows = rows.astype(np.float64)
    columns = columns.astype(np.float64)
    cy = rows.sum() / area
    cx = columns.sum() / area

    dr = rows - cy
    dc = columns - cx
    row_moment = float((dr**2).sum() / area)
    mixed_moment = float((dr * dc).sum() / area)
    column_moment = float((dc**2).sum() / area)

    theta = _principal_angle(row_moment, mixed_moment, column_moment)
    inertia_one = _inertia(theta, row_moment, mixed_moment, column_moment)
    inertia_two = _inertia(theta + math.pi / 2, row_moment, mixed_moment, column_moment)

    radii = np.sqrt(dc**2 + dr**2)
    mean_radius = float(radii.sum() / area)
    deviation = math.sqrt(float(((radii - mean_radius) ** 2).sum() / area))
    circularity = mean_radius / deviation if deviation > 0 else math.inf

    boundary = perimeter_mask(erase_all_but_color(buffer, color))
    perimeter = perimeter_length(trace_boundary(boundary), buffer.stride)

    logger.debug(f"Blob {color}: area={area}, perimeter={perimeter:.1f}")
    return BlobMetrics(
        color=color,
        area=area,
        centroid=Point(x=cx, y=cy),
        second_row_moment=row_moment,
        second_mixed_moment=mixed_moment,
        second_column_moment=column_moment,
        max_inertia=max(inertia_one, inertia_two),
        min_inertia=min(inertia_one, inertia_two),
        circularity=circularity,
        perimeter=perimeter,
    )
