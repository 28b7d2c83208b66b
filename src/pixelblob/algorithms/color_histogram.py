"""
64-bin quantized color histograms and their distance.

Each pixel falls into bin ``(R >> 6) << 4 | (G >> 6) << 2 | (B >> 6)``, i.e.
the two most significant bits of each channel packed as R:G:B. Only pixels
inside the image are counted; row padding is skipped.
"""

import logging
from typing import List, Sequence

import numpy as np

from pixelblob.common.constants import BufferConstants, HistogramConstants
from pixelblob.core.buffer import PixelBuffer
from pixelblob.exceptions import EmptyRegionError, InvalidGeometryError

logger = logging.getLogger(__name__)


def quantize(red, green, blue):
    """
    Bin index of a color. Accepts ints or integer numpy arrays.
    """
    shift = HistogramConstants.CHANNEL_SHIFT
    return (
        ((red >> shift) << HistogramConstants.RED_POSITION)
        | ((green >> shift) << HistogramConstants.GREEN_POSITION)
        | (blue >> shift)
    )


def _bin_indices(buffer: PixelBuffer) -> np.ndarray:
    pixels = buffer.pixels.astype(np.int64)
    return quantize(
        pixels[:, :, BufferConstants.RED_OFFSET],
        pixels[:, :, BufferConstants.GREEN_OFFSET],
        pixels[:, :, BufferConstants.BLUE_OFFSET],
    )


def _count(indices: np.ndarray) -> List[float]:
    counts = np.bincount(indices.ravel(), minlength=HistogramConstants.BIN_COUNT)
    return [float(c) for c in counts]


def color_bins(buffer: PixelBuffer, normalize: bool = False) -> List[float]:
    """
    Histogram of every pixel of the buffer.

    Args:
        buffer: Source buffer
        normalize: Return percentages instead of counts

    Returns:
        64 bin values
    """
    bins = _count(_bin_indices(buffer))
    return normalize_bins(bins) if normalize else bins


def color_bins_within_blob(
    buffer: PixelBuffer, mask: PixelBuffer, normalize: bool = False
) -> List[float]:
    """
    Histogram of the pixels inside a blob.

    The blob is given by a thresholded companion buffer of the same geometry.
    Note the inverted convention: a pixel counts when the mask's blue channel
    is 0 (object), and is skipped when it is anything else (background).

    Raises:
        InvalidGeometryError: If the mask does not match the buffer's geometry
    """
    if not buffer.same_geometry(mask):
        raise InvalidGeometryError(
            "mask must share width, height and stride with the buffer",
            buffer=repr(buffer),
            mask=repr(mask),
        )
    inside = mask.channel(BufferConstants.BLUE_OFFSET) == HistogramConstants.INSIDE_BLOB_VALUE
    bins = _count(_bin_indices(buffer)[inside])
    return normalize_bins(bins) if normalize else bins


def normalize_bins(bins: Sequence[float]) -> List[float]:
    """
    Convert counts to percentages rounded to two decimals.

    Raises:
        EmptyRegionError: If the counts sum to zero
    """
    total = float(sum(bins))
    if total == 0:
        raise EmptyRegionError("normalize_bins", "histogram has no counts")
    return [
        round(count / total * HistogramConstants.PERCENT_SCALE, HistogramConstants.NORMALIZED_DECIMALS)
        for count in bins
    ]


def bin_distance(first: Sequence[float], second: Sequence[float]) -> float:
    """
    Chi-square style distance ``sum((a - b)**2 / (a + b))``.

    Bins with ``a == b`` contribute nothing, which also covers the 0/0 case.
    For any other pair of non-negative values the denominator is positive.

    Raises:
        ValueError: If the histograms differ in length or hold a negative value
    """
    if len(first) != len(second):
        raise ValueError(f"Histogram lengths differ: {len(first)} != {len(second)}")
    if any(value < 0 for value in first) or any(value < 0 for value in second):
        raise ValueError("Histogram bins must be non-negative")

    difference = 0.0
    for a, b in zip(first, second):
        if a == b:
            continue
        difference += (a - b) ** 2 / (a + b)
    return difference
