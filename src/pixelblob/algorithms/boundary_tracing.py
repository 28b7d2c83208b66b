"""
Moore-neighbor boundary tracing.

Precondition: the mask holds exactly one connected boundary curve in black on
a white background, as produced by
:func:`pixelblob.algorithms.morphology.perimeter_mask` on a single blob. Masks
with several disjoint curves are not supported; only the curve containing the
first black pixel in raster order is followed.
"""

import logging
from typing import List

import numpy as np

from pixelblob.common.constants import BufferConstants
from pixelblob.core.buffer import PixelBuffer
from pixelblob.exceptions import EmptyRegionError, UnclosedBoundaryError

logger = logging.getLogger(__name__)


def _search_offsets(slots_per_row: int) -> List[int]:
    """Slot offsets in search priority: TR, R, BR, B, BL, L, TL, T."""
    return [
        -slots_per_row + 1,
        1,
        slots_per_row + 1,
        slots_per_row,
        slots_per_row - 1,
        -1,
        -slots_per_row - 1,
        -slots_per_row,
    ]


def trace_boundary(mask: PixelBuffer) -> List[int]:
    """
    Follow the black boundary curve starting at its first pixel in raster order.

    At every step the current pixel is appended to the path and marked visited,
    then the 8 neighbors are searched in priority order top-right, right,
    bottom-right, bottom, bottom-left, left, top-left, top; the walk moves to
    the first one that is still black. The walk ends when the chosen pixel is
    already on the path, including the dead-end case where no black neighbor
    remains. A one-pixel-wide region therefore yields an open path that ends
    away from its start. The mask itself is not modified.

    Args:
        mask: Buffer whose boundary pixels are pure black

    Returns:
        Byte addresses of the boundary pixels in walk order

    Raises:
        EmptyRegionError: If the mask has no black pixel
        UnclosedBoundaryError: If the walk runs past ``height * width`` steps
            without revisiting the path
    """
    spr = mask.slots_per_row
    black_grid = np.zeros((mask.height, spr), dtype=bool)
    black_grid[:, : mask.width] = ~np.any(mask.pixels[:, :, : BufferConstants.ALPHA_OFFSET] != 0, axis=2)
    black = black_grid.ravel().tolist()

    try:
        start = black.index(True)
    except ValueError:
        raise EmptyRegionError("trace_boundary", "mask has no black pixel")

    slot_count = len(black)
    offsets = _search_offsets(spr)
    path: List[int] = []
    visited = set()
    current = start

    for _ in range(mask.height * mask.width):
        path.append(current)
        visited.add(current)
        black[current] = False

        following = current
        for offset in offsets:
            candidate = current + offset
            if 0 <= candidate < slot_count and black[candidate]:
                following = candidate
                break

        if following in visited:
            break
        current = following
    else:
        raise UnclosedBoundaryError(len(path), "iteration limit of height * width reached")

    logger.debug(f"Traced boundary of {len(path)} pixels")
    return [slot * BufferConstants.BYTES_PER_PIXEL for slot in path]
