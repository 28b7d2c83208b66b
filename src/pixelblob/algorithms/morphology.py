"""
Binary morphology over pixel buffers.

Foreground is any non-white pixel. Each operation reads an unmodified source and
writes black/white into a fresh buffer; the one-pixel image border is always
white in the result.
"""

import logging

import numpy as np

from pixelblob.core.buffer import PixelBuffer
from pixelblob.exceptions import InvalidGeometryError

logger = logging.getLogger(__name__)


def _binary_to_buffer(source: PixelBuffer, foreground: np.ndarray) -> PixelBuffer:
    """Fresh buffer with the source geometry: black where ``foreground``, white elsewhere."""
    result = source.clone()
    value = np.where(foreground, 0, 255).astype(np.uint8)
    result.write_bgr(value, value, value)
    return result


def _cross_neighborhood(foreground: np.ndarray):
    """Interior pixel plus its N, S, W, E neighbors as aligned (h-2, w-2) views."""
    center = foreground[1:-1, 1:-1]
    north = foreground[:-2, 1:-1]
    south = foreground[2:, 1:-1]
    west = foreground[1:-1, :-2]
    east = foreground[1:-1, 2:]
    return center, north, south, west, east


def erode(buffer: PixelBuffer) -> PixelBuffer:
    """
    Erode by one pixel with a 4-connected cross.

    An interior output pixel is black iff the pixel and its four neighbors are
    all non-white.

    Args:
        buffer: Source buffer (not modified)

    Returns:
        New eroded buffer
    """
    foreground = buffer.foreground_mask()
    result = np.zeros_like(foreground)
    if buffer.height > 2 and buffer.width > 2:
        center, north, south, west, east = _cross_neighborhood(foreground)
        result[1:-1, 1:-1] = center & north & south & west & east
    logger.debug(f"Eroded {int(foreground.sum())} -> {int(result.sum())} foreground pixels")
    return _binary_to_buffer(buffer, result)


def dilate(buffer: PixelBuffer) -> PixelBuffer:
    """
    Dilate by one pixel with a 4-connected cross.

    An interior output pixel is black iff the pixel or any of its four
    neighbors is non-white.

    Args:
        buffer: Source buffer (not modified)

    Returns:
        New dilated buffer
    """
    foreground = buffer.foreground_mask()
    result = np.zeros_like(foreground)
    if buffer.height > 2 and buffer.width > 2:
        center, north, south, west, east = _cross_neighborhood(foreground)
        result[1:-1, 1:-1] = center | north | south | west | east
    logger.debug(f"Dilated {int(foreground.sum())} -> {int(result.sum())} foreground pixels")
    return _binary_to_buffer(buffer, result)


def exclusive_or(first: PixelBuffer, second: PixelBuffer) -> PixelBuffer:
    """
    Black where exactly one of the two buffers has a foreground pixel.

    Raises:
        InvalidGeometryError: If the buffers differ in geometry
    """
    if not first.same_geometry(second):
        raise InvalidGeometryError(
            "buffers must share width, height and stride",
            first=repr(first),
            second=repr(second),
        )
    return _binary_to_buffer(first, first.foreground_mask() ^ second.foreground_mask())


def perimeter_mask(buffer: PixelBuffer) -> PixelBuffer:
    """
    Boundary pixels of the foreground: the original minus its erosion.

    The result is black on the boundary and white everywhere else, ready for
    :func:`pixelblob.algorithms.boundary_tracing.trace_boundary`.
    """
    return exclusive_or(buffer, erode(buffer))
