"""
Separable blur with a triangular-squared kernel.

The kernel weight at distance ``d`` from the center is ``(radius + 1 - |d|)**2``.
Products are looked up in a precomputed ``[kernel_length][256]`` table. Each
pass divides by the sum of the weights of the taps that fall inside the image,
so edges are renormalized instead of padded, and the division truncates.
"""

import logging
from typing import List

import numpy as np

from pixelblob.common.constants import BufferConstants, ConvolutionConstants
from pixelblob.core.buffer import PixelBuffer
from pixelblob.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


def build_kernel(radius: int) -> List[int]:
    """
    Build the 1-D kernel of length ``2 * radius + 1``.

    Raises:
        ConfigurationError: If radius is outside the supported range
    """
    if not ConvolutionConstants.MIN_RADIUS <= radius <= ConvolutionConstants.MAX_RADIUS:
        raise ConfigurationError(
            "radius",
            f"must be between {ConvolutionConstants.MIN_RADIUS} and "
            f"{ConvolutionConstants.MAX_RADIUS}, got {radius}",
        )
    return [(radius + 1 - abs(d)) ** 2 for d in range(-radius, radius + 1)]


def build_multiplication_table(kernel: List[int]) -> np.ndarray:
    """Table where ``table[k][v] == kernel[k] * v`` for every byte value ``v``."""
    values = np.arange(ConvolutionConstants.TABLE_SIZE, dtype=np.int64)
    return np.asarray(kernel, dtype=np.int64)[:, None] * values[None, :]


def _convolve_axis(channels: np.ndarray, kernel: List[int], table: np.ndarray, axis: int) -> np.ndarray:
    """
    One pass along ``axis`` of a (height, width, 3) uint8 array.

    Returns:
        uint8 array of the same shape
    """
    radius = len(kernel) // 2
    length = channels.shape[axis]
    totals = np.zeros(channels.shape, dtype=np.int64)
    weights = np.zeros(length, dtype=np.int64)

    for k, weight in enumerate(kernel):
        d = k - radius
        # Output positions whose tap at distance d lands inside [0, length)
        start, stop = max(0, -d), min(length, length - d)
        if start >= stop:
            continue
        out = [slice(None)] * channels.ndim
        src = [slice(None)] * channels.ndim
        out[axis] = slice(start, stop)
        src[axis] = slice(start + d, stop + d)
        totals[tuple(out)] += table[k][channels[tuple(src)]]
        weights[start:stop] += weight

    shape = [1] * channels.ndim
    shape[axis] = length
    return (totals // weights.reshape(shape)).astype(np.uint8)


def gaussian_blur(buffer: PixelBuffer, radius: int = ConvolutionConstants.DEFAULT_RADIUS) -> PixelBuffer:
    """
    Blur the B, G and R channels in place: a horizontal pass, then a vertical
    pass over the horizontal result. Alpha and padding bytes are untouched.

    Args:
        buffer: Buffer to blur
        radius: Kernel radius; 0 leaves the image unchanged

    Returns:
        The same buffer, for chaining
    """
    kernel = build_kernel(radius)
    table = build_multiplication_table(kernel)

    bgr = buffer.pixels[:, :, : BufferConstants.ALPHA_OFFSET].copy()
    horizontal = _convolve_axis(bgr, kernel, table, axis=1)
    vertical = _convolve_axis(horizontal, kernel, table, axis=0)
    buffer.pixels[:, :, : BufferConstants.ALPHA_OFFSET] = vertical

    logger.debug(f"Blurred {buffer.width}x{buffer.height} with radius {radius}")
    return buffer
