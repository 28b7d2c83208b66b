"""
Oriented-gradient field estimators.

Both estimators overwrite each pixel as B = magnitude (0-255),
G = orientation (0-255 for a full turn), R = 255. They read every neighbor
from an unmodified snapshot taken before the pass, so the result does not
depend on visiting order. Neighbors are found by address arithmetic on the
stride; a neighbor address outside the buffer contributes zero.

Rounding follows round-half-to-even throughout (``np.rint``).
"""

import logging
from typing import Dict

import numpy as np

from pixelblob.common.constants import BufferConstants, GradientConstants
from pixelblob.core.buffer import PixelBuffer, shift_flat

logger = logging.getLogger(__name__)


def _neighbor_offsets(slots_per_row: int) -> Dict[str, int]:
    """Slot offsets of the 8 neighbors in the 3x3 neighborhood."""
    return {
        "top_left": -slots_per_row - 1,
        "bottom_left": slots_per_row - 1,
        "top": -slots_per_row,
        "bottom": slots_per_row,
        "top_right": -slots_per_row + 1,
        "bottom_right": slots_per_row + 1,
        "left": -1,
        "right": 1,
    }


def _to_pixel_grid(buffer: PixelBuffer, values: np.ndarray) -> np.ndarray:
    """Reshape a per-slot array to (height, width), dropping padding slots."""
    return values.reshape(buffer.height, buffer.slots_per_row)[:, : buffer.width]


def _push_out_of_dead_zone(values: np.ndarray) -> np.ndarray:
    """Move values within DEAD_ZONE of zero out to +/-DEAD_ZONE, keeping their sign."""
    dead_zone = GradientConstants.DEAD_ZONE
    values = np.where((values >= 0) & (values < dead_zone), dead_zone, values)
    return np.where((values < 0) & (values > -dead_zone), -dead_zone, values)


def finite_difference_gradient(buffer: PixelBuffer) -> PixelBuffer:
    """
    Estimate the gradient of the gray level with averaged central differences.

    The gray level of a pixel is the integer mean of its B, G and R channels.
    Vertical differences are taken down the left, middle and right columns of
    the 3x3 neighborhood and averaged into ``Fy``; horizontal differences
    along the top, middle and bottom rows are averaged into ``Fx``.

    Pixels whose rounded magnitude is zero are written black.

    Args:
        buffer: Buffer to overwrite in place (normally already grayscale)

    Returns:
        The same buffer, for chaining
    """
    slots = buffer.slots
    gray = slots[:, : BufferConstants.ALPHA_OFFSET].astype(np.int64).sum(axis=1) // 3
    gray = gray.astype(np.float64)

    n = _neighbor_offsets(buffer.slots_per_row)
    at = {name: shift_flat(gray, offset) for name, offset in n.items()}

    dy_left = (at["top_left"] - at["bottom_left"]) / 2.0
    dy_middle = (at["top"] - at["bottom"]) / 2.0
    dy_right = (at["top_right"] - at["bottom_right"]) / 2.0

    dx_top = (at["top_right"] - at["top_left"]) / 2.0
    dx_middle = (at["right"] - at["left"]) / 2.0
    dx_bottom = (at["bottom_right"] - at["bottom_left"]) / 2.0

    fy = _push_out_of_dead_zone((dy_left + dy_middle + dy_right) / 3.0)
    fx = _push_out_of_dead_zone((dx_top + dx_middle + dx_bottom) / 3.0)

    magnitude = np.sqrt(fx**2 + fy**2)
    angle = np.arctan2(fy, fx) * (180.0 / np.pi) + 180.0

    angle_intensity = np.rint(
        GradientConstants.MAX_INTENSITY / GradientConstants.FULL_TURN_DEGREES * np.rint(angle)
    )
    magnitude_intensity = np.minimum(np.rint(magnitude), GradientConstants.MAX_INTENSITY)

    magnitude_intensity = _to_pixel_grid(buffer, magnitude_intensity)
    angle_intensity = _to_pixel_grid(buffer, angle_intensity)
    has_edge = magnitude_intensity > 0

    buffer.write_bgr(
        np.where(has_edge, magnitude_intensity, 0).astype(np.uint8),
        np.where(has_edge, angle_intensity, 0).astype(np.uint8),
        np.where(has_edge, GradientConstants.MAX_INTENSITY, 0).astype(np.uint8),
    )

    logger.debug(f"Finite-difference gradient: {int(has_edge.sum())} edge pixels")
    return buffer


def vector_sum_refinement(buffer: PixelBuffer, iterations: int = 1) -> PixelBuffer:
    """
    Reinforce gradient magnitudes that agree in direction with their neighbors.

    Each pixel's (magnitude, orientation) is treated as a vector. The new
    magnitude is the pixel's own magnitude plus, over its 8 neighbors,
    ``m_self * m_neighbor * cos(a_neighbor - a_self)``. Totals below the noise
    floor become 0; otherwise they are divided by the normalization constant
    (24) and clamped to [0, 255]. Orientation is kept.

    Args:
        buffer: Gradient buffer (B = magnitude, G = orientation) to overwrite
        iterations: Number of passes to apply

    Returns:
        The same buffer, for chaining
    """
    degrees_per_step = GradientConstants.FULL_TURN_DEGREES / GradientConstants.MAX_INTENSITY
    offsets = _neighbor_offsets(buffer.slots_per_row)

    for _ in range(iterations):
        slots = buffer.slots
        angle = slots[:, BufferConstants.GREEN_OFFSET].astype(np.float64) * degrees_per_step
        intensity = slots[:, BufferConstants.BLUE_OFFSET].astype(np.float64)

        total = intensity.copy()
        for offset in offsets.values():
            neighbor_angle = shift_flat(angle, offset)
            neighbor_intensity = shift_flat(intensity, offset)
            total += (
                intensity * neighbor_intensity * np.cos((np.pi / 180.0) * (neighbor_angle - angle))
            )

        total = np.where(
            total < GradientConstants.NOISE_FLOOR, 0.0, total / GradientConstants.NORMALIZATION
        )
        total = np.clip(total, 0, GradientConstants.MAX_INTENSITY)

        magnitude = _to_pixel_grid(buffer, np.rint(total)).astype(np.uint8)
        orientation = buffer.channel(BufferConstants.GREEN_OFFSET).copy()
        buffer.write_bgr(magnitude, orientation, GradientConstants.MAX_INTENSITY)

    logger.debug(f"Vector-sum refinement applied {iterations} time(s)")
    return buffer


def grey_collapse(buffer: PixelBuffer) -> PixelBuffer:
    """Copy the magnitude (blue) channel into all three color channels."""
    magnitude = buffer.channel(BufferConstants.BLUE_OFFSET).copy()
    buffer.write_bgr(magnitude, magnitude, magnitude)
    return buffer
