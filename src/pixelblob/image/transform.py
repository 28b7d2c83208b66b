"""
Whole-buffer pixel operations.

Pure white is background throughout. Operations documented as "in place"
overwrite the B, G and R channels of the given buffer and return it; the
others return a new buffer and leave their input untouched. Alpha and row
padding are never modified.
"""

import logging
from collections import Counter
from typing import Optional

import numpy as np

from pixelblob.common.base import Rect
from pixelblob.common.constants import BufferConstants
from pixelblob.core.buffer import PixelBuffer
from pixelblob.core.color import BLACK, RED, WHITE, Color

logger = logging.getLogger(__name__)


def grayscale(buffer: PixelBuffer) -> PixelBuffer:
    """In place: set B, G and R of every pixel to the integer mean ``(B + G + R) // 3``."""
    bgr = buffer.pixels[:, :, : BufferConstants.ALPHA_OFFSET].astype(np.uint16)
    gray = (bgr.sum(axis=2) // 3).astype(np.uint8)
    buffer.write_bgr(gray, gray, gray)
    return buffer


def threshold(buffer: PixelBuffer, threshold: int, invert: bool = False) -> PixelBuffer:
    """
    In place: binarize on the blue channel.

    ``B >= threshold`` becomes background (255, or 0 when inverted); everything
    else becomes object (0, or 255 when inverted).
    """
    object_value, background_value = (255, 0) if invert else (0, 255)
    blue = buffer.channel(BufferConstants.BLUE_OFFSET)
    value = np.where(blue >= threshold, background_value, object_value).astype(np.uint8)
    buffer.write_bgr(value, value, value)
    return buffer


def crop_border(buffer: PixelBuffer, thickness: int, white: bool = False) -> PixelBuffer:
    """
    In place: paint a frame around the image.

    Rows ``0..thickness`` and ``height - thickness..height - 1`` and the
    matching columns are set to black (or white), both ends inclusive.
    """
    value = 255 if white else 0
    bgr = buffer.pixels[:, :, : BufferConstants.ALPHA_OFFSET]
    bgr[: thickness + 1] = value
    bgr[max(0, buffer.height - thickness) :] = value
    bgr[:, : thickness + 1] = value
    bgr[:, max(0, buffer.width - thickness) :] = value
    return buffer


def erase_all_but_color(buffer: PixelBuffer, color: Color) -> PixelBuffer:
    """New buffer in which every pixel not exactly ``color`` is white."""
    result = buffer.clone()
    result.pixels[~buffer.color_mask(color), : BufferConstants.ALPHA_OFFSET] = WHITE.to_bgr()
    return result


def blacken_all_but_color_and_white(buffer: PixelBuffer, color: Color) -> PixelBuffer:
    """In place: every pixel that is neither ``color`` nor white becomes black."""
    keep = buffer.color_mask(color) | buffer.color_mask(WHITE)
    buffer.pixels[~keep, : BufferConstants.ALPHA_OFFSET] = BLACK.to_bgr()
    return buffer


def bounding_box_of_color(buffer: PixelBuffer, color: Color) -> Optional[Rect]:
    """
    Tight bounding box of the pixels exactly matching ``color``.

    Returns:
        Rect covering every matching pixel, or None if there is none
    """
    rows, columns = np.nonzero(buffer.color_mask(color))
    if rows.size == 0:
        return None
    x, y = int(columns.min()), int(rows.min())
    return Rect(x=x, y=y, width=int(columns.max()) - x + 1, height=int(rows.max()) - y + 1)


def central_blob_color(buffer: PixelBuffer) -> Optional[Color]:
    """
    Most frequent color along the middle row, ignoring pure white and pure black.

    Ties go to the color met first from the left. Returns None when the row
    holds only white and black.
    """
    middle = buffer.pixels[buffer.height // 2, :, : BufferConstants.ALPHA_OFFSET]
    counts = Counter(Color.from_bgr(b, g, r) for b, g, r in middle)
    counts.pop(WHITE, None)
    counts.pop(BLACK, None)
    if not counts:
        return None
    return counts.most_common(1)[0][0]


def flip_if_top_heavy(buffer: PixelBuffer, color: Color) -> PixelBuffer:
    """
    Copy rotated by 180 degrees when more ``color`` pixels lie above the middle
    than below it; otherwise an unrotated copy.
    """
    rows = np.nonzero(buffer.color_mask(color))[0]
    top = int(np.count_nonzero(rows < buffer.height / 2.0))
    bottom = rows.size - top

    result = buffer.clone()
    if top > bottom:
        result.pixels[:] = buffer.pixels[::-1, ::-1]
        logger.debug(f"Rotated top-heavy buffer ({top} above, {bottom} below)")
    return result


def draw_rectangle(buffer: PixelBuffer, rect: Rect, color: Color = RED) -> PixelBuffer:
    """
    In place: draw the 1-pixel outline of ``rect``.

    Lines are drawn at columns ``x`` and ``x + width`` and rows ``y`` and
    ``y + height``, so the right and bottom edges are inclusive. Parts outside
    the image are clipped.
    """
    bgr = buffer.pixels[:, :, : BufferConstants.ALPHA_OFFSET]
    value = color.to_bgr()

    top, bottom = max(rect.y, 0), min(rect.y2, buffer.height - 1)
    left, right = max(rect.x, 0), min(rect.x2, buffer.width - 1)
    if top > bottom or left > right:
        return buffer

    for column in (rect.x, rect.x2):
        if 0 <= column < buffer.width:
            bgr[top : bottom + 1, column] = value
    for row in (rect.y, rect.y2):
        if 0 <= row < buffer.height:
            bgr[row, left : right + 1] = value
    return buffer
