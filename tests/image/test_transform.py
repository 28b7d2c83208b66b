"""
Tests for image.transform module.
"""

import numpy as np

from pixelblob.common.base import Rect
from pixelblob.core.buffer import PixelBuffer
from pixelblob.core.color import BLACK, RED, WHITE, Color
from pixelblob.image.transform import (
    blacken_all_but_color_and_white,
    bounding_box_of_color,
    central_blob_color,
    crop_border,
    draw_rectangle,
    erase_all_but_color,
    flip_if_top_heavy,
    grayscale,
    threshold,
)

BLUE = Color(0, 0, 255)
GREEN = Color(0, 255, 0)


class TestGrayscale:
    """Tests for grayscale"""

    def test_integer_mean(self):
        buffer = PixelBuffer.filled(3, 2, Color(30, 60, 91))
        grayscale(buffer)
        assert buffer.distinct_colors() == {Color(60, 60, 60)}

    def test_alpha_untouched(self):
        buffer = PixelBuffer.filled(3, 2, Color(30, 60, 90))
        buffer.channel(3)[:] = 17
        grayscale(buffer)
        assert np.all(buffer.channel(3) == 17)


class TestThreshold:
    """Tests for threshold"""

    def test_blue_channel_decides(self):
        buffer = PixelBuffer.filled(2, 1)
        buffer.set_color(0, 0, Color(r=255, g=255, b=9))
        buffer.set_color(0, 1, Color(r=0, g=0, b=10))
        threshold(buffer, 10)

        assert buffer.get_color(0, 0) == BLACK
        assert buffer.get_color(0, 1) == WHITE

    def test_invert(self):
        buffer = PixelBuffer.filled(2, 1)
        buffer.set_color(0, 0, Color(0, 0, 9))
        threshold(buffer, 10, invert=True)

        assert buffer.get_color(0, 0) == WHITE
        assert buffer.get_color(0, 1) == BLACK

    def test_threshold_above_range_marks_everything(self):
        buffer = PixelBuffer.filled(4, 4)
        threshold(buffer, 256)
        assert buffer.distinct_colors() == {BLACK}


class TestCropBorder:
    """Tests for crop_border"""

    def test_black_frame(self):
        buffer = crop_border(PixelBuffer.filled(10, 10), 2)

        assert buffer.get_color(2, 5) == BLACK
        assert buffer.get_color(3, 5) == WHITE
        assert buffer.get_color(7, 5) == WHITE
        assert buffer.get_color(8, 5) == BLACK
        assert buffer.get_color(5, 2) == BLACK
        assert buffer.get_color(5, 8) == BLACK
        assert buffer.get_color(5, 5) == WHITE

    def test_white_frame(self):
        buffer = PixelBuffer.filled(6, 6, BLACK)
        crop_border(buffer, 0, white=True)

        assert buffer.get_color(0, 3) == WHITE
        assert buffer.get_color(3, 0) == WHITE
        assert buffer.get_color(3, 3) == BLACK


class TestColorSelection:
    """Tests for the color filtering helpers"""

    def test_erase_all_but_color(self):
        buffer = PixelBuffer.filled(4, 4, BLUE)
        buffer.set_color(1, 1, RED)
        erased = erase_all_but_color(buffer, RED)

        assert erased.distinct_colors() == {RED, WHITE}
        assert erased.get_color(1, 1) == RED
        assert buffer.get_color(0, 0) == BLUE

    def test_blacken_all_but_color_and_white(self):
        buffer = PixelBuffer.filled(4, 4)
        buffer.set_color(0, 0, RED)
        buffer.set_color(0, 1, GREEN)
        blacken_all_but_color_and_white(buffer, RED)

        assert buffer.get_color(0, 0) == RED
        assert buffer.get_color(0, 1) == BLACK
        assert buffer.get_color(3, 3) == WHITE

    def test_bounding_box(self, square_buffer):
        assert bounding_box_of_color(square_buffer, BLACK) == Rect(x=4, y=4, width=3, height=3)
        assert bounding_box_of_color(square_buffer, RED) is None


class TestCentralBlobColor:
    """Tests for central_blob_color"""

    def test_most_frequent_on_middle_row(self):
        buffer = PixelBuffer.filled(6, 5)
        buffer.pixels[2, 0:2, :3] = RED.to_bgr()
        buffer.pixels[2, 2:5, :3] = GREEN.to_bgr()
        buffer.pixels[0, :, :3] = BLUE.to_bgr()
        assert central_blob_color(buffer) == GREEN

    def test_ignores_black_and_white(self):
        buffer = PixelBuffer.filled(6, 5)
        buffer.pixels[2, :4, :3] = 0
        assert central_blob_color(buffer) is None


class TestFlipIfTopHeavy:
    """Tests for flip_if_top_heavy"""

    def test_top_heavy_is_rotated(self):
        buffer = PixelBuffer.filled(4, 4)
        buffer.set_color(0, 0, RED)
        flipped = flip_if_top_heavy(buffer, RED)

        assert flipped.get_color(3, 3) == RED
        assert flipped.get_color(0, 0) == WHITE
        assert buffer.get_color(0, 0) == RED

    def test_bottom_heavy_is_copied(self):
        buffer = PixelBuffer.filled(4, 4)
        buffer.set_color(3, 1, RED)
        result = flip_if_top_heavy(buffer, RED)

        assert result == buffer
        assert result is not buffer


class TestDrawRectangle:
    """Tests for draw_rectangle"""

    def test_outline(self):
        buffer = PixelBuffer.filled(6, 6)
        draw_rectangle(buffer, Rect(x=1, y=1, width=3, height=2))

        assert buffer.color_mask(RED).sum() == 10
        assert buffer.get_color(1, 4) == RED
        assert buffer.get_color(3, 1) == RED
        assert buffer.get_color(2, 2) == WHITE

    def test_clipped(self):
        buffer = PixelBuffer.filled(4, 4)
        draw_rectangle(buffer, Rect(x=2, y=2, width=5, height=5), GREEN)

        assert buffer.get_color(2, 3) == GREEN
        assert buffer.get_color(3, 2) == GREEN
        assert buffer.color_mask(GREEN).sum() == 3
