"""
Tests for image.converters module.

Tests conversion between OpenCV arrays, encoded images and pixel buffers.
"""

import cv2
import numpy as np
import pytest

from pixelblob.core.color import BLACK, WHITE, Color
from pixelblob.exceptions import ProcessingError
from pixelblob.image.converters import (
    decode_image_bytes,
    decode_image_file,
    encode_image_bytes,
    encode_image_file,
    from_ndarray,
    resize_to_fit,
    rotate,
    to_grayscale_ndarray,
    to_ndarray,
)


class TestArrayConversion:
    """Tests for ndarray <-> PixelBuffer"""

    def test_from_bgr(self, test_image):
        buffer = from_ndarray(test_image)

        assert (buffer.width, buffer.height) == (160, 120)
        assert buffer.stride == 160 * 4
        assert np.all(buffer.channel(3) == 255)
        assert buffer.get_color(0, 0) == WHITE

    def test_from_grayscale(self):
        image = np.full((4, 5), 77, dtype=np.uint8)
        buffer = from_ndarray(image)
        assert buffer.pixels[2, 3].tolist() == [77, 77, 77, 255]

    def test_from_bgra_keeps_alpha(self):
        image = np.zeros((2, 2, 4), dtype=np.uint8)
        image[..., 3] = 9
        assert np.all(from_ndarray(image).channel(3) == 9)

    def test_unsupported_shape(self):
        with pytest.raises(ProcessingError):
            from_ndarray(np.zeros((2, 2, 2), dtype=np.uint8))

    def test_to_ndarray_drops_padding(self, padded_buffer):
        array = to_ndarray(padded_buffer, with_alpha=False)
        assert array.shape == (8, 10, 3)
        assert array.flags["C_CONTIGUOUS"]

    def test_round_trip(self, test_image):
        assert np.array_equal(to_ndarray(from_ndarray(test_image), with_alpha=False), test_image)

    def test_grayscale_array(self, square_buffer):
        gray = to_grayscale_ndarray(square_buffer)
        assert gray.shape == (10, 10)
        assert gray[5, 5] == 0 and gray[0, 0] == 255


class TestEncoding:
    """Tests for encoding and decoding"""

    def test_png_bytes_round_trip(self, padded_buffer):
        decoded = decode_image_bytes(encode_image_bytes(padded_buffer))
        assert np.array_equal(decoded.pixels, padded_buffer.pixels)

    def test_file_round_trip(self, tmp_path, square_buffer):
        path = tmp_path / "square.png"
        encode_image_file(square_buffer, path)
        assert decode_image_file(path) == square_buffer

    def test_reads_file_written_by_opencv(self, tmp_path, test_image):
        path = tmp_path / "image.bmp"
        cv2.imwrite(str(path), test_image)
        assert decode_image_file(path).get_color(45, 45) == Color(20, 20, 20)

    def test_invalid_bytes(self):
        with pytest.raises(ProcessingError):
            decode_image_bytes(b"definitely not an image")

    def test_missing_file(self, tmp_path):
        with pytest.raises(ProcessingError):
            decode_image_file(tmp_path / "missing.png")


class TestGeometryHelpers:
    """Tests for resize_to_fit and rotate"""

    def test_resize_enlarges_to_box(self, test_image):
        resized = resize_to_fit(from_ndarray(test_image), 400)
        assert (resized.width, resized.height) == (400, 300)

    def test_resize_shrinks_to_box(self, test_image):
        resized = resize_to_fit(from_ndarray(test_image), 80)
        assert (resized.width, resized.height) == (80, 60)

    def test_rotate_keeps_size(self, test_image):
        rotated = rotate(from_ndarray(test_image), 30)
        assert (rotated.width, rotated.height) == (160, 120)

    def test_rotate_fills_corners(self, make_buffer):
        buffer = make_buffer(20, 20)
        buffer.write_bgr(0, 0, 0)
        rotated = rotate(buffer, 45, fill=255)
        assert rotated.get_color(0, 0) == WHITE
        assert rotated.get_color(10, 10) == BLACK
