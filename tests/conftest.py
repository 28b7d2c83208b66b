"""
Pytest configuration and fixtures for pixelblob tests
"""

import cv2
import numpy as np
import pytest

from pixelblob.config import Settings
from pixelblob.core.buffer import PixelBuffer
from pixelblob.core.color import BLACK, WHITE


def paint(buffer, x, y, width, height, color=BLACK):
    """Fill a rectangle of ``buffer`` with ``color``."""
    buffer.pixels[y : y + height, x : x + width, :3] = color.to_bgr()
    return buffer


@pytest.fixture
def make_buffer():
    """Factory for white buffers with black rectangles painted on them"""

    def _make(width, height, rects=(), stride=None, color=BLACK):
        buffer = PixelBuffer.filled(width, height, WHITE, stride)
        for x, y, w, h in rects:
            paint(buffer, x, y, w, h, color)
        return buffer

    return _make


@pytest.fixture
def square_buffer(make_buffer):
    """10x10 white buffer with a black 3x3 square centered at (5, 5)"""
    return make_buffer(10, 10, [(4, 4, 3, 3)])


@pytest.fixture
def padded_buffer(make_buffer):
    """Buffer whose rows carry two padding slots"""
    return make_buffer(10, 8, [(2, 2, 3, 3)], stride=48)


@pytest.fixture
def test_image():
    """Color test image: dark rectangle and gray circle on white"""
    image = np.full((120, 160, 3), 255, dtype=np.uint8)
    cv2.rectangle(image, (20, 30), (70, 60), (20, 20, 20), -1)
    cv2.circle(image, (120, 80), 20, (128, 128, 128), -1)
    return image


@pytest.fixture
def textured_image():
    """Grayscale image with enough structure for keypoint detection"""
    rng = np.random.default_rng(7)
    image = np.full((200, 200), 255, dtype=np.uint8)
    for _ in range(30):
        x, y = (int(v) for v in rng.integers(10, 170, size=2))
        w, h = (int(v) for v in rng.integers(8, 30, size=2))
        shade = int(rng.integers(0, 200))
        cv2.rectangle(image, (x, y), (x + w, y + h), shade, -1)
    return image


@pytest.fixture
def settings():
    """Settings built from defaults only"""
    return Settings()
