"""
Tests for services.window_scanner module.
"""

import pytest

from pixelblob.algorithms.color_histogram import color_bins
from pixelblob.common.base import Rect
from pixelblob.config import ScanConfig
from pixelblob.core.buffer import PixelBuffer
from pixelblob.core.color import BLACK
from pixelblob.services.window_scanner import WindowScanner, merge_significant_intersections


@pytest.fixture
def white_image():
    return PixelBuffer.filled(60, 60)


@pytest.fixture
def white_template(white_image):
    return color_bins(white_image, normalize=True)


class TestMergeSignificantIntersections:
    """Tests for merge_significant_intersections"""

    def test_overlapping_pair_merges(self):
        rects = [
            Rect(x=0, y=0, width=10, height=10),
            Rect(x=2, y=2, width=10, height=10),
            Rect(x=50, y=50, width=5, height=5),
        ]
        assert merge_significant_intersections(rects) == [
            Rect(x=0, y=0, width=12, height=12),
            Rect(x=50, y=50, width=5, height=5),
        ]

    def test_contained_rect_absorbed(self):
        rects = [Rect(x=0, y=0, width=20, height=20), Rect(x=5, y=5, width=3, height=3)]
        assert merge_significant_intersections(rects) == [Rect(x=0, y=0, width=20, height=20)]

    def test_small_overlap_kept_apart(self):
        rects = [Rect(x=0, y=0, width=10, height=10), Rect(x=8, y=8, width=10, height=10)]
        assert merge_significant_intersections(rects) == rects

    def test_chain_merges_until_stable(self):
        rects = [
            Rect(x=0, y=0, width=10, height=10),
            Rect(x=4, y=0, width=10, height=10),
            Rect(x=8, y=0, width=10, height=10),
        ]
        assert merge_significant_intersections(rects) == [Rect(x=0, y=0, width=18, height=10)]

    def test_empty(self):
        assert merge_significant_intersections([]) == []


class TestWindowScanner:
    """Tests for WindowScanner"""

    def test_template_must_have_64_bins(self):
        with pytest.raises(ValueError):
            WindowScanner([1.0] * 10)

    def test_window_sizes(self, white_template):
        scanner = WindowScanner(white_template, ScanConfig())
        sizes = scanner.window_sizes(60, 60)

        assert sizes[0] == (59, 59)
        assert len(sizes) == 9
        assert all(w > 15 and h > 15 for w, h in sizes)

    def test_uniform_image_matches_largest_window(self, white_image, white_template):
        scanner = WindowScanner(white_template, ScanConfig(), max_workers=2)
        matches = scanner.find_matches(white_image)

        assert len(matches) == 1
        assert matches[0].rect == Rect(x=0, y=0, width=59, height=59)
        assert matches[0].distance == 0

    def test_scan_returns_merged_regions(self, white_image, white_template):
        scanner = WindowScanner(white_template, ScanConfig())
        assert scanner.scan(white_image) == [Rect(x=0, y=0, width=59, height=59)]

    def test_no_match(self, white_template):
        black_image = PixelBuffer.filled(40, 40, BLACK)
        scanner = WindowScanner(white_template, ScanConfig())
        assert scanner.scan(black_image) == []

    def test_finds_patch(self, white_template):
        image = PixelBuffer.filled(90, 90, BLACK)
        image.pixels[40:90, 40:90, :3] = 255
        scanner = WindowScanner(white_template, ScanConfig(distance_threshold=5.0))
        regions = scanner.scan(image)

        assert regions
        for region in regions:
            assert region.x >= 30 and region.y >= 30
