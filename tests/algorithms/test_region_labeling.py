"""
Tests for algorithms.region_labeling module.

Covers single and multiple components, deferred merges, policy
independence of the partition and re-labeling of an already labeled buffer.
"""

import cv2
import numpy as np
import pytest

from pixelblob.algorithms.region_labeling import RegionLabeler
from pixelblob.common.enums import TieBreakPolicy
from pixelblob.core.buffer import PixelBuffer
from pixelblob.core.color import BLACK, WHITE


@pytest.fixture
def labeler():
    return RegionLabeler()


@pytest.fixture
def u_shape(make_buffer):
    """Two vertical arms joined by a bottom bar; the arms start as separate labels"""
    return make_buffer(10, 10, [(2, 2, 1, 5), (6, 2, 1, 5), (2, 6, 5, 1)])


@pytest.fixture
def noisy_buffer():
    rng = np.random.default_rng(5)
    buffer = PixelBuffer.filled(30, 20, stride=31 * 4)
    value = np.where(rng.random((20, 30)) < 0.35, 0, 255).astype(np.uint8)
    buffer.write_bgr(value, value, value)
    return buffer


class TestRegionLabeler:
    """Tests for RegionLabeler.label"""

    def test_single_square(self, labeler, square_buffer):
        result = labeler.label(square_buffer)

        assert result.region_count == 1
        assert result.merges == 0
        color = result.colors[0]
        assert square_buffer.color_mask(color).sum() == 9
        assert square_buffer.color_mask(WHITE).sum() == 91
        assert color not in (WHITE, BLACK)

    def test_two_separate_squares(self, labeler, make_buffer):
        buffer = make_buffer(20, 20, [(2, 2, 2, 2), (12, 12, 2, 2)])
        result = labeler.label(buffer)

        assert result.region_count == 2
        assert result.merges == 0
        assert result.colors[0] != result.colors[1]
        assert buffer.get_color(2, 2) == result.colors[0]
        assert buffer.get_color(13, 13) == result.colors[1]

    def test_deferred_merge_gives_one_color(self, labeler, u_shape):
        result = labeler.label(u_shape)

        assert result.tentative_labels == 2
        assert result.merges == 1
        assert result.region_count == 1
        assert u_shape.color_mask(result.colors[0]).sum() == 5 + 5 + 3

    def test_diagonal_pixels_are_connected(self, labeler, make_buffer):
        buffer = make_buffer(6, 6, [(1, 1, 1, 1), (2, 2, 1, 1), (3, 1, 1, 1)])
        result = labeler.label(buffer)
        assert result.region_count == 1

    def test_single_pixel(self, labeler, make_buffer):
        buffer = make_buffer(5, 5, [(2, 2, 1, 1)])
        result = labeler.label(buffer)
        assert result.region_count == 1
        assert buffer.get_color(2, 2) == result.colors[0]

    def test_empty_image(self, labeler):
        buffer = PixelBuffer.filled(8, 8)
        before = buffer.clone()
        result = labeler.label(buffer)

        assert result.colors == []
        assert not result.label_map.any()
        assert buffer == before

    def test_label_map_matches_colors(self, labeler, make_buffer):
        buffer = make_buffer(20, 20, [(2, 2, 2, 2), (12, 12, 2, 2)])
        result = labeler.label(buffer)

        assert result.label_map.shape == (20, 20)
        assert result.label_map[0, 0] == 0
        for index, color in enumerate(result.colors, start=1):
            assert np.array_equal(result.label_map == index, buffer.color_mask(color))

    def test_relabeling_keeps_partition(self, labeler, noisy_buffer):
        first = labeler.label(noisy_buffer)
        second = labeler.label(noisy_buffer)

        assert second.region_count == first.region_count
        assert np.array_equal(second.label_map, first.label_map)
        # Existing colors are reserved, so every region gets a fresh color
        assert not set(second.colors) & set(first.colors)

    def test_policies_agree_on_partition(self, noisy_buffer):
        by_order = RegionLabeler(TieBreakPolicy.NEIGHBOR_ORDER).label(noisy_buffer.clone())
        by_min = RegionLabeler(TieBreakPolicy.MIN_LABEL).label(noisy_buffer.clone())

        assert by_order.region_count == by_min.region_count
        assert np.array_equal(by_order.label_map, by_min.label_map)

    def test_components_are_eight_connected(self, labeler, noisy_buffer):
        foreground = noisy_buffer.foreground_mask().astype(np.uint8)
        count, _ = cv2.connectedComponents(foreground, connectivity=8)
        result = labeler.label(noisy_buffer)
        assert result.region_count == count - 1

    def test_padding_slots_untouched(self, labeler, padded_buffer):
        result = labeler.label(padded_buffer)
        rows = padded_buffer.data.reshape(padded_buffer.height, padded_buffer.stride)

        assert result.region_count == 1
        assert np.all(rows[:, padded_buffer.width * 4 :] == 0)

    def test_row_wrap_follows_address_arithmetic(self, labeler, make_buffer):
        packed = make_buffer(5, 3, [(4, 0, 1, 1), (0, 1, 1, 1)])
        padded = make_buffer(5, 3, [(4, 0, 1, 1), (0, 1, 1, 1)], stride=24)

        # In a packed buffer the slot left of (1, 0) is (0, 4)
        assert labeler.label(packed).region_count == 1
        assert labeler.label(padded).region_count == 2

    def test_seeded_colors_are_reproducible(self, square_buffer):
        first = RegionLabeler(palette_seed=9).label(square_buffer.clone())
        second = RegionLabeler(palette_seed=9).label(square_buffer.clone())
        assert first.colors == second.colors
