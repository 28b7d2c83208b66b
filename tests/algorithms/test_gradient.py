"""
Tests for algorithms.gradient module.

Covers the finite-difference estimate, the vector-sum refinement and the grey
collapse that prepares a gradient buffer for thresholding.
"""

import numpy as np
import pytest

from pixelblob.algorithms.gradient import (
    finite_difference_gradient,
    grey_collapse,
    vector_sum_refinement,
)
from pixelblob.core.buffer import PixelBuffer
from pixelblob.core.color import BLACK, Color


@pytest.fixture
def step_edge(make_buffer):
    """10x10 buffer: columns 0-4 black, columns 5-9 white"""
    return make_buffer(10, 10, [(0, 0, 5, 10)])


def _gradient_buffer(magnitudes, orientations):
    """Gradient-encoded buffer from (h, w) magnitude and orientation arrays."""
    height, width = magnitudes.shape
    buffer = PixelBuffer.filled(width, height, BLACK)
    buffer.write_bgr(magnitudes.astype(np.uint8), orientations.astype(np.uint8), 255)
    return buffer


class TestFiniteDifferenceGradient:
    """Tests for finite_difference_gradient"""

    def test_uniform_interior_has_no_edge(self):
        buffer = PixelBuffer.filled(8, 8, Color(128, 128, 128))
        finite_difference_gradient(buffer)
        interior = buffer.pixels[1:-1, 1:-1, :3]
        assert not interior.any()

    def test_outside_reads_as_zero(self):
        buffer = PixelBuffer.filled(8, 8, Color(128, 128, 128))
        finite_difference_gradient(buffer)
        # The row above the image reads as 0, so the top row sees an edge
        assert np.all(buffer.channel(2)[0] == 255)
        assert np.all(buffer.channel(0)[0] > 0)

    def test_step_edge(self, step_edge):
        finite_difference_gradient(step_edge)

        # Fx = 127.5 rounds half-to-even to 128; the angle of 180 degrees maps to 127.5 -> 128
        assert step_edge.get_color(5, 4) == Color(r=255, g=128, b=128)
        assert step_edge.get_color(5, 5) == Color(r=255, g=128, b=128)
        assert step_edge.get_color(5, 2) == BLACK
        assert step_edge.get_color(5, 7) == BLACK

    def test_alpha_untouched(self, step_edge):
        finite_difference_gradient(step_edge)
        assert np.all(step_edge.channel(3) == 255)

    def test_mirrored_edge_has_same_magnitude(self, step_edge):
        flipped = step_edge.clone()
        flipped.pixels[:] = step_edge.pixels[:, ::-1]
        finite_difference_gradient(step_edge)
        finite_difference_gradient(flipped)
        # Mirroring swaps the edge columns; magnitudes stay the same
        assert flipped.get_color(5, 4).b == step_edge.get_color(5, 5).b


class TestVectorSumRefinement:
    """Tests for vector_sum_refinement"""

    def test_isolated_pixel(self):
        magnitudes = np.zeros((5, 5))
        magnitudes[2, 2] = 48
        buffer = _gradient_buffer(magnitudes, np.zeros((5, 5)))
        vector_sum_refinement(buffer)

        # Only its own magnitude counts: 48 / 24
        assert buffer.channel(0)[2, 2] == 2

    def test_aligned_neighbors_reinforce(self):
        magnitudes = np.zeros((5, 5))
        magnitudes[2, 2] = magnitudes[2, 3] = 48
        buffer = _gradient_buffer(magnitudes, np.zeros((5, 5)))
        vector_sum_refinement(buffer)

        # (48 + 48 * 48) / 24
        assert buffer.channel(0)[2, 2] == 98
        assert buffer.channel(0)[2, 3] == 98

    def test_opposed_neighbors_cancel(self):
        magnitudes = np.zeros((5, 5))
        magnitudes[2, 2] = magnitudes[2, 3] = 48
        orientations = np.zeros((5, 5))
        orientations[2, 3] = 128
        buffer = _gradient_buffer(magnitudes, orientations)
        vector_sum_refinement(buffer)

        assert buffer.channel(0)[2, 2] == 0
        assert buffer.channel(0)[2, 3] == 0

    def test_orientation_kept_and_red_set(self):
        rng = np.random.default_rng(1)
        magnitudes = rng.integers(0, 60, size=(6, 7))
        orientations = rng.integers(0, 256, size=(6, 7))
        buffer = _gradient_buffer(magnitudes, orientations)
        vector_sum_refinement(buffer)

        assert np.array_equal(buffer.channel(1), orientations.astype(np.uint8))
        assert np.all(buffer.channel(2) == 255)

    def test_iterations_repeat_the_pass(self):
        rng = np.random.default_rng(2)
        magnitudes = rng.integers(0, 40, size=(6, 6))
        orientations = rng.integers(0, 256, size=(6, 6))
        twice = _gradient_buffer(magnitudes, orientations)
        stepwise = twice.clone()

        vector_sum_refinement(twice, iterations=2)
        vector_sum_refinement(vector_sum_refinement(stepwise))
        assert twice == stepwise

    def test_zero_field_stays_zero(self):
        buffer = _gradient_buffer(np.zeros((4, 4)), np.zeros((4, 4)))
        vector_sum_refinement(buffer, iterations=3)
        assert not buffer.channel(0).any()


class TestGreyCollapse:
    """Tests for grey_collapse"""

    def test_copies_blue_to_all_channels(self):
        buffer = PixelBuffer.filled(3, 3, Color(r=255, g=90, b=40))
        grey_collapse(buffer)
        assert buffer.distinct_colors() == {Color(40, 40, 40)}
