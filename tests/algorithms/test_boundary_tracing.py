"""
Tests for algorithms.boundary_tracing module.
"""

import pytest

from pixelblob.algorithms.blob_metrics import perimeter_length
from pixelblob.algorithms.boundary_tracing import trace_boundary
from pixelblob.algorithms.morphology import perimeter_mask
from pixelblob.core.buffer import PixelBuffer
from pixelblob.exceptions import EmptyRegionError


def _ring(top, left, size):
    """(row, column) pairs on the outline of a size x size square."""
    cells = set()
    for i in range(size):
        cells.update({(top, left + i), (top + size - 1, left + i)})
        cells.update({(top + i, left), (top + i, left + size - 1)})
    return cells


class TestTraceBoundary:
    """Tests for trace_boundary"""

    def test_square_ring_closes(self, square_buffer):
        mask = perimeter_mask(square_buffer)
        path = trace_boundary(mask)

        assert len(path) == 8
        assert path[0] == mask.address(4, 4)
        assert {mask.row_column(a) for a in path} == _ring(4, 4, 3)

        first_row, first_col = mask.row_column(path[0])
        last_row, last_col = mask.row_column(path[-1])
        assert abs(first_row - last_row) <= 1 and abs(first_col - last_col) <= 1

    def test_first_step_goes_right(self, square_buffer):
        mask = perimeter_mask(square_buffer)
        path = trace_boundary(mask)
        assert path[1] == mask.address(4, 5)

    def test_mask_is_not_modified(self, square_buffer):
        mask = perimeter_mask(square_buffer)
        before = mask.clone()
        trace_boundary(mask)
        assert mask == before

    def test_addresses_use_stride(self, padded_buffer):
        mask = perimeter_mask(padded_buffer)
        path = trace_boundary(mask)

        assert path[0] == 2 * padded_buffer.stride + 2 * 4
        assert {mask.row_column(a) for a in path} == _ring(2, 2, 3)

    def test_larger_ring(self, make_buffer):
        mask = perimeter_mask(make_buffer(20, 20, [(5, 5, 8, 8)]))
        path = trace_boundary(mask)
        assert len(path) == 28
        assert len(set(path)) == len(path)

    def test_empty_mask(self):
        with pytest.raises(EmptyRegionError):
            trace_boundary(PixelBuffer.filled(6, 6))

    def test_open_line_returns_open_path(self, make_buffer):
        line = make_buffer(10, 10, [(2, 5, 5, 1)])
        path = trace_boundary(line)

        assert [line.row_column(a) for a in path] == [(5, c) for c in range(2, 7)]
        assert perimeter_length(path, line.stride) == 4
