"""Tests for gap filling and smoothing of elevation grids."""

import time

import numpy as np
import pytest

from terrastl.core.grid import ElevationGrid
from terrastl.surface.processing import (
    DEFAULT_ELEVATION,
    box_blur,
    fill_gaps,
    interpolate_gap,
    ring_values,
    smooth_terrain,
    smoothing_iterations
)


def _scan_order_fill(values):
    """Straightforward cell-by-cell fill: row-major, filled cells become valid."""
    values = np.array(values, dtype=float)
    rows, cols = values.shape
    input_valid = np.isfinite(values)
    known = input_valid.copy()
    global_mean = values[input_valid].mean()

    for r in range(rows):
        for c in range(cols):
            if known[r, c]:
                continue
            estimate = global_mean
            for radius in range(1, 6):
                found = [
                    values[rr, cc]
                    for rr in range(max(r - radius, 0), min(r + radius, rows - 1) + 1)
                    for cc in range(max(c - radius, 0), min(c + radius, cols - 1) + 1)
                    if max(abs(rr - r), abs(cc - c)) == radius and known[rr, cc]
                ]
                if found:
                    estimate = np.mean(found)
                    break
            values[r, c] = estimate
            known[r, c] = True
    return values


class TestRingValues:

    def test_radius_one_is_eight_neighbourhood(self):
        values = np.arange(25, dtype=float).reshape(5, 5)
        valid = np.ones_like(values, dtype=bool)
        ring = ring_values(values, valid, 2, 2, 1)
        assert sorted(ring) == [6, 7, 8, 11, 13, 16, 17, 18]

    def test_ring_excludes_inner_cells(self):
        values = np.arange(25, dtype=float).reshape(5, 5)
        valid = np.ones_like(values, dtype=bool)
        ring = ring_values(values, valid, 2, 2, 2)
        assert len(ring) == 16
        assert 12 not in ring
        assert 6 not in ring

    def test_ring_clipped_at_corner(self):
        values = np.arange(9, dtype=float).reshape(3, 3)
        valid = np.ones_like(values, dtype=bool)
        assert sorted(ring_values(values, valid, 0, 0, 1)) == [1, 3, 4]

    def test_invalid_samples_skipped(self):
        values = np.arange(9, dtype=float).reshape(3, 3)
        valid = np.ones_like(values, dtype=bool)
        valid[0, 1] = False
        assert sorted(ring_values(values, valid, 0, 0, 1)) == [3, 4]


class TestFillGaps:

    def test_complete_grid_returned_as_copy(self, ramp_grid):
        filled = fill_gaps(ramp_grid)
        assert filled == ramp_grid
        assert filled is not ramp_grid

    def test_centre_gap_takes_neighbour_mean(self):
        values = np.arange(1, 10, dtype=float).reshape(3, 3)
        values[1, 1] = np.nan
        filled = fill_gaps(ElevationGrid.from_array(values))
        assert filled.as_array()[1, 1] == pytest.approx(5.0)

    def test_corner_gap(self):
        filled = fill_gaps(ElevationGrid.from_array([[np.nan, 2.0], [4.0, 6.0]]))
        assert filled.as_array()[0, 0] == pytest.approx(4.0)

    def test_filled_values_feed_later_gaps(self):
        grid = ElevationGrid.from_array([[0.0, np.nan, np.nan], [30.0, 60.0, 90.0]])
        filled = fill_gaps(grid).as_array()
        # (0, 2) sees the 45 just filled at (0, 1) plus 60 and 90 below
        np.testing.assert_allclose(filled[0], [0.0, 45.0, 65.0])

    def test_left_gap_filled_first(self):
        grid = ElevationGrid.from_array([[np.nan, np.nan], [4.0, 8.0]])
        filled = fill_gaps(grid).as_array()
        np.testing.assert_allclose(filled[0], [6.0, 6.0])

    def test_single_valid_cell_fills_neighbours(self):
        values = np.full((3, 3), np.nan)
        values[1, 1] = 42.0
        filled = fill_gaps(ElevationGrid.from_array(values))
        np.testing.assert_array_equal(filled.as_array(), np.full((3, 3), 42.0))

    def test_infinite_samples_are_gaps(self):
        filled = fill_gaps(ElevationGrid.from_array([[np.inf, 2.0], [2.0, -np.inf]]))
        assert filled.is_complete()
        np.testing.assert_allclose(filled.as_array(), [[2.0, 2.0], [2.0, 2.0]])

    def test_first_cell_searches_wider_rings(self):
        values = np.full((13, 13), np.nan)
        values[0, 3] = 10.0
        values[3, 1] = 20.0
        values[12, 12] = 1000.0
        filled = fill_gaps(ElevationGrid.from_array(values)).as_array()

        assert filled[0, 0] == pytest.approx(15.0)
        # (0, 1) sees the filled corner only
        assert filled[0, 1] == pytest.approx(15.0)

    def test_isolated_first_cell_uses_global_mean(self):
        values = np.full((13, 13), np.nan)
        values[10, 10] = 10.0
        values[10, 11] = 40.0
        filled = fill_gaps(ElevationGrid.from_array(values)).as_array()

        assert filled[0, 0] == pytest.approx(25.0)
        assert filled.min() >= 10.0
        assert filled.max() <= 40.0

    def test_matches_cell_by_cell_scan(self):
        rng = np.random.default_rng(11)
        values = rng.uniform(0, 1000, size=(14, 17))
        values[rng.random(values.shape) < 0.45] = np.nan
        values[0, 0] = np.nan
        values[6:10, 3:12] = np.nan

        filled = fill_gaps(ElevationGrid.from_array(values)).as_array()
        np.testing.assert_allclose(filled, _scan_order_fill(values), rtol=1e-12, atol=1e-9)

    def test_large_void_is_fast(self):
        values = np.random.default_rng(3).uniform(0, 100, size=(600, 600))
        values[100:500, 100:500] = np.nan

        start = time.perf_counter()
        filled = fill_gaps(ElevationGrid.from_array(values))
        elapsed = time.perf_counter() - start

        assert filled.is_complete()
        assert elapsed < 5.0

    def test_all_invalid_grid_uses_default(self, caplog):
        grid = ElevationGrid.from_array(np.full((3, 4), np.nan))
        filled = fill_gaps(grid)
        np.testing.assert_array_equal(filled.as_array(), np.full((3, 4), DEFAULT_ELEVATION))
        assert "No valid elevation samples" in caplog.text

    def test_valid_samples_untouched(self, gappy_grid):
        filled = fill_gaps(gappy_grid)
        valid = ~gappy_grid.invalid_mask()
        np.testing.assert_array_equal(filled.as_array()[valid], gappy_grid.as_array()[valid])
        assert filled.is_complete()

    def test_input_grid_not_modified(self, gappy_grid):
        before = gappy_grid.cells.copy()
        fill_gaps(gappy_grid)
        np.testing.assert_array_equal(gappy_grid.cells, before)

    def test_interpolate_gap_none_when_isolated(self):
        values = np.zeros((13, 13))
        valid = np.zeros((13, 13), dtype=bool)
        valid[0, 0] = True
        assert interpolate_gap(values, valid, 12, 12) is None
        assert interpolate_gap(values, valid, 5, 5) == 0.0


class TestSmoothing:

    @pytest.mark.parametrize("level, expected", [
        (-1, 0), (0, 0), (0.3, 1), (1, 1), (2.1, 3), (5, 5), (40, 5)
    ])
    def test_iteration_count(self, level, expected):
        assert smoothing_iterations(level) == expected

    def test_zero_level_returns_same_grid(self, ramp_grid):
        assert smooth_terrain(ramp_grid, 0) is ramp_grid

    def test_box_blur_edge_handling(self):
        values = np.ones((3, 3))
        values[1, 1] = 9.0
        blurred = box_blur(values)

        assert blurred[0, 0] == pytest.approx(12.0 / 4)
        assert blurred[0, 1] == pytest.approx(14.0 / 6)
        assert blurred[1, 1] == pytest.approx(17.0 / 9)

    def test_constant_grid_is_unchanged(self):
        grid = ElevationGrid.from_array(np.full((4, 6), 123.0))
        smoothed = smooth_terrain(grid, 3)
        np.testing.assert_allclose(smoothed.as_array(), 123.0)

    def test_smoothing_reduces_range(self):
        values = np.zeros((7, 7))
        values[3, 3] = 90.0
        grid = ElevationGrid.from_array(values)
        once = smooth_terrain(grid, 1).as_array()
        twice = smooth_terrain(grid, 2).as_array()

        assert once.max() == pytest.approx(10.0)
        assert once[1, 1] == 0.0
        assert twice[1, 1] > 0.0
        assert smooth_terrain(grid, 1.5) == smooth_terrain(grid, 2)
