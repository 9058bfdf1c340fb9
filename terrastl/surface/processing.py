"""
Functions for repairing and conditioning elevation grids before meshing:
gap filling of nodata samples and iterative box-blur smoothing.
"""

import logging
import math
from typing import Optional

import numpy as np
from scipy import ndimage

from terrastl.core.grid import ElevationGrid

logger = logging.getLogger(__name__)

DEFAULT_ELEVATION = 500.0
MAX_SEARCH_RADIUS = 5
MAX_SMOOTHING_ITERATIONS = 5

_BOX_KERNEL = np.ones((3, 3), dtype=np.float64)
_ROW_KERNEL = np.ones(3, dtype=np.float64)
# Right neighbour plus the three cells below
_AHEAD_KERNEL = np.array([[0, 0, 0], [0, 0, 1], [1, 1, 1]], dtype=np.float64)


def ring_values(
    values: np.ndarray,
    valid: np.ndarray,
    row: int,
    col: int,
    radius: int
) -> np.ndarray:
    """
    Collect the valid samples lying on a square ring around a cell.

    Only cells at Chebyshev distance exactly ``radius`` are returned, so
    radius 1 is the 8-neighbourhood. The ring is clipped at the grid edges.

    Args:
        values: 2D array of elevations
        valid: Boolean mask of usable samples, same shape as values
        row: Row of the centre cell
        col: Column of the centre cell
        radius: Ring radius (>= 1)

    Returns:
        1D array of valid values on the ring (possibly empty)
    """
    rows, cols = values.shape
    r0, r1 = max(row - radius, 0), min(row + radius, rows - 1)
    c0, c1 = max(col - radius, 0), min(col + radius, cols - 1)

    dr = np.abs(np.arange(r0, r1 + 1) - row)[:, None]
    dc = np.abs(np.arange(c0, c1 + 1) - col)[None, :]
    on_ring = np.maximum(dr, dc) == radius

    selected = on_ring & valid[r0:r1 + 1, c0:c1 + 1]
    return values[r0:r1 + 1, c0:c1 + 1][selected]


def interpolate_gap(
    values: np.ndarray,
    valid: np.ndarray,
    row: int,
    col: int,
    max_radius: int = MAX_SEARCH_RADIUS
) -> Optional[float]:
    """
    Estimate a missing sample from its nearest non-empty ring of neighbours.

    Returns:
        Mean of the first ring (radius 1..max_radius) holding any valid
        sample, or None if every ring is empty.
    """
    for radius in range(1, max_radius + 1):
        found = ring_values(values, valid, row, col, radius)
        if found.size:
            return float(found.mean())
    return None


def fill_gaps(grid: ElevationGrid) -> ElevationGrid:
    """
    Replace every non-finite sample with an estimate from its neighbours.

    Gaps are visited in row-major order and each estimate counts as valid
    for the gaps visited after it. A gap takes the mean of the valid samples
    on the closest non-empty ring (radius 1 to 5); with nothing valid within
    radius 5 it takes the mean of all valid input samples. A grid without any
    valid sample becomes a constant DEFAULT_ELEVATION grid.

    Once the first gap is filled, every later gap has a filled or valid cell
    to its left or in the row above, so only the first cell in scan order
    can ever need the wider rings or the global mean. Samples ahead of a gap
    in scan order are taken from the input for the whole grid in one pass;
    the rows are then swept in order to add the already-filled neighbours.

    Args:
        grid: Input elevation grid, possibly containing nodata

    Returns:
        New grid in which every cell is finite
    """
    values = grid.as_array()
    valid = np.isfinite(values)

    if valid.all():
        return grid.with_values(values.copy())

    if not valid.any():
        logger.warning(
            f"No valid elevation samples in {grid.width}x{grid.height} grid, "
            f"using default elevation {DEFAULT_ELEVATION}"
        )
        return grid.with_values(np.full(values.shape, DEFAULT_ELEVATION))

    filled = np.where(valid, values, 0.0)
    global_mean = float(values[valid].mean())

    # Right neighbour and the row below: only input samples are known there
    ahead_sums = ndimage.correlate(filled, _AHEAD_KERNEL, mode='constant', cval=0.0)
    ahead_counts = ndimage.correlate(
        valid.astype(np.float64), _AHEAD_KERNEL, mode='constant', cval=0.0
    )
    row_above_counts = ndimage.correlate1d(
        np.ones(grid.width), _ROW_KERNEL, mode='constant', cval=0.0
    )

    gap_count = int((~valid).sum())
    global_fills = 0

    for row in np.flatnonzero(~valid.all(axis=1)):
        sums = ahead_sums[row]
        counts = ahead_counts[row]
        if row > 0:
            # The row above is final
            sums = sums + ndimage.correlate1d(filled[row - 1], _ROW_KERNEL, mode='constant', cval=0.0)
            counts = counts + row_above_counts
        sums = sums.tolist()
        counts = counts.tolist()

        line = filled[row].tolist()
        for col in np.flatnonzero(~valid[row]).tolist():
            total, count = sums[col], counts[col]
            if col > 0:
                total += line[col - 1]
                count += 1

            if count:
                line[col] = total / count
                continue

            estimate = interpolate_gap(values, valid, row, col)
            if estimate is None:
                estimate = global_mean
                global_fills += 1
            line[col] = estimate

        filled[row] = line

    logger.debug(
        f"Filled {gap_count} gaps "
        f"({gap_count - global_fills} from neighbours, {global_fills} from global mean {global_mean:.3f})"
    )
    return grid.with_values(filled)


def smoothing_iterations(smoothness_level: float) -> int:
    """Number of blur passes for a smoothness level (0 disables smoothing)."""
    if smoothness_level <= 0:
        return 0
    return min(MAX_SMOOTHING_ITERATIONS, int(math.ceil(smoothness_level)))


def box_blur(values: np.ndarray) -> np.ndarray:
    """
    One 3x3 box blur pass without padding.

    Each output cell is the mean of itself and its in-bounds neighbours, so
    corners average 4 samples, edges 6 and interior cells 9.
    """
    sums = ndimage.correlate(values, _BOX_KERNEL, mode='constant', cval=0.0)
    counts = ndimage.correlate(np.ones_like(values), _BOX_KERNEL, mode='constant', cval=0.0)
    return sums / counts


def smooth_terrain(grid: ElevationGrid, smoothness_level: float) -> ElevationGrid:
    """
    Apply iterative box blur smoothing.

    Args:
        grid: Gap-free elevation grid
        smoothness_level: 0 or less returns the grid unchanged; otherwise
            ceil(level) passes are applied, capped at 5

    Returns:
        Smoothed grid (the same object when no smoothing is requested)
    """
    iterations = smoothing_iterations(smoothness_level)
    if iterations == 0:
        return grid

    current = grid.as_array()
    for _ in range(iterations):
        current = box_blur(current)

    logger.debug(f"Applied {iterations} smoothing passes to {grid.width}x{grid.height} grid")
    return grid.with_values(current)
