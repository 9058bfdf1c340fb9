"""Heightmap statistics and normalisation."""

import logging
from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional, Union

import numpy as np

from terrastl.core.grid import ElevationGrid
from terrastl.exceptions import EmptyGridError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TerrainStats:
    """Summary statistics of an elevation grid."""
    min: float
    max: float
    mean: float
    range: float
    std_dev: float

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _as_values(heightmap: Union[ElevationGrid, np.ndarray]) -> np.ndarray:
    if isinstance(heightmap, ElevationGrid):
        return heightmap.cells
    return np.asarray(heightmap, dtype=np.float64).reshape(-1)


def calculate_terrain_stats(heightmap: Union[ElevationGrid, np.ndarray]) -> TerrainStats:
    """
    Calculate min, max, mean, range and population standard deviation.

    Args:
        heightmap: ElevationGrid or array of elevations

    Returns:
        TerrainStats for the samples

    Raises:
        EmptyGridError: If there are no samples
    """
    values = _as_values(heightmap)
    count = values.size
    if count == 0:
        raise EmptyGridError("Cannot compute statistics of an empty grid")

    min_value = float(values.min())
    max_value = float(values.max())
    mean = float(values.sum() / count)

    deviations = values - mean
    std_dev = float(np.sqrt(np.sum(deviations * deviations) / count))

    return TerrainStats(
        min=min_value,
        max=max_value,
        mean=mean,
        range=max_value - min_value,
        std_dev=std_dev
    )


def normalize_heightmap(
    heightmap: np.ndarray,
    stats: Optional[TerrainStats] = None
) -> np.ndarray:
    """
    Normalize heightmap values to range [0,1].
    
    Args:
        heightmap: Input heightmap array
        stats: Precomputed statistics; calculated from the heightmap if omitted
        
    Returns:
        Normalized heightmap array (all zeros for a flat heightmap)
    """
    heightmap = np.asarray(heightmap, dtype=np.float64)
    if stats is None:
        stats = calculate_terrain_stats(heightmap)

    if stats.range > 0:
        return np.clip((heightmap - stats.min) / stats.range, 0.0, 1.0)
    return np.zeros_like(heightmap)
