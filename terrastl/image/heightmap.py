"""
Heightmap preview rasters.

The preview is derived from the same smoothed grid and statistics used to
build the mesh. It is returned as a plain uint8 array; saving or displaying
it is left to the caller (``save_heightmap_preview`` writes a PNG with PIL).
"""

import logging
from typing import Optional

import numpy as np

from terrastl.core.grid import ElevationGrid
from terrastl.model.utils.heightmap import TerrainStats, calculate_terrain_stats, normalize_heightmap

logger = logging.getLogger(__name__)


def create_heightmap_preview(
    grid: ElevationGrid,
    stats: Optional[TerrainStats] = None,
    colormap: Optional[str] = None
) -> np.ndarray:
    """
    Render an elevation grid as an 8-bit raster.

    Args:
        grid: Gap-free elevation grid
        stats: Statistics of the grid; calculated if omitted
        colormap: Matplotlib colormap name for an RGB preview; grayscale if None

    Returns:
        uint8 array shaped (height, width) for grayscale or (height, width, 3)
        for a colormap. Flat grids render as all zeros (or the colormap's
        lowest colour).
    """
    if stats is None:
        stats = calculate_terrain_stats(grid)

    normalized = normalize_heightmap(grid.as_array(), stats)

    if colormap is None:
        return np.round(normalized * 255).astype(np.uint8)

    import matplotlib
    try:
        cmap = matplotlib.colormaps[colormap]
    except KeyError:
        logger.warning(f"Colormap '{colormap}' not found, using 'terrain' instead")
        cmap = matplotlib.colormaps['terrain']

    colored = cmap(normalized)
    return (colored[:, :, :3] * 255).astype(np.uint8)


def save_heightmap_preview(raster: np.ndarray, output_path: str) -> str:
    """
    Save a preview raster as an image file.

    Args:
        raster: uint8 array from create_heightmap_preview
        output_path: Destination path; format follows the extension

    Returns:
        The output path

    Raises:
        OSError: If the image cannot be written
    """
    from PIL import Image

    Image.fromarray(np.ascontiguousarray(raster)).save(output_path)
    logger.info(f"Saved heightmap preview to {output_path}")
    return output_path
