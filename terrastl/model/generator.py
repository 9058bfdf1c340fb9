"""
End-to-end terrain model generation.

    ElevationGrid -> fill_gaps -> smooth_terrain -> build_solid_mesh
                  -> serialize_stl -> SerializedModel

Each call is independent; nothing is cached between generations.
"""

import logging
import math
import time
from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional

import numpy as np

from terrastl.core.grid import ElevationGrid
from terrastl.image.heightmap import create_heightmap_preview
from terrastl.model.builder import VerticalScaling, build_solid_mesh
from terrastl.model.config import ModelSettings
from terrastl.model.formats.stl import DEFAULT_HEADER, serialize_stl
from terrastl.model.utils.heightmap import TerrainStats, calculate_terrain_stats
from terrastl.model.utils.logging import pipeline_logger
from terrastl.surface.processing import fill_gaps, smooth_terrain

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ModelStats:
    """Summary of a generated model, for reporting."""
    min_elevation: float
    max_elevation: float
    elevation_range: float
    mean_elevation: float
    std_dev: float
    max_model_height_mm: float
    triangle_count: int
    vertical_scale_factor: float
    base_scaling_factor: float
    final_vertical_scale: float
    layer_thickness_mm: float
    estimated_layer_count: int

    @classmethod
    def from_parts(
        cls,
        terrain: TerrainStats,
        scaling: VerticalScaling,
        triangle_count: int,
        layer_thickness_mm: float
    ) -> 'ModelStats':
        return cls(
            min_elevation=terrain.min,
            max_elevation=terrain.max,
            elevation_range=terrain.range,
            mean_elevation=terrain.mean,
            std_dev=terrain.std_dev,
            max_model_height_mm=scaling.max_model_height_mm,
            triangle_count=triangle_count,
            vertical_scale_factor=scaling.vertical_exaggeration,
            base_scaling_factor=scaling.base_scale,
            final_vertical_scale=scaling.final_scale,
            layer_thickness_mm=layer_thickness_mm,
            estimated_layer_count=int(math.ceil(scaling.max_model_height_mm / layer_thickness_mm))
        )

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ModelDimensions:
    """Overall size of the printed model in millimetres."""
    width_mm: float
    length_mm: float
    height_mm: float


@dataclass(frozen=True, eq=False)
class SerializedModel:
    """Binary STL plus everything a caller needs to report on or preview it."""
    buffer: bytes
    triangle_count: int
    stats: ModelStats
    dimensions: ModelDimensions
    preview: np.ndarray


def generate_model(
    grid: ElevationGrid,
    settings: ModelSettings,
    header: str = DEFAULT_HEADER,
    colormap: Optional[str] = None
) -> SerializedModel:
    """
    Convert a raw elevation grid into a printable binary STL.

    Args:
        grid: Raw grid; non-finite samples are treated as gaps
        settings: Physical model settings
        header: STL header text
        colormap: Optional matplotlib colormap for the preview raster

    Returns:
        SerializedModel

    Raises:
        CapacityExceededError: If mesh emission exceeds its allocation
    """
    start = time.perf_counter()

    filled = fill_gaps(grid)
    smoothed = smooth_terrain(filled, settings.smoothness_level)
    terrain = calculate_terrain_stats(smoothed)

    mesh, scaling = build_solid_mesh(smoothed, settings, terrain)
    buffer = serialize_stl(mesh, header)

    stats = ModelStats.from_parts(
        terrain, scaling, mesh.triangle_count, settings.layer_thickness_mm
    )
    dimensions = ModelDimensions(
        width_mm=settings.physical_width_mm,
        length_mm=settings.physical_length_mm,
        height_mm=scaling.max_model_height_mm
    )
    preview = create_heightmap_preview(smoothed, terrain, colormap=colormap)

    pipeline_logger.info(
        "Generated terrain model",
        grid=f"{grid.width}x{grid.height}",
        triangles=stats.triangle_count,
        bytes=len(buffer),
        height_mm=round(stats.max_model_height_mm, 3),
        seconds=round(time.perf_counter() - start, 3)
    )

    return SerializedModel(
        buffer=buffer,
        triangle_count=mesh.triangle_count,
        stats=stats,
        dimensions=dimensions,
        preview=preview
    )
