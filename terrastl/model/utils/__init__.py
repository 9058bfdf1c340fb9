"""Model utility functions."""

from .mesh import calculate_normal, calculate_face_normals

from .heightmap import (
    TerrainStats,
    calculate_terrain_stats,
    normalize_heightmap
)

from .validation import validate_triangles, ensure_directory_exists

# Define package exports
__all__ = [
    # Mesh utilities
    'calculate_normal',
    'calculate_face_normals',
    'validate_triangles',
    'ensure_directory_exists',
    
    # Heightmap utilities
    'TerrainStats',
    'calculate_terrain_stats',
    'normalize_heightmap'
]
