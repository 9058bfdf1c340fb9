"""Core data structures for terrastl."""

from terrastl.core.grid import ElevationGrid, validate_grid_shape

__all__ = ['ElevationGrid', 'validate_grid_shape']
