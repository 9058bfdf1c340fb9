"""Grid conditioning: gap filling and smoothing."""

from terrastl.surface.processing import (
    DEFAULT_ELEVATION,
    fill_gaps,
    smooth_terrain,
    smoothing_iterations,
)

__all__ = ['DEFAULT_ELEVATION', 'fill_gaps', 'smooth_terrain', 'smoothing_iterations']
