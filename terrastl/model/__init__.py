"""Terrain model generation package."""
from .config import ModelSettings
from .builder import (
    BASE_THICKNESS_MM,
    VerticalScaling,
    build_solid_mesh,
    compute_vertical_scaling,
    expected_triangle_count
)
from .generator import ModelDimensions, ModelStats, SerializedModel, generate_model

__all__ = [
    'ModelSettings',
    'BASE_THICKNESS_MM',
    'VerticalScaling',
    'build_solid_mesh',
    'compute_vertical_scaling',
    'expected_triangle_count',
    'ModelDimensions',
    'ModelStats',
    'SerializedModel',
    'generate_model'
]
