"""
terrastl Package.

Converts elevation grids into solid, 3D-printable binary STL terrain models:
gap filling, smoothing, solid triangulation and STL serialization.
"""

__version__ = "0.1.0"

# Import the main exception classes for easy access
from terrastl.exceptions import (
    TerraSTLException,
    InvalidGridShapeError,
    EmptyGridError,
    CapacityExceededError,
    STLFormatError
)

from terrastl.core.grid import ElevationGrid
from terrastl.model.config import ModelSettings
from terrastl.model.generator import SerializedModel, generate_model
