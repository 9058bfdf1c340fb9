"""
Elevation grid container.

An ElevationGrid is a row-major rectangle of elevation samples. Invalid
samples are stored as non-finite values (NaN or +/-inf). Grids are treated as
immutable: the cell array is flagged read-only, and every processing stage
returns a new grid.
"""

import logging
from dataclasses import dataclass
from typing import Sequence, Union

import numpy as np

from terrastl.exceptions import InvalidGridShapeError

logger = logging.getLogger(__name__)

MIN_GRID_SIZE = 2


def validate_grid_shape(width: int, height: int, cell_count: int) -> None:
    """
    Check grid dimensions against the number of cells.

    Args:
        width: Number of samples per row
        height: Number of rows
        cell_count: Length of the flat cell sequence

    Raises:
        InvalidGridShapeError: If a dimension is not a whole number, the grid
            is smaller than 2x2 or the cell count does not equal width * height
    """
    for name, value in (("width", width), ("height", height)):
        if not float(value).is_integer():
            raise InvalidGridShapeError(f"Grid {name} must be a whole number, got {value!r}")

    if width < MIN_GRID_SIZE or height < MIN_GRID_SIZE:
        raise InvalidGridShapeError(
            f"Grid must be at least {MIN_GRID_SIZE}x{MIN_GRID_SIZE}, got {width}x{height}"
        )
    if cell_count != width * height:
        raise InvalidGridShapeError(
            f"Grid of {width}x{height} needs {width * height} cells, got {cell_count}"
        )


@dataclass(eq=False)
class ElevationGrid:
    """Rectangular grid of elevation samples."""
    width: int
    height: int
    cells: np.ndarray  # flat, row-major, float64

    def __post_init__(self):
        """Normalise cells to a read-only float64 array and validate the shape."""
        cells = np.array(self.cells, dtype=np.float64).reshape(-1)
        validate_grid_shape(self.width, self.height, cells.size)

        self.width = int(self.width)
        self.height = int(self.height)

        cells.flags.writeable = False
        self.cells = cells

    @classmethod
    def from_array(cls, array: Union[np.ndarray, Sequence[Sequence[float]]]) -> 'ElevationGrid':
        """
        Create a grid from a 2D array shaped (height, width).

        Args:
            array: 2D array-like of elevations

        Returns:
            New ElevationGrid
        """
        array = np.asarray(array, dtype=np.float64)
        if array.ndim != 2:
            raise InvalidGridShapeError(f"Expected a 2D array, got {array.ndim}D")
        rows, cols = array.shape
        return cls(width=cols, height=rows, cells=array.reshape(-1))

    @property
    def shape(self):
        """(height, width), matching numpy conventions."""
        return (self.height, self.width)

    @property
    def size(self) -> int:
        return self.cells.size

    def as_array(self) -> np.ndarray:
        """Return a read-only (height, width) view of the cells."""
        return self.cells.reshape(self.height, self.width)

    def invalid_mask(self) -> np.ndarray:
        """Boolean (height, width) mask of non-finite samples."""
        return ~np.isfinite(self.as_array())

    def is_complete(self) -> bool:
        """True if every sample is finite."""
        return bool(np.isfinite(self.cells).all())

    def with_values(self, values: np.ndarray) -> 'ElevationGrid':
        """Create a grid of the same shape holding new values."""
        return ElevationGrid(self.width, self.height, np.asarray(values).reshape(-1))

    def __eq__(self, other) -> bool:
        if not isinstance(other, ElevationGrid):
            return NotImplemented
        return (
            self.width == other.width
            and self.height == other.height
            and np.array_equal(self.cells, other.cells, equal_nan=True)
        )

    def __repr__(self) -> str:
        return f"ElevationGrid(width={self.width}, height={self.height})"
