"""Triangle soup data structures used between the mesh builder and STL writer."""

import logging
from typing import Iterator, NamedTuple, Tuple

import numpy as np

from terrastl.exceptions import CapacityExceededError, MeshGenerationError
from terrastl.model.utils.mesh import calculate_face_normals
from terrastl.model.utils.validation import validate_triangles

logger = logging.getLogger(__name__)


class Triangle(NamedTuple):
    """One STL facet: unit normal plus three vertices in millimetres."""
    normal: np.ndarray
    v0: np.ndarray
    v1: np.ndarray
    v2: np.ndarray


class TriangleMesh:
    """
    Ordered, immutable sequence of triangles.

    Vertices are stored as an (N, 3, 3) array; normals as (N, 3). The order
    of triangles is preserved from construction and determines the byte
    layout of the serialized model.
    """

    def __init__(self, triangles: np.ndarray, normals: np.ndarray = None):
        """
        Initialize the mesh.

        Args:
            triangles: Array of shape (N, 3, 3)
            normals: Optional array of shape (N, 3); calculated if omitted

        Raises:
            MeshGenerationError: If the arrays are malformed
        """
        triangles = np.array(triangles, dtype=np.float64)
        if triangles.size == 0:
            triangles = triangles.reshape(0, 3, 3)
        if not validate_triangles(triangles):
            raise MeshGenerationError("Triangle vertices must be finite with shape (N, 3, 3)")

        if normals is None:
            normals = calculate_face_normals(triangles)
        normals = np.array(normals, dtype=np.float64)
        if normals.shape != (len(triangles), 3):
            raise MeshGenerationError(
                f"Expected normals of shape ({len(triangles)}, 3), got {normals.shape}"
            )

        triangles.flags.writeable = False
        normals.flags.writeable = False
        self.triangles = triangles
        self.normals = normals

    @property
    def triangle_count(self) -> int:
        return len(self.triangles)

    def __len__(self) -> int:
        return len(self.triangles)

    def __getitem__(self, index: int) -> Triangle:
        v0, v1, v2 = self.triangles[index]
        return Triangle(self.normals[index], v0, v1, v2)

    def __iter__(self) -> Iterator[Triangle]:
        for index in range(len(self.triangles)):
            yield self[index]

    def get_bounding_box(self) -> Tuple[np.ndarray, np.ndarray]:
        """Get mesh bounding box as (min_xyz, max_xyz)."""
        points = self.triangles.reshape(-1, 3)
        return points.min(axis=0), points.max(axis=0)

    def __repr__(self) -> str:
        return f"TriangleMesh(triangles={self.triangle_count})"


class TriangleBuffer:
    """
    Fixed-capacity accumulator for emitted triangles.

    Emitting past the capacity raises CapacityExceededError; triangles are
    never dropped silently.
    """

    def __init__(self, capacity: int):
        if capacity < 0:
            raise ValueError(f"capacity cannot be negative, got {capacity}")
        self.capacity = capacity
        self.count = 0
        self._data = np.empty((capacity, 3, 3), dtype=np.float64)

    def add(self, v0, v1, v2) -> None:
        """Append a single triangle."""
        self.extend(np.array([[v0, v1, v2]], dtype=np.float64))

    def extend(self, triangles: np.ndarray) -> None:
        """
        Append a block of triangles shaped (K, 3, 3).

        Raises:
            CapacityExceededError: If the block does not fit
        """
        triangles = np.asarray(triangles, dtype=np.float64).reshape(-1, 3, 3)
        needed = self.count + len(triangles)
        if needed > self.capacity:
            raise CapacityExceededError(
                f"Cannot emit {len(triangles)} triangles: {self.count} of "
                f"{self.capacity} already used"
            )
        self._data[self.count:needed] = triangles
        self.count = needed

    def to_mesh(self) -> TriangleMesh:
        """Trim to the emitted triangles and compute normals."""
        if self.count != self.capacity:
            logger.warning(
                f"Triangle buffer under-filled: {self.count} of {self.capacity} used"
            )
        return TriangleMesh(self._data[:self.count].copy())
