"""Per-triangle normal calculation."""

import logging
from typing import Sequence

import numpy as np

logger = logging.getLogger(__name__)


def calculate_normal(
    v0: Sequence[float],
    v1: Sequence[float],
    v2: Sequence[float]
) -> np.ndarray:
    """
    Calculate the unit normal of a single triangle.

    The normal is the normalised cross product of (v1 - v0) and (v2 - v0), so
    it follows the winding of the vertices. Degenerate triangles (collinear or
    repeated vertices) yield the zero vector.

    Args:
        v0: First vertex (x, y, z)
        v1: Second vertex
        v2: Third vertex

    Returns:
        Array of shape (3,)
    """
    v0 = np.asarray(v0, dtype=np.float64)
    edge1 = np.asarray(v1, dtype=np.float64) - v0
    edge2 = np.asarray(v2, dtype=np.float64) - v0

    normal = np.cross(edge1, edge2)
    norm = np.linalg.norm(normal)
    if norm > 0:
        return normal / norm
    return np.zeros(3, dtype=np.float64)


def calculate_face_normals(triangles: np.ndarray) -> np.ndarray:
    """
    Calculate unit normals for a stack of triangles.

    Vectorised equivalent of calculate_normal.

    Args:
        triangles: Array of shape (N, 3, 3) holding v0, v1, v2 per triangle

    Returns:
        Array of shape (N, 3); degenerate triangles get zero normals
    """
    triangles = np.asarray(triangles, dtype=np.float64)
    if triangles.size == 0:
        return np.zeros((0, 3), dtype=np.float64)

    edge1 = triangles[:, 1] - triangles[:, 0]
    edge2 = triangles[:, 2] - triangles[:, 0]
    normals = np.cross(edge1, edge2)

    norms = np.linalg.norm(normals, axis=1, keepdims=True)
    degenerate = norms[:, 0] == 0
    if degenerate.any():
        logger.debug(f"{int(degenerate.sum())} degenerate triangles have zero normals")

    safe = np.where(norms > 0, norms, 1.0)
    return np.where(norms > 0, normals / safe, 0.0)
