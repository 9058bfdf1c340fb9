"""Mesh data structures."""

from .mesh import Triangle, TriangleMesh, TriangleBuffer

__all__ = ['Triangle', 'TriangleMesh', 'TriangleBuffer']
