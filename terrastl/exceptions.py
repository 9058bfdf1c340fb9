#!/usr/bin/env python3
"""
terrastl Exceptions

This module defines custom exceptions used throughout the terrastl library.
Settings and bounding box validation raise plain ValueError instead.
"""

class TerraSTLException(Exception):
    """Base class for all terrastl exceptions."""
    pass

class GridError(TerraSTLException):
    """Exception raised when an elevation grid cannot be processed."""
    pass

class InvalidGridShapeError(GridError):
    """Exception raised when grid dimensions and cell count disagree or are too small."""
    pass

class EmptyGridError(GridError):
    """Exception raised when statistics are requested for a grid with no cells."""
    pass

class MeshGenerationError(TerraSTLException):
    """Exception raised when a mesh cannot be built from a grid."""
    pass

class CapacityExceededError(MeshGenerationError):
    """Exception raised when more triangles are emitted than were allocated."""
    pass

class STLFormatError(TerraSTLException):
    """Exception raised when a buffer is not a well-formed binary STL."""
    pass
