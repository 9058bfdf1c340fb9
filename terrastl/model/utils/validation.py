"""Validation utilities for terrastl model operations."""

import os
import logging

import numpy as np

# Set up logging
logger = logging.getLogger(__name__)


def validate_triangles(triangles: np.ndarray) -> bool:
    """
    Validate a triangle vertex array.
    
    Args:
        triangles: Array expected to have shape (N, 3, 3)
        
    Returns:
        True if the shape is right and every coordinate is finite
    """
    if triangles is None or not isinstance(triangles, np.ndarray):
        return False

    if triangles.ndim != 3 or triangles.shape[1:] != (3, 3):
        return False

    return bool(np.isfinite(triangles).all())


def ensure_directory_exists(filename: str) -> bool:
    """
    Ensure the directory for a file exists, creating it if needed.
    
    Args:
        filename: Path to file
        
    Returns:
        True if directory exists or was created, False on error
    """
    try:
        directory = os.path.dirname(filename)
        if directory:
            os.makedirs(directory, exist_ok=True)
        return True
    except OSError as e:
        logger.error(f"Failed to create directory for {filename}: {e}")
        return False
