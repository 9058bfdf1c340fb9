#!/usr/bin/env python3
"""
I/O utilities for the terrastl CLI.

This module loads already-decoded elevation rasters from local files and
manages output locations. Supported inputs:

* ``.npy``: a 2D array
* ``.npz``: the ``elevation`` array, or the first array in the archive
* ``.tif``, ``.tiff``, ``.png``: single-band images read with PIL
"""

import logging
from pathlib import Path
from typing import Optional, Union

import numpy as np

from terrastl.cli.core.config import load_config
from terrastl.cli.core.ui import console
from terrastl.cli.exceptions import FileError
from terrastl.core.grid import ElevationGrid

# Set up logger
logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = (".tif", ".tiff", ".png")
GRID_EXTENSIONS = (".npy", ".npz") + IMAGE_EXTENSIONS


def _read_npz(file_path: Path) -> np.ndarray:
    with np.load(file_path) as archive:
        if not archive.files:
            raise FileError(f"No arrays found in {file_path}")
        key = "elevation" if "elevation" in archive.files else archive.files[0]
        return archive[key]


def _read_image(file_path: Path) -> np.ndarray:
    from PIL import Image

    with Image.open(file_path) as img:
        if img.mode not in ("F", "I", "I;16", "L"):
            raise FileError(
                f"{file_path.name} is a {img.mode} image; expected a single-band elevation raster"
            )
        return np.array(img, dtype=np.float64)


def load_elevation_grid(
    file_path: Union[str, Path],
    nodata: Optional[float] = None
) -> ElevationGrid:
    """
    Load an elevation raster into an ElevationGrid.
    
    Args:
        file_path: Path to the raster file
        nodata: Sample value marking missing data; converted to NaN
        
    Returns:
        ElevationGrid (may still contain gaps)

    Raises:
        FileError: If the file is missing or in an unsupported format
    """
    file_path = Path(file_path)
    if not file_path.exists():
        raise FileError(f"File not found: {file_path}")

    suffix = file_path.suffix.lower()
    try:
        if suffix == ".npy":
            array = np.load(file_path)
        elif suffix == ".npz":
            array = _read_npz(file_path)
        elif suffix in IMAGE_EXTENSIONS:
            array = _read_image(file_path)
        else:
            raise FileError(
                f"Unsupported grid format '{suffix}', expected one of {', '.join(GRID_EXTENSIONS)}"
            )
    except (OSError, ValueError) as e:
        raise FileError(f"Could not read {file_path}: {e}")

    array = np.asarray(array, dtype=np.float64)
    if nodata is not None:
        array = np.where(array == nodata, np.nan, array)

    logger.info(f"Loaded {array.shape} grid from {file_path}")
    return ElevationGrid.from_array(array)


def create_output_dir(base_dir: Optional[Union[str, Path]] = None,
                      subdir: Optional[str] = None) -> Path:
    """
    Create the output directory if it doesn't exist.
    
    Args:
        base_dir: Optional base directory (uses config if None).
        subdir: Optional subdirectory to create under base_dir.
        
    Returns:
        Path object pointing to the created directory.
    """
    if base_dir is None:
        output_path = Path(load_config()["output_dir"])
    else:
        output_path = Path(base_dir)

    if subdir:
        output_path = output_path / subdir

    if not output_path.exists():
        output_path.mkdir(parents=True, exist_ok=True)
        console.print(f"[green]Created directory:[/green] {output_path}")

    return output_path


def find_grid_files(directory: Path, pattern: str = "*.npy", recursive: bool = False) -> list:
    """List grid files in a directory, sorted by name."""
    finder = directory.rglob if recursive else directory.glob
    return sorted(p for p in finder(pattern) if p.suffix.lower() in GRID_EXTENSIONS)
