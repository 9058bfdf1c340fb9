"""
Pytest fixtures shared across test modules.
"""
import os
import sys

import numpy as np
import pytest

# Add the project root to the path to import terrastl and terrastl_cli
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from terrastl.core.grid import ElevationGrid
from terrastl.model.config import ModelSettings


@pytest.fixture
def ramp_grid():
    """4 rows x 5 columns rising by 10 per column and 100 per row."""
    rows, cols = np.mgrid[0:4, 0:5]
    return ElevationGrid.from_array(rows * 100.0 + cols * 10.0)


@pytest.fixture
def gappy_grid():
    """5x5 hill with a few NaN and inf samples."""
    y, x = np.mgrid[-2:3, -2:3]
    values = 1000.0 - 50.0 * (x ** 2 + y ** 2)
    values[1, 1] = np.nan
    values[2, 4] = np.inf
    values[4, 0] = np.nan
    return ElevationGrid.from_array(values)


@pytest.fixture
def default_settings():
    return ModelSettings()
