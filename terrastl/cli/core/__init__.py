#!/usr/bin/env python3
"""
Core functionality for terrastl CLI tools.

This module provides shared functionality used across the CLI commands,
such as configuration management, file loading, and console output.
"""

# Re-export key functionality to make imports easier
from terrastl.cli.core.ui import (
    console,
    setup_logging,
    print_warning,
    print_error,
    print_success,
    print_rich_table,
    display_model_stats
)

from terrastl.cli.core.config import (
    load_config,
    save_config,
    set_config_value,
    reset_config
)

from terrastl.cli.core.io import (
    load_elevation_grid,
    create_output_dir,
    find_grid_files
)
