#!/usr/bin/env python3
"""
Configuration management for terrastl CLI tools.

This module provides functions for loading, saving, and accessing the
defaults used by terrastl command-line tools.
"""

import json
import logging
from pathlib import Path
from typing import Dict, Any

logger = logging.getLogger(__name__)

# Default settings
DEFAULT_CONFIG = {
    "output_dir": "terrastl_output",
    "default_width_mm": 100.0,
    "default_length_mm": 100.0,
    "vertical_exaggeration": 1.0,
    "smoothness": 0.0,
    "layer_thickness_mm": 0.2,
    "save_preview": True,
    "colormap": "terrain",
    "dem_source": "SRTMGL1",
}

def get_config_path() -> Path:
    """Get the path to the configuration file."""
    return Path.home() / ".terrastl_config.json"

def load_config() -> Dict[str, Any]:
    """
    Load configuration from config file or create default one.
    
    Returns:
        Dictionary containing configuration settings.
    """
    config_path = get_config_path()
    if not config_path.exists():
        save_config(DEFAULT_CONFIG)
        return DEFAULT_CONFIG.copy()

    try:
        with open(config_path, 'r') as f:
            config = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.warning(f"Could not load config file: {e}")
        return DEFAULT_CONFIG.copy()

    # Update with any missing default values
    for key, value in DEFAULT_CONFIG.items():
        config.setdefault(key, value)
    return config

def save_config(config: Dict[str, Any]) -> None:
    """
    Save configuration to config file.
    
    Args:
        config: Configuration dictionary to save.
    """
    config_path = get_config_path()
    try:
        with open(config_path, 'w') as f:
            json.dump(config, f, indent=2)
    except OSError as e:
        logger.warning(f"Could not save config file: {e}")

def set_config_value(key: str, value: Any) -> None:
    """
    Set a configuration value and save the config.
    
    Args:
        key: Configuration key
        value: Value to set
    """
    config = load_config()
    config[key] = value
    save_config(config)

def reset_config() -> None:
    """Reset configuration to default values."""
    save_config(DEFAULT_CONFIG.copy())
