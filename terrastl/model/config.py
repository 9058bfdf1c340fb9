"""
Configuration classes for terrain model generation.

This module provides the print-model settings read by the mesh builder,
with validation, defaults, and serialization capabilities.
"""

import json
import logging
import math
from typing import Dict, Any
from dataclasses import dataclass, asdict, fields

# Set up logging
logger = logging.getLogger(__name__)


@dataclass
class ModelSettings:
    """
    Physical print settings for a generated terrain model.

    Dimensions are print-model millimetres, not geographic distances.
    """
    physical_width_mm: float = 100.0
    physical_length_mm: float = 100.0
    vertical_exaggeration: float = 1.0
    smoothness_level: float = 0.0
    layer_thickness_mm: float = 0.2

    def __post_init__(self):
        """Validate configuration after initialization."""
        self.validate()

    def validate(self) -> None:
        """
        Validate configuration parameters.

        Raises:
            ValueError: If configuration is invalid
        """
        for name in ('physical_width_mm', 'physical_length_mm', 'layer_thickness_mm'):
            value = getattr(self, name)
            if not math.isfinite(value) or value <= 0:
                raise ValueError(f"{name} must be positive, got {value}")

        if not math.isfinite(self.vertical_exaggeration):
            raise ValueError(
                f"vertical_exaggeration must be finite, got {self.vertical_exaggeration}"
            )

        if not math.isfinite(self.smoothness_level) or self.smoothness_level < 0:
            raise ValueError(f"smoothness_level cannot be negative, got {self.smoothness_level}")

    @property
    def effective_vertical_exaggeration(self) -> float:
        """Vertical exaggeration clamped to at least 1."""
        return max(1.0, float(self.vertical_exaggeration))

    @property
    def max_dimension_mm(self) -> float:
        return max(self.physical_width_mm, self.physical_length_mm)

    def as_dict(self) -> Dict[str, Any]:
        """
        Get configuration as a dictionary.

        Returns:
            Dictionary representation of configuration
        """
        return asdict(self)

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> 'ModelSettings':
        """
        Create configuration from a dictionary.

        Unknown keys are ignored with a warning.

        Args:
            config_dict: Dictionary of configuration parameters

        Returns:
            New ModelSettings instance
        """
        known = [f.name for f in fields(cls)]
        unknown = [k for k in config_dict if k not in known]
        if unknown:
            logger.warning(f"Ignoring unknown model settings: {unknown}")

        return cls(**{k: float(v) for k, v in config_dict.items() if k in known})

    @classmethod
    def load(cls, config_file: str) -> 'ModelSettings':
        """
        Load settings from a JSON file.

        Raises:
            IOError: If file cannot be read
            ValueError: If settings are invalid
        """
        try:
            with open(config_file, 'r') as f:
                config_dict = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise IOError(f"Failed to load settings from {config_file}: {e}")

        return cls.from_dict(config_dict)

    def save(self, config_file: str) -> None:
        """
        Save settings to a JSON file.

        Raises:
            IOError: If file cannot be written
        """
        try:
            with open(config_file, 'w') as f:
                json.dump(self.as_dict(), f, indent=2)
        except OSError as e:
            raise IOError(f"Failed to save settings to {config_file}: {e}")
