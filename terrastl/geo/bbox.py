"""
Geographic regions and their print-model footprint.

A region is a latitude/longitude rectangle plus the settings used to print
it. The footprint helpers keep the model's width and length in the same
ratio as the ground distances of the rectangle, using an equirectangular
approximation.
"""

import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

from terrastl.model.config import ModelSettings

logger = logging.getLogger(__name__)

KM_PER_DEGREE = 111.32
DEFAULT_MODEL_LENGTH_MM = 100.0


class DemSource(str, Enum):
    """OpenTopography global DEM datasets."""
    SRTMGL3 = "SRTMGL3"
    SRTMGL1 = "SRTMGL1"
    SRTMGL1_E = "SRTMGL1_E"
    AW3D30 = "AW3D30"
    AW3D30_E = "AW3D30_E"
    SRTM15PLUS = "SRTM15Plus"
    NASADEM = "NASADEM"
    COP30 = "COP30"
    COP90 = "COP90"
    EU_DTM = "EU_DTM"
    GEDI_L3 = "GEDI_L3"
    GEBCO_ICE_TOPO = "GEBCOIceTopo"
    GEBCO_SUB_ICE_TOPO = "GEBCOSubIceTopo"

    @classmethod
    def default(cls) -> 'DemSource':
        return cls.SRTMGL1


@dataclass(frozen=True)
class BoundingBox:
    """Latitude/longitude rectangle in decimal degrees."""
    south: float
    west: float
    north: float
    east: float
    name: Optional[str] = None

    def __post_init__(self):
        """Validate coordinate ranges and ordering."""
        for label, value, limit in (
            ("south", self.south, 90.0), ("north", self.north, 90.0),
            ("west", self.west, 180.0), ("east", self.east, 180.0)
        ):
            if not math.isfinite(value) or abs(value) > limit:
                raise ValueError(f"{label} must be within +/-{limit}, got {value}")

        if self.north <= self.south:
            raise ValueError(f"north ({self.north}) must be greater than south ({self.south})")
        if self.east <= self.west:
            raise ValueError(f"east ({self.east}) must be greater than west ({self.west})")

    @classmethod
    def from_string(cls, text: str, name: Optional[str] = None) -> 'BoundingBox':
        """Parse 'south,west,north,east'."""
        parts = [p.strip() for p in text.split(",")]
        if len(parts) != 4:
            raise ValueError(f"Expected 'south,west,north,east', got '{text}'")
        south, west, north, east = (float(p) for p in parts)
        return cls(south=south, west=west, north=north, east=east, name=name)

    @property
    def center_latitude(self) -> float:
        return (self.north + self.south) / 2

    def ground_size_km(self) -> Tuple[float, float]:
        """Approximate (east-west, north-south) extent in kilometres."""
        lat_km = (self.north - self.south) * KM_PER_DEGREE
        lng_km = (
            (self.east - self.west) * KM_PER_DEGREE
            * math.cos(math.radians(self.center_latitude))
        )
        return lng_km, lat_km

    def aspect_ratio(self) -> float:
        """Ground width divided by ground length."""
        lng_km, lat_km = self.ground_size_km()
        return lng_km / lat_km

    def default_model_dimensions(
        self,
        default_length_mm: float = DEFAULT_MODEL_LENGTH_MM
    ) -> Tuple[float, float]:
        """(width_mm, length_mm) with the given length and the region's aspect ratio."""
        return default_length_mm * self.aspect_ratio(), default_length_mm

    def linked_length(self, width_mm: float) -> float:
        """Model length that keeps the region's aspect ratio for a given width."""
        return width_mm / self.aspect_ratio()

    def linked_width(self, length_mm: float) -> float:
        """Model width that keeps the region's aspect ratio for a given length."""
        return length_mm * self.aspect_ratio()


@dataclass
class Region:
    """A named area to print, with its DEM source and model settings."""
    bbox: BoundingBox
    dem_source: DemSource = DemSource.SRTMGL1
    settings: Optional[ModelSettings] = field(default=None)

    def __post_init__(self):
        """Derive default settings from the bounding box when none are given."""
        self.dem_source = DemSource(self.dem_source)
        if self.settings is None:
            width, length = self.bbox.default_model_dimensions()
            self.settings = ModelSettings(physical_width_mm=width, physical_length_mm=length)

    @property
    def name(self) -> str:
        return self.bbox.name or "terrain"

    def header_text(self) -> str:
        """STL header identifying the region and its data source."""
        return f"Terrain model: {self.name} ({self.dem_source.value})"
