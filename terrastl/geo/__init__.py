"""Geographic regions."""

from terrastl.geo.bbox import BoundingBox, DemSource, Region

__all__ = ['BoundingBox', 'DemSource', 'Region']
