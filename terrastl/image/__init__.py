"""Preview rasters."""

from terrastl.image.heightmap import create_heightmap_preview, save_heightmap_preview

__all__ = ['create_heightmap_preview', 'save_heightmap_preview']
