"""
Raster version store.
"""
from .models import RasterVersion
from .version_history import VersionHistory

__all__ = [
    'RasterVersion',
    'VersionHistory'
]
