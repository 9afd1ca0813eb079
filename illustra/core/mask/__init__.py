"""
Selection mask surface.
"""
from .mask_surface import MASK_TINT, MaskSurface

__all__ = [
    'MASK_TINT',
    'MaskSurface'
]
