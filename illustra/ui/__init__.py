"""
User interface components.
"""
from .windows import ImageEditorWindow

__all__ = ['ImageEditorWindow']
