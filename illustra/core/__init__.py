"""
Core business logic for the Illustra image editor.
"""
from .bubbles import Bubble, BubbleManager, BubbleShape
from .errors import BackendFailure, EditorError, InvalidInput, NotFound
from .export import Compositor
from .history import RasterVersion, VersionHistory
from .mask import MaskSurface
from .modes import PenSize, SessionState, ToolMode

__all__ = [
    'Bubble',
    'BubbleManager',
    'BubbleShape',
    'BackendFailure',
    'EditorError',
    'InvalidInput',
    'NotFound',
    'Compositor',
    'RasterVersion',
    'VersionHistory',
    'MaskSurface',
    'PenSize',
    'SessionState',
    'ToolMode'
]
