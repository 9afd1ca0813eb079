"""
Speech bubble annotations.
"""
from .models import Bubble, BubbleShape
from .manager import BubbleManager
from .renderer import render_bubbles

__all__ = [
    'Bubble',
    'BubbleShape',
    'BubbleManager',
    'render_bubbles'
]
