from .edit_toolbar import EditToolbar
from .bubble_panel import BubblePanel

__all__ = ['EditToolbar', 'BubblePanel']
