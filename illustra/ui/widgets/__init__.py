from .editor_canvas import EditorCanvas

__all__ = ['EditorCanvas']
