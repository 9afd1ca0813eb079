from .editor_window import ImageEditorWindow

__all__ = ['ImageEditorWindow']
