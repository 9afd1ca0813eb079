"""
Application controllers for managing interactions between UI and core logic.
"""
from .edit_session_controller import EditSessionController

__all__ = [
    'EditSessionController'
]
