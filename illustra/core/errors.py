"""
Error types raised by the editor core.
"""


class EditorError(Exception):
    """Base class for all editor errors."""


class BackendFailure(EditorError):
    """A subject-mask or edit request to the image backend failed."""


class InvalidInput(EditorError):
    """The caller supplied input the editor cannot act on."""


class NotFound(EditorError):
    """A mutation referenced an entity that no longer exists."""
