"""
Generative image backends.
"""
from .base import ImageBackend
from .gemini_backend import GeminiImageBackend
from .worker import BackendWorker

__all__ = [
    'ImageBackend',
    'GeminiImageBackend',
    'BackendWorker'
]
