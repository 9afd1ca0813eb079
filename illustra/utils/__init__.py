"""
Utility functions and helpers.
"""
from .config import EditorConfig, load_config
from .resource_loader import get_config_dir
from .warning_manager import WarningManager, WarningType, warning_manager

__all__ = [
    # Configuration
    'EditorConfig',
    'load_config',

    # Platform directories
    'get_config_dir',

    # Warning management
    'WarningManager',
    'WarningType',
    'warning_manager'
]
