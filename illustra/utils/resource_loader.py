"""
Where Illustra keeps its settings on each platform.
"""
import os
import sys
from pathlib import Path

APP_NAME = "Illustra"


def get_config_dir(app_name: str = APP_NAME) -> Path:
    """
    Get the directory that holds settings.json.

    The directory is not created; a missing one just means no settings.

    Args:
        app_name: Folder name under the platform's config root

    Returns:
        %APPDATA%/<app> on Windows, ~/Library/Preferences/<app> on macOS,
        $XDG_CONFIG_HOME/<app> (default ~/.config/<app>) elsewhere
    """
    if os.name == 'nt':
        root = Path(os.environ.get('APPDATA') or Path.home())
    elif sys.platform == 'darwin':
        root = Path.home() / "Library" / "Preferences"
    else:
        root = Path(os.environ.get('XDG_CONFIG_HOME') or Path.home() / ".config")
    return root / app_name
