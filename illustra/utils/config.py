"""
Editor settings loaded from the config directory and the environment.
"""
import json
import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Mapping, Optional

from illustra.core.backend.gemini_backend import DEFAULT_MODEL
from .resource_loader import get_config_dir

logger = logging.getLogger(__name__)

SETTINGS_FILE = "settings.json"


@dataclass
class EditorConfig:
    """Settings for one run of the editor."""
    api_key: Optional[str] = None
    model: str = DEFAULT_MODEL
    dark_mode: bool = True
    log_level: str = "INFO"


def _read_settings_file(path: Path) -> dict:
    if not path.exists():
        return {}
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.warning("Ignoring unreadable settings file %s: %s", path, e)
        return {}
    if not isinstance(data, dict):
        logger.warning("Ignoring settings file %s: expected a JSON object", path)
        return {}

    known = {f.name for f in fields(EditorConfig)}
    for key in set(data) - known:
        logger.warning("Unknown setting %r in %s", key, path)
    return {key: value for key, value in data.items() if key in known}


def load_config(settings_path: Optional[Path] = None,
                environ: Optional[Mapping[str, str]] = None) -> EditorConfig:
    """
    Build the editor configuration.

    Defaults are overridden by the settings file, which is overridden by
    environment variables (GEMINI_API_KEY or API_KEY, ILLUSTRA_MODEL,
    ILLUSTRA_LOG_LEVEL).

    Args:
        settings_path: Settings JSON file; defaults to the config directory's
        environ: Environment mapping; defaults to os.environ

    Returns:
        Resolved configuration
    """
    if settings_path is None:
        settings_path = get_config_dir() / SETTINGS_FILE
    if environ is None:
        environ = os.environ

    config = EditorConfig(**_read_settings_file(settings_path))

    api_key = environ.get('GEMINI_API_KEY') or environ.get('API_KEY')
    if api_key:
        config.api_key = api_key
    if environ.get('ILLUSTRA_MODEL'):
        config.model = environ['ILLUSTRA_MODEL']
    if environ.get('ILLUSTRA_LOG_LEVEL'):
        config.log_level = environ['ILLUSTRA_LOG_LEVEL'].upper()

    return config
