"""
Configuration management for jsongraph.

Handles persistent configuration including:
- Which JSON document the editor opens on start-up
- Serialization indent used when an edit is committed
- Port the NiceGUI server listens on

Config is stored in config.json in the application directory: the project
root in development, the directory of the executable when frozen
(PyInstaller). Relative paths in it resolve against that directory.
Environment variables (optionally loaded from .env by app.py) take priority.
"""

import json
import logging
import os
import sys
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

DEFAULT_INDENT = 2
DEFAULT_PORT = 8081

ENV_DOCUMENT = "JSONGRAPH_DOCUMENT"
ENV_INDENT = "JSONGRAPH_INDENT"
ENV_PORT = "JSONGRAPH_PORT"


def get_app_dir() -> Path:
    """Project root in development, the executable's directory when frozen."""
    if getattr(sys, 'frozen', False):
        return Path(sys.executable).parent
    return Path(__file__).parent.parent


def get_config_path() -> Path:
    return get_app_dir() / "config.json"


def load_config() -> dict:
    """Load configuration from config.json."""
    config_path = get_config_path()
    if config_path.exists():
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                config = json.load(f)
        except (json.JSONDecodeError, IOError) as e:
            logger.warning(f"Failed to load config from {config_path}: {e}")
            return {}
        if not isinstance(config, dict):
            logger.warning(f"Ignoring config at {config_path}: expected a JSON object")
            return {}
        return config
    return {}


def save_config(config: dict) -> None:
    """Save configuration to config.json."""
    config_path = get_config_path()
    with open(config_path, 'w', encoding='utf-8') as f:
        json.dump(config, f, indent=2)


def _int_setting(env_name: str, config_key: str, default: int) -> int:
    raw = os.environ.get(env_name)
    if raw is None:
        raw = load_config().get(config_key, default)
    try:
        return int(raw)
    except (TypeError, ValueError):
        logger.warning(f"Invalid value for {config_key!r}: {raw!r}, using {default}")
        return default


def get_document_path() -> Optional[Path]:
    """
    Get the JSON document to open.

    Priority:
    1. Environment variable JSONGRAPH_DOCUMENT
    2. 'document_path' in config.json, relative to the application directory

    Returns None when neither is set (the editor then starts with an
    in-memory document).
    """
    env_path = os.environ.get(ENV_DOCUMENT)
    if env_path:
        return Path(env_path)

    configured = load_config().get("document_path")
    if not configured:
        return None
    path = Path(configured)
    if not path.is_absolute():
        path = get_app_dir() / path
    return path


def get_indent() -> int:
    """Indent used when the canonical text is re-serialized after a commit."""
    indent = _int_setting(ENV_INDENT, "indent", DEFAULT_INDENT)
    return indent if indent >= 0 else DEFAULT_INDENT


def get_port() -> int:
    """Port for the NiceGUI server."""
    return _int_setting(ENV_PORT, "port", DEFAULT_PORT)
