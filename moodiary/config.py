"""Configuration loading for Moodiary.

Configuration lives in ``~/.config/moodiary/config.toml``. Set
``MOODIARY_HOME`` to use a different directory.
"""

import logging
import os
from pathlib import Path
from typing import Optional

import toml

from moodiary.db.base import DEFAULT_MAX_ATTEMPTS

logger = logging.getLogger(__name__)

DEFAULT_USER_ID = "local-user"


def get_home() -> Path:
    """Get the configuration directory."""
    override = os.environ.get("MOODIARY_HOME")
    if override:
        return Path(override).expanduser()
    return Path.home() / ".config" / "moodiary"


def get_config_path() -> Path:
    return get_home() / "config.toml"


def load_config() -> Optional[dict]:
    """Load the configuration file.

    Returns:
        Config dict, or None if the file is missing or unreadable.
    """
    config_path = get_config_path()

    if not config_path.exists():
        return None

    try:
        return toml.load(config_path)
    except (OSError, toml.TomlDecodeError) as e:
        logger.warning("Could not read %s: %s", config_path, e)
        return None


def create_template_config(name: str = "", email: str = "") -> Path:
    """Write a template configuration file.

    Returns:
        Path of the written file.
    """
    config_path = get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)

    template = {
        "user": {
            "id": DEFAULT_USER_ID,
            "name": name,
            "email": email,
        },
        "store": {
            "path": "",  # Leave empty for <home>/moodiary.db
            "max_attempts": DEFAULT_MAX_ATTEMPTS,
        },
        "files": {
            "path": "",  # Leave empty for <home>/files
        },
    }

    with open(config_path, "w") as f:
        toml.dump(template, f)

    return config_path


def get_user_id(config: Optional[dict]) -> str:
    """Get the configured user ID."""
    return (config or {}).get("user", {}).get("id") or DEFAULT_USER_ID


def get_db_path(config: Optional[dict]) -> Path:
    """Get the database path, defaulting to ``<home>/moodiary.db``."""
    path = (config or {}).get("store", {}).get("path")
    return Path(path).expanduser() if path else get_home() / "moodiary.db"


def get_max_attempts(config: Optional[dict]) -> int:
    """Get the transaction attempt limit."""
    return int((config or {}).get("store", {}).get("max_attempts", DEFAULT_MAX_ATTEMPTS))


def get_files_path(config: Optional[dict]) -> Path:
    """Get the upload directory, defaulting to ``<home>/files``."""
    path = (config or {}).get("files", {}).get("path")
    return Path(path).expanduser() if path else get_home() / "files"
