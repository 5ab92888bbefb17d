"""Platform-related utility functions."""

import logging
import os
from pathlib import Path

APP_NAME = "gsm"
CONFIG_DIR_NAME = ".gsm"
CONFIG_FILE_NAME = "config.json"
LOG_FILE_NAME = "gsm.log"

logger = logging.getLogger(__name__)


def _normalize_path(path: str) -> str:
    """Expand user references and return an absolute path."""
    return os.path.abspath(os.path.expanduser(path))


def get_home_dir() -> str:
    """Return the user's home directory.

    Falls back to the current working directory when neither ``expanduser``
    nor ``Path.home`` can determine it.
    """
    home_dir = os.path.expanduser("~")
    if not home_dir or home_dir == "~":
        try:
            home_dir = str(Path.home())
        except (KeyError, RuntimeError):
            home_dir = ""

    if not home_dir or not str(home_dir).strip():
        logger.warning(
            "Unable to determine the user's home directory; "
            "falling back to the current working directory for GSM data."
        )
        home_dir = os.getcwd()
    return home_dir


def get_config_dir() -> str:
    """Return the per-user configuration directory for GSM.

    Defaults to ``~/.gsm``. The location can be overridden by setting the
    ``GSM_CONFIG_DIR`` environment variable.
    """
    override = os.environ.get("GSM_CONFIG_DIR")
    if override:
        return _normalize_path(override)
    return _normalize_path(os.path.join(get_home_dir(), CONFIG_DIR_NAME))


def get_config_path() -> str:
    """Return the default path of the connection store file."""
    return os.path.join(get_config_dir(), CONFIG_FILE_NAME)
