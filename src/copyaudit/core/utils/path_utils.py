# src/copyaudit/core/utils/path_utils.py
import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)

SETTINGS_ENV_VAR = "COPYAUDIT_SETTINGS"


class PathUtils:
    """
    A central utility for reliably retrieving important package paths.
    """

    @staticmethod
    def get_package_root() -> Path:
        """Returns the directory of the installed 'copyaudit' package."""
        return Path(__file__).resolve().parents[2]

    @staticmethod
    def get_settings_file() -> Path:
        """
        Returns the path of the settings file to load.
        The COPYAUDIT_SETTINGS environment variable takes precedence over the
        settings.json bundled with the package.
        """
        override = os.environ.get(SETTINGS_ENV_VAR)
        if override:
            logger.debug("Using settings override from %s: %s", SETTINGS_ENV_VAR, override)
            return Path(override).expanduser()
        return PathUtils.get_package_root() / "settings.json"
