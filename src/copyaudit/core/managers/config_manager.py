# src/copyaudit/core/managers/config_manager.py
import json
import logging
from typing import Any, Dict, Optional, Type, TypeVar

from pydantic import BaseModel

from copyaudit.core.utils.path_utils import PathUtils

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class ConfigManager:
    """
    Process-wide access to settings.json.

    Values are read with dotted key paths ('discovery.max_subpages') or as a
    whole section validated into a pydantic settings model. In-memory edits
    through `set_nested` last until the next `reset`.
    """
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(ConfigManager, cls).__new__(cls)
            cls._instance._config = {}
            cls._instance.reset()
        return cls._instance

    def get_all(self) -> Dict[str, Any]:
        return self._config

    def get_nested(self, key_path: str, default: Optional[Any] = None) -> Any:
        """Dotted lookup; missing keys and explicit nulls both yield `default`."""
        node: Any = self._config
        for key in key_path.split('.'):
            if not isinstance(node, dict):
                return default
            node = node.get(key)
        return default if node is None else node

    def load_model(self, model: Type[ModelT], *sections: str) -> ModelT:
        """
        Builds `model` from one or more top-level sections. Later sections win
        on key clashes; keys the model does not declare are ignored, and
        nulls leave the model default in place.
        """
        values: Dict[str, Any] = {}
        for section in sections:
            values.update(self.get_nested(section, {}) or {})
        known = {
            key: value for key, value in values.items()
            if key in model.model_fields and value is not None
        }
        return model(**known)

    def set_nested(self, key_path: str, value: Any) -> bool:
        """
        Sets a value in memory, creating intermediate sections as needed.
        When a value already exists the new one is cast to its type.
        """
        *parents, leaf = key_path.split('.')
        node = self._config
        for key in parents:
            node = node.setdefault(key, {})
            if not isinstance(node, dict):
                logger.error("Cannot set %s: '%s' is not a section.", key_path, key)
                return False

        current = node.get(leaf)
        if current is not None:
            try:
                value = type(current)(value)
            except (ValueError, TypeError):
                logger.warning(
                    "Could not cast new value for '%s' to %s. Storing as given.",
                    key_path, type(current).__name__
                )

        node[leaf] = value
        logger.info("Configuration updated: %s = %s", key_path, value)
        return True

    def reset(self) -> None:
        """Reloads the settings file, discarding in-memory edits."""
        config_path = PathUtils.get_settings_file()
        if not config_path.exists():
            logger.warning("Settings file not found at %s. Using empty config.", config_path)
            self._config = {}
            return
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                self._config = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error("Failed to load settings from %s: %s", config_path, e, exc_info=True)
            self._config = {}
            return
        logger.debug("Configuration loaded from %s.", config_path)


# The global singleton instance that the entire application will use.
config_manager = ConfigManager()
