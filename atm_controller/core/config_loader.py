import logging
import os
from typing import Any, Dict, Optional

import yaml

from atm_controller.core.errors import ConfigError
from atm_controller.paths import get_resource_path

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "config/atm_config.yml"


class ConfigLoader:
    """
    Process-wide configuration, loaded once from YAML.

    The first instantiation reads the packaged atm_config.yml; call load()
    with an explicit path to switch to another file.
    """
    _instance = None
    _config: Dict[str, Any] = {}

    def __new__(cls):
        if cls._instance is None:
            instance = super(ConfigLoader, cls).__new__(cls)
            instance.load()
            cls._instance = instance
        return cls._instance

    @classmethod
    def reset(cls):
        """Drops the cached instance so the next ConfigLoader() reloads."""
        cls._instance = None

    def load(self, config_path: Optional[str] = None):
        config_path = config_path or get_resource_path(DEFAULT_CONFIG_PATH)
        if not os.path.exists(config_path):
            logger.warning("Config file not found: %s", config_path)
            self._config = {}
            return

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Failed to load config {config_path}: {e}") from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigError(f"Config root must be a mapping: {config_path}")
        self._config = data
        logger.debug("Loaded config from %s", config_path)

    @property
    def config(self) -> Dict[str, Any]:
        return self._config

    def get(self, key: str, default: Any = None) -> Any:
        return self._config.get(key, default)

    def section(self, key: str) -> Dict[str, Any]:
        """Returns a config section, or an empty dict if it is missing."""
        value = self._config.get(key) or {}
        if not isinstance(value, dict):
            raise ConfigError(f"Config section '{key}' must be a mapping")
        return value
