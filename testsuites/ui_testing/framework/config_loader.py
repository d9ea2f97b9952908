"""
================================================================================
Configuration Loader
================================================================================

Run settings of the clinic suite, read from config/config.yaml.

Lookup order for `get("ui.timeouts.navigation", 15000)`:
    1. Environment variable UI_TIMEOUTS_NAVIGATION, coerced to the default's type
    2. ui -> timeouts -> navigation in the YAML file
    3. The default passed by the caller

Keys read by the framework:
    ui.base_url, ui.browser, ui.headless, ui.viewport.{width,height},
    ui.timeouts.{navigation,element,download}, artifacts.dir,
    artifacts.record_on_failure, logging.level, logging.file,
    oracles.not_found.leak_patterns

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from loguru import logger


# repo_root/config/config.yaml
DEFAULT_CONFIG_PATH = Path(__file__).parent.parent.parent.parent / "config" / "config.yaml"

_TRUE_WORDS = ("true", "1", "yes", "on")

_MISSING = object()


class ConfigurationError(Exception):
    """Config file or environment value that cannot be used."""


def env_key(key: str) -> str:
    """Environment variable that overrides a dotted key: ui.base_url -> UI_BASE_URL."""
    return key.upper().replace(".", "_")


class ConfigLoader:
    """
    Process-wide settings (one instance per xdist worker).

    Usage:
        config = ConfigLoader()
        base_url = config.get("ui.base_url", "http://localhost:8080")
        headless = config.get("ui.headless", True)   # UI_HEADLESS=false -> False
    """

    _instance: Optional["ConfigLoader"] = None

    def __new__(cls, config_path: Optional[Path] = None) -> "ConfigLoader":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._settings = None
        return cls._instance

    def __init__(self, config_path: Optional[Path] = None) -> None:
        if self._settings is not None:
            return
        self.path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH
        self._settings: Dict[str, Any] = self._read(self.path)

    @staticmethod
    def _read(path: Path) -> Dict[str, Any]:
        if not path.exists():
            logger.warning(f"No config file at {path}; running on defaults and environment only")
            return {}
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"{path} is not valid YAML: {e}") from e
        if not isinstance(data, dict):
            raise ConfigurationError(f"{path} must hold a mapping, got {type(data).__name__}")
        logger.debug(f"Settings loaded from {path}")
        return data

    def _lookup(self, key: str) -> Any:
        node: Any = self._settings
        for part in key.split("."):
            if not isinstance(node, dict) or node.get(part) is None:
                return _MISSING
            node = node[part]
        return node

    def get(self, key: str, default: Any = None) -> Any:
        """Value of a dotted key; environment first, then the file, then `default`."""
        name = env_key(key)
        raw = os.environ.get(name)
        if raw is not None:
            return _coerce(name, raw, default)

        value = self._lookup(key)
        return default if value is _MISSING else value

    def reload(self) -> None:
        """Re-read the config file (environment is always read live)."""
        self._settings = self._read(self.path)
        logger.info(f"Settings reloaded from {self.path}")

    @classmethod
    def reset(cls) -> None:
        """Forget the process instance; the next ConfigLoader() reads the file again."""
        cls._instance = None


def _coerce(name: str, raw: str, default: Any) -> Any:
    """Environment strings take the type of the default they override."""
    if isinstance(default, bool):
        return raw.strip().lower() in _TRUE_WORDS
    if isinstance(default, int):
        try:
            return int(raw)
        except ValueError:
            raise ConfigurationError(f"{name}={raw!r} is not an integer") from None
    if isinstance(default, (list, tuple)):
        return [item.strip() for item in raw.split(",") if item.strip()]
    return raw


__all__ = [
    "ConfigLoader",
    "ConfigurationError",
    "DEFAULT_CONFIG_PATH",
    "env_key",
]
