"""
Configuration for techlist.

Values come from, in increasing precedence: built-in defaults, a YAML or
JSON config file, ``TECHLIST_*`` environment variables, and command-line
flags applied by the CLI through ``Config.set``.
"""

import copy
import json
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from .core.errors import ConfigurationError
from .utils.logging_setup import get_logger

logger = get_logger(__name__)

CONFIG_FILENAMES = [".techlist.yml", ".techlist.yaml", "techlist.yml", "techlist.yaml"]

ENV_OVERRIDES = {
    "TECHLIST_SIMILARITY_LIMIT": "similarity.limit",
    "TECHLIST_OUTPUT": "output.path",
    "TECHLIST_STRIP_WHITESPACE": "input.strip_whitespace",
    "TECHLIST_LOG_LEVEL": "logging.level",
    "TECHLIST_LOG_DIR": "logging.dir",
}


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


class Config:
    """Dictionary-backed configuration with dot-separated key access."""

    DEFAULT_CONFIG = {
        "similarity": {
            "limit": 2,
        },
        "input": {
            "encoding": "utf-8",
            "strip_whitespace": False,
        },
        "output": {
            "path": "build/insert-technologies.sql",
            "echo": True,
        },
        "logging": {
            "level": "WARNING",
            "dir": None,
            "json": True,
        },
    }

    def __init__(self, config_dict: Optional[Dict] = None):
        """Initialize with optional config dictionary merged over the defaults."""
        self.config = self._merge_configs(self.DEFAULT_CONFIG, config_dict or {})
        self.source: Optional[Path] = None

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "Config":
        """Load configuration from a YAML or JSON file."""
        path = Path(path)
        if not path.exists():
            raise ConfigurationError(f"Configuration file not found: {path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                if path.suffix in [".yaml", ".yml"]:
                    data = yaml.safe_load(f) or {}
                elif path.suffix == ".json":
                    data = json.load(f)
                else:
                    raise ConfigurationError(f"Unsupported config format: {path.suffix}")
        except (yaml.YAMLError, json.JSONDecodeError) as e:
            raise ConfigurationError(f"Malformed configuration file {path}: {e}") from e
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigurationError(f"Cannot read configuration file {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError(f"Configuration file {path} must contain a mapping")

        config = cls(data)
        config.source = path
        logger.info(f"Loaded configuration from {path}")
        return config

    @classmethod
    def find_and_load(cls, start_path: Union[str, Path]) -> "Config":
        """Find and load configuration from the start path or its parents."""
        current = Path(start_path).resolve()

        while True:
            for name in CONFIG_FILENAMES:
                config_path = current / name
                if config_path.is_file():
                    return cls.from_file(config_path)
            if current == current.parent:
                break
            current = current.parent

        return cls()

    def apply_environment_overrides(self, environ: Optional[Dict[str, str]] = None) -> None:
        """Apply TECHLIST_* environment variables over the loaded values."""
        environ = os.environ if environ is None else environ
        for env_name, key in ENV_OVERRIDES.items():
            value = environ.get(env_name)
            if value is None:
                continue
            if key == "input.strip_whitespace":
                self.set(key, _parse_bool(value))
            else:
                self.set(key, value)
            logger.debug(f"Environment override {env_name} -> {key}")

    def get(self, key: str, default=None):
        """Get configuration value by dot-separated key."""
        value: Any = self.config
        for k in key.split("."):
            if isinstance(value, dict):
                value = value.get(k)
                if value is None:
                    return default
            else:
                return default
        return value

    def set(self, key: str, value) -> None:
        """Set configuration value by dot-separated key."""
        keys = key.split(".")
        config = self.config
        for k in keys[:-1]:
            if not isinstance(config.get(k), dict):
                config[k] = {}
            config = config[k]
        config[keys[-1]] = value

    def similarity_limit(self) -> int:
        """The similarity limit as an int."""
        value = self.get("similarity.limit", 2)
        if isinstance(value, bool):
            raise ConfigurationError(f"similarity.limit must be an integer, got {value!r}")
        if isinstance(value, int):
            return value
        try:
            return int(str(value).strip())
        except ValueError:
            raise ConfigurationError(f"similarity.limit must be an integer, got {value!r}") from None

    def output_path(self) -> str:
        """The output destination as a non-empty string."""
        value = self.get("output.path")
        if not isinstance(value, str) or not value.strip():
            raise ConfigurationError(f"output.path must be a non-empty string, got {value!r}")
        return value

    def log_dir(self) -> Optional[str]:
        """Directory for the log file, or None when file logging is off."""
        value = self.get("logging.dir")
        if value is None:
            return None
        if not isinstance(value, str) or not value.strip():
            raise ConfigurationError(f"logging.dir must be a non-empty string, got {value!r}")
        return value

    def _merge_configs(self, base: Dict, override: Dict) -> Dict:
        """Recursively merge configuration dictionaries."""
        result = copy.deepcopy(base)
        for key, value in override.items():
            if key in result and isinstance(result[key], dict):
                if not isinstance(value, dict):
                    raise ConfigurationError(f"Section {key!r} must be a mapping, got {value!r}")
                result[key] = self._merge_configs(result[key], value)
            else:
                result[key] = copy.deepcopy(value)
        return result
