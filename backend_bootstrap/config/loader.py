"""
YAML Configuration Loader
=========================

Locates and parses the backend configuration file and exposes dotted
key-path lookups (``"redis.db"``) over it.

Usage:
    config = load_configuration()
    dsn = config.get_string("database.dsn")
    db = config.get_int("redis.db", 0)
"""

from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple, Union

import yaml

from backend_bootstrap.core import ConfigurationException
from backend_bootstrap.shared.infrastructure.logging import get_logger

logger = get_logger(__name__)

SUPPORTED_CONFIG_TYPES = ("yaml",)
_EXTENSIONS = {"yaml": (".yaml", ".yml", "")}

_MISSING = object()


def _normalize_keys(data: Mapping) -> Dict[str, Any]:
    """Lower-case mapping keys recursively; values are left untouched."""
    normalized: Dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(value, Mapping):
            value = _normalize_keys(value)
        normalized[str(key).lower()] = value
    return normalized


class Configuration:
    """
    Read-only view over a parsed configuration document.

    Keys are case-insensitive. Values come back exactly as they were
    parsed from the file.
    """

    def __init__(self, data: Optional[Mapping] = None, config_file: Optional[Path] = None):
        self._data = _normalize_keys(data or {})
        self._config_file = config_file

    @classmethod
    def from_mapping(cls, data: Mapping) -> "Configuration":
        """Build a configuration without touching the file system."""
        return cls(data)

    @property
    def config_file(self) -> Optional[Path]:
        """Path of the file this configuration was loaded from, if any."""
        return self._config_file

    def _lookup(self, key: str) -> Any:
        node: Any = self._data
        for part in key.lower().split("."):
            if not isinstance(node, dict) or part not in node:
                return _MISSING
            node = node[part]
        return node

    def is_set(self, key: str) -> bool:
        return self._lookup(key) is not _MISSING

    def get(self, key: str, default: Any = None) -> Any:
        value = self._lookup(key)
        return default if value is _MISSING else value

    def get_string(self, key: str, default: Any = _MISSING) -> str:
        """
        Get a string value.

        Integers and floats are rendered with ``str()``. Anything else that
        is not a string is rejected.

        Raises:
            ConfigurationException: If the key is absent and no default was
                given, or the value is not a scalar.
        """
        value = self._lookup(key)
        if value is _MISSING:
            if default is _MISSING:
                raise ConfigurationException(
                    f"missing configuration key '{key}'",
                    {"key": key, "config_file": str(self._config_file)}
                )
            return default
        if isinstance(value, str):
            return value
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        raise ConfigurationException(
            f"configuration key '{key}' is not a string",
            {"key": key, "type": type(value).__name__}
        )

    def get_int(self, key: str, default: Any = _MISSING) -> int:
        """
        Get an integer value.

        Decimal strings are parsed; booleans are rejected.

        Raises:
            ConfigurationException: If the key is absent and no default was
                given, or the value is not an integer.
        """
        value = self._lookup(key)
        if value is _MISSING:
            if default is _MISSING:
                raise ConfigurationException(
                    f"missing configuration key '{key}'",
                    {"key": key, "config_file": str(self._config_file)}
                )
            return default
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        if isinstance(value, str):
            try:
                return int(value.strip())
            except ValueError:
                pass
        raise ConfigurationException(
            f"configuration key '{key}' is not an integer",
            {"key": key, "type": type(value).__name__}
        )

    def __repr__(self) -> str:
        return f"Configuration(config_file={self._config_file!r})"


def _find_config_file(name: str, paths: Iterable[Path], config_type: str) -> Optional[Path]:
    for directory in paths:
        for extension in _EXTENSIONS[config_type]:
            candidate = Path(directory) / f"{name}{extension}"
            if candidate.is_file():
                return candidate
    return None


def load_configuration(
    name: str = "config",
    paths: Iterable[Union[str, Path]] = ("./config",),
    config_type: str = "yaml",
) -> Configuration:
    """
    Locate and parse the configuration file.

    Each directory in ``paths`` is searched in order for ``<name>.yaml``,
    ``<name>.yml`` and finally ``<name>`` with no extension.

    Args:
        name: File name without extension
        paths: Directories to search
        config_type: File format, only ``yaml`` is supported

    Returns:
        Configuration: The parsed configuration

    Raises:
        ConfigurationException: If the file is missing, unreadable or malformed
    """
    config_type = config_type.lower()
    if config_type not in SUPPORTED_CONFIG_TYPES:
        raise ConfigurationException(
            f"unsupported config type '{config_type}'",
            {"supported": list(SUPPORTED_CONFIG_TYPES)}
        )

    search_paths: Tuple[Path, ...] = tuple(Path(p) for p in paths)
    path = _find_config_file(name, search_paths, config_type)
    if path is None:
        raise ConfigurationException(
            f'config file "{name}" not found in {[str(p) for p in search_paths]}',
            {"name": name, "paths": [str(p) for p in search_paths]}
        )

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigurationException(
            f"cannot read config file {path}: {e}", {"path": str(path)}
        ) from e
    except yaml.YAMLError as e:
        raise ConfigurationException(
            f"cannot parse config file {path}: {e}", {"path": str(path)}
        ) from e

    if data is None:
        data = {}
    if not isinstance(data, Mapping):
        raise ConfigurationException(
            f"config file {path} must contain a mapping at the top level",
            {"path": str(path), "type": type(data).__name__}
        )

    logger.info("Configuration loaded", extra={"config_file": str(path)})
    return Configuration(data, config_file=path)
