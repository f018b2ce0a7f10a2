"""
Config system - flat string key/value configuration for scalar bindings.

Files use dotenv syntax (``key=value`` lines, ``#`` comments) and are
parsed with python-dotenv. The loaded table never changes afterwards.
"""

from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Union
import logging

from dotenv import dotenv_values

logger = logging.getLogger("kestrel.config")


class ConfigError(Exception):
    """Raised when configuration cannot be loaded or a required key is absent."""
    pass


class ConfigSource:
    """
    Immutable ``str -> str`` configuration table.

    Example:
        >>> config = ConfigSource.from_mapping({"app.name": "demo"})
        >>> config.get("app.name")
        'demo'
    """

    __slots__ = ("_values", "_origin")

    def __init__(self, values: Optional[Mapping[str, Any]] = None, origin: str = "<memory>"):
        self._values = MappingProxyType(
            {str(k): str(v) for k, v in (values or {}).items() if v is not None}
        )
        self._origin = origin

    @classmethod
    def empty(cls) -> "ConfigSource":
        return cls()

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "ConfigSource":
        """Build from an in-memory mapping; values are stringified."""
        return cls(values)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "ConfigSource":
        """
        Load a dotenv-style file.

        Bare keys (a line with no ``=``) are treated as missing. Variable
        interpolation is disabled so values are taken literally.

        Raises:
            ConfigError: If the file does not exist or cannot be read
        """
        path = Path(path)
        if not path.is_file():
            raise ConfigError(f"Configuration file not found: {path}")

        try:
            raw = dotenv_values(path, interpolate=False)
        except (OSError, UnicodeDecodeError) as exc:
            raise ConfigError(f"Cannot read configuration file {path}: {exc}") from exc

        values: Dict[str, str] = {k: v for k, v in raw.items() if v is not None}
        logger.debug("Loaded %d configuration keys from %s", len(values), path)
        return cls(values, origin=str(path))

    @property
    def origin(self) -> str:
        return self._origin

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self._values.get(key, default)

    def require(self, key: str) -> str:
        """
        Raises:
            ConfigError: If the key is absent
        """
        try:
            return self._values[key]
        except KeyError:
            raise ConfigError(f"Missing configuration key '{key}' in {self._origin}") from None

    def as_dict(self) -> Mapping[str, str]:
        """Read-only view of the whole table."""
        return self._values

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"ConfigSource(origin={self._origin!r}, keys={len(self._values)})"
