"""Configuration management for arenapack.toml.

Example:
    [settings]
    content_root = "/workspace-content"
    artifact_timeout = 30.0

    [config.support-eval]
    source = "support-pack"

    [source.support-pack]
    content_path = "arena/support-pack"
    url = "http://localhost:8082/artifacts/support-pack.tar.gz"
    config_map = "support-pack"

    [store.support-pack]
    "arena.yaml" = "kind: Arena"
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import tomli

from arenapack.constants import (
    ARTIFACT_TIMEOUT,
    CONFIG_FILENAME,
    IN_CLUSTER_ARTIFACT_URL,
    LOOPBACK_ARTIFACT_URL,
    SYSTEM_TEMPLATE_MAX_LENGTH,
    WORKSPACE_CONTENT_ROOT,
)
from arenapack.core.catalog import ArenaConfigRecord
from arenapack.exceptions import (
    ArenaConfigNotFoundError,
    ConfigNotFoundError,
    ConfigParseError,
    ConfigValidationError,
)
from arenapack.fetcher.types import SourceDescriptor


def _optional_str(section: str, key: str, value: Any) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ConfigValidationError(
            f"'{section}.{key}' must be a string, got {type(value).__name__}"
        )
    return value


def _required_str(section: str, key: str, value: Any) -> str:
    if not isinstance(value, str):
        raise ConfigValidationError(
            f"'{section}.{key}' must be a string, got {type(value).__name__}"
        )
    return value


def _table(section: str, value: Any) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise ConfigValidationError(
            f"'{section}' must be a table, got {type(value).__name__}"
        )
    return value


@dataclass
class Settings:
    """Runtime settings for content resolution and display."""

    content_root: str = WORKSPACE_CONTENT_ROOT
    artifact_timeout: float = ARTIFACT_TIMEOUT
    loopback_url: str = LOOPBACK_ARTIFACT_URL
    service_url: str = IN_CLUSTER_ARTIFACT_URL
    template_max_length: int = SYSTEM_TEMPLATE_MAX_LENGTH

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Settings":
        """Create Settings from the [settings] table."""
        settings = cls()
        for key in ("content_root", "loopback_url", "service_url"):
            value = _optional_str("settings", key, data.get(key))
            if value is not None:
                setattr(settings, key, value)

        timeout = data.get("artifact_timeout")
        if timeout is not None:
            if isinstance(timeout, bool) or not isinstance(timeout, (int, float)):
                raise ConfigValidationError("'settings.artifact_timeout' must be a number")
            settings.artifact_timeout = float(timeout)

        max_length = data.get("template_max_length")
        if max_length is not None:
            if isinstance(max_length, bool) or not isinstance(max_length, int) or max_length < 0:
                raise ConfigValidationError(
                    "'settings.template_max_length' must be a non-negative integer"
                )
            settings.template_max_length = max_length

        return settings


@dataclass
class ArenapackConfig:
    """Configuration from arenapack.toml.

    Besides settings, the file may declare arena configs, sources and
    key-value stores; this makes it usable as a local catalog.
    """

    path: Path | None = None
    settings: Settings = field(default_factory=Settings)
    configs: dict[str, ArenaConfigRecord] = field(default_factory=dict)
    sources: dict[str, SourceDescriptor] = field(default_factory=dict)
    stores: dict[str, dict[str, str]] = field(default_factory=dict)

    @classmethod
    def load(cls, path: Path) -> "ArenapackConfig":
        """Load configuration from arenapack.toml.

        Args:
            path: Path to the arenapack.toml file

        Returns:
            Parsed ArenapackConfig

        Raises:
            ConfigNotFoundError: If the file doesn't exist
            ConfigParseError: If the file cannot be parsed
            ConfigValidationError: If the configuration is invalid
        """
        if not path.exists():
            raise ConfigNotFoundError(f"Config file not found: {path}")

        try:
            with open(path, "rb") as f:
                data = tomli.load(f)
        except tomli.TOMLDecodeError as e:
            raise ConfigParseError(f"Failed to parse {path}: {e}")

        return cls._from_dict(path, data)

    @classmethod
    def _from_dict(cls, path: Path | None, data: dict[str, Any]) -> "ArenapackConfig":
        """Create an ArenapackConfig from a parsed TOML dict."""
        config = cls(path=path)
        config.settings = Settings.from_dict(_table("settings", data.get("settings", {})))

        # Parse arena configs
        for name, entry in _table("config", data.get("config", {})).items():
            entry = _table(f"config.{name}", entry)
            config.configs[name] = ArenaConfigRecord(
                name=name,
                source_ref=_optional_str(f"config.{name}", "source", entry.get("source")),
            )

        # Parse arena sources
        for name, entry in _table("source", data.get("source", {})).items():
            section = f"source.{name}"
            entry = _table(section, entry)
            config.sources[name] = SourceDescriptor(
                name=name,
                content_path=_optional_str(section, "content_path", entry.get("content_path")),
                artifact_url=_optional_str(section, "url", entry.get("url")),
                config_map=_optional_str(section, "config_map", entry.get("config_map")),
            )

        # Parse key-value stores
        for name, entries in _table("store", data.get("store", {})).items():
            section = f"store.{name}"
            entries = _table(section, entries)
            config.stores[name] = {
                key: _required_str(section, key, value) for key, value in entries.items()
            }

        return config

    def get_config(self, workspace: str, namespace: str, name: str) -> ArenaConfigRecord:
        """Return a declared arena config.

        Raises:
            ArenaConfigNotFoundError: If the config is not declared
        """
        if name not in self.configs:
            raise ArenaConfigNotFoundError(f"Arena config '{name}' not found")
        return self.configs[name]

    def get_source(self, workspace: str, namespace: str, name: str) -> SourceDescriptor | None:
        """Return a declared arena source, or None."""
        return self.sources.get(name)


def find_config(start_path: Path | None = None) -> Path | None:
    """Find arenapack.toml by walking up the directory tree.

    Args:
        start_path: Starting directory (defaults to current working directory)

    Returns:
        Path to arenapack.toml if found, None otherwise
    """
    if start_path is None:
        start_path = Path.cwd()

    current = start_path.resolve()

    while True:
        config_path = current / CONFIG_FILENAME
        if config_path.exists():
            return config_path

        parent = current.parent
        if parent == current:
            # Reached filesystem root
            return None
        current = parent


def load_config(path: Path | None = None) -> ArenapackConfig:
    """Load arenapack.toml from an explicit path or the nearest one found.

    Falls back to default settings with an empty catalog when no file exists
    and no explicit path was given.

    Raises:
        ConfigNotFoundError: If an explicit path doesn't exist
    """
    if path is not None:
        return ArenapackConfig.load(path)

    found = find_config()
    if found is None:
        return ArenapackConfig()
    return ArenapackConfig.load(found)
