"""Configuration loading and validation for build scanning."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

from scripts.buildscan.errors import ConfigurationError

# Default paths for build scanning
DEFAULT_CONFIG_PATH = ".buildscan/config.yaml"
DEFAULT_SOURCE_EXTENSION = ".java"
SETTINGS_RELATIVE_PATH = ".m2/settings.xml"


@dataclass
class PomCacheConfig:
    """Descriptor cache configuration."""

    enabled: bool = True
    directory: Optional[str] = None  # None means the user's home directory


@dataclass
class VcsConfig:
    """Version-control provenance configuration."""

    enabled: bool = True


@dataclass
class ScanConfig:
    """Complete build scan configuration."""

    version: str = "1.0"
    source_extension: str = DEFAULT_SOURCE_EXTENSION
    settings_path: Optional[str] = None  # None means ~/.m2/settings.xml
    pom_cache: PomCacheConfig = field(default_factory=PomCacheConfig)
    vcs: VcsConfig = field(default_factory=VcsConfig)


def get_default_config() -> ScanConfig:
    """Return the default scan configuration."""
    return ScanConfig()


def _expect_mapping(value: Any, section: str, config_file: str) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigurationError(f"Section '{section}' must be a mapping", file=config_file)
    return value


def _expect_bool(value: Any, key: str, config_file: str) -> bool:
    if not isinstance(value, bool):
        raise ConfigurationError(f"'{key}' must be true or false, got {value!r}", file=config_file)
    return value


def _parse_pom_cache(data: dict[str, Any], config_file: str) -> PomCacheConfig:
    defaults = PomCacheConfig()
    directory = data.get("directory", defaults.directory)
    if directory is not None and not isinstance(directory, str):
        raise ConfigurationError("'pom_cache.directory' must be a string", file=config_file)
    return PomCacheConfig(
        enabled=_expect_bool(data.get("enabled", defaults.enabled), "pom_cache.enabled", config_file),
        directory=directory,
    )


def validate_config(config: ScanConfig, config_file: Optional[str] = None) -> None:
    """Validate configuration values.

    Raises:
        ConfigurationError: If configuration is invalid.
    """
    ext = config.source_extension
    if not isinstance(ext, str) or not ext.startswith(".") or len(ext) < 2:
        raise ConfigurationError(
            f"Invalid source_extension {ext!r}: must look like '.java'",
            file=config_file,
        )


def load_config(config_path: Path | str) -> ScanConfig:
    """Load configuration from a YAML file.

    Args:
        config_path: Path to the config.yaml file.

    Returns:
        ScanConfig with loaded values merged with defaults.

    Raises:
        ConfigurationError: If the file exists but contains invalid configuration.
    """
    config_path = Path(config_path)
    config_file = str(config_path)

    defaults = get_default_config()

    if not config_path.exists():
        return defaults

    try:
        content = config_path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigurationError(f"Unable to read config: {e}", file=config_file)

    if not content.strip():
        return defaults

    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML: {e}", file=config_file)

    if not data:
        return defaults
    if not isinstance(data, dict):
        raise ConfigurationError("Top-level scan config must be a mapping", file=config_file)

    config = ScanConfig(
        version=str(data.get("version", defaults.version)),
        source_extension=data.get("source_extension", defaults.source_extension),
        settings_path=data.get("settings_path", defaults.settings_path),
        pom_cache=_parse_pom_cache(_expect_mapping(data.get("pom_cache"), "pom_cache", config_file), config_file),
        vcs=VcsConfig(
            enabled=_expect_bool(
                _expect_mapping(data.get("vcs"), "vcs", config_file).get("enabled", True),
                "vcs.enabled",
                config_file,
            )
        ),
    )

    validate_config(config, config_file)

    return config


def discover_config(project_dir: Optional[Path | str] = None) -> ScanConfig:
    """Find and load the scan configuration.

    Search order:
    1. <project_dir>/.buildscan/config.yaml
    2. <cwd>/.buildscan/config.yaml
    3. Built-in defaults
    """
    search = [Path.cwd()]
    if project_dir is not None:
        search.insert(0, Path(project_dir))

    for directory in search:
        candidate = directory / DEFAULT_CONFIG_PATH
        if candidate.is_file():
            return load_config(candidate)

    return get_default_config()
