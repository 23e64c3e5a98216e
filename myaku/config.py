"""Configuration model, discovery and loading."""

import logging
import os
from collections.abc import Mapping
from dataclasses import asdict, dataclass, field, fields, is_dataclass
from pathlib import Path
from typing import Any, Optional

import yaml

log = logging.getLogger(__name__)

APP_NAME = "myaku"
ENV_OVERRIDE = "MYAKU_CONFIG"
CONFIG_FILE_NAMES = ("myaku.yaml", "myaku.yml")

_U16_MAX = 2**16 - 1
_U32_MAX = 2**32 - 1


class ConfigError(ValueError):
    """Raised when configuration data has the wrong shape or type."""


def _uint(default: int, maximum: int = _U32_MAX) -> Any:
    return field(default=default, metadata={"max": maximum})


@dataclass
class AppearanceConfig:
    """Visual appearance settings."""

    width: int = _uint(1200)
    height: int = _uint(800)
    font_size: float = 13.0
    opacity: float = 0.95
    refresh_rate_ms: int = _uint(1000)


@dataclass
class MonitoringConfig:
    """Which subsystems to monitor."""

    show_cpu: bool = True
    show_memory: bool = True
    show_disk: bool = True
    show_network: bool = True
    show_gpu: bool = False
    history_seconds: int = _uint(300)


@dataclass
class ProcessConfig:
    """Process list settings."""

    sort_by: str = "cpu"
    sort_direction: str = "desc"
    show_threads: bool = False
    auto_refresh: bool = True


@dataclass
class AlertConfig:
    """Resource usage alert thresholds, in percent."""

    cpu_threshold: float = 90.0
    memory_threshold: float = 85.0
    disk_threshold: float = 90.0


@dataclass
class DaemonConfig:
    """Daemon mode configuration."""

    enable: bool = False
    metrics_port: int = _uint(9100, _U16_MAX)
    history_retention_hours: int = _uint(24)


@dataclass
class MyakuConfig:
    """Top-level configuration."""

    appearance: AppearanceConfig = field(default_factory=AppearanceConfig)
    monitoring: MonitoringConfig = field(default_factory=MonitoringConfig)
    processes: ProcessConfig = field(default_factory=ProcessConfig)
    alerts: AlertConfig = field(default_factory=AlertConfig)
    daemon: DaemonConfig = field(default_factory=DaemonConfig)


def _coerce(value: Any, typ: type, metadata: Mapping[str, Any], name: str) -> Any:
    if typ is bool:
        if not isinstance(value, bool):
            raise ConfigError(f"{name}: expected a boolean, got {value!r}")
        return value
    if typ is int:
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigError(f"{name}: expected an integer, got {value!r}")
        maximum = metadata.get("max", _U32_MAX)
        if not 0 <= value <= maximum:
            raise ConfigError(f"{name}: {value} is out of range 0..{maximum}")
        return value
    if typ is float:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ConfigError(f"{name}: expected a number, got {value!r}")
        return float(value)
    if typ is str:
        if not isinstance(value, str):
            raise ConfigError(f"{name}: expected a string, got {value!r}")
        return value
    raise ConfigError(f"{name}: unsupported field type {typ!r}")


def _build(cls: type, data: Any, path: str) -> Any:
    if data is None:
        return cls()
    if not isinstance(data, Mapping):
        raise ConfigError(f"{path or 'config'}: expected a mapping, got {data!r}")
    kwargs = {}
    for f in fields(cls):
        if f.name not in data:
            continue
        name = f"{path}.{f.name}" if path else f.name
        value = data[f.name]
        if is_dataclass(f.type):
            kwargs[f.name] = _build(f.type, value, name)
        else:
            kwargs[f.name] = _coerce(value, f.type, f.metadata, name)
    return cls(**kwargs)


def from_dict(data: Optional[Mapping[str, Any]]) -> MyakuConfig:
    """Build a configuration from a mapping; missing keys take their defaults."""
    return _build(MyakuConfig, data, "")


def to_dict(config: MyakuConfig) -> dict:
    """Return the configuration as nested plain dictionaries."""
    return asdict(config)


def discover_config_path() -> Optional[Path]:
    """Find the configuration file: the override variable first, then the config dir."""
    override = os.environ.get(ENV_OVERRIDE)
    if override:
        candidate = Path(override).expanduser()
        if candidate.is_file():
            return candidate
    base = os.environ.get("XDG_CONFIG_HOME")
    root = Path(base) if base else Path.home() / ".config"
    for file_name in CONFIG_FILE_NAMES:
        candidate = root / APP_NAME / file_name
        if candidate.is_file():
            return candidate
    return None


def load_config(path: Optional[os.PathLike] = None) -> MyakuConfig:
    """Load configuration from ``path`` (or a discovered file), falling back to defaults."""
    if path is None:
        path = discover_config_path()
        if path is None:
            log.info("no config file found, using defaults")
            return MyakuConfig()
    log.info("loading config from %s", path)
    try:
        text = Path(path).read_text(encoding="utf-8")
        return from_dict(yaml.safe_load(text))
    except (OSError, yaml.YAMLError, ConfigError) as exc:
        log.warning("failed to load config: %s, using defaults", exc)
        return MyakuConfig()