"""
utils/config.py
Optional YAML configuration for scan defaults.

Example hostsweep.yaml:
  timeout: 1s
  max_concurrent_hosts: 32
  max_concurrent_ports: 256
  show_closed: false
  log_level: WARNING

A missing file yields the built-in defaults; CLI flags override file values.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict

import yaml

from utils.constants import (
    DEFAULT_TIMEOUT_S, DEFAULT_MAX_CONCURRENT_HOSTS,
    DEFAULT_MAX_CONCURRENT_PORTS, DEFAULT_LOG_LEVEL, MAX_TIMEOUT_S,
)
from utils.duration import parse_duration, DurationParseError


class ConfigError(ValueError):
    """Raised when the configuration file is unreadable or invalid."""


@dataclass
class ScanConfig:
    timeout:              float = DEFAULT_TIMEOUT_S        # seconds, per probe
    max_concurrent_hosts: int   = DEFAULT_MAX_CONCURRENT_HOSTS
    max_concurrent_ports: int   = DEFAULT_MAX_CONCURRENT_PORTS
    show_closed:          bool  = False
    log_level:            str   = DEFAULT_LOG_LEVEL

    def __post_init__(self) -> None:
        if not 0 < self.timeout <= MAX_TIMEOUT_S:
            raise ConfigError(
                f"timeout must be in (0, {MAX_TIMEOUT_S:g}] seconds, got {self.timeout}"
            )
        for name in ("max_concurrent_hosts", "max_concurrent_ports"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool) or value < 1:
                raise ConfigError(f"{name} must be a positive integer, got {value!r}")
        if not isinstance(logging.getLevelName(str(self.log_level).upper()), int):
            raise ConfigError(f"Unknown log_level {self.log_level!r}")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ScanConfig":
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ConfigError(f"Unknown config keys: {sorted(unknown)}")

        values = dict(data)
        if "timeout" in values:
            values["timeout"] = _coerce_timeout(values["timeout"])
        if "show_closed" in values:
            values["show_closed"] = bool(values["show_closed"])
        return cls(**values)


def _coerce_timeout(raw: Any) -> float:
    if isinstance(raw, bool):
        raise ConfigError(f"Invalid timeout {raw!r}")
    if isinstance(raw, (int, float)):
        return float(raw)
    try:
        return parse_duration(str(raw))
    except DurationParseError as exc:
        raise ConfigError(f"Invalid timeout: {exc}") from exc


def load_config(path: str | Path) -> ScanConfig:
    """Load ScanConfig from a YAML file. Missing file → defaults."""
    path = Path(path)
    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
    except FileNotFoundError:
        return ScanConfig()
    except yaml.YAMLError as exc:
        raise ConfigError(f"Cannot parse {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"{path}: top level must be a mapping")
    return ScanConfig.from_dict(data)
