"""Registry configuration.

Settings come from ``REFLECTPOOL_*`` environment variables or from a YAML
file with a top-level ``reflectpool:`` mapping::

    reflectpool:
      include_dunder: false
      root_modules: [builtins, abc, typing]
      warn_on_rename: true
      log_level: WARNING
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

import yaml

from reflectpool.errors import ConfigError

ENV_PREFIX = "REFLECTPOOL_"
DEFAULT_ROOT_MODULES = ("builtins", "abc", "typing")
_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off", ""}


@dataclass(frozen=True)
class ReflectConfig:
    """How classes are reflected and how the registry reports."""

    include_dunder: bool = False  # Reflect __dunder__ members too
    root_modules: tuple[str, ...] = field(default=DEFAULT_ROOT_MODULES)  # Parent chain stops here
    warn_on_rename: bool = True  # Log when a name is registered twice
    log_level: str = "WARNING"

    def __post_init__(self):
        if logging.getLevelName(self.log_level.upper()) == f"Level {self.log_level.upper()}":
            raise ConfigError("Unknown log level", log_level=self.log_level)

    @classmethod
    def from_mapping(cls, data: dict[str, Any]) -> ReflectConfig:
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ConfigError("Unknown config key(s)", keys=sorted(unknown))
        values: dict[str, Any] = {}
        for name, raw in data.items():
            if name in ("include_dunder", "warn_on_rename"):
                values[name] = _parse_bool(name, raw)
            elif name == "root_modules":
                values[name] = _parse_modules(raw)
            else:
                values[name] = str(raw)
        return cls(**values)

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> ReflectConfig:
        environ = os.environ if environ is None else environ
        data = {}
        for f in fields(cls):
            key = ENV_PREFIX + f.name.upper()
            if key in environ:
                data[f.name] = environ[key]
        return cls.from_mapping(data)


def load_config(path: str | Path) -> ReflectConfig:
    """Load a ReflectConfig from a YAML file."""
    with open(path) as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ConfigError("Config file must hold a mapping", path=str(path))
    section = data.get("reflectpool", {}) or {}
    if not isinstance(section, dict):
        raise ConfigError("'reflectpool' section must be a mapping", path=str(path))
    return ReflectConfig.from_mapping(section)


def _parse_bool(name: str, raw: Any) -> bool:
    if isinstance(raw, bool):
        return raw
    text = str(raw).strip().lower()
    if text in _TRUTHY:
        return True
    if text in _FALSY:
        return False
    raise ConfigError("Expected a boolean", key=name, value=raw)


def _parse_modules(raw: Any) -> tuple[str, ...]:
    if isinstance(raw, str):
        return tuple(m.strip() for m in raw.split(",") if m.strip())
    if isinstance(raw, (list, tuple)):
        return tuple(str(m) for m in raw)
    raise ConfigError("Expected a list of module names", key="root_modules", value=raw)
