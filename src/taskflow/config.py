# src/taskflow/config.py

"""
User configuration.

Settings come from `config.yml` in the taskflow home directory:

    ~/.taskflow/config.yml

Override the home directory with the TASKFLOW_HOME env var (or --home),
and the config file itself with TASKFLOW_CONFIG. A missing file means
defaults for every key.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import yaml

from .engine.model import SortField, SortOrder

CONFIG_NAME = "config.yml"


class ConfigError(Exception):
    """Raised when the configuration file cannot be read or is malformed."""


@dataclass(frozen=True, slots=True)
class Settings:
    home: Path
    log_level: int = logging.WARNING
    log_file: Optional[Path] = None
    sort_by: SortField = SortField.CREATED_AT
    sort_order: SortOrder = SortOrder.DESC

    @property
    def data_dir(self) -> Path:
        return self.home / "data"


def default_home() -> Path:
    env = os.getenv("TASKFLOW_HOME")
    if env:
        return Path(env).expanduser().resolve()

    return (Path.home() / ".taskflow").resolve()


def load_settings(home: Optional[Path] = None) -> Settings:
    """
    Build Settings from the config file under `home` (or the default home).
    """
    home = (home or default_home()).expanduser().resolve()

    env_cfg = os.getenv("TASKFLOW_CONFIG")
    path = Path(env_cfg).expanduser() if env_cfg else home / CONFIG_NAME

    data = _read_yaml(path)

    log_file = data.get("log_file")
    return Settings(
        home=home,
        log_level=_parse_level(path, data.get("log_level", "WARNING")),
        log_file=(home / Path(str(log_file)).expanduser()) if log_file else None,
        sort_by=_parse_choice(path, data, "sort_by", SortField, SortField.CREATED_AT),
        sort_order=_parse_choice(path, data, "sort_order", SortOrder, SortOrder.DESC),
    )


# ---------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------

def _read_yaml(path: Path) -> dict[str, Any]:
    if not path.is_file():
        return {}

    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"{path}: Cannot read file: {e}") from e

    try:
        data = yaml.safe_load(text) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"{path}: Invalid YAML: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"{path}: YAML root must be a mapping/dictionary")

    return data


def _parse_level(path: Path, raw: Any) -> int:
    if isinstance(raw, int):
        return raw
    level = logging.getLevelName(str(raw).strip().upper())
    if not isinstance(level, int):
        raise ConfigError(f"{path}: Invalid log_level '{raw}'")
    return level


def _parse_choice(path: Path, data: dict[str, Any], key: str, enum_cls: type, default: Any) -> Any:
    raw = data.get(key)
    if raw is None:
        return default
    try:
        return enum_cls(str(raw).strip().lower())
    except ValueError as e:
        allowed = ", ".join([m.value for m in enum_cls])
        raise ConfigError(f"{path}: Invalid {key} '{raw}' (allowed: {allowed})") from e
