# src/todoctl/config.py

"""Settings loaded from an optional YAML file plus environment variables.

Lookup order for each value: environment variable, then the YAML file,
then the built-in default. The YAML file is `$TODOCTL_CONFIG` if set,
otherwise `~/.config/todoctl/config.yml`; it may be absent.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml

ENV_PREFIX = "TODOCTL"

DEFAULT_FILE_NAME = "TODO.json"
DEFAULT_GLOBAL_FILE = Path("~/.todoctl/TODO.json")
DEFAULT_CONFIG_FILE = Path("~/.config/todoctl/config.yml")


class ConfigError(Exception):
    """Raised when the settings file exists but cannot be used."""


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(env: Mapping[str, str], name: str) -> Optional[str]:
    v = env.get(name)
    if v is None or v.strip() == "":
        return None
    return v


@dataclass(frozen=True, slots=True)
class Settings:
    file_name: str = DEFAULT_FILE_NAME
    global_file: Path = DEFAULT_GLOBAL_FILE
    file_override: Optional[Path] = None
    log_file: Optional[Path] = None
    log_level: str = "WARNING"


def config_path(env: Mapping[str, str] | None = None) -> Path:
    env = os.environ if env is None else env
    raw = _env(env, _k("CONFIG"))
    return Path(raw).expanduser() if raw else DEFAULT_CONFIG_FILE.expanduser()


def load_config_file(path: Path) -> dict[str, Any]:
    """
    Read the YAML settings file. Missing file -> empty mapping.
    """
    if not path.is_file():
        return {}

    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"{path}: cannot read file: {e}") from e

    try:
        data = yaml.safe_load(text) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"{path}: invalid YAML: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"{path}: YAML root must be a mapping")

    return data


def get_settings(env: Mapping[str, str] | None = None) -> Settings:
    """Build Settings from the environment and the optional YAML file."""
    env = os.environ if env is None else env
    data = load_config_file(config_path(env))

    def pick(suffix: str, key: str) -> Optional[str]:
        v = _env(env, _k(suffix))
        if v is not None:
            return v
        raw = data.get(key)
        if raw is None or str(raw).strip() == "":
            return None
        return str(raw)

    file_name = pick("FILE_NAME", "file_name") or DEFAULT_FILE_NAME
    global_file = pick("GLOBAL_FILE", "global_file")
    override = _env(env, _k("FILE"))
    log_file = pick("LOG_FILE", "log_file")
    log_level = pick("LOG_LEVEL", "log_level") or "WARNING"

    return Settings(
        file_name=file_name,
        global_file=Path(global_file).expanduser() if global_file else DEFAULT_GLOBAL_FILE.expanduser(),
        file_override=Path(override).expanduser() if override else None,
        log_file=Path(log_file).expanduser() if log_file else None,
        log_level=log_level.strip().upper(),
    )
