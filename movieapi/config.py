"""Application configuration read from the environment and an optional .env file."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, fields
from pathlib import Path

from dotenv import load_dotenv

_log = logging.getLogger(__name__)

ENV_PREFIX = "APP_PORT"

_TRUE_VALUES = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE_VALUES = frozenset({"0", "f", "F", "FALSE", "false", "False"})

_ENV_KEYS = {
    "is_development": "IS_DEVELOPMENT",
    "debug": "DEBUG",
    "env": "APP_ENV",
    "port": "APP_PORT",
    "movies": "MOVIES",
    "credits": "CREDITS",
    "ratings": "RATINGS",
}


@dataclass(frozen=True)
class AppConfig:
    """Settings the service runs with."""

    is_development: bool = False
    debug: bool = False
    env: str = ""
    port: str = ""
    movies: str = ""
    credits: str = ""
    ratings: str = ""


def _load_env_file() -> bool:
    """Load ``.env`` from the working directory without overriding set variables."""
    path = Path.cwd() / ".env"
    if not path.is_file():
        return False
    load_dotenv(path, override=False)
    return True


def _parse_bool(key: str, value: str) -> bool:
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"invalid boolean value {value!r} for {key}")


def _lookup(environ: Mapping[str, str], key: str) -> str | None:
    for candidate in (f"{ENV_PREFIX}_{key}", key):
        if candidate in environ:
            return environ[candidate]
    return None


def get_config(environ: Mapping[str, str] | None = None) -> AppConfig:
    """Build the configuration from ``environ``.

    When ``environ`` is omitted, ``.env`` in the working directory is loaded
    first and the process environment is used.
    """
    if environ is None:
        if not _load_env_file():
            _log.warning("warning .env file not found, scanning from OS ENV")
        environ = os.environ

    values: dict[str, object] = {}
    for item in fields(AppConfig):
        key = _ENV_KEYS[item.name]
        raw = _lookup(environ, key)
        if raw is None:
            continue
        if isinstance(item.default, bool):
            values[item.name] = _parse_bool(key, raw)
        else:
            values[item.name] = raw
    return AppConfig(**values)


def get_config_by_name(key: str) -> str:
    """Load ``.env`` and return the value of ``key``, or an empty string."""
    if not _load_env_file():
        raise FileNotFoundError("open .env: no such file or directory")
    return os.getenv(key, "")