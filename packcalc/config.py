"""Application configuration from defaults and PC_-prefixed environment variables."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from datetime import timedelta
from typing import Any

from packcalc.durations import parse_duration


@dataclass(frozen=True)
class ServerConfig:
    port: int = 8080
    host: str = "0.0.0.0"
    read_timeout: timedelta = timedelta(seconds=15)
    write_timeout: timedelta = timedelta(seconds=15)
    idle_timeout: timedelta = timedelta(seconds=60)


@dataclass(frozen=True)
class LoggingConfig:
    level: str = "info"
    format: str = "json"


@dataclass(frozen=True)
class AppConfig:
    name: str = "pack-calculator"
    version: str = "1.0.0"
    environment: str = "development"


@dataclass(frozen=True)
class Config:
    server: ServerConfig = field(default_factory=ServerConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    app: AppConfig = field(default_factory=AppConfig)


def _parse_int(text: str) -> int:
    try:
        return int(text, 0)
    except ValueError:
        return int(text, 8)  # a leading zero means octal


def _section(cls: type, name: str, env: Mapping[str, str]) -> Any:
    values = {}
    for item in fields(cls):
        raw = env.get(f"PC_{name}_{item.name}".upper())
        if not raw:
            continue
        kind = type(item.default)
        try:
            if kind is int:
                values[item.name] = _parse_int(raw)
            elif kind is timedelta:
                values[item.name] = parse_duration(raw)
            else:
                values[item.name] = raw
        except ValueError as exc:
            raise ValueError(f"cannot parse '{name}.{item.name}' from {raw!r}: {exc}") from exc
    return cls(**values)


def load(environ: Mapping[str, str] | None = None) -> Config:
    """Load configuration; PC_SERVER_PORT overrides server.port and so on.

    Empty variables count as unset. A value that cannot be parsed raises ValueError.
    """
    env = os.environ if environ is None else environ
    return Config(
        server=_section(ServerConfig, "server", env),
        logging=_section(LoggingConfig, "logging", env),
        app=_section(AppConfig, "app", env),
    )