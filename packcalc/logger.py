"""Structured logging to standard output in JSON or text form."""

from __future__ import annotations

import json
import sys
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import IntEnum
from typing import Any

from packcalc.durations import format_duration

Fields = dict[str, Any]


class Level(IntEnum):
    DEBUG = 0
    INFO = 1
    WARN = 2
    ERROR = 3


@dataclass
class LogEntry:
    """One log record."""

    timestamp: str
    level: str
    message: str
    fields: Fields | None = None
    request_id: str = ""
    method: str = ""
    path: str = ""
    duration: str = ""
    status: int = 0

    def to_dict(self) -> dict[str, Any]:
        """Return the entry as a dictionary, leaving out empty optional parts."""
        data: dict[str, Any] = {
            "timestamp": self.timestamp,
            "level": self.level,
            "message": self.message,
            "fields": dict(sorted(self.fields.items())) if self.fields else None,
            "request_id": self.request_id,
            "method": self.method,
            "path": self.path,
            "duration": self.duration,
            "status": self.status,
        }
        required = ("timestamp", "level", "message")
        return {key: value for key, value in data.items() if key in required or value}


def parse_level(level: str) -> Level:
    """Map a level name to a Level, case-insensitively; unknown names mean INFO."""
    return Level.__members__.get(level.upper(), Level.INFO)


def _timestamp() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def _text_value(value: Any) -> str:
    if isinstance(value, bool):
        return str(value).lower()
    if value is None:
        return "<nil>"
    if isinstance(value, (list, tuple)):
        return "[" + " ".join(map(_text_value, value)) + "]"
    if isinstance(value, dict):
        return "map[" + " ".join(f"{_text_value(k)}:{_text_value(v)}" for k, v in value.items()) + "]"
    return str(value)


class Logger:
    """Writes log entries at or above a minimum level."""

    def __init__(self, level: str, format: str) -> None:
        self.level = parse_level(level)
        self.format = format if format in ("json", "text") else "json"

    def debug(self, message: str, fields: Fields | None = None) -> None:
        self._log(Level.DEBUG, message, fields)

    def info(self, message: str, fields: Fields | None = None) -> None:
        self._log(Level.INFO, message, fields)

    def warn(self, message: str, fields: Fields | None = None) -> None:
        self._log(Level.WARN, message, fields)

    def error(self, message: str, fields: Fields | None = None) -> None:
        self._log(Level.ERROR, message, fields)

    def http(
        self,
        method: str,
        path: str,
        request_id: str,
        status: int,
        duration: timedelta,
        fields: Fields | None = None,
    ) -> None:
        """Log a served HTTP request; always written, whatever the level."""
        self._output(
            LogEntry(_timestamp(), Level.INFO.name, "HTTP Request", fields,
                     request_id, method, path, format_duration(duration), status)
        )

    def _log(self, level: Level, message: str, fields: Fields | None) -> None:
        if level >= self.level:
            self._output(LogEntry(_timestamp(), level.name, message, fields))

    def _output(self, entry: LogEntry) -> None:
        if self.format == "json":
            try:
                print(json.dumps(entry.to_dict(), separators=(",", ":"), ensure_ascii=False))
            except (TypeError, ValueError) as exc:
                print(f"Failed to marshal log entry: {exc}", file=sys.stderr)
            return

        parts = [f"{entry.timestamp} [{entry.level}] {entry.message}"]
        if entry.request_id:
            parts.append(f"request_id={entry.request_id}")
        if entry.method and entry.path:
            parts.append(f"{entry.method} {entry.path}")
        if entry.status > 0:
            parts.append(f"status={entry.status}")
        if entry.duration:
            parts.append(f"duration={entry.duration}")
        parts.extend(f"{key}={_text_value(value)}" for key, value in (entry.fields or {}).items())
        print(" ".join(parts))


_default_logger: Logger | None = None


def initialize(level: str, format: str) -> None:
    """Set up the process-wide logger used by the module-level functions."""
    global _default_logger
    _default_logger = Logger(level, format)


def debug(message: str, fields: Fields | None = None) -> None:
    if _default_logger is not None:
        _default_logger.debug(message, fields)


def info(message: str, fields: Fields | None = None) -> None:
    if _default_logger is not None:
        _default_logger.info(message, fields)


def warn(message: str, fields: Fields | None = None) -> None:
    if _default_logger is not None:
        _default_logger.warn(message, fields)


def error(message: str, fields: Fields | None = None) -> None:
    if _default_logger is not None:
        _default_logger.error(message, fields)


def http(
    method: str,
    path: str,
    request_id: str,
    status: int,
    duration: timedelta,
    fields: Fields | None = None,
) -> None:
    if _default_logger is not None:
        _default_logger.http(method, path, request_id, status, duration, fields)