"""Formatting and parsing of durations in the compact "1h2m3.5s" notation."""

import re
from datetime import timedelta
from decimal import Decimal

_NS_PER_US = 1_000
_NS_PER_MS = 1_000_000
_NS_PER_S = 1_000_000_000
_NS_PER_M = 60 * _NS_PER_S
_NS_PER_H = 60 * _NS_PER_M

_UNITS = {
    "ns": 1,
    "us": _NS_PER_US,
    "µs": _NS_PER_US,
    "μs": _NS_PER_US,
    "ms": _NS_PER_MS,
    "s": _NS_PER_S,
    "m": _NS_PER_M,
    "h": _NS_PER_H,
}

_COMPONENT = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|μs|ms|s|m|h)")


def _to_nanoseconds(duration: timedelta | int) -> int:
    if isinstance(duration, timedelta):
        whole_seconds = duration.days * 86_400 + duration.seconds
        return whole_seconds * _NS_PER_S + duration.microseconds * _NS_PER_US
    return int(duration)


def _decimal(value: int, digits: int) -> str:
    whole, rest = divmod(value, 10**digits)
    fraction = str(rest).rjust(digits, "0").rstrip("0")
    return f"{whole}.{fraction}" if fraction else str(whole)


def format_duration(duration: timedelta | int) -> str:
    """Render a timedelta (or a count of nanoseconds) like "1h2m3.5s" or "5ms"."""
    nanoseconds = _to_nanoseconds(duration)
    if nanoseconds == 0:
        return "0s"
    sign = "-" if nanoseconds < 0 else ""
    magnitude = abs(nanoseconds)

    if magnitude < _NS_PER_US:
        return f"{sign}{magnitude}ns"
    if magnitude < _NS_PER_MS:
        return f"{sign}{_decimal(magnitude, 3)}µs"
    if magnitude < _NS_PER_S:
        return f"{sign}{_decimal(magnitude, 6)}ms"

    hours, rest = divmod(magnitude, _NS_PER_H)
    minutes, rest = divmod(rest, _NS_PER_M)
    seconds = f"{_decimal(rest, 9)}s"
    if hours:
        return f"{sign}{hours}h{minutes}m{seconds}"
    if minutes:
        return f"{sign}{minutes}m{seconds}"
    return f"{sign}{seconds}"


def parse_duration(text: str) -> timedelta:
    """Parse a duration such as "15s", "1m30s" or "-1.5h" into a timedelta."""
    if not text:
        raise ValueError("invalid duration: empty string")
    body = text
    negative = body.startswith("-")
    if body[0] in "+-":
        body = body[1:]
    if body == "0":
        return timedelta(0)
    if not body:
        raise ValueError(f"invalid duration {text!r}")

    total = Decimal(0)
    position = 0
    while position < len(body):
        match = _COMPONENT.match(body, position)
        if match is None:
            raise ValueError(f"invalid duration {text!r}")
        total += Decimal(match.group(1)) * _UNITS[match.group(2)]
        position = match.end()

    microseconds = int(total) // _NS_PER_US
    return timedelta(microseconds=-microseconds if negative else microseconds)