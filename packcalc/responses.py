"""JSON response builders shared by the HTTP handlers."""

from __future__ import annotations

import json
from datetime import datetime
from typing import Any

from werkzeug.wrappers import Response

_ESCAPES = {
    "<": "\\u003c",
    ">": "\\u003e",
    "&": "\\u0026",
    "\u2028": "\\u2028",
    "\u2029": "\\u2029",
}


def _default(value: Any) -> Any:
    to_dict = getattr(value, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, (set, frozenset, tuple)):
        return list(value)
    raise TypeError(f"value of type {type(value).__name__} is not JSON serializable")


def _encode(payload: Any) -> str:
    text = json.dumps(payload, ensure_ascii=False, separators=(",", ":"), default=_default)
    for char, escape in _ESCAPES.items():
        text = text.replace(char, escape)
    return text + "\n"


def _json(status: int, payload: Any) -> Response:
    return Response(_encode(payload), status=status, content_type="application/json")


def success_response(status: int, data: Any = None) -> Response:
    """Wrap data as {"success": ..., "data": ...}; success follows the status code."""
    payload: dict[str, Any] = {"success": status < 400}
    if data is not None:
        payload["data"] = data
    return _json(status, payload)


def error_response(status: int, message: str, code: str = "") -> Response:
    """Build {"success": false, "error": message} with an optional error code."""
    payload: dict[str, Any] = {"success": False, "error": message}
    if code:
        payload["code"] = code
    return _json(status, payload)


def json_response(status: int, data: Any) -> Response:
    """Encode data as the whole JSON body."""
    return _json(status, data)