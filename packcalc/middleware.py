"""WSGI middleware that tags each request with an id and logs it."""

from __future__ import annotations

import secrets
import time
from collections.abc import Callable
from datetime import timedelta
from typing import Any

from packcalc import logger

REQUEST_ID_HEADER = "X-Request-ID"


def generate_request_id() -> str:
    """Return a random 16-character hexadecimal request id."""
    return secrets.token_hex(8)


class LoggingMiddleware:
    """Sets a fresh X-Request-ID on request and response and logs each request."""

    def __init__(self, app: Callable[..., Any]) -> None:
        self.app = app

    def __call__(self, environ: dict[str, Any], start_response: Callable[..., Any]) -> Any:
        start = time.perf_counter_ns()
        request_id = generate_request_id()
        environ = {**environ, "HTTP_X_REQUEST_ID": request_id}
        seen = {"status": 200, "size": ""}

        def tracking_start_response(status: str, headers: list[tuple[str, str]], exc_info: Any = None) -> Any:
            seen["status"] = int(status.split(None, 1)[0])
            names = {key.lower(): value for key, value in headers}
            if REQUEST_ID_HEADER.lower() not in names:
                headers = [*headers, (REQUEST_ID_HEADER, request_id)]
            seen["size"] = names.get("content-length", "")
            return start_response(status, headers, exc_info)

        body = self.app(environ, tracking_start_response)

        duration = timedelta(microseconds=(time.perf_counter_ns() - start) / 1_000)
        path = environ.get("PATH_INFO", "").encode("latin-1", "replace").decode("utf-8", "replace")
        port = environ.get("REMOTE_PORT")
        address = environ.get("REMOTE_ADDR", "")
        logger.http(
            environ.get("REQUEST_METHOD", "GET"),
            path,
            request_id,
            seen["status"],
            duration,
            {
                "user_agent": environ.get("HTTP_USER_AGENT", ""),
                "remote_addr": f"{address}:{port}" if port else address,
                "content_type": environ.get("CONTENT_TYPE", ""),
                "response_size": seen["size"],
            },
        )
        return body