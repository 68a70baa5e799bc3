"""URL routing for the HTTP API, the health checks and the web UI."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any
from urllib.parse import quote

from werkzeug.wrappers import Request, Response

Handler = Callable[[Request], Response]

_PATH_SAFE = "/:@!$&'()*+,;=-._~"


@dataclass(frozen=True)
class _Route:
    path: str
    methods: frozenset[str]
    handler: Handler
    prefix: bool = False

    def matches(self, path: str) -> bool:
        return path.startswith(self.path) if self.prefix else path == self.path


def _raw_path(environ: dict[str, Any]) -> str:
    path_info = environ.get("PATH_INFO", "")
    return path_info.encode("latin-1", "replace").decode("utf-8", "replace")


def _clean_path(path: str) -> str:
    """Collapse repeated slashes and resolve "." and ".." segments."""
    if not path:
        return "/"
    if not path.startswith("/"):
        path = "/" + path
    segments: list[str] = []
    for segment in path.split("/"):
        if segment in ("", "."):
            continue
        if segment == "..":
            if segments:
                segments.pop()
            continue
        segments.append(segment)
    cleaned = "/" + "/".join(segments)
    if path.endswith("/") and cleaned != "/":
        cleaned += "/"
    return cleaned


def _redirect(path: str, query: bytes) -> Response:
    location = quote(path, safe=_PATH_SAFE)
    if query:
        location += "?" + query.decode("latin-1")
    return Response(status=301, headers={"Location": location})


def _not_found() -> Response:
    return Response(
        "404 page not found\n",
        status=404,
        content_type="text/plain; charset=utf-8",
        headers={"X-Content-Type-Options": "nosniff"},
    )


class Router:
    """Dispatches requests to handlers by path and method.

    Paths that are not in clean form are redirected to their clean form. A path
    that matches only with another method gets 405, an unknown path 404.
    """

    def __init__(self) -> None:
        self._routes: list[_Route] = []

    def _add(
        self, path: str, handler: Handler, methods: Iterable[str], *, prefix: bool = False
    ) -> None:
        self._routes.append(_Route(path, frozenset(methods), handler, prefix))

    def register_calculation_routes(self, calculate: Handler) -> None:
        self._add("/api/v1/calculate", calculate, ("POST",))

    def register_health_routes(self, health: Handler, ready: Handler) -> None:
        # HEAD is allowed too, for container health checks.
        self._add("/health", health, ("GET", "HEAD"))
        self._add("/ready", ready, ("GET", "HEAD"))

    def register_static_routes(self, ui: Handler, static: Handler) -> None:
        self._add("/", ui, ("GET",))
        self._add("/ui", ui, ("GET",))
        self._add("/static/", static, ("GET",), prefix=True)

    def _dispatch(self, request: Request) -> Response:
        path = _raw_path(request.environ)
        if request.method != "CONNECT":
            cleaned = _clean_path(path)
            if cleaned != path:
                return _redirect(cleaned, request.query_string)

        method_mismatch = False
        for route in self._routes:
            if not route.matches(path):
                continue
            if request.method in route.methods:
                return route.handler(request)
            method_mismatch = True

        if method_mismatch:
            return Response(status=405)
        return _not_found()

    def __call__(self, environ: dict[str, Any], start_response: Callable[..., Any]) -> Any:
        response = self._dispatch(Request(environ))
        return response(environ, start_response)