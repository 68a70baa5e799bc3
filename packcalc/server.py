"""A threaded WSGI server that can be stopped from another thread."""

from __future__ import annotations

import socketserver
import threading
from collections.abc import Callable
from datetime import timedelta
from typing import Any
from wsgiref.simple_server import WSGIRequestHandler, WSGIServer

from packcalc import logger


class _ThreadingWSGIServer(socketserver.ThreadingMixIn, WSGIServer):
    # Request threads are joined on close, so in-flight requests finish.
    daemon_threads = False

    def server_bind(self) -> None:
        socketserver.TCPServer.server_bind(self)
        self.server_name, self.server_port = self.server_address[:2]
        self.setup_environ()


class _RequestHandler(WSGIRequestHandler):
    def log_message(self, format: str, *args: Any) -> None:
        logger.debug(format % args)


class Server:
    """Serves a WSGI application on all interfaces at the given port.

    ``timeout`` bounds each socket read and write of a connection.
    """

    def __init__(self, port: int, app: Callable[..., Any]) -> None:
        self.port = port
        self.app = app
        self.timeout = timedelta(seconds=15)
        self._lock = threading.Lock()
        self._closed = False
        self._httpd: _ThreadingWSGIServer | None = None
        self._done = threading.Event()

    def start(self) -> None:
        """Serve until stop() is called; raise OSError if the port cannot be bound.

        Returns at once if the server has already been stopped.
        """
        print(f"Starting HTTP server on port {self.port}")
        with self._lock:
            if self._closed:
                return
            handler = type("_TimedRequestHandler", (_RequestHandler,), {"timeout": self.timeout.total_seconds()})
            httpd = _ThreadingWSGIServer(("", self.port), handler)
            httpd.set_app(self.app)
            self._httpd = httpd
        try:
            httpd.serve_forever(poll_interval=0.25)
        finally:
            httpd.server_close()
            self._done.set()

    def stop(self) -> None:
        """Stop accepting connections and wait for active requests to finish."""
        print("Shutting down HTTP server...")
        with self._lock:
            self._closed = True
            httpd = self._httpd
        if httpd is not None:
            httpd.shutdown()
            self._done.wait()