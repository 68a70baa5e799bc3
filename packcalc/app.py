"""Application wiring and the command that runs the HTTP server."""

from __future__ import annotations

import argparse
import os
import signal
import threading
from collections.abc import Sequence

from packcalc import logger
from packcalc.config import Config, load
from packcalc.handlers import CalculationHandler, HealthHandler, StaticHandler
from packcalc.middleware import LoggingMiddleware
from packcalc.routing import Router
from packcalc.server import Server
from packcalc.service import PackService

_SIGNALS = (signal.SIGINT, signal.SIGTERM)
_SHUTDOWN_TIMEOUT = 30.0


def create_app(
    config: Config | None = None, web_dir: str | os.PathLike[str] = "./web"
) -> LoggingMiddleware:
    """Set up logging from the configuration and build the WSGI application."""
    config = load() if config is None else config

    logger.initialize(config.logging.level, config.logging.format)
    logger.info(
        "Starting Pack Calculator API",
        {
            "version": config.app.version,
            "environment": config.app.environment,
            "port": config.server.port,
        },
    )

    pack_service = PackService()
    logger.info("Services initialized")

    calculation_handler = CalculationHandler(pack_service)
    health_handler = HealthHandler()
    static_handler = StaticHandler(web_dir)
    logger.info("Handlers initialized")

    router = Router()
    router.register_calculation_routes(calculation_handler.calculate)
    router.register_health_routes(health_handler.health, health_handler.ready)
    router.register_static_routes(static_handler.serve_ui, static_handler.serve_static)
    return LoggingMiddleware(router)


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="packcalc",
        description="Serve the pack calculator API. Settings come from PC_* environment variables.",
    )
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    """Run the server until SIGINT or SIGTERM; return the exit status."""
    _parse_args(argv)
    try:
        config = load()
    except ValueError as exc:
        print(f"Failed to load config: {exc}")
        return 1

    app = create_app(config)
    server = Server(config.server.port, app)
    server.timeout = max(config.server.read_timeout, config.server.write_timeout)

    stop = threading.Event()
    failures: list[OSError] = []

    def serve() -> None:
        logger.info("HTTP server starting", {"address": f":{config.server.port}"})
        try:
            server.start()
        except OSError as exc:
            logger.error("Failed to start server", {"error": str(exc)})
            failures.append(exc)
            stop.set()

    previous = {sig: signal.signal(sig, lambda signum, frame: stop.set()) for sig in _SIGNALS}
    try:
        threading.Thread(target=serve, name="http-server", daemon=True).start()
        logger.info("Server started successfully")
        while not stop.wait(0.5):
            pass
    finally:
        for sig, handler in previous.items():
            signal.signal(sig, handler)

    if failures:
        return 1

    logger.info("Shutdown signal received, starting graceful shutdown")
    stopper = threading.Thread(target=server.stop, name="http-shutdown", daemon=True)
    stopper.start()
    stopper.join(_SHUTDOWN_TIMEOUT)
    if stopper.is_alive():
        logger.error("Server forced to shutdown", {"error": "context deadline exceeded"})
    else:
        logger.info("Server shutdown completed")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())