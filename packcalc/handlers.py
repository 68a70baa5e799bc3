"""HTTP request handlers for calculations, health checks and the static UI."""

from __future__ import annotations

import json
import logging
import os
import time
from datetime import datetime, timezone
from pathlib import Path

from werkzeug.security import safe_join
from werkzeug.utils import send_file
from werkzeug.wrappers import Request, Response

from packcalc import logger
from packcalc.dto import (
    HealthResponse,
    ValidationError,
    parse_calculation_request,
    to_calculation_response,
)
from packcalc.errors import DomainError
from packcalc.responses import error_response, json_response, success_response
from packcalc.service import PackService

VERSION = "1.0.0"

_log = logging.getLogger(__name__)


def _timestamp() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def _plain_error(message: str, status: int) -> Response:
    return Response(
        message + "\n",
        status=status,
        content_type="text/plain; charset=utf-8",
        headers={"X-Content-Type-Options": "nosniff"},
    )


def _not_found() -> Response:
    return _plain_error("404 page not found", 404)


def _decode_first_value(body: bytes) -> object:
    text = body.decode("utf-8", errors="replace").lstrip()
    value, _ = json.JSONDecoder().raw_decode(text)
    return value


class CalculationHandler:
    """Handles POST /api/v1/calculate."""

    def __init__(self, pack_service: PackService) -> None:
        self.pack_service = pack_service

    def calculate(self, request: Request) -> Response:
        start = time.perf_counter_ns()
        request_id = request.headers.get("X-Request-ID", "")

        try:
            calc_request = parse_calculation_request(_decode_first_value(request.get_data()))
        except ValidationError as exc:
            logger.warn(
                "Request validation failed", {"request_id": request_id, "error": str(exc)}
            )
            return error_response(400, f"Validation failed: {exc}")
        except (TypeError, ValueError) as exc:
            logger.warn("Invalid JSON request", {"request_id": request_id, "error": str(exc)})
            return error_response(400, "Invalid JSON format")

        pack_sizes = calc_request.pack_sizes or []
        order_quantity = calc_request.order_quantity
        logger.debug(
            "Calculation request received",
            {"request_id": request_id, "pack_sizes": pack_sizes, "order_quantity": order_quantity},
        )

        try:
            result = self.pack_service.calculate_optimal(pack_sizes, order_quantity)
        except DomainError as exc:
            logger.error(
                "Calculation failed",
                {
                    "request_id": request_id,
                    "pack_sizes": pack_sizes,
                    "order_quantity": order_quantity,
                    "error": str(exc),
                },
            )
            return error_response(400, str(exc))

        logger.info(
            "Calculation completed",
            {
                "request_id": request_id,
                "pack_sizes": pack_sizes,
                "order_quantity": order_quantity,
                "total_items": result.total_items,
                "total_packs": result.total_packs,
                "items_overage": result.items_overage,
                "duration_ms": (time.perf_counter_ns() - start) // 1_000_000,
                "calculation_id": result.id,
            },
        )
        return success_response(200, to_calculation_response(result))


class HealthHandler:
    """Handles GET /health and GET /ready."""

    def health(self, request: Request) -> Response:
        return json_response(
            200, HealthResponse(status="healthy", version=VERSION, time=_timestamp())
        )

    def ready(self, request: Request) -> Response:
        return json_response(200, HealthResponse(status="ready", time=_timestamp()))


class StaticHandler:
    """Serves the web UI and its assets from a directory."""

    def __init__(self, web_dir: str | os.PathLike[str] = "./web") -> None:
        self.web_dir = Path(web_dir)
        if self.web_dir.exists():
            _log.info("Web directory found: %s", self.web_dir)
        else:
            _log.warning("Web directory %s does not exist", self.web_dir)

    def serve_ui(self, request: Request) -> Response:
        index_path = self.web_dir / "index.html"
        if not index_path.is_file():
            _log.error("index.html not found at %s", index_path)
            return _plain_error("UI not found", 404)
        _log.info("Serving UI: %s", index_path)
        return send_file(index_path, request.environ)

    def serve_static(self, request: Request) -> Response:
        path = request.path.removeprefix("/static")
        if path in ("", "/"):
            return _not_found()

        file_path = safe_join(str(self.web_dir), path.lstrip("/"))
        if file_path is None or not os.path.isfile(file_path):
            _log.error("Static file not found: %s", file_path or path)
            return _not_found()

        _log.info("Serving static file: %s", file_path)
        return send_file(file_path, request.environ)