import json

import pytest
from werkzeug.wrappers import Request

from packcalc.handlers import CalculationHandler, HealthHandler, StaticHandler
from packcalc.service import PackService


@pytest.fixture(scope="module")
def calculation_handler():
    return CalculationHandler(PackService())


def _post(body: bytes) -> Request:
    return Request.from_values(
        path="/api/v1/calculate",
        method="POST",
        data=body,
        content_type="application/json",
    )


def _get(path: str) -> Request:
    return Request.from_values(path=path, method="GET")


def _json(response):
    return json.loads(response.get_data(as_text=True))


def _file_body(response) -> bytes:
    response.direct_passthrough = False
    try:
        return response.get_data()
    finally:
        response.close()


@pytest.mark.parametrize(
    ("body", "expected_status", "expect_success"),
    [
        ({"pack_sizes": [250, 500, 1000], "order_quantity": 263}, 200, True),
        ({"pack_sizes": [23, 31, 53], "order_quantity": 500000}, 200, True),
        ({"pack_sizes": [], "order_quantity": 100}, 400, False),
        ({"pack_sizes": [250, 500], "order_quantity": 0}, 400, False),
        ("invalid json", 400, False),
    ],
)
def test_calculate(calculation_handler, body, expected_status, expect_success):
    raw = body.encode() if isinstance(body, str) else json.dumps(body).encode()
    response = calculation_handler.calculate(_post(raw))

    assert response.status_code == expected_status
    payload = _json(response)
    assert payload["success"] is expect_success
    if expect_success:
        for name in ("id", "packs_used", "total_items", "total_packs"):
            assert name in payload["data"]


def test_calculate_edge_case_result(calculation_handler):
    body = json.dumps({"pack_sizes": [23, 31, 53], "order_quantity": 500000}).encode()
    data = _json(calculation_handler.calculate(_post(body)))["data"]
    assert data["packs_used"] == {"23": 2, "31": 7, "53": 9429}


def test_invalid_json_message(calculation_handler):
    payload = _json(calculation_handler.calculate(_post(b"invalid json")))
    assert payload["error"] == "Invalid JSON format"


def test_wrong_field_type_is_invalid_json(calculation_handler):
    body = json.dumps({"pack_sizes": "250", "order_quantity": 1}).encode()
    response = calculation_handler.calculate(_post(body))
    assert response.status_code == 400
    assert _json(response)["error"] == "Invalid JSON format"


def test_validation_failure_message(calculation_handler):
    body = json.dumps({"pack_sizes": [250, 500], "order_quantity": 0}).encode()
    payload = _json(calculation_handler.calculate(_post(body)))
    assert payload["error"].startswith("Validation failed: ")
    assert "OrderQuantity" in payload["error"]


def test_health():
    response = HealthHandler().health(_get("/health"))
    assert response.status_code == 200
    payload = _json(response)
    assert payload["status"] == "healthy"
    assert payload["version"] == "1.0.0"
    assert payload["time"].endswith("Z")


def test_ready():
    response = HealthHandler().ready(_get("/ready"))
    assert response.status_code == 200
    payload = _json(response)
    assert payload["status"] == "ready"
    assert "version" not in payload


@pytest.fixture
def web_dir(tmp_path):
    web = tmp_path / "web"
    web.mkdir()
    (web / "index.html").write_text("<html>calc</html>")
    (web / "app.js").write_text("console.log(1);")
    (tmp_path / "outside.txt").write_text("outside")
    return web


def test_serve_ui(web_dir):
    response = StaticHandler(web_dir).serve_ui(_get("/"))
    assert response.status_code == 200
    assert response.mimetype == "text/html"
    assert _file_body(response) == b"<html>calc</html>"


def test_serve_ui_missing_index(tmp_path):
    response = StaticHandler(tmp_path / "missing").serve_ui(_get("/"))
    assert response.status_code == 404
    assert response.get_data() == b"UI not found\n"


def test_serve_static_file(web_dir):
    response = StaticHandler(web_dir).serve_static(_get("/static/app.js"))
    assert response.status_code == 200
    assert _file_body(response) == b"console.log(1);"


@pytest.mark.parametrize("path", ["/static/", "/static/missing.css", "/static/../outside.txt"])
def test_serve_static_not_found(web_dir, path):
    response = StaticHandler(web_dir).serve_static(_get(path))
    assert response.status_code == 404
    assert response.get_data() == b"404 page not found\n"