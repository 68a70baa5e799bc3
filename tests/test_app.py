import json
import socket

import pytest
from werkzeug.test import Client

from packcalc import logger
from packcalc.app import create_app, main
from packcalc.config import Config, LoggingConfig


@pytest.fixture(autouse=True)
def _isolated_logger(monkeypatch):
    monkeypatch.setattr(logger, "_default_logger", None)


def _quiet_config():
    return Config(logging=LoggingConfig(level="error"))


def _messages(text):
    return [json.loads(line) for line in text.splitlines() if line.startswith("{")]


def test_create_app_logs_startup(tmp_path, capsys):
    create_app(Config(), tmp_path)
    entries = _messages(capsys.readouterr().out)
    assert [entry["message"] for entry in entries] == [
        "Starting Pack Calculator API",
        "Services initialized",
        "Handlers initialized",
    ]
    assert entries[0]["fields"]["version"] == "1.0.0"
    assert entries[0]["fields"]["port"] == 8080
    assert entries[0]["fields"]["environment"] == "development"


def test_log_level_from_config_is_applied(tmp_path, capsys):
    client = Client(create_app(_quiet_config(), tmp_path))
    response = client.get("/health")
    assert response.get_json()["status"] == "healthy"
    assert capsys.readouterr().out == ""


def test_health_carries_request_id(tmp_path):
    client = Client(create_app(_quiet_config(), tmp_path))
    response = client.get("/health")
    assert response.status_code == 200
    assert len(response.headers["X-Request-ID"]) == 16


def test_calculate_edge_case(tmp_path):
    client = Client(create_app(_quiet_config(), tmp_path))
    response = client.post(
        "/api/v1/calculate", json={"pack_sizes": [23, 31, 53], "order_quantity": 500000}
    )
    body = response.get_json()
    assert response.status_code == 200
    assert body["success"] is True
    assert body["data"]["packs_used"] == {"23": 2, "31": 7, "53": 9429}


def test_calculate_rejects_empty_pack_sizes(tmp_path):
    client = Client(create_app(_quiet_config(), tmp_path))
    response = client.post("/api/v1/calculate", json={"pack_sizes": [], "order_quantity": 100})
    assert response.status_code == 400
    assert response.get_json()["success"] is False


def test_serves_ui_and_static_files(tmp_path):
    (tmp_path / "index.html").write_text("<h1>packs</h1>")
    (tmp_path / "site.css").write_text("body {}")
    client = Client(create_app(_quiet_config(), tmp_path))
    assert client.get("/").get_data(as_text=True) == "<h1>packs</h1>"
    assert client.get("/ui").get_data(as_text=True) == "<h1>packs</h1>"
    assert client.get("/static/site.css").get_data(as_text=True) == "body {}"


def test_main_fails_on_bad_config(monkeypatch, capsys):
    monkeypatch.setenv("PC_SERVER_PORT", "not-a-port")
    assert main([]) == 1
    assert "Failed to load config" in capsys.readouterr().out


def test_main_fails_when_port_is_busy(monkeypatch, capsys):
    with socket.create_server(("", 0)) as occupied:
        monkeypatch.setenv("PC_SERVER_PORT", str(occupied.getsockname()[1]))
        monkeypatch.setenv("PC_LOGGING_LEVEL", "info")
        assert main([]) == 1
    messages = [entry["message"] for entry in _messages(capsys.readouterr().out)]
    assert "Failed to start server" in messages
    assert "Shutdown signal received, starting graceful shutdown" not in messages