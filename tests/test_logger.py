import json
from datetime import timedelta

import pytest

from packcalc import logger as log
from packcalc.durations import format_duration
from packcalc.logger import Level, LogEntry, Logger, parse_level


@pytest.mark.parametrize(
    "level, fmt, expected_level, expected_format",
    [
        ("debug", "json", Level.DEBUG, "json"),
        ("info", "text", Level.INFO, "text"),
        ("invalid", "json", Level.INFO, "json"),
        ("info", "invalid", Level.INFO, "json"),
        ("INFO", "JSON", Level.INFO, "json"),
    ],
)
def test_new(level, fmt, expected_level, expected_format):
    logger = Logger(level, fmt)
    assert logger.level == expected_level
    assert logger.format == expected_format


@pytest.mark.parametrize(
    "text, expected",
    [
        ("debug", Level.DEBUG),
        ("DEBUG", Level.DEBUG),
        ("info", Level.INFO),
        ("INFO", Level.INFO),
        ("warn", Level.WARN),
        ("WARN", Level.WARN),
        ("error", Level.ERROR),
        ("ERROR", Level.ERROR),
        ("invalid", Level.INFO),
        ("", Level.INFO),
    ],
)
def test_parse_level(text, expected):
    assert parse_level(text) == expected


def test_debug_filtered_at_info(capsys):
    Logger("info", "json").debug("debug message")
    assert capsys.readouterr().out == ""


@pytest.mark.parametrize("method, message", [("info", "info message"), ("warn", "warn message"), ("error", "error message")])
def test_levels_logged_at_info(capsys, method, message):
    logger = Logger("info", "json")
    getattr(logger, method)(message)
    entry = json.loads(capsys.readouterr().out)
    assert entry["message"] == message


def test_json_format(capsys):
    Logger("info", "json").info("test message", {"key1": "value1", "key2": 42})
    entry = json.loads(capsys.readouterr().out)
    assert entry["level"] == "INFO"
    assert entry["message"] == "test message"
    assert entry["fields"]["key1"] == "value1"
    assert entry["fields"]["key2"] == 42
    assert entry["timestamp"] != ""
    assert entry["timestamp"].endswith("Z")


def test_json_omits_empty_optional_fields(capsys):
    Logger("info", "json").info("plain")
    entry = json.loads(capsys.readouterr().out)
    assert set(entry) == {"timestamp", "level", "message"}


def test_text_format(capsys):
    Logger("info", "text").info("test message", {"key1": "value1", "key2": 42})
    output = capsys.readouterr().out
    assert "[INFO]" in output
    assert "test message" in output
    assert "key1=value1" in output
    assert "key2=42" in output


def test_http(capsys):
    duration = timedelta(milliseconds=100)
    Logger("info", "json").http("POST", "/api/test", "req123", 200, duration, {"user_agent": "test-agent"})
    entry = json.loads(capsys.readouterr().out)
    assert entry["message"] == "HTTP Request"
    assert entry["method"] == "POST"
    assert entry["path"] == "/api/test"
    assert entry["request_id"] == "req123"
    assert entry["status"] == 200
    assert entry["duration"] == format_duration(duration)
    assert entry["duration"] == "100ms"
    assert entry["fields"]["user_agent"] == "test-agent"


def test_http_logged_even_at_error_level(capsys):
    Logger("error", "text").http("GET", "/health", "abc", 200, timedelta(0))
    output = capsys.readouterr().out
    assert "request_id=abc" in output
    assert "GET /health" in output
    assert "status=200" in output


def test_log_entry_to_dict_keeps_set_values():
    entry = LogEntry(timestamp="t", level="INFO", message="m", request_id="r", status=404)
    assert entry.to_dict() == {"timestamp": "t", "level": "INFO", "message": "m", "request_id": "r", "status": 404}


def test_global_logger(capsys, monkeypatch):
    monkeypatch.setattr(log, "_default_logger", None)
    log.info("test message")
    assert capsys.readouterr().out == ""

    log.initialize("info", "json")
    log.info("test message")
    entry = json.loads(capsys.readouterr().out)
    assert entry["message"] == "test message"


@pytest.mark.parametrize(
    "function, level",
    [(log.debug, "DEBUG"), (log.info, "INFO"), (log.warn, "WARN"), (log.error, "ERROR")],
)
def test_global_logger_methods(capsys, monkeypatch, function, level):
    monkeypatch.setattr(log, "_default_logger", None)
    log.initialize("debug", "json")
    function("msg")
    entry = json.loads(capsys.readouterr().out)
    assert entry["level"] == level


def test_global_http(capsys, monkeypatch):
    monkeypatch.setattr(log, "_default_logger", None)
    log.initialize("info", "json")
    log.http("GET", "/ready", "id1", 200, timedelta(milliseconds=100))
    entry = json.loads(capsys.readouterr().out)
    assert entry["path"] == "/ready"
    assert entry["request_id"] == "id1"