"""Structured Logging — verifies JSON output and handler replacement."""

import json
import logging

from gateway.infrastructure.observability import JSONFormatter, setup_logging


def test_json_formatter_includes_extra_fields():
    record = logging.LogRecord(
        "gateway.test", logging.WARNING, __file__, 1, "rate limited", None, None,
    )
    record.request_id = "req-1"
    record.error_code = "RATE_LIMITED"
    record.stage = "routed"
    payload = json.loads(JSONFormatter().format(record))
    assert payload["level"] == "WARNING"
    assert payload["message"] == "rate limited"
    assert payload["request_id"] == "req-1"
    assert payload["error_code"] == "RATE_LIMITED"
    assert payload["stage"] == "routed"
    assert "client_id" not in payload


def test_setup_logging_does_not_stack_handlers():
    root = logging.getLogger()
    previous_level = root.level
    try:
        setup_logging("DEBUG", "json")
        setup_logging("INFO", "text")
        named = [h for h in root.handlers if h.get_name() == "gateway"]
        assert len(named) == 1
        assert root.level == logging.INFO
    finally:
        for handler in [h for h in root.handlers if h.get_name() == "gateway"]:
            root.removeHandler(handler)
        root.setLevel(previous_level)
