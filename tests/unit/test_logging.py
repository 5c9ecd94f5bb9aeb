"""Unit tests for the JSON log formatter and request ID filter."""

from __future__ import annotations

import json
import logging
import sys

from reliable_proxy.logging_config import JsonFormatter, RequestIdFilter, request_id_var


def _record(message: str, **extra: object) -> logging.LogRecord:
    record = logging.LogRecord(
        name="reliable_proxy.test",
        level=logging.INFO,
        pathname="test.py",
        lineno=1,
        msg=message,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJsonFormatter:
    def test_required_fields(self) -> None:
        entry = json.loads(JsonFormatter().format(_record("hello")))

        assert entry["message"] == "hello"
        assert entry["level"] == "INFO"
        assert entry["logger"] == "reliable_proxy.test"
        assert "timestamp" in entry
        assert entry["request_id"] is None

    def test_forwarding_fields(self) -> None:
        record = _record(
            "Proxied GET http://upstream.test/a -> 200",
            method="GET",
            target_url="http://upstream.test/a",
            upstream_status=200,
            duration_ms=12.5,
        )

        entry = json.loads(JsonFormatter().format(record))

        assert entry["method"] == "GET"
        assert entry["target_url"] == "http://upstream.test/a"
        assert entry["upstream_status"] == 200
        assert entry["duration_ms"] == 12.5

    def test_redacts_credentials(self) -> None:
        record = _record(
            "calling with authorization: Bearer abc123",
            error_reason="token=supersecret",
        )

        entry = json.loads(JsonFormatter().format(record))

        assert "abc123" not in entry["message"]
        assert "supersecret" not in entry["error_reason"]
        assert "[REDACTED]" in entry["message"]

    def test_redacts_auth_scheme_credentials(self) -> None:
        record = _record(
            "upstream said Authorization: Basic dXNlcjpwYXNz and token: Bearer xyz789"
        )

        entry = json.loads(JsonFormatter().format(record))

        assert "dXNlcjpwYXNz" not in entry["message"]
        assert "xyz789" not in entry["message"]
        assert entry["message"].startswith("upstream said [REDACTED]")

    def test_exception_included(self) -> None:
        try:
            raise ValueError("broken")
        except ValueError:
            record = _record("failed")
            record.exc_info = sys.exc_info()

        entry = json.loads(JsonFormatter().format(record))

        assert "ValueError: broken" in entry["exception"]


class TestRequestIdFilter:
    def test_stamps_current_request_id(self) -> None:
        token = request_id_var.set("req-123")
        try:
            record = _record("inside request")
            assert RequestIdFilter().filter(record) is True
        finally:
            request_id_var.reset(token)

        assert record.request_id == "req-123"  # type: ignore[attr-defined]

    def test_keeps_explicit_request_id(self) -> None:
        record = _record("explicit", request_id="given")

        RequestIdFilter().filter(record)

        assert record.request_id == "given"  # type: ignore[attr-defined]
