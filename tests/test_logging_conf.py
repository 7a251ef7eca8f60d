"""Tests for JSON-line logging and secret redaction."""

import json
import logging
import sys
from contextlib import contextmanager

import pytest

from verification_secret.logging_conf import (
    REDACTED,
    JsonFormatter,
    get_logger,
    setup_logging,
)


@contextmanager
def bare_root():
    """Run with no root handlers, including pytest's own capture handler.

    Must be entered inside the test body: pytest attaches its handler after
    fixtures are set up.
    """
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers, root.level
    root.handlers = []
    try:
        yield root
    finally:
        root.handlers = saved_handlers
        root.setLevel(saved_level)


def _format(**fields):
    record = logging.makeLogRecord({"name": "domain.client_secret", "levelname": "INFO", **fields})
    return json.loads(JsonFormatter().format(record))


class TestJsonFormatter:
    """Tests for JsonFormatter output."""

    def test_core_fields(self):
        out = _format(msg="client_secret.rejected")
        assert out["level"] == "INFO"
        assert out["logger"] == "domain.client_secret"
        assert out["message"] == "client_secret.rejected"
        assert "ts" in out

    def test_structured_extras_included(self):
        out = _format(msg="client_secret.rejected", event="client_secret_rejected", reason="type_tag")
        assert out["event"] == "client_secret_rejected"
        assert out["reason"] == "type_tag"
        assert "lineno" not in out

    def test_extras_do_not_overwrite_core_keys(self):
        out = _format(msg="hello", logger="spoofed")
        assert out["logger"] == "domain.client_secret"

    @pytest.mark.parametrize("key", ["client_secret", "url_token", "raw"])
    def test_sensitive_extras_redacted(self, key):
        out = _format(msg="hello", **{key: "vi_abc_secret_tok789"})
        assert out[key] == REDACTED
        assert "tok789" not in json.dumps(out)

    def test_dict_message_merged_and_redacted(self):
        out = _format(msg={"event": "session_start", "client_secret": "vi_abc_secret_tok789"})
        assert out["event"] == "session_start"
        assert out["client_secret"] == REDACTED
        assert "message" not in out

    def test_non_json_values_stringified(self):
        out = _format(msg="hello", session=object())
        assert isinstance(out["session"], str)

    def test_exception_info(self):
        try:
            raise ValueError("boom")
        except ValueError:
            record = logging.getLogger("x").makeRecord(
                "x", logging.ERROR, __file__, 1, "failed", (), exc_info=sys.exc_info()
            )
        out = json.loads(JsonFormatter().format(record))
        assert "ValueError: boom" in out["exc_info"]


class TestSetupLogging:
    """Tests for setup_logging idempotency."""

    def test_attaches_single_json_handler(self):
        with bare_root() as root:
            setup_logging("DEBUG")
            setup_logging("DEBUG")
            assert len(root.handlers) == 1
            assert isinstance(root.handlers[0].formatter, JsonFormatter)
            assert root.level == logging.DEBUG

    def test_unknown_level_falls_back_to_info(self):
        with bare_root() as root:
            setup_logging("chatty")
            assert root.level == logging.INFO

    def test_leaves_configured_root_alone(self):
        with bare_root() as root:
            existing = logging.NullHandler()
            root.handlers.append(existing)
            setup_logging()
            assert root.handlers == [existing]


def test_get_logger_names():
    assert get_logger("domain.client_secret").name == "domain.client_secret"
    assert get_logger().name == "verification_secret.logging_conf"
