"""Tests for logging configuration."""

import json
import logging

from certprep.logging_config import JSONFormatter, setup_logging


def make_record(level=logging.INFO, msg="Generated batch", **extra):
    record = logging.LogRecord(
        name="certprep.generation",
        level=level,
        pathname="/app/certprep/generation/generator.py",
        lineno=42,
        msg=msg,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJSONFormatter:
    """Tests for JSONFormatter."""

    def test_basic_fields(self):
        entry = json.loads(JSONFormatter().format(make_record()))
        assert entry["level"] == "INFO"
        assert entry["logger"] == "certprep.generation"
        assert entry["message"] == "Generated batch"
        assert "timestamp" in entry
        assert "source" not in entry

    def test_extra_fields(self):
        entry = json.loads(
            JSONFormatter().format(make_record(provider="gemini", attempt=2, batch=1))
        )
        assert entry["provider"] == "gemini"
        assert entry["attempt"] == 2
        assert entry["batch"] == 1

    def test_error_includes_source(self):
        entry = json.loads(JSONFormatter().format(make_record(level=logging.ERROR)))
        assert entry["source"] == "/app/certprep/generation/generator.py:42"


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_level_from_settings(self, test_settings):
        test_settings.log_level = "WARNING"
        setup_logging(test_settings)
        assert logging.getLogger("certprep").level == logging.WARNING

    def test_level_override(self, test_settings):
        setup_logging(test_settings, level_override="DEBUG")
        assert logging.getLogger("certprep").level == logging.DEBUG

    def test_http_client_loggers_quieted(self, test_settings):
        setup_logging(test_settings, level_override="DEBUG")
        assert logging.getLogger("httpx").level == logging.WARNING

    def test_production_uses_json(self, test_settings):
        test_settings.env = "production"
        setup_logging(test_settings)
        handler = logging.getLogger("certprep").handlers[0]
        assert isinstance(handler.formatter, JSONFormatter)
