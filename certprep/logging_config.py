"""
Centralized logging configuration with structured logging support.
"""
import json
import logging
import logging.config
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from certprep.config import Settings, settings

# Structured fields copied from records when present (passed via ``extra=``)
_EXTRA_FIELDS = ("provider", "attempt", "batch", "certification")


class JSONFormatter(logging.Formatter):
    """
    JSON formatter for production logging.

    Produces structured log entries with consistent fields for log aggregation.
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        timestamp = datetime.fromtimestamp(record.created, tz=timezone.utc)
        log_entry: Dict[str, Any] = {
            "timestamp": timestamp.isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for name in _EXTRA_FIELDS:
            if hasattr(record, name):
                log_entry[name] = getattr(record, name)

        # Add source location for error-level logs
        if record.levelno >= logging.ERROR:
            log_entry["source"] = f"{record.pathname}:{record.lineno}"

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, default=str)


def setup_logging(
    config: Optional[Settings] = None, level_override: Optional[str] = None
) -> None:
    """
    Configure application-wide logging.

    Configures:
    - Log level from settings (or ``level_override``, e.g. for --verbose)
    - JSON formatting for production (structured for log aggregators)
    - Human-readable format for development
    """
    config = config or settings
    log_level_name = level_override or config.log_level
    log_level = getattr(logging, log_level_name.upper(), logging.INFO)

    is_production = config.env == "production"

    logging_config: Dict[str, Any] = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
            "json": {
                "()": JSONFormatter,
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": log_level,
                "formatter": "json" if is_production else "default",
                "stream": sys.stderr,
            },
        },
        "root": {
            "level": log_level,
            "handlers": ["console"],
        },
        "loggers": {
            "certprep": {
                "level": log_level,
                "handlers": ["console"],
                "propagate": False,
            },
            # Request lines from the HTTP client are noise at INFO
            "httpx": {
                "level": logging.WARNING,
                "handlers": ["console"],
                "propagate": False,
            },
            "httpcore": {
                "level": logging.WARNING,
                "handlers": ["console"],
                "propagate": False,
            },
        },
    }

    logging.config.dictConfig(logging_config)
