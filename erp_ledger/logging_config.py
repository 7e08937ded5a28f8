"""
Logging configuration.

Development gets human-readable console lines; every other
environment gets one JSON object per line on stdout so the
output can be shipped to a log aggregator as-is.
"""

import json
import logging
import logging.config
from datetime import datetime, timezone

from erp_ledger.config import get_settings


class JsonFormatter(logging.Formatter):
    """Render a log record as a single JSON line."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def get_logging_config(log_level: str, log_format: str) -> dict:
    """Build a dictConfig mapping for the given level and format."""
    formatter = "json" if log_format == "json" else "console"
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "console": {
                "format": "%(asctime)s %(levelname)-8s %(name)s: %(message)s",
            },
            "json": {
                "()": "erp_ledger.logging_config.JsonFormatter",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": formatter,
                "stream": "ext://sys.stdout",
            },
        },
        "loggers": {
            "erp_ledger": {
                "handlers": ["console"],
                "level": log_level.upper(),
                "propagate": False,
            },
        },
    }


def configure_logging() -> None:
    settings = get_settings()
    logging.config.dictConfig(
        get_logging_config(settings.LOG_LEVEL, settings.LOG_FORMAT)
    )
