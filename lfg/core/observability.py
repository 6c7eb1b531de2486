"""
Structured logging setup.

Configures the root logger once at startup. The JSON format emits one object
per record and surfaces the structured extras passed via ``extra=``.
"""

import json
import logging
import time
from datetime import datetime, timezone

# Extras surfaced in JSON output when present on a record
STRUCTURED_FIELDS = (
    "endpoint", "permission", "details", "group_id", "user_id", "error", "path",
)


class JSONFormatter(logging.Formatter):
    """Format log records as single-line JSON objects."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in STRUCTURED_FIELDS:
            val = record.__dict__.get(key)
            if val is not None:
                log[key] = val
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO", fmt: str = "json") -> None:
    """Configure logging for the application."""
    handler = logging.StreamHandler()
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        formatter = logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%SZ",
        )
        formatter.converter = time.gmtime
        handler.setFormatter(formatter)
    root = logging.getLogger()
    # Replace handlers so repeated startups (tests, reload) don't duplicate output
    root.handlers = [handler]
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
