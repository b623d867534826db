"""Structured Logging — one JSON object per line, keyed by the facade's request fields.

Invariants:
    - Every line carries timestamp (record creation time, UTC), level, logger, message
    - Facade context (employee_id, operation, attempt, status_code, delay/wait ms)
      is copied from `extra=` only when set
    - "json" format for deployed instances, "text" for local runs and tests

Design Decisions:
    - Plain logging.Formatter subclass: log shippers only need flat JSON lines,
      and call sites stay on the stdlib `extra=` convention
    - setup_logging replaces its own named handler: safe to call from every
      lifespan start (tests, reloads) without duplicate lines
    - httpx request logging raised to WARNING: the client already logs each
      upstream exchange at DEBUG with status and path
"""

import logging
import json
from datetime import datetime, timezone

EXTRA_FIELDS = (
    "employee_id", "operation", "attempt", "status_code",
    "error_code", "path", "delay_ms", "wait_ms",
)

_HANDLER_NAME = "employee_facade"
_QUIET_LOGGERS = ("httpx", "httpcore")


class JSONFormatter(logging.Formatter):
    """Render a record as a single JSON line."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc,
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        log.update({
            key: record.__dict__[key]
            for key in EXTRA_FIELDS
            if record.__dict__.get(key) is not None
        })
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO", fmt: str = "json") -> logging.Handler:
    """Install the facade's root handler, replacing any previous one."""
    root = logging.getLogger()
    for existing in list(root.handlers):
        if existing.get_name() == _HANDLER_NAME:
            root.removeHandler(existing)

    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(
        JSONFormatter() if fmt == "json"
        else logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
    )
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    return handler
