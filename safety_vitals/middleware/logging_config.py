"""
Logging setup for Safety Vitals.

One stderr handler on the root logger, tagged with a name so rebuilding the
app (tests create several) swaps it instead of stacking copies. Other root
handlers, such as pytest's capture handler, are left alone.

Every record emitted while a request is active is stamped with the request's
scope (request id, organization, admin) by RequestScopeFilter, so service
logs can be correlated with the access line written by middleware.timing.

Output format:
    LOG_FORMAT=json      one JSON object per line (default outside DEBUG/TESTING)
    LOG_FORMAT=console   short human-readable lines (default in DEBUG/TESTING)
Level: LOG_LEVEL (default INFO in production, DEBUG otherwise).
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone

from flask import g, has_request_context

HANDLER_NAME = "safety_vitals"

# Scope attributes shown on every line, in display order
SCOPE_FIELDS = ("request_id", "org_id", "survey_id", "admin_id")

# Access-line attributes set by middleware.timing via ``extra=``
ACCESS_FIELDS = ("method", "path", "status", "duration_ms", "remote_addr")

QUIET_LOGGERS = ("urllib3", "werkzeug", "sqlalchemy.engine", "smtplib")


class RequestScopeFilter(logging.Filter):
    """Copy request-scoped identifiers from ``flask.g`` onto the record.

    Values passed explicitly through ``extra=`` are never overwritten.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if not has_request_context():
            return True
        if getattr(record, "request_id", None) is None:
            record.request_id = g.get("request_id")
        if getattr(record, "org_id", None) is None:
            record.org_id = g.get("org_id")
        if getattr(record, "admin_id", None) is None:
            admin = g.get("admin")
            record.admin_id = admin.id if admin is not None else None
        return True


def _scope(record: logging.LogRecord) -> dict:
    return {
        name: getattr(record, name)
        for name in SCOPE_FIELDS + ACCESS_FIELDS
        if getattr(record, name, None) not in (None, "")
    }


class JsonLineFormatter(logging.Formatter):
    """Single-line JSON records for the log pipeline."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
            "where": f"{record.module}:{record.funcName}:{record.lineno}",
        }
        payload.update(_scope(record))
        if record.exc_info and record.exc_info[0] is not None:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


class ConsoleFormatter(logging.Formatter):
    """``HH:MM:SS LEVEL logger: message  req=.. org=..`` for local work."""

    LEVEL_COLORS = {
        logging.DEBUG: "\033[2m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[1;31m",
    }

    def __init__(self, color: bool = False):
        super().__init__()
        self.color = color

    def format(self, record: logging.LogRecord) -> str:
        stamp = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")
        level = f"{record.levelname:<7}"
        if self.color and record.levelno in self.LEVEL_COLORS:
            level = f"{self.LEVEL_COLORS[record.levelno]}{level}\033[0m"

        line = f"{stamp} {level} {record.name}: {record.getMessage()}"
        scope = _scope(record)
        duration = scope.pop("duration_ms", None)
        if duration is not None:
            line += f" ({duration:.0f}ms)"
        tags = [
            f"{short}={scope[name]}"
            for short, name in (("req", "request_id"), ("org", "org_id"), ("admin", "admin_id"))
            if name in scope
        ]
        if tags:
            line += "  " + " ".join(tags)
        if record.exc_info and record.exc_info[0] is not None:
            line += "\n" + self.formatException(record.exc_info)
        return line


def _build_handler(fmt: str, level: int) -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    handler.name = HANDLER_NAME
    handler.setLevel(level)
    handler.addFilter(RequestScopeFilter())
    if fmt == "json":
        handler.setFormatter(JsonLineFormatter())
    else:
        handler.setFormatter(ConsoleFormatter(color=sys.stderr.isatty()))
    return handler


def configure_logging(app):
    """Install the Safety Vitals handler on the root logger."""
    local = app.config.get("DEBUG", False) or app.config.get("TESTING", False)

    level_name = os.getenv("LOG_LEVEL", "DEBUG" if local else "INFO").upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        level = logging.INFO

    fmt = os.getenv("LOG_FORMAT", "console" if local else "json").lower()

    root = logging.getLogger()
    for existing in [h for h in root.handlers if h.name == HANDLER_NAME]:
        root.removeHandler(existing)
    root.addHandler(_build_handler(fmt, level))
    root.setLevel(level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    app.logger.setLevel(level)

    if not app.config.get("TESTING", False):
        app.logger.info("Logging configured: level=%s format=%s", level_name, fmt)
    return root
