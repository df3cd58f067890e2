"""Logging handler setup, request scope stamping and formatters."""

import json
import logging

from safety_vitals.middleware.logging_config import (
    HANDLER_NAME,
    ConsoleFormatter,
    JsonLineFormatter,
    RequestScopeFilter,
    configure_logging,
)


def _record(msg="Action created", **extra):
    record = logging.LogRecord("safety_vitals.services.action_service", logging.INFO,
                               __file__, 10, msg, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_configure_replaces_own_handler_only(app):
    root = logging.getLogger()
    foreign = logging.NullHandler()
    root.addHandler(foreign)
    try:
        configure_logging(app)
        configure_logging(app)
        ours = [h for h in root.handlers if h.name == HANDLER_NAME]
        assert len(ours) == 1
        assert foreign in root.handlers
    finally:
        root.removeHandler(foreign)


def test_log_format_env_selects_json(app, monkeypatch):
    monkeypatch.setenv("LOG_FORMAT", "json")
    root = configure_logging(app)
    handler = next(h for h in root.handlers if h.name == HANDLER_NAME)
    assert isinstance(handler.formatter, JsonLineFormatter)
    monkeypatch.delenv("LOG_FORMAT")
    configure_logging(app)


def test_scope_filter_outside_request_is_noop():
    record = _record()
    assert RequestScopeFilter().filter(record) is True
    assert not hasattr(record, "request_id")


def test_scope_filter_stamps_request_values(app, admin):
    with app.test_request_context("/api/actions/x", headers={"X-Org-ID": "org-1"}):
        from flask import g
        g.request_id = "req123"
        g.org_id = "org-1"
        g.admin = admin
        record = _record()
        RequestScopeFilter().filter(record)
    assert record.request_id == "req123"
    assert record.org_id == "org-1"
    assert record.admin_id == admin.id


def test_scope_filter_keeps_explicit_extra(app):
    with app.test_request_context("/api/health"):
        from flask import g
        g.org_id = "from-header"
        record = _record(org_id="explicit")
        RequestScopeFilter().filter(record)
    assert record.org_id == "explicit"


def test_json_line_fields():
    line = JsonLineFormatter().format(
        _record(request_id="req123", org_id="org-1", status=201, duration_ms=12.5)
    )
    payload = json.loads(line)
    assert payload["level"] == "INFO"
    assert payload["msg"] == "Action created"
    assert payload["logger"] == "safety_vitals.services.action_service"
    assert payload["request_id"] == "req123"
    assert payload["status"] == 201
    assert "admin_id" not in payload


def test_console_line_has_duration_and_scope_tags():
    line = ConsoleFormatter().format(
        _record("Request: GET /api/health", duration_ms=41.7, request_id="req123", org_id="org-1")
    )
    assert "INFO" in line
    assert line.endswith("Request: GET /api/health (42ms)  req=req123 org=org-1")
