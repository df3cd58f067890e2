"""
Elevated session over a separate ``admin`` bind (ADMIN_DATABASE_URL).

A second app is built with the admin bind pointed at its own SQLite file, so
rows written there are visible to /api/admin/* but not to the regular session.
"""

from unittest.mock import patch

import pytest
from sqlalchemy import text
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from safety_vitals import create_app
from safety_vitals.config import TestingConfig
from safety_vitals.middleware.admin_auth import elevated_session
from safety_vitals.models import db as _db
from safety_vitals.models.organization import Organization

from conftest import login_as, make_admin


@pytest.fixture()
def bound_app(tmp_path, monkeypatch):
    monkeypatch.setattr(TestingConfig, "SQLALCHEMY_BINDS",
                        {"admin": f"sqlite:///{tmp_path / 'admin.db'}"})
    application = create_app("testing")
    with application.app_context():
        _db.metadata.create_all(_db.engines["admin"])
        yield application
        _db.session.remove()
        for engine in _db.engines.values():
            engine.dispose()
    # init_app registered an "admin" metadata on the shared db; drop it so the
    # session-wide app (which has no admin bind) can still create/drop tables.
    _db.metadatas.pop("admin", None)


def _add_elevated_org(name):
    with Session(bind=_db.engines["admin"]) as session:
        session.add(Organization(name=name))
        session.commit()


def test_admin_reads_go_through_admin_engine(bound_app):
    _add_elevated_org("Elevated Only")
    client = login_as(bound_app.test_client(), make_admin())

    res = client.get("/api/admin/all-organizations")
    assert res.status_code == 200
    assert [o["name"] for o in res.get_json()] == ["Elevated Only"]
    assert Organization.query.count() == 0


def test_elevated_session_binds_admin_engine(bound_app):
    with elevated_session() as session:
        assert session is not _db.session
        assert session.get_bind() is _db.engines["admin"]


def test_store_error_rolls_back_and_closes(bound_app):
    with patch.object(Session, "rollback", autospec=True, side_effect=Session.rollback) as rollback, \
            patch.object(Session, "close", autospec=True, side_effect=Session.close) as close:
        with pytest.raises(OperationalError):
            with elevated_session() as session:
                session.execute(text("SELECT * FROM no_such_table"))

    assert any(call.args[0] is session for call in rollback.call_args_list)
    assert any(call.args[0] is session for call in close.call_args_list)


def test_admin_store_error_is_reported(bound_app):
    _db.metadata.drop_all(_db.engines["admin"])
    client = login_as(bound_app.test_client(), make_admin())

    res = client.get("/api/admin/all-organizations")
    assert res.status_code == 500
    assert "no such table" in res.get_json()["error"]
