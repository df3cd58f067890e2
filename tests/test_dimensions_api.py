"""Dimension catalog endpoint tests."""

from safety_vitals.models import db as _db
from safety_vitals.models.survey import Dimension

from conftest import login_as, make_admin


def _seed(*rows):
    for code, name in rows:
        _db.session.add(Dimension(code=code, dimension_name=name))
    _db.session.commit()


def test_list_requires_org_or_admin(client):
    assert client.get("/api/dimensions").status_code == 401


def test_list_sorted_by_numeric_prefix(client, org):
    _seed(("CUL", "10. Culture"), ("LEAD", "1. Leadership"), ("COMM", "2. Communication"))
    res = client.get("/api/dimensions", headers={"X-Org-ID": org.id})
    assert res.status_code == 200
    assert [d["code"] for d in res.get_json()] == ["LEAD", "COMM", "CUL"]


def test_create_update_delete(admin_client):
    res = admin_client.post("/api/dimensions", json={
        "code": "PPE", "dimension_name": "4. Protective Equipment", "description": "Gear use",
    })
    assert res.status_code == 201
    assert res.get_json()["code"] == "PPE"

    res = admin_client.put("/api/dimensions/PPE", json={"description": "Gear availability"})
    assert res.status_code == 200
    assert res.get_json()["description"] == "Gear availability"
    assert res.get_json()["dimension_name"] == "4. Protective Equipment"

    assert admin_client.delete("/api/dimensions/PPE").get_json() == {"success": True}
    assert admin_client.delete("/api/dimensions/PPE").status_code == 404


def test_duplicate_code_conflicts(admin_client):
    _seed(("PPE", "4. Protective Equipment"))
    res = admin_client.post("/api/dimensions", json={"code": "PPE", "dimension_name": "dup"})
    assert res.status_code == 409


def test_create_requires_fields(admin_client):
    res = admin_client.post("/api/dimensions", json={"code": "X"})
    assert res.status_code == 400


def test_write_needs_capability(client):
    reader = make_admin(email="reader@safetyvitals.test", capabilities=["surveys.read"])
    login_as(client, reader)
    res = client.post("/api/dimensions", json={"code": "X", "dimension_name": "Y"})
    assert res.status_code == 403


def test_org_caller_cannot_write(client, org):
    res = client.post("/api/dimensions", json={"code": "X", "dimension_name": "Y"},
                      headers={"X-Org-ID": org.id})
    assert res.status_code == 401
