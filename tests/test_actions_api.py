"""
Actions and dashboard endpoint tests.

Test blocks:
  1. Organization scoping (X-Org-ID header / admin session / neither)
  2. Action CRUD over HTTP
  3. Comments and evidence
  4. Survey summary and action plan
"""

import pytest

ORG_HEADER = "X-Org-ID"


def _headers(org):
    return {ORG_HEADER: org.id}


def _create(client, survey, org, **fields):
    body = {"dimension": "1. Leadership", "tier": "critical", "title": "Toolbox talks"}
    body.update(fields)
    res = client.post(f"/api/surveys/{survey.id}/actions", json=body, headers=_headers(org))
    assert res.status_code == 201, res.get_json()
    return res.get_json()


# ── 1. Scoping ───────────────────────────────────────────────────────────────


class TestScoping:

    def test_no_org_and_no_admin_returns_401(self, client, survey):
        res = client.get(f"/api/surveys/{survey.id}/actions")
        assert res.status_code == 401

    def test_other_org_sees_404(self, client, survey, org, other_org):
        action = _create(client, survey, org)
        res = client.get(f"/api/actions/{action['id']}", headers=_headers(other_org))
        assert res.status_code == 404
        res = client.get(f"/api/surveys/{survey.id}/actions", headers=_headers(other_org))
        assert res.status_code == 404

    def test_admin_sees_every_org(self, admin_client, survey, org):
        action = _create(admin_client, survey, org)
        res = admin_client.get(f"/api/actions/{action['id']}")
        assert res.status_code == 200


# ── 2. CRUD ──────────────────────────────────────────────────────────────────


class TestActionCrud:

    def test_create_and_list(self, client, survey, org):
        created = _create(client, survey, org, priority="high", target_date="2025-09-01")
        assert created["org_id"] == org.id
        assert created["priority"] == "high"

        res = client.get(f"/api/surveys/{survey.id}/actions", headers=_headers(org))
        assert res.status_code == 200
        assert [a["id"] for a in res.get_json()] == [created["id"]]

    def test_create_validation_error(self, client, survey, org):
        res = client.post(f"/api/surveys/{survey.id}/actions",
                          json={"dimension": "1. Leadership", "tier": "strong"},
                          headers=_headers(org))
        assert res.status_code == 400
        assert "title" in res.get_json()["details"]

    def test_admin_create_records_created_by(self, admin_client, admin, survey, org):
        created = _create(admin_client, survey, org)
        assert created["created_by"] == admin.id

    def test_patch_syncs_completion(self, client, survey, org):
        action = _create(client, survey, org)
        res = client.patch(f"/api/actions/{action['id']}",
                           json={"workflow_stage": "done"}, headers=_headers(org))
        assert res.status_code == 200
        assert res.get_json()["is_completed"] is True

    def test_patch_requires_json_content_type(self, client, survey, org):
        action = _create(client, survey, org)
        res = client.patch(f"/api/actions/{action['id']}", data="title=x",
                           content_type="text/plain",
                           headers=_headers(org))
        assert res.status_code == 415

    def test_delete_twice(self, client, survey, org):
        action = _create(client, survey, org)
        first = client.delete(f"/api/actions/{action['id']}", headers=_headers(org))
        second = client.delete(f"/api/actions/{action['id']}", headers=_headers(org))
        assert first.get_json() == {"success": True, "deleted": True}
        assert second.status_code == 200
        assert second.get_json() == {"success": True, "deleted": False}


# ── 3. Comments / evidence ───────────────────────────────────────────────────


class TestThreads:

    def test_comment_newest_first(self, client, survey, org):
        action = _create(client, survey, org)
        url = f"/api/actions/{action['id']}/comments"
        client.post(url, json={"content": "Scheduled", "user_id": "u1", "user_name": "Ann"},
                    headers=_headers(org))
        res = client.post(url, json={"content": "Done on site A", "user_id": "u2",
                                     "user_name": "Bob"}, headers=_headers(org))
        assert res.status_code == 201
        assert [c["content"] for c in res.get_json()["comments"]] == ["Done on site A", "Scheduled"]

    def test_comment_defaults_to_admin_identity(self, admin_client, admin, survey, org):
        action = _create(admin_client, survey, org)
        res = admin_client.post(f"/api/actions/{action['id']}/comments",
                                json={"content": "Reviewed"})
        comment = res.get_json()["comments"][0]
        assert comment["user_id"] == admin.id
        assert comment["user_name"] == admin.full_name

    def test_comment_without_author_rejected(self, client, survey, org):
        action = _create(client, survey, org)
        res = client.post(f"/api/actions/{action['id']}/comments",
                          json={"content": "anonymous"}, headers=_headers(org))
        assert res.status_code == 400

    def test_evidence_appended(self, client, survey, org):
        action = _create(client, survey, org)
        url = f"/api/actions/{action['id']}/evidence"
        client.post(url, json={"url": "https://files.example/1.jpg"}, headers=_headers(org))
        res = client.post(url, json={"url": "https://files.example/2.jpg"}, headers=_headers(org))
        assert res.status_code == 201
        assert res.get_json()["evidence_urls"] == [
            "https://files.example/1.jpg", "https://files.example/2.jpg",
        ]

    def test_evidence_requires_url(self, client, survey, org):
        action = _create(client, survey, org)
        res = client.post(f"/api/actions/{action['id']}/evidence", json={},
                          headers=_headers(org))
        assert res.status_code == 400


# ── 4. Dashboard ─────────────────────────────────────────────────────────────


class TestDashboard:

    def test_summary(self, client, survey, org):
        res = client.get(f"/api/surveys/{survey.id}/summary", headers=_headers(org))
        assert res.status_code == 200
        data = res.get_json()
        assert set(data) == {"survey", "stats", "classification", "summary", "action_plan"}

    @pytest.mark.parametrize("value", ["abc", "-1", "5.5"])
    def test_summary_rejects_bad_threshold(self, client, survey, org, value):
        res = client.get(f"/api/surveys/{survey.id}/summary?threshold={value}",
                         headers=_headers(org))
        assert res.status_code == 400

    def test_summary_unknown_survey(self, client, org):
        res = client.get("/api/surveys/nope/summary", headers=_headers(org))
        assert res.status_code == 404

    def test_action_plan(self, client, survey, org):
        low = _create(client, survey, org, priority="low")
        high = _create(client, survey, org, priority="high")
        done = _create(client, survey, org, workflow_stage="done")

        res = client.get(f"/api/surveys/{survey.id}/action-plan", headers=_headers(org))
        assert res.status_code == 200
        data = res.get_json()
        assert [a["id"] for a in data["active"]] == [high["id"], low["id"]]
        assert [a["id"] for a in data["completed"]] == [done["id"]]
