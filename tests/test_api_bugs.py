"""
Bugs API — CRUD, filters, severity, and the resolvedAt rule.

resolvedAt is non-null exactly when status is "closed", whichever route
changed the status (create, PUT, PATCH /status).
"""

import pytest

from studioboard.models import db
from studioboard.models.bug import Bug
from studioboard.models.category import Category


@pytest.fixture()
def category():
    cat = Category(name="QA", color="#ef4444")
    db.session.add(cat)
    db.session.commit()
    return cat


@pytest.fixture()
def bug(project, alice):
    b = Bug(project_id=project.id, title="Crash on load", reported_by=alice.id)
    db.session.add(b)
    db.session.commit()
    return b


def _create(client, headers, project_id, **fields):
    return client.post("/api/bugs", json={"projectId": project_id, "title": "Bug", **fields},
                       headers=headers)


# ═══════════════════════════════════════════════════════════════
# CREATE / READ
# ═══════════════════════════════════════════════════════════════

class TestCreateBug:
    def test_create_with_defaults(self, client, alice, project, auth_headers):
        res = _create(client, auth_headers(alice), project.id)
        assert res.status_code == 201
        body = res.get_json()
        assert body["status"] == "open"
        assert body["severity"] == "major"
        assert body["resolvedAt"] is None
        assert body["reportedBy"] == alice.id
        assert body["reporterName"] == "Alice Artist"
        assert body["stepsToReproduce"] == []

    def test_create_with_category_and_steps(self, client, alice, project, category, auth_headers):
        res = _create(
            client, auth_headers(alice), project.id,
            categoryId=category.id, stepsToReproduce=["open", "click", "open"],
            attachments=["/uploads/images/a.png"], severity="blocker",
        )
        body = res.get_json()
        assert body["categoryName"] == "QA"
        assert body["categoryColor"] == "#ef4444"
        assert body["stepsToReproduce"] == ["open", "click", "open"]
        assert body["attachments"] == ["/uploads/images/a.png"]
        assert body["severity"] == "blocker"

    def test_create_closed_stamps_resolved_at(self, client, alice, project, auth_headers):
        res = _create(client, auth_headers(alice), project.id, status="closed")
        assert res.get_json()["resolvedAt"] is not None

    @pytest.mark.parametrize("fields", [
        {"severity": "cosmetic"},
        {"status": "wontfix"},
        {"categoryId": "missing"},
        {"stepsToReproduce": "do things"},
        {"description": ["a", "b"]},
        {"categoryId": {"id": "missing"}},
    ])
    def test_invalid_payloads(self, client, alice, project, auth_headers, fields):
        res = _create(client, auth_headers(alice), project.id, **fields)
        assert res.status_code == 400
        assert Bug.query.count() == 0

    def test_non_member_cannot_create(self, client, bob, project, auth_headers):
        assert _create(client, auth_headers(bob), project.id).status_code == 403

    def test_get_and_non_member(self, client, alice, bob, bug, auth_headers):
        assert client.get(f"/api/bugs/{bug.id}", headers=auth_headers(alice)).status_code == 200
        assert client.get(f"/api/bugs/{bug.id}", headers=auth_headers(bob)).status_code == 403

    def test_filters(self, client, admin, alice, project, category, auth_headers):
        headers = auth_headers(alice)
        _create(client, headers, project.id, title="A", severity="minor")
        _create(client, headers, project.id, title="B", severity="critical",
                categoryId=category.id)
        _create(client, headers, project.id, title="C", status="testing")

        def titles(query):
            return sorted(b["title"] for b in client.get(f"/api/bugs?{query}",
                                                          headers=headers).get_json())

        assert titles("severity=critical") == ["B"]
        assert titles(f"categoryId={category.id}") == ["B"]
        assert titles("status=testing") == ["C"]
        assert titles(f"projectId={project.id}") == ["A", "B", "C"]

    def test_list_hidden_from_non_members(self, client, bob, bug, auth_headers):
        assert client.get("/api/bugs", headers=auth_headers(bob)).get_json() == []


# ═══════════════════════════════════════════════════════════════
# resolvedAt
# ═══════════════════════════════════════════════════════════════

class TestResolvedAt:
    def test_patch_close_and_reopen(self, client, alice, bug, auth_headers):
        headers = auth_headers(alice)
        res = client.patch(f"/api/bugs/{bug.id}/status", json={"status": "closed"},
                           headers=headers)
        assert res.status_code == 200
        assert res.get_json()["status"] == "closed"
        assert res.get_json()["resolvedAt"] is not None

        res = client.patch(f"/api/bugs/{bug.id}/status", json={"status": "open"},
                           headers=headers)
        assert res.get_json()["resolvedAt"] is None

    def test_put_close_and_reopen(self, client, alice, bug, auth_headers):
        headers = auth_headers(alice)
        res = client.put(f"/api/bugs/{bug.id}", json={"status": "closed"}, headers=headers)
        assert res.get_json()["resolvedAt"] is not None

        res = client.put(f"/api/bugs/{bug.id}", json={"status": "in-progress"}, headers=headers)
        assert res.get_json()["resolvedAt"] is None

    def test_staying_closed_keeps_original_stamp(self, client, alice, bug, auth_headers):
        headers = auth_headers(alice)
        first = client.patch(f"/api/bugs/{bug.id}/status", json={"status": "closed"},
                             headers=headers).get_json()["resolvedAt"]

        again = client.patch(f"/api/bugs/{bug.id}/status", json={"status": "closed"},
                             headers=headers).get_json()["resolvedAt"]
        assert again == first

        res = client.put(f"/api/bugs/{bug.id}", json={"title": "Crash fixed"}, headers=headers)
        assert res.get_json()["resolvedAt"] == first

    def test_invariant_holds_for_every_status(self, client, alice, bug, auth_headers):
        headers = auth_headers(alice)
        for status in ("in-progress", "closed", "testing", "closed", "open"):
            body = client.patch(f"/api/bugs/{bug.id}/status", json={"status": status},
                                headers=headers).get_json()
            assert (body["resolvedAt"] is not None) == (status == "closed")

    def test_invalid_status_leaves_bug_alone(self, client, alice, bug, auth_headers):
        res = client.patch(f"/api/bugs/{bug.id}/status", json={"status": "done"},
                           headers=auth_headers(alice))
        assert res.status_code == 400
        assert db.session.get(Bug, bug.id).status == "open"


# ═══════════════════════════════════════════════════════════════
# SEVERITY / UPDATE / DELETE
# ═══════════════════════════════════════════════════════════════

class TestBugActions:
    def test_set_severity(self, client, alice, bug, auth_headers):
        res = client.patch(f"/api/bugs/{bug.id}/severity", json={"severity": "critical"},
                           headers=auth_headers(alice))
        assert res.get_json() == {"message": "Severity updated", "severity": "critical"}

    def test_set_invalid_severity(self, client, alice, bug, auth_headers):
        res = client.patch(f"/api/bugs/{bug.id}/severity", json={"severity": "meh"},
                           headers=auth_headers(alice))
        assert res.status_code == 400

    def test_clear_category_with_null(self, client, alice, project, category, auth_headers):
        headers = auth_headers(alice)
        bug_id = _create(client, headers, project.id, categoryId=category.id).get_json()["id"]
        res = client.put(f"/api/bugs/{bug_id}", json={"categoryId": None}, headers=headers)
        assert res.get_json()["categoryId"] is None

    def test_deleting_category_keeps_bug(self, client, admin, alice, project, category,
                                         auth_headers):
        bug_id = _create(client, auth_headers(alice), project.id,
                         categoryId=category.id).get_json()["id"]

        res = client.delete(f"/api/categories/{category.id}", headers=auth_headers(admin))
        assert res.status_code == 200

        body = client.get(f"/api/bugs/{bug_id}", headers=auth_headers(alice)).get_json()
        assert body["categoryId"] is None
        assert body["categoryName"] is None

    def test_delete(self, client, alice, bug, auth_headers):
        bug_id = bug.id
        res = client.delete(f"/api/bugs/{bug_id}", headers=auth_headers(alice))
        assert res.get_json() == {"message": "Bug deleted"}
        assert Bug.query.filter_by(id=bug_id).count() == 0

    def test_missing(self, client, admin, auth_headers):
        res = client.delete("/api/bugs/missing", headers=auth_headers(admin))
        assert res.status_code == 404
        assert res.get_json()["error"] == "Bug not found"
