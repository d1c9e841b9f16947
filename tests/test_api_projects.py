"""
Projects API — CRUD, membership and cascade delete.

Tests cover:
  - list scoping (admin sees all, members see theirs)
  - creator is always a member; members list replaces as given
  - admin-only writes
  - delete removes tasks, bugs, documents, events, assets and memberships
"""

import pytest

from studioboard.models import db
from studioboard.models.bug import Bug
from studioboard.models.project import Asset, CalendarEvent, Document, Project, ProjectMember
from studioboard.models.task import Task, TaskAssignee


def _member_ids(body):
    return {m["id"] for m in body["members"]}


# ═══════════════════════════════════════════════════════════════
# LIST / GET
# ═══════════════════════════════════════════════════════════════

class TestReadProjects:
    def test_admin_sees_every_project(self, client, admin, bob, project, auth_headers):
        other = Project(name="Sunrise", created_by=bob.id)
        db.session.add(other)
        db.session.commit()

        res = client.get("/api/projects", headers=auth_headers(admin))
        assert res.status_code == 200
        assert {p["name"] for p in res.get_json()} == {"Moonlight", "Sunrise"}

    def test_member_sees_only_own(self, client, alice, bob, project, auth_headers):
        assert [p["id"] for p in client.get("/api/projects", headers=auth_headers(alice)).get_json()] \
            == [project.id]
        assert client.get("/api/projects", headers=auth_headers(bob)).get_json() == []

    def test_get_includes_members_and_creator(self, client, admin, alice, project, auth_headers):
        res = client.get(f"/api/projects/{project.id}", headers=auth_headers(alice))
        assert res.status_code == 200
        body = res.get_json()
        assert body["creatorName"] == "Ada Admin"
        assert _member_ids(body) == {admin.id, alice.id}

    def test_get_non_member(self, client, bob, project, auth_headers):
        res = client.get(f"/api/projects/{project.id}", headers=auth_headers(bob))
        assert res.status_code == 403
        assert res.get_json()["error"] == "You do not have access to this project"


# ═══════════════════════════════════════════════════════════════
# CREATE / UPDATE
# ═══════════════════════════════════════════════════════════════

class TestWriteProjects:
    def test_create_adds_creator_as_member(self, client, admin, auth_headers):
        res = client.post("/api/projects", json={"name": "Solo"}, headers=auth_headers(admin))
        assert res.status_code == 201
        body = res.get_json()
        assert _member_ids(body) == {admin.id}
        assert body["status"] == "active"
        assert body["startDate"] is not None
        assert body["createdBy"] == admin.id

    def test_create_with_members(self, client, admin, alice, bob, auth_headers):
        res = client.post(
            "/api/projects",
            json={"name": "Team", "members": [alice.id, bob.id, alice.id]},
            headers=auth_headers(admin),
        )
        assert res.status_code == 201
        assert _member_ids(res.get_json()) == {admin.id, alice.id, bob.id}

    def test_create_unknown_member(self, client, admin, auth_headers):
        res = client.post(
            "/api/projects", json={"name": "Ghosts", "members": ["nobody"]},
            headers=auth_headers(admin),
        )
        assert res.status_code == 400
        assert Project.query.filter_by(name="Ghosts").count() == 0

    def test_create_requires_name(self, client, admin, auth_headers):
        assert client.post("/api/projects", json={}, headers=auth_headers(admin)).status_code == 400

    def test_create_rejects_bad_status(self, client, admin, auth_headers):
        res = client.post("/api/projects", json={"name": "X", "status": "archived"},
                          headers=auth_headers(admin))
        assert res.status_code == 400

    def test_create_rejects_end_before_start(self, client, admin, auth_headers):
        res = client.post(
            "/api/projects",
            json={"name": "X", "startDate": "2026-05-01", "endDate": "2026-04-01"},
            headers=auth_headers(admin),
        )
        assert res.status_code == 400

    def test_non_admin_cannot_create(self, client, alice, auth_headers):
        res = client.post("/api/projects", json={"name": "Mine"}, headers=auth_headers(alice))
        assert res.status_code == 403

    def test_update_fields(self, client, admin, project, auth_headers):
        res = client.put(
            f"/api/projects/{project.id}",
            json={"name": "Moonlight II", "status": "on-hold", "endDate": "2027-01-31T00:00:00Z"},
            headers=auth_headers(admin),
        )
        assert res.status_code == 200
        body = res.get_json()
        assert body["name"] == "Moonlight II"
        assert body["status"] == "on-hold"
        assert body["endDate"].startswith("2027-01-31")

    def test_update_members_replaces_set(self, client, admin, alice, bob, project, auth_headers):
        res = client.put(
            f"/api/projects/{project.id}",
            json={"members": [admin.id, bob.id]},
            headers=auth_headers(admin),
        )
        assert res.status_code == 200
        assert _member_ids(res.get_json()) == {admin.id, bob.id}
        assert ProjectMember.query.filter_by(project_id=project.id).count() == 2

    def test_update_without_members_keeps_them(self, client, admin, alice, project, auth_headers):
        res = client.put(f"/api/projects/{project.id}", json={"description": "dark"},
                         headers=auth_headers(admin))
        assert _member_ids(res.get_json()) == {admin.id, alice.id}

    @pytest.mark.parametrize("field", ["description", "color", "coverImage", "name"])
    def test_update_rejects_non_string_text(self, client, admin, project, auth_headers, field):
        res = client.put(
            f"/api/projects/{project.id}",
            json={"status": "completed", field: {"x": 1}},
            headers=auth_headers(admin),
        )
        assert res.status_code == 400
        assert res.get_json()["details"] == {field: "dict"}
        assert db.session.get(Project, project.id).status == "active"

    def test_create_rejects_list_description(self, client, admin, auth_headers):
        res = client.post("/api/projects", json={"name": "Nova", "description": ["a"]},
                          headers=auth_headers(admin))
        assert res.status_code == 400
        assert Project.query.filter_by(name="Nova").count() == 0

    def test_update_missing(self, client, admin, auth_headers):
        res = client.put("/api/projects/missing", json={"name": "x"}, headers=auth_headers(admin))
        assert res.status_code == 404


# ═══════════════════════════════════════════════════════════════
# MEMBERS
# ═══════════════════════════════════════════════════════════════

class TestMembers:
    def test_add_member(self, client, admin, bob, project, auth_headers):
        res = client.post(f"/api/projects/{project.id}/members", json={"userId": bob.id},
                          headers=auth_headers(admin))
        assert res.status_code == 200
        assert res.get_json()["message"] == "Member added"
        assert ProjectMember.query.filter_by(project_id=project.id, user_id=bob.id).count() == 1

    def test_add_existing_member_is_idempotent(self, client, admin, alice, project, auth_headers):
        res = client.post(f"/api/projects/{project.id}/members", json={"userId": alice.id},
                          headers=auth_headers(admin))
        assert res.status_code == 200
        assert res.get_json()["message"] == "Already a member"
        assert ProjectMember.query.filter_by(project_id=project.id).count() == 2

    def test_add_member_requires_user_id(self, client, admin, project, auth_headers):
        res = client.post(f"/api/projects/{project.id}/members", json={},
                          headers=auth_headers(admin))
        assert res.status_code == 400

    def test_add_member_rejects_non_string_id(self, client, admin, bob, project, auth_headers):
        res = client.post(f"/api/projects/{project.id}/members", json={"userId": {"id": bob.id}},
                          headers=auth_headers(admin))
        assert res.status_code == 400
        assert res.get_json()["details"] == {"userId": "dict"}

    def test_add_unknown_user(self, client, admin, project, auth_headers):
        res = client.post(f"/api/projects/{project.id}/members", json={"userId": "ghost"},
                          headers=auth_headers(admin))
        assert res.status_code == 400

    def test_remove_member(self, client, admin, alice, project, auth_headers):
        res = client.delete(f"/api/projects/{project.id}/members/{alice.id}",
                            headers=auth_headers(admin))
        assert res.status_code == 200
        assert ProjectMember.query.filter_by(project_id=project.id, user_id=alice.id).count() == 0

        # Removal takes effect on the next request
        res = client.get(f"/api/projects/{project.id}", headers=auth_headers(alice))
        assert res.status_code == 403

    def test_remove_non_member_is_ok(self, client, admin, bob, project, auth_headers):
        res = client.delete(f"/api/projects/{project.id}/members/{bob.id}",
                            headers=auth_headers(admin))
        assert res.status_code == 200

    def test_member_routes_are_admin_only(self, client, alice, bob, project, auth_headers):
        res = client.post(f"/api/projects/{project.id}/members", json={"userId": bob.id},
                          headers=auth_headers(alice))
        assert res.status_code == 403


# ═══════════════════════════════════════════════════════════════
# DELETE (cascade)
# ═══════════════════════════════════════════════════════════════

class TestDeleteProject:
    def test_delete_cascades_to_children(self, client, admin, alice, project, auth_headers):
        pid = project.id
        task = Task(project_id=pid, title="Rig", created_by=admin.id)
        task.assignments.append(TaskAssignee(user_id=alice.id))
        db.session.add_all([
            task,
            Bug(project_id=pid, title="Crash", reported_by=alice.id),
            Document(project_id=pid, title="Brief", created_by=admin.id),
            CalendarEvent(
                project_id=pid, title="Kickoff", user_id=admin.id,
                start_date=project.start_date, end_date=project.start_date,
            ),
            Asset(project_id=pid, name="Hero sprite"),
        ])
        db.session.commit()

        res = client.delete(f"/api/projects/{pid}", headers=auth_headers(admin))
        assert res.status_code == 200
        assert res.get_json() == {"message": "Project deleted"}

        assert Project.query.filter_by(id=pid).count() == 0
        for model in (Task, Bug, Document, CalendarEvent, Asset, ProjectMember):
            assert model.query.filter_by(project_id=pid).count() == 0, model.__name__
        assert TaskAssignee.query.count() == 0

    def test_delete_leaves_other_projects(self, client, admin, project, auth_headers):
        other = Project(name="Sunrise", created_by=admin.id)
        db.session.add(other)
        db.session.flush()
        db.session.add(Task(project_id=other.id, title="Keep me", created_by=admin.id))
        db.session.commit()

        client.delete(f"/api/projects/{project.id}", headers=auth_headers(admin))
        assert Task.query.filter_by(project_id=other.id).count() == 1

    def test_delete_missing(self, client, admin, auth_headers):
        assert client.delete("/api/projects/missing", headers=auth_headers(admin)).status_code == 404

    def test_non_admin_cannot_delete(self, client, alice, project, auth_headers):
        assert client.delete(f"/api/projects/{project.id}",
                             headers=auth_headers(alice)).status_code == 403
