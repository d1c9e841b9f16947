"""
Users API — account CRUD.

  GET/POST /api/users, GET/PUT/DELETE /api/users/<id>
"""

import pytest

from studioboard.models import db
from studioboard.models.notification import Notification
from studioboard.models.project import ProjectMember
from studioboard.models.user import User
from studioboard.utils.crypto import verify_password


def _new_user_payload(**overrides):
    payload = {
        "email": "Carol@Studio.com",
        "name": "Carol Coder",
        "password": "initial-pw",
    }
    payload.update(overrides)
    return payload


# ═══════════════════════════════════════════════════════════════
# READ
# ═══════════════════════════════════════════════════════════════

class TestListUsers:
    def test_list_sorted_by_name(self, client, admin, alice, bob, auth_headers):
        res = client.get("/api/users", headers=auth_headers(bob))
        assert res.status_code == 200
        names = [u["name"] for u in res.get_json()]
        assert names == sorted(names)
        assert len(names) == 3

    def test_list_never_exposes_hash(self, client, alice, auth_headers):
        for user in client.get("/api/users", headers=auth_headers(alice)).get_json():
            assert "password" not in user

    def test_get_one(self, client, alice, bob, auth_headers):
        res = client.get(f"/api/users/{bob.id}", headers=auth_headers(alice))
        assert res.status_code == 200
        assert res.get_json()["email"] == "bob@studio.com"

    def test_get_missing(self, client, alice, auth_headers):
        res = client.get("/api/users/nope", headers=auth_headers(alice))
        assert res.status_code == 404
        assert res.get_json()["error"] == "User not found"

    def test_requires_token(self, client):
        assert client.get("/api/users").status_code == 401


# ═══════════════════════════════════════════════════════════════
# CREATE
# ═══════════════════════════════════════════════════════════════

class TestCreateUser:
    def test_admin_creates_user(self, client, admin, auth_headers):
        res = client.post("/api/users", json=_new_user_payload(), headers=auth_headers(admin))
        assert res.status_code == 201
        body = res.get_json()
        assert body["email"] == "carol@studio.com"
        assert body["role"] == "user"
        assert body["mustChangePassword"] is True
        assert body["allowedPages"] == []

        user = db.session.get(User, body["id"])
        assert verify_password("initial-pw", user.password_hash)

    def test_create_with_pages_and_role(self, client, admin, auth_headers):
        res = client.post(
            "/api/users",
            json=_new_user_payload(role="admin", allowedPages=["tasks", "bugs"]),
            headers=auth_headers(admin),
        )
        assert res.status_code == 201
        assert res.get_json()["role"] == "admin"
        assert res.get_json()["allowedPages"] == ["tasks", "bugs"]

    def test_duplicate_email_case_insensitive(self, client, admin, alice, auth_headers):
        res = client.post(
            "/api/users",
            json=_new_user_payload(email="ALICE@studio.com"),
            headers=auth_headers(admin),
        )
        assert res.status_code == 400
        assert res.get_json()["error"] == "Email already in use"

    @pytest.mark.parametrize("overrides", [
        {"email": ""},
        {"name": ""},
        {"password": None},
        {"password": "123"},
        {"email": "not-an-email"},
        {"role": "superuser"},
        {"allowedPages": ["nowhere"]},
        {"color": {"hex": "#fff"}},
    ])
    def test_invalid_payloads(self, client, admin, auth_headers, overrides):
        res = client.post(
            "/api/users", json=_new_user_payload(**overrides), headers=auth_headers(admin),
        )
        assert res.status_code == 400
        assert User.query.filter_by(email="carol@studio.com").count() == 0

    def test_non_admin_forbidden(self, client, alice, auth_headers):
        res = client.post("/api/users", json=_new_user_payload(), headers=auth_headers(alice))
        assert res.status_code == 403


# ═══════════════════════════════════════════════════════════════
# UPDATE
# ═══════════════════════════════════════════════════════════════

class TestUpdateUser:
    def test_self_updates_name_and_color(self, client, alice, auth_headers):
        res = client.put(
            f"/api/users/{alice.id}",
            json={"name": "Alice A.", "color": "#000000"},
            headers=auth_headers(alice),
        )
        assert res.status_code == 200
        assert res.get_json()["name"] == "Alice A."
        assert res.get_json()["color"] == "#000000"

    def test_non_string_profile_fields_rejected(self, client, admin, alice, auth_headers):
        res = client.put(f"/api/users/{alice.id}", json={"name": {"first": "Al"}},
                         headers=auth_headers(alice))
        assert res.status_code == 400
        res = client.put(f"/api/users/{alice.id}", json={"avatar": ["a.png"]},
                         headers=auth_headers(admin))
        assert res.status_code == 400
        res = client.put(f"/api/users/{alice.id}", json={"email": 12345},
                         headers=auth_headers(admin))
        assert res.status_code == 400
        assert db.session.get(User, alice.id).email == "alice@studio.com"

    def test_self_cannot_escalate(self, client, alice, auth_headers):
        res = client.put(
            f"/api/users/{alice.id}",
            json={"role": "admin", "email": "boss@studio.com", "allowedPages": ["tasks"]},
            headers=auth_headers(alice),
        )
        assert res.status_code == 200
        body = res.get_json()
        assert body["role"] == "user"
        assert body["email"] == "alice@studio.com"
        assert body["allowedPages"] == []

    def test_user_cannot_edit_someone_else(self, client, alice, bob, auth_headers):
        res = client.put(f"/api/users/{bob.id}", json={"name": "Hacked"},
                         headers=auth_headers(alice))
        assert res.status_code == 403
        assert db.session.get(User, bob.id).name == "Bob Builder"

    def test_admin_updates_everything(self, client, admin, alice, auth_headers):
        res = client.put(
            f"/api/users/{alice.id}",
            json={"role": "admin", "email": "alice2@studio.com", "allowedPages": ["bugs"]},
            headers=auth_headers(admin),
        )
        assert res.status_code == 200
        body = res.get_json()
        assert body["role"] == "admin"
        assert body["email"] == "alice2@studio.com"
        assert body["allowedPages"] == ["bugs"]

    def test_admin_password_reset_rearms_forced_change(self, client, admin, alice, auth_headers):
        res = client.put(f"/api/users/{alice.id}", json={"password": "reset-pw"},
                         headers=auth_headers(admin))
        assert res.status_code == 200
        assert res.get_json()["mustChangePassword"] is True
        user = db.session.get(User, alice.id)
        assert verify_password("reset-pw", user.password_hash)

    def test_admin_email_collision(self, client, admin, alice, bob, auth_headers):
        res = client.put(f"/api/users/{alice.id}", json={"email": "bob@studio.com"},
                         headers=auth_headers(admin))
        assert res.status_code == 400

    def test_keeping_own_email_is_fine(self, client, admin, alice, auth_headers):
        res = client.put(f"/api/users/{alice.id}", json={"email": "alice@studio.com"},
                         headers=auth_headers(admin))
        assert res.status_code == 200

    def test_update_missing_user(self, client, admin, auth_headers):
        res = client.put("/api/users/missing", json={"name": "x"}, headers=auth_headers(admin))
        assert res.status_code == 404


# ═══════════════════════════════════════════════════════════════
# DELETE
# ═══════════════════════════════════════════════════════════════

class TestDeleteUser:
    def test_admin_deletes_user(self, client, admin, bob, auth_headers):
        bob_id = bob.id
        res = client.delete(f"/api/users/{bob_id}", headers=auth_headers(admin))
        assert res.status_code == 200
        assert res.get_json() == {"message": "User deleted"}
        assert User.query.filter_by(id=bob_id).count() == 0

    def test_admin_cannot_delete_self(self, client, admin, auth_headers):
        res = client.delete(f"/api/users/{admin.id}", headers=auth_headers(admin))
        assert res.status_code == 400
        assert User.query.filter_by(id=admin.id).count() == 1

    def test_non_admin_forbidden(self, client, alice, bob, auth_headers):
        res = client.delete(f"/api/users/{bob.id}", headers=auth_headers(alice))
        assert res.status_code == 403

    def test_delete_missing(self, client, admin, auth_headers):
        assert client.delete("/api/users/missing", headers=auth_headers(admin)).status_code == 404

    def test_memberships_and_notifications_go_with_user(
        self, client, admin, alice, project, auth_headers,
    ):
        alice_id = alice.id
        db.session.add(Notification(user_id=alice_id, type="info", title="Hi"))
        db.session.commit()

        res = client.delete(f"/api/users/{alice_id}", headers=auth_headers(admin))
        assert res.status_code == 200
        assert ProjectMember.query.filter_by(user_id=alice_id).count() == 0
        assert Notification.query.filter_by(user_id=alice_id).count() == 0
