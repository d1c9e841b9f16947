"""
Categories API — teams / services with their own member sets.
"""

from studioboard.models import db
from studioboard.models.category import Category, CategoryMember


def _member_ids(body):
    return {m["id"] for m in body["members"]}


class TestCategories:
    def test_create_and_list(self, client, admin, alice, auth_headers):
        headers = auth_headers(admin)
        client.post("/api/categories", json={"name": "Sound"}, headers=headers)
        res = client.post("/api/categories",
                          json={"name": "Art", "description": "2D/3D", "members": [alice.id]},
                          headers=headers)
        assert res.status_code == 201
        assert _member_ids(res.get_json()) == {alice.id}

        names = [c["name"] for c in client.get("/api/categories", headers=headers).get_json()]
        assert names == ["Art", "Sound"]

    def test_any_user_can_read(self, client, admin, alice, auth_headers):
        cat = Category(name="QA")
        db.session.add(cat)
        db.session.commit()
        assert client.get(f"/api/categories/{cat.id}", headers=auth_headers(alice)).status_code == 200

    def test_read_is_page_gated(self, client, make_user, auth_headers):
        user = make_user(email="tasks-only@studio.com", allowed_pages=["tasks"])
        assert client.get("/api/categories", headers=auth_headers(user)).status_code == 403

    def test_writes_are_admin_only(self, client, alice, auth_headers):
        res = client.post("/api/categories", json={"name": "Rogue"}, headers=auth_headers(alice))
        assert res.status_code == 403

    def test_name_required(self, client, admin, auth_headers):
        assert client.post("/api/categories", json={}, headers=auth_headers(admin)).status_code == 400

    def test_non_string_fields_rejected(self, client, admin, auth_headers):
        headers = auth_headers(admin)
        res = client.post("/api/categories", json={"name": "QA", "color": ["#fff"]}, headers=headers)
        assert res.status_code == 400
        assert Category.query.count() == 0

        cat = Category(name="QA")
        db.session.add(cat)
        db.session.commit()
        res = client.post(f"/api/categories/{cat.id}/members", json={"userId": 42}, headers=headers)
        assert res.status_code == 400
        assert res.get_json()["details"] == {"userId": "int"}

    def test_update_replaces_members(self, client, admin, alice, bob, auth_headers):
        cat = Category(name="QA")
        cat.memberships.append(CategoryMember(user_id=alice.id))
        db.session.add(cat)
        db.session.commit()

        res = client.put(f"/api/categories/{cat.id}", json={"members": [bob.id], "color": "#111"},
                         headers=auth_headers(admin))
        assert res.status_code == 200
        assert _member_ids(res.get_json()) == {bob.id}
        assert res.get_json()["color"] == "#111"

    def test_add_and_remove_member(self, client, admin, bob, auth_headers):
        cat = Category(name="QA")
        db.session.add(cat)
        db.session.commit()
        headers = auth_headers(admin)

        res = client.post(f"/api/categories/{cat.id}/members", json={"userId": bob.id},
                          headers=headers)
        assert res.get_json()["message"] == "Member added"
        res = client.post(f"/api/categories/{cat.id}/members", json={"userId": bob.id},
                          headers=headers)
        assert res.get_json()["message"] == "Already a member"
        assert CategoryMember.query.filter_by(category_id=cat.id).count() == 1

        res = client.delete(f"/api/categories/{cat.id}/members/{bob.id}", headers=headers)
        assert res.status_code == 200
        assert CategoryMember.query.filter_by(category_id=cat.id).count() == 0

    def test_delete_removes_memberships(self, client, admin, alice, auth_headers):
        cat = Category(name="QA")
        cat.memberships.append(CategoryMember(user_id=alice.id))
        db.session.add(cat)
        db.session.commit()
        cat_id = cat.id

        res = client.delete(f"/api/categories/{cat_id}", headers=auth_headers(admin))
        assert res.get_json() == {"message": "Category deleted"}
        assert Category.query.filter_by(id=cat_id).count() == 0
        assert CategoryMember.query.filter_by(category_id=cat_id).count() == 0

    def test_missing(self, client, admin, auth_headers):
        res = client.get("/api/categories/missing", headers=auth_headers(admin))
        assert res.status_code == 404
        assert res.get_json()["error"] == "Category not found"
