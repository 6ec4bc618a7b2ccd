"""Integration tests for profile management and admin user operations."""
from blogapi.models import User
from blogapi.services.sessions import SessionRegistry

from conftest import auth_headers, login, register


class TestProfile:
    def test_get_profile(self, client, regular_user):
        resp = client.get("/api/users/profile", headers=regular_user["headers"])
        assert resp.status_code == 200
        body = resp.json()
        assert body["username"] == "ana"
        assert body["is_blocked"] is False

    def test_update_profile_fields(self, client, regular_user):
        resp = client.put(
            "/api/users/profile",
            headers=regular_user["headers"],
            json={"username": "ana_maria", "password": "newpass1"},
        )
        assert resp.status_code == 200
        assert resp.json()["username"] == "ana_maria"
        assert login(client, "ana@x.com", "newpass1")

    def test_update_profile_rejects_taken_email(self, client, regular_user):
        register(client, "bob", "bob@x.com")
        resp = client.put(
            "/api/users/profile",
            headers=regular_user["headers"],
            json={"email": "bob@x.com"},
        )
        assert resp.status_code == 409

    def test_update_profile_strips_username(self, client, regular_user):
        resp = client.put(
            "/api/users/profile",
            headers=regular_user["headers"],
            json={"username": "  ana_maria  "},
        )
        assert resp.status_code == 200
        assert resp.json()["username"] == "ana_maria"

    def test_padded_username_still_conflicts(self, client, regular_user):
        register(client, "bob", "bob@x.com")
        resp = client.put(
            "/api/users/profile",
            headers=regular_user["headers"],
            json={"username": " bob "},
        )
        assert resp.status_code == 409

    def test_update_profile_rejects_whitespace_username(self, client, regular_user):
        resp = client.put(
            "/api/users/profile",
            headers=regular_user["headers"],
            json={"username": "     "},
        )
        assert resp.status_code == 400

    def test_update_profile_keeps_own_email(self, client, regular_user):
        resp = client.put(
            "/api/users/profile",
            headers=regular_user["headers"],
            json={"email": "ana@x.com"},
        )
        assert resp.status_code == 200

    def test_liked_items_listing(self, client, regular_user, published_post):
        client.put(f"/api/posts/{published_post['id']}/like", headers=regular_user["headers"])
        resp = client.get("/api/users/profile/likes", headers=regular_user["headers"])
        assert resp.status_code == 200
        assert resp.json()["data"] == [{"item_id": published_post["id"], "item_type": "Post"}]


class TestAdminUsers:
    def test_admin_lists_users(self, client, admin_user, regular_user):
        resp = client.get("/api/users", headers=admin_user["headers"])
        assert resp.status_code == 200
        usernames = {u["username"] for u in resp.json()}
        assert usernames == {"admin", "ana"}

    def test_regular_user_cannot_list_users(self, client, regular_user):
        resp = client.get("/api/users", headers=regular_user["headers"])
        assert resp.status_code == 403
        assert resp.json()["code"] == "forbidden"

    def test_admin_deletes_user(self, client, db, admin_user, regular_user):
        resp = client.delete(f"/api/users/{regular_user['id']}", headers=admin_user["headers"])
        assert resp.status_code == 200
        assert db.query(User).filter(User.id == regular_user["id"]).first() is None
        assert SessionRegistry(db).count(regular_user["id"]) == 0

    def test_deleting_user_clears_their_likes(self, client, admin_user, regular_user, published_post):
        client.put(f"/api/posts/{published_post['id']}/like", headers=regular_user["headers"])
        client.delete(f"/api/users/{regular_user['id']}", headers=admin_user["headers"])
        post = client.get(f"/api/posts/{published_post['id']}").json()
        assert post["num_likes"] == 0
        assert post["likes"] == []

    def test_admin_cannot_delete_admin_or_self(self, client, admin_user):
        resp = client.delete(f"/api/users/{admin_user['id']}", headers=admin_user["headers"])
        assert resp.status_code == 400

    def test_delete_unknown_user_is_not_found(self, client, admin_user):
        resp = client.delete("/api/users/does-not-exist", headers=admin_user["headers"])
        assert resp.status_code == 404


class TestBlocking:
    def test_block_revokes_existing_sessions(self, client, db, admin_user, regular_user):
        assert client.get("/api/users/profile", headers=regular_user["headers"]).status_code == 200

        resp = client.put(f"/api/users/{regular_user['id']}/block", headers=admin_user["headers"])
        assert resp.status_code == 200
        assert resp.json()["is_blocked"] is True
        assert SessionRegistry(db).count(regular_user["id"]) == 0

        resp = client.get("/api/users/profile", headers=regular_user["headers"])
        assert resp.status_code == 401

    def test_blocked_user_cannot_login(self, client, admin_user, regular_user):
        client.put(f"/api/users/{regular_user['id']}/block", headers=admin_user["headers"])
        resp = client.post("/api/auth/login", json={"email": "ana@x.com", "password": "pw1234"})
        assert resp.status_code == 403
        assert resp.json()["code"] == "account_blocked"

    def test_blocked_user_with_active_token_is_rejected(self, client, db, admin_user, regular_user):
        # Flag set without going through the endpoint, so the token is still allow-listed
        user = db.query(User).filter(User.id == regular_user["id"]).first()
        user.is_blocked = True
        db.commit()
        resp = client.get("/api/users/profile", headers=regular_user["headers"])
        assert resp.status_code == 403

    def test_unblock_allows_login_again(self, client, admin_user, regular_user):
        client.put(f"/api/users/{regular_user['id']}/block", headers=admin_user["headers"])
        resp = client.put(f"/api/users/{regular_user['id']}/block", headers=admin_user["headers"])
        assert resp.json()["is_blocked"] is False
        token = login(client, "ana@x.com")
        assert client.get("/api/users/profile", headers=auth_headers(token)).status_code == 200

    def test_admin_cannot_be_blocked(self, client, admin_user):
        resp = client.put(f"/api/users/{admin_user['id']}/block", headers=admin_user["headers"])
        assert resp.status_code == 400

    def test_regular_user_cannot_block(self, client, regular_user):
        resp = client.put(f"/api/users/{regular_user['id']}/block", headers=regular_user["headers"])
        assert resp.status_code == 403
