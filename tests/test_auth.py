from datetime import timedelta

from cartify.core.auth import create_access_token, decode_access_token
from cartify.repositories.user_repo import UserRepository


# ============================================================================
# Register / login
# ============================================================================

class TestRegisterLogin:

    def test_register_returns_token_and_profile(self, client):
        resp = client.post(
            "/api/auth/register",
            json={"name": "alice", "email": "Alice@Example.com", "password": "pw"},
        )
        assert resp.status_code == 201
        body = resp.json()
        assert body["user"]["email"] == "alice@example.com"
        assert body["user"]["userId"].isdigit()
        assert decode_access_token(body["token"])["userId"] == body["user"]["userId"]

    def test_duplicate_email(self, client, register):
        register(name="alice", email="alice@example.com")
        resp = client.post(
            "/api/auth/register",
            json={"name": "other", "email": "alice@example.com", "password": "pw"},
        )
        assert resp.status_code == 400
        assert resp.json()["message"] == "User already exists"

    def test_duplicate_name(self, client, register):
        register(name="alice")
        resp = client.post(
            "/api/auth/register",
            json={"name": "alice", "email": "new@example.com", "password": "pw"},
        )
        assert resp.status_code == 400
        assert resp.json()["message"] == "Username already taken"

    def test_invalid_email_rejected(self, client):
        resp = client.post(
            "/api/auth/register",
            json={"name": "x", "email": "not-an-email", "password": "pw"},
        )
        assert resp.status_code == 400
        assert resp.json()["kind"] == "validation"

    def test_login(self, client, register):
        user = register(name="bob", password="Secret@123")
        resp = client.post(
            "/api/auth/login",
            json={"email": "BOB@example.com", "password": "Secret@123"},
        )
        assert resp.status_code == 200
        assert resp.json()["user"]["userId"] == user["user"]["userId"]

    def test_login_errors(self, client, register):
        register(name="bob", password="Secret@123")
        unknown = client.post(
            "/api/auth/login", json={"email": "nobody@example.com", "password": "x"}
        )
        wrong = client.post(
            "/api/auth/login", json={"email": "bob@example.com", "password": "x"}
        )
        assert unknown.json()["message"] == "Invalid Email"
        assert wrong.json()["message"] == "Password is wrong"
        assert unknown.status_code == wrong.status_code == 400

    def test_change_password(self, client, register):
        register(name="carol", password="old")
        bad = client.post(
            "/api/auth/change-password",
            json={"email": "carol@example.com", "currentPassword": "nope", "newPassword": "new"},
        )
        assert bad.status_code == 400
        assert bad.json()["message"] == "Current password is incorrect"

        ok = client.post(
            "/api/auth/change-password",
            json={"email": "carol@example.com", "currentPassword": "old", "newPassword": "new"},
        )
        assert ok.json()["message"] == "Password updated successfully"

        old = client.post("/api/auth/login", json={"email": "carol@example.com", "password": "old"})
        new = client.post("/api/auth/login", json={"email": "carol@example.com", "password": "new"})
        assert old.status_code == 400
        assert new.status_code == 200

    def test_me(self, client, register):
        user = register(name="dave")
        resp = client.get("/api/auth/me", headers=user["headers"])
        assert resp.status_code == 200
        assert resp.json() == user["user"]

    def test_expired_token(self, client, register):
        user = register()
        token = create_access_token(
            user_id=user["user"]["userId"], expires_delta=timedelta(seconds=-1)
        )
        resp = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert resp.status_code == 401
        assert resp.json()["message"] == "Invalid or expired token"


# ============================================================================
# Admin
# ============================================================================

class TestAdmin:

    def test_builtin_admin_login(self, client):
        resp = client.post(
            "/api/admin/login",
            json={"email": "admin@cartify.com", "password": "Admin@2001"},
        )
        body = resp.json()
        assert body["isAdmin"] is True
        claims = decode_access_token(body["token"])
        assert claims["isAdmin"] is True
        assert "userId" not in claims

    def test_regular_user_admin_login_is_not_admin(self, client, register):
        register(name="erin", password="pw")
        resp = client.post("/api/admin/login", json={"email": "erin@example.com", "password": "pw"})
        assert resp.status_code == 200
        assert resp.json()["isAdmin"] is False

    def test_list_users_hides_password_hash(self, client, register, admin_headers):
        register(name="frank")
        resp = client.get("/api/admin/users", headers=admin_headers)
        assert resp.status_code == 200
        users = resp.json()
        assert [u["name"] for u in users] == ["frank"]
        assert "passwordHash" not in users[0]
        assert "password_hash" not in users[0]

    def test_non_admin_forbidden(self, client, register):
        headers = register()["headers"]
        resp = client.get("/api/admin/users", headers=headers)
        assert resp.status_code == 403
        assert resp.json()["kind"] == "forbidden"

    def test_no_token_unauthorized(self, client):
        assert client.get("/api/admin/users").status_code == 401

    def test_toggle_product_visibility(self, client, make_product, admin_headers):
        product = make_product()
        resp = client.patch(
            f"/api/admin/products/{product.id}",
            json={"isActive": False},
            headers=admin_headers,
        )
        assert resp.status_code == 200
        assert resp.json()["isActive"] is False

        listed = client.get("/api/admin/products", headers=admin_headers).json()
        assert listed[0]["isActive"] is False

    def test_user_repository_lists_and_saves_cart(self, session, register):
        repo = UserRepository()
        user_id = register(name="gina")["user"]["userId"]

        users = repo.list_all(session)
        assert [u.user_id for u in users] == [user_id]

        repo.save_cart(session, users[0], [{"productId": 1, "quantity": 2}])
        assert repo.get_by_user_id(session, user_id).cart == [{"productId": 1, "quantity": 2}]
