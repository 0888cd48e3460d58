"""
Registration, login and bearer-token checks.
"""

from datetime import datetime, timedelta, timezone

import jwt
import pytest
from sqlalchemy.exc import OperationalError

from cleanstock.config import settings
from cleanstock.errors import AuthError, ConflictError, ValidationError
from cleanstock.models.user import ActivityLog, User, UserRole
from cleanstock.services import auth_service
from conftest import login, register


class TestRegister:
    def test_register_returns_201(self, client):
        resp = register(client)
        assert resp.status_code == 201
        body = resp.json()
        assert body["user"]["email"] == "ana@example.com"
        assert body["user"]["role"] == "operator"
        assert "password" not in body["user"]

    def test_duplicate_email_conflicts(self, client, db_session):
        assert register(client, name="First").status_code == 201
        resp = register(client, name="Second", password="zzz999")
        assert resp.status_code == 400
        assert resp.json()["message"] == "Email already registered"

        users = db_session.query(User).all()
        assert len(users) == 1
        assert users[0].name == "First"
        assert login(client).status_code == 200

    def test_duplicate_email_raises_conflict_error(self, db_session):
        auth_service.register(db_session, "Ana", UserRole.DRIVER, "a@x.com", "abc123")
        with pytest.raises(ConflictError):
            auth_service.register(db_session, "Bia", UserRole.HANDLER, "a@x.com", "abc123")

    @pytest.mark.parametrize("password", ["ab", "abc12", "abc 123", "abc-123", "senhaçã1", ""])
    def test_password_policy_rejects(self, db_session, password):
        with pytest.raises(ValidationError):
            auth_service.register(db_session, "Ana", UserRole.OPERATOR, "a@x.com", password)
        assert db_session.query(User).count() == 0

    @pytest.mark.parametrize("password", ["abc123", "ABCDEF", "123456", "LongerPassword2024"])
    def test_password_policy_accepts(self, db_session, password):
        user = auth_service.register(db_session, "Ana", UserRole.OPERATOR, "a@x.com", password)
        assert user.id

    def test_weak_password_over_http(self, client):
        resp = register(client, password="ab")
        assert resp.status_code == 400
        assert resp.json()["message"] == auth_service.PASSWORD_RULE

    def test_password_over_bcrypt_limit_rejected(self, client, db_session):
        resp = register(client, password="a" * 80)
        assert resp.status_code == 400
        assert resp.json()["message"] == auth_service.PASSWORD_RULE
        assert db_session.query(User).count() == 0

    def test_password_at_bcrypt_limit_accepted(self, client):
        assert register(client, password="a" * 72).status_code == 201
        assert login(client, password="a" * 72).status_code == 200

    def test_unknown_role_is_rejected(self, client):
        resp = register(client, role="admin")
        assert resp.status_code == 400

    def test_password_is_hashed(self, db_session):
        user = auth_service.register(db_session, "Ana", UserRole.OPERATOR, "a@x.com", "abc123")
        assert user.password_hash != "abc123"
        assert auth_service.verify_password("abc123", user.password_hash)


class TestLogin:
    def test_login_returns_token_and_user(self, client):
        register(client)
        resp = login(client)
        assert resp.status_code == 200
        body = resp.json()
        assert body["token"]
        assert set(body["user"]) == {"id", "name", "role", "email"}

    def test_wrong_password_and_unknown_email_look_the_same(self, client):
        register(client)
        wrong_password = login(client, password="wrong1")
        unknown_email = login(client, email="nobody@example.com")
        assert wrong_password.status_code == unknown_email.status_code == 400
        assert wrong_password.json() == unknown_email.json() == {"message": "Invalid credentials"}

    def test_overlong_password_is_a_plain_mismatch(self, client):
        register(client)
        resp = login(client, password="a" * 80)
        assert resp.status_code == 400
        assert resp.json() == {"message": "Invalid credentials"}

    def test_verify_password_rejects_overlong_input(self, db_session):
        user = auth_service.register(db_session, "Ana", UserRole.OPERATOR, "a@x.com", "a" * 72)
        assert auth_service.verify_password("a" * 72, user.password_hash)
        assert not auth_service.verify_password("a" * 73, user.password_hash)
        assert not auth_service.verify_password("ç" * 40, user.password_hash)

    def test_token_carries_user_id_and_email(self, db_session):
        auth_service.register(db_session, "Ana", UserRole.OPERATOR, "a@x.com", "abc123")
        token, user = auth_service.login(db_session, "a@x.com", "abc123")
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=["HS256"])
        assert payload["sub"] == user.id
        assert payload["email"] == "a@x.com"
        lifetime = payload["exp"] - datetime.now(timezone.utc).timestamp()
        assert timedelta(hours=23).total_seconds() < lifetime <= timedelta(hours=24).total_seconds()


class TestTokenVerification:
    def test_missing_token_is_401(self, client):
        resp = client.get("/api/products")
        assert resp.status_code == 401
        assert resp.json() == {"message": "Access denied"}

    def test_garbage_token_is_403(self, client):
        resp = client.get("/api/products", headers={"Authorization": "Bearer not-a-jwt"})
        assert resp.status_code == 403
        assert resp.json() == {"message": "Invalid token"}

    def test_expired_token_is_403(self, client, db_session):
        user = auth_service.register(db_session, "Ana", UserRole.OPERATOR, "a@x.com", "abc123")
        token = jwt.encode(
            {"sub": user.id, "email": user.email, "exp": datetime.now(timezone.utc) - timedelta(minutes=1)},
            settings.SECRET_KEY,
            algorithm="HS256",
        )
        resp = client.get("/api/products", headers={"Authorization": f"Bearer {token}"})
        assert resp.status_code == 403

    def test_token_signed_with_other_key_is_403(self, client, db_session):
        user = auth_service.register(db_session, "Ana", UserRole.OPERATOR, "a@x.com", "abc123")
        token = jwt.encode(
            {"sub": user.id, "exp": datetime.now(timezone.utc) + timedelta(hours=1)},
            "some-other-key",
            algorithm="HS256",
        )
        resp = client.get("/api/dashboard", headers={"Authorization": f"Bearer {token}"})
        assert resp.status_code == 403

    def test_verify_without_token(self, db_session):
        with pytest.raises(AuthError) as exc:
            auth_service.verify(db_session, None)
        assert exc.value.status_code == 401

    @pytest.mark.parametrize("role", ["auxiliary", "operator", "handler", "driver"])
    def test_every_role_can_write(self, client, role):
        register(client, role=role)
        token = login(client).json()["token"]
        resp = client.post(
            "/api/products",
            json={"name": "Sabão", "type": "finished_good", "unit": "un"},
            headers={"Authorization": f"Bearer {token}"},
        )
        assert resp.status_code == 201

    def test_me(self, client, auth_headers):
        resp = client.get("/api/auth/me", headers=auth_headers)
        assert resp.status_code == 200
        assert resp.json()["email"] == "ana@example.com"


class TestActivityLog:
    def test_login_and_register_are_logged(self, client, auth_headers):
        resp = client.get("/api/auth/activity", headers=auth_headers)
        assert resp.status_code == 200
        actions = {entry["action"] for entry in resp.json()}
        assert {"register", "login"} <= actions

    def test_newest_entry_first(self, client, auth_headers):
        entries = client.get("/api/auth/activity", headers=auth_headers).json()
        assert [e["action"] for e in entries] == ["login", "register"]

    def test_store_failure_does_not_raise(self, db_session, monkeypatch):
        user = auth_service.register(db_session, "Ana", UserRole.OPERATOR, "a@x.com", "abc123")

        def failing_commit():
            raise OperationalError("INSERT INTO activity_logs", {}, Exception("disk I/O error"))

        monkeypatch.setattr(db_session, "commit", failing_commit)
        auth_service.log_activity(db_session, user, "login")
        monkeypatch.undo()

        assert db_session.query(ActivityLog).count() == 0
        assert db_session.query(User).count() == 1

    def test_failed_audit_keeps_committed_sale(self, client, auth_headers, product, monkeypatch):
        monkeypatch.setattr(auth_service, "ActivityLog", lambda **kwargs: object())
        resp = client.post(
            "/api/sales", json={"product_id": product["id"], "quantity": 5, "total": "10"}, headers=auth_headers
        )
        assert resp.status_code == 201
        assert resp.json()["quantity"] == 5
        monkeypatch.undo()

        stock = client.get(f"/api/products/{product['id']}", headers=auth_headers).json()["current_stock"]
        assert stock == 95
        assert len(client.get("/api/sales", headers=auth_headers).json()) == 1
