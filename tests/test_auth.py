import pytest

from portal import create_app
from portal.config import TestConfig


def test_login_returns_user_without_password(register, client):
    register(username="amina")
    resp = client.post("/api/auth/login", json={"username": "amina", "password": "secret123"})

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["username"] == "amina"
    assert body["role"] == "student"
    assert "password" not in body
    assert "passwordHash" not in body


def test_login_rejects_wrong_password(register, client):
    register(username="amina")
    resp = client.post("/api/auth/login", json={"username": "amina", "password": "nope"})
    assert resp.status_code == 401
    assert resp.get_json()["message"] == "Invalid username or password"


def test_login_rejects_unknown_user(client):
    resp = client.post("/api/auth/login", json={"username": "ghost", "password": "whatever"})
    assert resp.status_code == 401


def test_login_requires_both_fields(client):
    resp = client.post("/api/auth/login", json={"username": "amina"})
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Invalid request"


def test_me_returns_session_user(student):
    resp = student.client.get("/api/auth/me")
    assert resp.status_code == 200
    assert resp.get_json()["id"] == student.user["id"]


def test_me_requires_session(client):
    assert client.get("/api/auth/me").status_code == 401


def test_logout_destroys_session(student):
    resp = student.client.post("/api/auth/logout")
    assert resp.status_code == 200
    assert student.client.get("/api/auth/me").status_code == 401
    assert student.client.get("/api/claims").status_code == 401


def test_admin_gate_rejects_students(student, admin):
    assert student.client.get("/api/users").status_code == 403
    assert admin.client.get("/api/users").status_code == 200


def test_role_is_captured_at_login(student, admin):
    # Promote the student while their session is still active
    resp = admin.client.put(f"/api/users/{student.user['id']}", json={"role": "admin"})
    assert resp.status_code == 200
    assert resp.get_json()["role"] == "admin"

    assert student.client.get("/api/users").status_code == 403


def test_csrf_token_required_when_enabled(app, register, monkeypatch):
    register(username="amina")
    monkeypatch.setitem(app.config, "WTF_CSRF_ENABLED", True)
    client = app.test_client()

    resp = client.post("/api/auth/login", json={"username": "amina", "password": "secret123"})
    assert resp.status_code == 400

    token = client.get("/api/auth/csrf-token").get_json()["csrfToken"]
    resp = client.post(
        "/api/auth/login",
        json={"username": "amina", "password": "secret123"},
        headers={"X-CSRFToken": token},
    )
    assert resp.status_code == 200


def test_missing_database_url_is_fatal():
    class NoDatabase(TestConfig):
        SQLALCHEMY_DATABASE_URI = ""

    with pytest.raises(RuntimeError, match="DATABASE_URL"):
        create_app(NoDatabase)
