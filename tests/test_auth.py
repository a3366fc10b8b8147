from tests.conftest import ADMIN_EMAIL, ADMIN_PASSWORD


def test_login_fails_with_wrong_password(client):
    res = client.post("/api/auth/login", json={"email": ADMIN_EMAIL, "password": "bad"})
    assert res.status_code == 401
    assert res.get_json()["error"] == "Invalid credentials"


def test_login_fails_with_unknown_email(client):
    res = client.post("/api/auth/login", json={"email": "someone@example.com", "password": ADMIN_PASSWORD})
    assert res.status_code == 401


def test_login_requires_email_and_password(client):
    res = client.post("/api/auth/login", json={"email": ADMIN_EMAIL})
    assert res.status_code == 400
    assert res.get_json()["error"] == "Email & password required"


def test_login_with_correct_credentials(client):
    res = client.post("/api/auth/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
    assert res.status_code == 200
    assert res.get_json()["token"]


def test_protected_route_without_token(client):
    res = client.post("/api/jobs", json={"title": "Test Job", "description": "Desc"})
    assert res.status_code == 401
    assert res.get_json()["error"] == "Missing auth token"


def test_protected_route_with_garbage_token(client):
    res = client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-token"})
    assert res.status_code == 401


def test_me_returns_identity(client, auth_headers):
    res = client.get("/api/auth/me", headers=auth_headers)
    assert res.status_code == 200
    body = res.get_json()
    assert body["email"] == ADMIN_EMAIL
    assert body["role"] == "admin"


def test_configured_password_hash_is_used(tmp_path):
    from config import TestingConfig
    from hiretrack import create_app
    from hiretrack.extensions import bcrypt

    hashed = bcrypt.generate_password_hash("another-password", rounds=4).decode("utf-8")

    class Config(TestingConfig):
        UPLOAD_FOLDER = str(tmp_path)
        ADMIN_PASSWORD_HASH = hashed

    client = create_app(Config).test_client()
    assert client.post("/api/auth/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD}).status_code == 401
    assert client.post("/api/auth/login", json={"email": ADMIN_EMAIL, "password": "another-password"}).status_code == 200


def test_health(client):
    res = client.get("/api/health")
    assert res.status_code == 200
    assert res.get_json()["status"] == "ok"
