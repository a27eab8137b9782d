from fastapi.testclient import TestClient

from conftest import ADMIN_PASSWORD
from mentorhub.auth.deps import get_session_config, is_admin_session
from mentorhub.auth.passwords import set_admin_password
from mentorhub.auth.session import COOKIE_NAME, SessionConfig, create_admin_token
from mentorhub.main import app


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_login_without_configured_password(client):
    r = client.post("/admin/login", json={"password": "anything"})
    assert r.status_code == 500


def test_login_sets_session_cookie(client, db):
    set_admin_password(db, ADMIN_PASSWORD)

    assert client.post("/admin/login", json={"password": "nope"}).status_code == 401
    assert client.get("/admin/templates").status_code == 401

    r = client.post("/admin/login", json={"password": ADMIN_PASSWORD})
    assert r.status_code == 200
    assert COOKIE_NAME in r.cookies
    assert "httponly" in r.headers["set-cookie"].lower()

    assert client.get("/admin/templates").status_code == 200


def test_session_token_checks():
    cfg = get_session_config()
    assert is_admin_session(create_admin_token(cfg))
    assert not is_admin_session("not-a-jwt")
    assert not is_admin_session(None)

    other = SessionConfig(
        secret="a-different-secret-0123456789abcdef",
        issuer=cfg.issuer,
        audience=cfg.audience,
        ttl_seconds=60,
    )
    assert not is_admin_session(create_admin_token(other))

    expired = SessionConfig(secret=cfg.secret, issuer=cfg.issuer, audience=cfg.audience, ttl_seconds=-60)
    assert not is_admin_session(create_admin_token(expired))


def test_logout_clears_cookie(admin_client):
    assert admin_client.get("/admin/templates").status_code == 200
    admin_client.post("/admin/logout")
    assert admin_client.get("/admin/templates").status_code == 401


def test_change_password(admin_client):
    r = admin_client.put(
        "/admin/password",
        json={"current_password": "wrong-password", "new_password": "new-password-1"},
    )
    assert r.status_code == 401

    r = admin_client.put(
        "/admin/password",
        json={"current_password": ADMIN_PASSWORD, "new_password": "short"},
    )
    assert r.status_code == 400

    r = admin_client.put(
        "/admin/password",
        json={"current_password": ADMIN_PASSWORD, "new_password": "new-password-1"},
    )
    assert r.status_code == 200

    with TestClient(app) as fresh:
        assert fresh.post("/admin/login", json={"password": ADMIN_PASSWORD}).status_code == 401
        assert fresh.post("/admin/login", json={"password": "new-password-1"}).status_code == 200
