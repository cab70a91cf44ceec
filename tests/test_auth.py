"""admin-login and request-scoped AuthResult"""
import json
from urllib.parse import quote

import pytest

from docpage.core.config import settings
from docpage.middleware.auth import extract_access_token
from docpage.models.user import User
from docpage.services import identity_service
from tests.conftest import bearer_for

LOGIN = "/functions/v1/admin-login"
STATUS = "/functions/v1/auth-status"


# ── admin-login ───────────────────────────────────────────────────────────────

@pytest.fixture
def admin_credentials(monkeypatch):
    monkeypatch.setattr(settings, "ADMIN_EMAIL", "admin@docpage.com.br")
    monkeypatch.setattr(settings, "ADMIN_PASSWORD", "s3nha-forte")


def test_admin_login_not_configured(client, monkeypatch):
    monkeypatch.setattr(settings, "ADMIN_EMAIL", "")
    monkeypatch.setattr(settings, "ADMIN_PASSWORD", "")

    response = client.post(LOGIN, json={"email": "admin@docpage.com.br", "password": "x"})

    assert response.status_code == 500


def test_admin_login_bad_email_format(client, admin_credentials):
    assert client.post(LOGIN, json={"email": "admin", "password": "s3nha-forte"}).status_code == 400


@pytest.mark.parametrize("email, password", [
    ("admin@docpage.com.br", "wrong"),
    ("other@docpage.com.br", "s3nha-forte"),
])
def test_admin_login_wrong_credentials(client, db_session, admin_credentials, email, password):
    response = client.post(LOGIN, json={"email": email, "password": password})

    assert response.status_code == 401
    assert response.json()["error"] == "Invalid credentials"
    assert db_session.query(User).count() == 0


def test_admin_login_non_ascii_email_is_rejected(client, admin_credentials):
    response = client.post(LOGIN, json={"email": "josé@docpage.com.br", "password": "s3nha-forte"})

    assert response.status_code == 401
    assert response.json()["error"] == "Invalid credentials"


def test_admin_login_configured_email_is_case_insensitive(client, monkeypatch):
    monkeypatch.setattr(settings, "ADMIN_EMAIL", " Admin@DocPage.com.br")
    monkeypatch.setattr(settings, "ADMIN_PASSWORD", "s3nha-forte")

    response = client.post(LOGIN, json={"email": "admin@docpage.com.br", "password": "s3nha-forte"})

    assert response.status_code == 200
    assert response.json()["user"]["email"] == "admin@docpage.com.br"


def test_admin_login_bootstraps_admin_identity(client, db_session, admin_credentials):
    first = client.post(LOGIN, json={"email": " Admin@DocPage.com.br ", "password": "s3nha-forte"})
    second = client.post(LOGIN, json={"email": "admin@docpage.com.br", "password": "s3nha-forte"})

    assert first.status_code == 200
    body = first.json()
    assert body["success"] is True
    assert body["isAdmin"] is True
    assert body["session"]["access_token"]

    user = db_session.query(User).one()
    assert body["user"]["id"] == user.id
    assert second.json()["user"]["id"] == user.id
    assert identity_service.is_admin(db_session, user.id)
    assert identity_service.verify_password("s3nha-forte", user.hashed_password)


def test_admin_login_session_unlocks_admin_endpoints(client, db_session, admin_credentials):
    login = client.post(LOGIN, json={"email": "admin@docpage.com.br", "password": "s3nha-forte"}).json()
    headers = {"Authorization": f"Bearer {login['session']['access_token']}"}

    response = client.post("/functions/v1/admin-get-pages", json={"userId": login["user"]["id"]}, headers=headers)

    assert response.status_code == 200


# ── AuthResult ────────────────────────────────────────────────────────────────

def test_anonymous_caller(client):
    assert client.get(STATUS).json() == {"user_id": None, "is_admin": False, "is_authenticated": False}


def test_bearer_header(client, db_session, admin_user):
    body = client.get(STATUS, headers=bearer_for(db_session, admin_user)).json()

    assert body == {"user_id": admin_user.id, "is_admin": True, "is_authenticated": True}


def test_session_cookie_with_json_value(client, db_session, regular_user):
    session = identity_service.create_session(db_session, regular_user)
    db_session.commit()
    cookie = quote(json.dumps({"access_token": session.access_token, "refresh_token": session.refresh_token}))

    body = client.get(STATUS, headers={"Cookie": f"sb-abcdef-auth-token={cookie}"}).json()

    assert body == {"user_id": regular_user.id, "is_admin": False, "is_authenticated": True}


def test_session_cookie_with_raw_token(client, db_session, regular_user):
    session = identity_service.create_session(db_session, regular_user)
    db_session.commit()

    body = client.get(STATUS, headers={"Cookie": f"sb-abcdef-auth-token={session.access_token}"}).json()

    assert body["user_id"] == regular_user.id


def test_invalid_token_is_anonymous(client):
    body = client.get(STATUS, headers={"Authorization": "Bearer not-a-jwt"}).json()
    assert body["is_authenticated"] is False


def test_extract_access_token_priority():
    cookies = {
        "sb-ref-auth-token": quote(json.dumps({"access_token": "from-json"})),
        "sb-ref-auth-token-access-token": "from-split-cookie",
    }

    assert extract_access_token("Bearer from-header", cookies) == "from-header"
    assert extract_access_token(None, cookies) == "from-split-cookie"
    assert extract_access_token(None, {"sb-ref-auth-token": quote(json.dumps({"accessToken": "camel"}))}) == "camel"
    assert extract_access_token(None, {"unrelated": "x"}) is None
    assert extract_access_token("Basic abc", {}) is None
