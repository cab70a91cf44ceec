"""Shared fixtures: in-memory database, stubbed email and mocked outbound HTTP"""
import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-jwt-signing-0123456789")

from datetime import datetime, timedelta, timezone  # noqa: E402

import httpx  # noqa: E402
import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from docpage.core.config import settings  # noqa: E402
from docpage.core.dependencies import get_db  # noqa: E402
from docpage.db.base import Base  # noqa: E402
from docpage.main import app  # noqa: E402
from docpage.models.landing_page import LandingPage  # noqa: E402
from docpage.models.user import AppRole  # noqa: E402
from docpage.services import identity_service  # noqa: E402
from docpage.utils import email as email_utils  # noqa: E402
from docpage.utils import http as http_utils  # noqa: E402


@pytest.fixture
def db_session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def client(db_session):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def fast_settings(monkeypatch, tmp_path):
    """No brute-force delays, static sites under tmp_path, Gemini key set"""
    monkeypatch.setattr(settings, "OTP_INVALID_FORMAT_DELAY_MS", 0)
    monkeypatch.setattr(settings, "OTP_MISMATCH_DELAY_MS", 0)
    monkeypatch.setattr(settings, "ADMIN_LOGIN_FAILURE_DELAY_MS", 0)
    monkeypatch.setattr(settings, "REQUIRE_BEARER_FOR_ADMIN", False)
    monkeypatch.setattr(settings, "STATIC_SITE_DIR", str(tmp_path / "sites"))
    monkeypatch.setattr(settings, "GEMINI_API_KEY", "test-gemini-key")


@pytest.fixture(autouse=True)
def sent_emails(monkeypatch):
    """Capture outgoing mail instead of talking to SMTP"""
    outbox = []

    def fake_send_email(to, subject, html_body, plain_body=""):
        outbox.append({"to": to, "subject": subject, "html": html_body, "plain": plain_body})
        return True

    monkeypatch.setattr(email_utils, "send_email", fake_send_email)
    return outbox


@pytest.fixture
def failing_email(monkeypatch):
    monkeypatch.setattr(email_utils, "send_email", lambda *args, **kwargs: False)


@pytest.fixture
def mock_http(monkeypatch):
    """
    Route outbound httpx calls to a handler.

    Usage: ``requests = mock_http(handler)`` where handler takes an
    httpx.Request and returns an httpx.Response.
    """
    def install(handler):
        seen = []

        def recording_handler(request):
            seen.append(request)
            return handler(request)

        monkeypatch.setattr(
            http_utils,
            "get_http_client",
            lambda: httpx.AsyncClient(transport=httpx.MockTransport(recording_handler)),
        )
        return seen

    return install


def make_user(db, email="doctor@example.com", admin=False, metadata=None):
    user = identity_service.create_user(db, email=email, user_metadata=metadata or {"name": "Doctor"})
    if admin:
        identity_service.grant_role(db, user.id, AppRole.ADMIN)
    db.commit()
    return user


def make_page(db, subdomain="drsilva", status="draft", briefing=None, created_offset_minutes=0, **fields):
    page = LandingPage(
        subdomain=subdomain,
        status=status,
        briefing_data=briefing if briefing is not None else {
            "name": "Ana Silva",
            "specialty": "Cardiologia",
            "crm": "12345",
            "crmState": "SP",
            "contactEmail": "ana@example.com",
            "contactPhone": "+55 11 99999-0000",
            "mainServices": "Check-up, Ecocardiograma, Holter, Teste ergométrico",
            "addresses": ["Av. Paulista, 1000"],
        },
        created_at=datetime.now(timezone.utc) - timedelta(minutes=created_offset_minutes),
        **fields,
    )
    db.add(page)
    db.commit()
    return page


@pytest.fixture
def admin_user(db_session):
    return make_user(db_session, email="admin@docpage.com.br", admin=True, metadata={"name": "Admin"})


@pytest.fixture
def regular_user(db_session):
    return make_user(db_session, email="someone@example.com")


def bearer_for(db, user):
    session = identity_service.create_session(db, user)
    db.commit()
    return {"Authorization": f"Bearer {session.access_token}"}
