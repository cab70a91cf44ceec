"""notify-site-published, generate-static-html, batch regeneration and outbox retries"""
from pathlib import Path

from docpage.core.config import settings
from docpage.models.publish_event import PublishEvent
from docpage.services import publish_service
from tests.conftest import make_page

NOTIFY = "/functions/v1/notify-site-published"
STATIC = "/functions/v1/generate-static-html"
STATIC_ALL = "/functions/v1/generate-all-static-html"


def _html_file(subdomain):
    return Path(settings.STATIC_SITE_DIR) / "html" / f"{subdomain}.html"


# ── notify-site-published ─────────────────────────────────────────────────────

def test_notify_sends_email_to_briefing_contact(client, db_session, sent_emails):
    page = make_page(db_session, status="published", custom_domain="dranasilva.com.br")

    response = client.post(NOTIFY, json={"landingPageId": page.id})

    assert response.json() == {"success": True}
    assert sent_emails[0]["to"] == "ana@example.com"
    assert "https://dranasilva.com.br" in sent_emails[0]["html"]


def test_notify_falls_back_to_briefing_email(client, db_session, sent_emails):
    page = make_page(db_session, briefing={"name": "Ana", "email": "ana.alt@example.com"})

    client.post(NOTIFY, json={"landingPageId": page.id})

    assert sent_emails[0]["to"] == "ana.alt@example.com"


def test_notify_validation(client, db_session):
    page = make_page(db_session, briefing={"name": "Ana", "specialty": "Dermatologia"})

    assert client.post(NOTIFY, json={}).status_code == 400
    assert client.post(NOTIFY, json={"landingPageId": "nope"}).status_code == 404

    response = client.post(NOTIFY, json={"landingPageId": page.id})
    assert response.status_code == 400
    assert response.json()["details"] == {"availableFields": ["name", "specialty"]}


def test_notify_delivery_failure(client, db_session, failing_email):
    page = make_page(db_session)

    response = client.post(NOTIFY, json={"landingPageId": page.id})

    assert response.status_code == 500
    body = response.json()
    assert body["success"] is False
    assert body["error"]
    assert body["warning"]


def test_published_email_escapes_doctor_name(client, db_session, sent_emails):
    page = make_page(db_session, briefing={"name": "<script>x</script>", "contactEmail": "a@example.com"})

    client.post(NOTIFY, json={"landingPageId": page.id})

    assert "<script>x</script>" not in sent_emails[0]["html"]
    assert "&lt;script&gt;" in sent_emails[0]["html"]


# ── generate-static-html ──────────────────────────────────────────────────────

def test_static_html_is_written_for_published_page(client, db_session):
    page = make_page(db_session, status="published")

    response = client.post(STATIC, json={"landingPageId": page.id})

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["subdomain"] == "drsilva"
    assert body["publicUrl"].endswith("/html/drsilva.html")
    document = _html_file("drsilva").read_text(encoding="utf-8")
    assert '<link rel="canonical" href="https://drsilva.docpage.com.br" />' in document
    assert '"@type": "Physician"' in document


def test_static_html_overwrites_previous_file(client, db_session):
    page = make_page(db_session, status="published")
    _html_file("drsilva").parent.mkdir(parents=True, exist_ok=True)
    _html_file("drsilva").write_text("stale", encoding="utf-8")

    client.post(STATIC, json={"landingPageId": page.id})

    assert _html_file("drsilva").read_text(encoding="utf-8").startswith("<!DOCTYPE html>")


def test_static_html_requires_published_page(client, db_session):
    page = make_page(db_session, status="draft")

    response = client.post(STATIC, json={"landingPageId": page.id})

    assert response.status_code == 400
    assert response.json()["details"] == {"status": "draft"}
    assert not _html_file("drsilva").exists()


def test_static_html_validation(client):
    assert client.post(STATIC, json={}).status_code == 400
    assert client.post(STATIC, json={"landingPageId": "nope"}).status_code == 404


def test_static_html_write_failure_is_500(client, db_session, monkeypatch):
    page = make_page(db_session, status="published")

    def broken_write(subdomain, document):
        raise OSError("read-only file system")

    monkeypatch.setattr(publish_service, "save_static_html", broken_write)

    response = client.post(STATIC, json={"landingPageId": page.id})

    assert response.status_code == 500


# ── batch ─────────────────────────────────────────────────────────────────────

def test_batch_with_nothing_published(client, db_session):
    make_page(db_session, status="draft")

    response = client.post(STATIC_ALL)

    assert response.status_code == 200
    body = response.json()
    assert body["count"] == 0
    assert body["results"] == []


def test_batch_reports_per_page_failures_but_returns_200(client, db_session, monkeypatch):
    good = make_page(db_session, subdomain="good", status="published", created_offset_minutes=5)
    bad = make_page(db_session, subdomain="bad", status="published", created_offset_minutes=1)
    make_page(db_session, subdomain="draft", status="draft")

    real_save = publish_service.save_static_html

    def flaky_save(subdomain, document):
        if subdomain == "bad":
            raise OSError("quota exceeded")
        return real_save(subdomain, document)

    monkeypatch.setattr(publish_service, "save_static_html", flaky_save)

    response = client.post(STATIC_ALL)

    assert response.status_code == 200
    body = response.json()
    assert body["total"] == 2
    assert body["success"] == 1
    assert body["errors"] == 1
    results = {r["landingPageId"]: r for r in body["results"]}
    assert results[good.id] == {"landingPageId": good.id, "subdomain": "good", "success": True}
    assert results[bad.id]["success"] is False
    assert results[bad.id]["error"]
    assert _html_file("good").exists()
    assert not _html_file("draft").exists()


# ── outbox ────────────────────────────────────────────────────────────────────

def test_failed_events_can_be_retried(db_session, monkeypatch):
    page = make_page(db_session, status="published")
    events = publish_service.record_publish_events(db_session, page.id)
    db_session.commit()

    def broken_write(subdomain, document):
        raise OSError("disk full")

    real_save = publish_service.save_static_html
    monkeypatch.setattr(publish_service, "save_static_html", broken_write)
    results = [publish_service.dispatch_publish_event(db_session, e) for e in events]
    assert results == [True, False]

    monkeypatch.setattr(publish_service, "save_static_html", real_save)
    summary = publish_service.retry_failed_events(db_session)

    assert summary == {"retried": 1, "succeeded": 1, "failed": 0}
    static_event = db_session.query(PublishEvent).filter_by(kind="static_html").one()
    assert static_event.status == "succeeded"
    assert static_event.attempts == 2
    assert static_event.last_error is None


def test_retry_skips_events_past_max_attempts(db_session):
    page = make_page(db_session, status="published")
    db_session.add(PublishEvent(landing_page_id=page.id, kind="static_html", status="failed", attempts=5))
    db_session.commit()

    assert publish_service.retry_failed_events(db_session, max_attempts=5)["retried"] == 0


def test_dispatch_pending_runs_queued_events(db_session, sent_emails):
    page = make_page(db_session, status="published")
    publish_service.record_publish_events(db_session, page.id)
    db_session.commit()

    assert publish_service.dispatch_pending(db_session) == 2
    assert len(sent_emails) == 1
    assert _html_file("drsilva").exists()
