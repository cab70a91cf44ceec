"""
Publish side effects: the owner notification email and the static HTML
snapshot.

Both run through the ``publish_events`` outbox. A status change to
"published" inserts one PENDING row per effect in the same commit, then each
row is dispatched right away. Failures are recorded on the row (status,
attempts, last_error) and logged; they never reach the caller that changed
the status. Failed rows can be re-dispatched later with retry_failed_events().
"""
import logging
from typing import Callable, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from docpage.errors.exceptions import (
    BadRequestException,
    NotFoundException,
    NotificationFailedException,
    StaticHtmlFailedException,
)
from docpage.models.landing_page import LandingPage, LandingPageStatus
from docpage.models.publish_event import PublishEvent, PublishEventKind, PublishEventStatus
from docpage.schemas.landing_page_schemas import BatchItemResult, StaticHtmlResult
from docpage.utils.email import send_site_published_email
from docpage.utils.file_storage import save_static_html
from docpage.utils.logger import log_publish_side_effect
from docpage.utils.static_html import page_url, render_landing_page_html

logger = logging.getLogger(__name__)


def _get_page(db: Session, landing_page_id: Optional[str]) -> LandingPage:
    if not landing_page_id:
        raise BadRequestException(detail="landingPageId is required")
    page = db.query(LandingPage).filter(LandingPage.id == landing_page_id).first()
    if page is None:
        raise NotFoundException(detail="Landing page not found")
    return page


# ── notification email ────────────────────────────────────────────────────────

def notify_site_published(db: Session, landing_page_id: Optional[str]) -> None:
    """
    Email the page owner that the site is live.

    The recipient is briefing.contactEmail, falling back to briefing.email.
    """
    page = _get_page(db, landing_page_id)
    briefing = page.briefing_data or {}
    to_email = briefing.get("contactEmail") or briefing.get("email")

    if not to_email:
        logger.warning("No contact email in briefing, notification skipped",
                       extra={"landing_page_id": page.id})
        raise BadRequestException(
            detail="No contact email found in briefing",
            details={"availableFields": sorted(briefing.keys())},
        )

    doctor_name = briefing.get("name") or "Doutor(a)"
    if not send_site_published_email(to=to_email, doctor_name=doctor_name, site_url=page_url(page)):
        raise NotificationFailedException()

    logger.info(f"Site-published email sent to {to_email}", extra={"landing_page_id": page.id})


# ── static HTML ───────────────────────────────────────────────────────────────

def generate_static_html(db: Session, landing_page_id: Optional[str]) -> StaticHtmlResult:
    """Render a published page and write it to the static site directory"""
    page = _get_page(db, landing_page_id)

    if not page.is_published:
        raise BadRequestException(
            detail="Landing page is not published",
            details={"status": page.status},
        )

    document = render_landing_page_html(page)
    try:
        public_url = save_static_html(page.subdomain, document)
    except OSError as e:
        logger.error(f"Failed to write static HTML for {page.subdomain}: {str(e)}",
                     extra={"landing_page_id": page.id})
        raise StaticHtmlFailedException(details=str(e))

    logger.info(f"Static HTML written for {page.subdomain}", extra={"landing_page_id": page.id})
    return StaticHtmlResult(publicUrl=public_url, subdomain=page.subdomain)


def generate_all_static_html(db: Session) -> Dict:
    """
    Regenerate every published page, one at a time. Per-page failures are
    collected in the results; the batch itself always completes.
    """
    pages = (
        db.query(LandingPage)
        .filter(LandingPage.status == LandingPageStatus.PUBLISHED.value)
        .order_by(LandingPage.created_at.asc())
        .all()
    )

    if not pages:
        return {"message": "No published landing pages found", "count": 0, "results": []}

    results: List[BatchItemResult] = []
    for page in pages:
        try:
            generate_static_html(db, page.id)
            results.append(BatchItemResult(landingPageId=page.id, subdomain=page.subdomain, success=True))
        except Exception as e:
            error = getattr(e, "detail", None) or str(e) or "Failed to generate HTML"
            logger.error(f"Static HTML failed for {page.subdomain}: {error}",
                         extra={"landing_page_id": page.id})
            results.append(BatchItemResult(
                landingPageId=page.id, subdomain=page.subdomain, success=False, error=str(error),
            ))

    success_count = sum(1 for r in results if r.success)
    error_count = len(results) - success_count
    logger.warning(f"Static HTML batch finished: {success_count} succeeded, {error_count} failed")

    return {
        "message": f"Processing finished: {success_count} succeeded, {error_count} failed",
        "total": len(pages),
        "success": success_count,
        "errors": error_count,
        "results": [r.model_dump(exclude_none=True) for r in results],
    }


# ── outbox ────────────────────────────────────────────────────────────────────

def _run_static_html(db: Session, landing_page_id: str) -> None:
    generate_static_html(db, landing_page_id)


EVENT_HANDLERS: Dict[str, Callable[[Session, str], None]] = {
    PublishEventKind.NOTIFY_EMAIL.value: notify_site_published,
    PublishEventKind.STATIC_HTML.value: _run_static_html,
}


def record_publish_events(db: Session, landing_page_id: str) -> List[PublishEvent]:
    """Add one PENDING row per side effect. The caller commits."""
    events = [
        PublishEvent(
            landing_page_id=landing_page_id,
            kind=kind.value,
            status=PublishEventStatus.PENDING.value,
            attempts=0,
        )
        for kind in (PublishEventKind.NOTIFY_EMAIL, PublishEventKind.STATIC_HTML)
    ]
    db.add_all(events)
    db.flush()
    return events


def dispatch_publish_event(db: Session, event: PublishEvent, user_id: Optional[str] = None) -> bool:
    """
    Run one outbox row and record the outcome on it. Never raises.

    Returns:
        bool: True if the side effect succeeded
    """
    event.attempts = (event.attempts or 0) + 1
    error = None
    try:
        EVENT_HANDLERS[event.kind](db, event.landing_page_id)
    except Exception as e:
        error = str(getattr(e, "detail", None) or e) or e.__class__.__name__

    event.status = PublishEventStatus.FAILED.value if error else PublishEventStatus.SUCCEEDED.value
    event.last_error = error
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Could not record outcome of publish event {event.id}: {str(e)}")

    log_publish_side_effect(
        kind=event.kind,
        landing_page_id=event.landing_page_id,
        error=error,
        attempt=event.attempts,
        user_id=user_id,
    )
    return error is None


def dispatch_pending(db: Session) -> int:
    """Dispatch every PENDING row. Returns how many succeeded."""
    events = (
        db.query(PublishEvent)
        .filter(PublishEvent.status == PublishEventStatus.PENDING.value)
        .order_by(PublishEvent.id.asc())
        .all()
    )
    return sum(1 for event in events if dispatch_publish_event(db, event))


def retry_failed_events(db: Session, max_attempts: int = 5) -> Dict[str, int]:
    """Re-dispatch FAILED rows that have not yet hit *max_attempts*"""
    events = (
        db.query(PublishEvent)
        .filter(
            PublishEvent.status == PublishEventStatus.FAILED.value,
            PublishEvent.attempts < max_attempts,
        )
        .order_by(PublishEvent.id.asc())
        .all()
    )
    succeeded = sum(1 for event in events if dispatch_publish_event(db, event))
    return {"retried": len(events), "succeeded": succeeded, "failed": len(events) - succeeded}
