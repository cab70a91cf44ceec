"""Admin operations on landing pages"""
import logging
from typing import Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from docpage.core.config import settings
from docpage.errors.exceptions import BadRequestException, DatabaseException
from docpage.models.landing_page import LandingPage, LandingPageStatus
from docpage.models.user import User
from docpage.schemas.landing_page_schemas import AdminLandingPage
from docpage.services.identity_service import utcnow
from docpage.services import publish_service

logger = logging.getLogger(__name__)

# Above this many distinct owners the email lookup is skipped
MAX_EMAIL_LOOKUP_USERS = 100


def _display_domain(page: LandingPage) -> str:
    return page.chosen_domain or page.custom_domain or f"{page.subdomain}.{settings.SITE_BASE_DOMAIN}"


def _lookup_emails(db: Session, user_ids: List[str]) -> Dict[str, str]:
    if not user_ids or len(user_ids) > MAX_EMAIL_LOOKUP_USERS:
        return {}
    rows = db.query(User.id, User.email).filter(User.id.in_(user_ids)).all()
    return {row.id: row.email for row in rows}


def list_admin_pages(db: Session, limit: Optional[int] = None) -> List[AdminLandingPage]:
    """
    Newest pages first, capped at ADMIN_PAGES_LIMIT, each enriched with the
    owner's email, the domain to display and the WhatsApp number.
    """
    limit = limit or settings.ADMIN_PAGES_LIMIT
    try:
        pages = (
            db.query(LandingPage)
            .order_by(LandingPage.created_at.desc())
            .limit(limit)
            .all()
        )
        user_ids = sorted({p.user_id for p in pages if p.user_id})
        emails = _lookup_emails(db, user_ids)
    except SQLAlchemyError as e:
        logger.error(f"Failed to fetch landing pages: {str(e)}")
        raise DatabaseException(detail="Failed to fetch landing pages", details=str(e))

    result = []
    for page in pages:
        briefing = page.briefing_data or {}
        result.append(AdminLandingPage(
            id=page.id,
            subdomain=page.subdomain,
            custom_domain=page.custom_domain,
            chosen_domain=page.chosen_domain,
            cpf=page.cpf,
            status=page.status,
            created_at=page.created_at,
            updated_at=page.updated_at,
            published_at=page.published_at,
            user_id=page.user_id,
            briefing_data=briefing,
            user_email=emails.get(page.user_id),
            display_domain=_display_domain(page),
            has_custom_domain=bool(page.custom_domain),
            whatsapp=briefing.get("contactPhone"),
        ))
    return result


def update_landing_page_status(
    db: Session,
    landing_page_id: Optional[str],
    new_status: Optional[str],
    admin_id: Optional[str] = None,
) -> None:
    """
    Persist a status change. Moving to "published" also stamps published_at
    and runs the publish side effects through the outbox; their outcome never
    affects the caller.
    """
    if not landing_page_id or not new_status:
        raise BadRequestException(detail="landingPageId and status are required")

    publishing = new_status == LandingPageStatus.PUBLISHED.value
    try:
        page = db.query(LandingPage).filter(LandingPage.id == landing_page_id).first()
        if page is None:
            raise DatabaseException(
                detail="Failed to update status",
                details=f"Landing page {landing_page_id} not found",
            )

        page.status = new_status
        page.updated_at = utcnow()
        events = []
        if publishing:
            page.published_at = utcnow()
            events = publish_service.record_publish_events(db, page.id)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to update status of {landing_page_id}: {str(e)}",
                     extra={"user_id": admin_id, "landing_page_id": landing_page_id})
        raise DatabaseException(detail="Failed to update status", details=str(e))

    logger.warning(f"Status changed to {new_status}",
                   extra={"user_id": admin_id, "landing_page_id": landing_page_id})

    for event in events:
        publish_service.dispatch_publish_event(db, event, user_id=admin_id)
