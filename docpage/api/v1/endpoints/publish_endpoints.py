"""Publish side-effect endpoints"""
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
import logging

from docpage.core.dependencies import get_db
from docpage.errors.exceptions import NotificationFailedException
from docpage.schemas.landing_page_schemas import LandingPageIdRequest, StaticHtmlResult, SuccessResponse
from docpage.services import publish_service

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/notify-site-published", response_model=SuccessResponse)
async def notify_site_published(body: LandingPageIdRequest, db: Session = Depends(get_db)):
    """Email the page owner that the site is live"""
    try:
        publish_service.notify_site_published(db, body.landingPageId)
    except NotificationFailedException as e:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "success": False,
                "error": e.detail,
                "warning": "The site was published but the notification email could not be sent.",
            },
        )
    return SuccessResponse()


@router.post("/generate-static-html", response_model=StaticHtmlResult)
async def generate_static_html(body: LandingPageIdRequest, db: Session = Depends(get_db)):
    """Render a published page to `<STATIC_SITE_DIR>/html/<subdomain>.html`"""
    return publish_service.generate_static_html(db, body.landingPageId)


@router.post("/generate-all-static-html")
async def generate_all_static_html(db: Session = Depends(get_db)):
    """
    Regenerate static HTML for every published page.

    Always **200**; per-page failures are listed in `results`.
    """
    return publish_service.generate_all_static_html(db)
