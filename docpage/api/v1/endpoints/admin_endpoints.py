"""Admin-only landing page endpoints"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
import logging

from docpage.core.dependencies import get_db
from docpage.middleware.auth import require_admin
from docpage.models.user import User
from docpage.schemas.landing_page_schemas import (
    AdminLandingPageList,
    AdminRequest,
    AdminUpdateStatusRequest,
    SuccessResponse,
)
from docpage.services import admin_service

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/admin-get-pages", response_model=AdminLandingPageList)
async def admin_get_pages(
    body: AdminRequest,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """
    ## List landing pages

    **Role:** Admin (`userId` in the body must hold the admin role).

    Newest first, at most 300 rows, each with the owner's email, the
    domain to display and the WhatsApp number from the briefing.
    """
    return AdminLandingPageList(data=admin_service.list_admin_pages(db))


@router.post("/admin-update-status", response_model=SuccessResponse)
async def admin_update_status(
    body: AdminUpdateStatusRequest,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """
    ## Change a landing page status

    **Role:** Admin.

    | Field         | Type   | Description                   |
    |---------------|--------|-------------------------------|
    | userId        | string | Caller, must be an admin      |
    | landingPageId | string | Page to update                |
    | status        | string | e.g. `draft`, `published`     |

    Publishing stamps `published_at` and sends the owner email plus the
    static HTML snapshot. Those never change the response.
    """
    admin_service.update_landing_page_status(db, body.landingPageId, body.status, admin_id=admin.id)
    return SuccessResponse()
