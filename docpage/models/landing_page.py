"""LandingPage model"""
import uuid

from sqlalchemy import Column, DateTime, ForeignKey, JSON, String, Text
from sqlalchemy.sql import func
from enum import Enum
from docpage.core.config import settings
from docpage.db.base import Base


class LandingPageStatus(str, Enum):
    """Known status values. The column accepts any string."""
    DRAFT = "draft"
    PENDING_PAYMENT = "pending_payment"
    PUBLISHED = "published"


def _new_page_id() -> str:
    return str(uuid.uuid4())


class LandingPage(Base):
    """
    A doctor's landing page.

    briefing_data holds the wizard answers (name, specialty, crm, crmState,
    contactEmail, contactPhone, mainServices, addresses, ...); content_data,
    design_data and visibility_data hold the generated/edited page state.
    """
    __tablename__ = "landing_pages"

    id = Column(String(36), primary_key=True, default=_new_page_id)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    subdomain = Column(String(63), unique=True, nullable=False, index=True)
    custom_domain = Column(String(255), nullable=True)
    chosen_domain = Column(String(255), nullable=True)
    cpf = Column(String(14), nullable=True)
    status = Column(String(32), nullable=False, default=LandingPageStatus.DRAFT.value, index=True)

    briefing_data = Column(JSON, nullable=False, default=dict)
    content_data = Column(JSON, nullable=True)
    design_data = Column(JSON, nullable=True)
    visibility_data = Column(JSON, nullable=True)

    meta_title = Column(String(255), nullable=True)
    meta_description = Column(Text, nullable=True)
    meta_keywords = Column(JSON, nullable=True)
    photo_url = Column(Text, nullable=True)
    about_photo_url = Column(Text, nullable=True)
    og_image_url = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=True)
    published_at = Column(DateTime(timezone=True), nullable=True)

    def __repr__(self):
        return f"<LandingPage(id={self.id!r}, subdomain={self.subdomain!r}, status={self.status!r})>"

    @property
    def is_published(self) -> bool:
        return self.status == LandingPageStatus.PUBLISHED.value

    @property
    def site_domain(self) -> str:
        """Domain the page is served from"""
        return self.custom_domain or f"{self.subdomain}.{settings.SITE_BASE_DOMAIN}"
