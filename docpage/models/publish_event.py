"""PublishEvent: outbox rows for side effects of publishing a page."""
from enum import Enum

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.sql import func

from docpage.db.base import Base


class PublishEventKind(str, Enum):
    NOTIFY_EMAIL = "notify_email"
    STATIC_HTML = "static_html"


class PublishEventStatus(str, Enum):
    PENDING = "pending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class PublishEvent(Base):
    """
    One row per side effect per publish. Inserted PENDING in the same commit
    as the status change, then dispatched; failed rows stay visible and can be
    re-dispatched by scripts/retry_publish_events.py.
    """

    __tablename__ = "publish_events"

    id = Column(Integer, primary_key=True, autoincrement=True)
    landing_page_id = Column(
        String(36), ForeignKey("landing_pages.id", ondelete="CASCADE"), nullable=False, index=True
    )
    kind = Column(String(32), nullable=False)
    status = Column(String(16), nullable=False, default=PublishEventStatus.PENDING.value, index=True)
    attempts = Column(Integer, nullable=False, default=0)
    last_error = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now(), nullable=True)

    def __repr__(self) -> str:
        return (
            f"<PublishEvent(id={self.id}, page={self.landing_page_id!r}, "
            f"kind={self.kind!r}, status={self.status!r}, attempts={self.attempts})>"
        )
