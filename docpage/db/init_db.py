"""Initialize database tables and create initial data if needed"""
import logging
from sqlalchemy.exc import SQLAlchemyError
from docpage.db.base import Base
from docpage.db.session import engine, SessionLocal
from docpage import models  # noqa: F401  registers every table on Base.metadata
from docpage.services.identity_service import ensure_admin_identity
from docpage.core.config import settings

logger = logging.getLogger(__name__)


def init_db() -> None:
    """Create all database tables"""
    try:
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables created successfully")
    except SQLAlchemyError as e:
        logger.error(f"Error creating database tables: {str(e)}")
        raise


def create_initial_data() -> None:
    """Seed the admin identity and its admin role from .env configuration"""
    if not settings.ADMIN_EMAIL or not settings.ADMIN_PASSWORD:
        logger.info("ADMIN_EMAIL / ADMIN_PASSWORD not set, skipping admin seed")
        return

    db = SessionLocal()
    try:
        user = ensure_admin_identity(db, settings.ADMIN_EMAIL, settings.ADMIN_PASSWORD)
        db.commit()
        logger.info(f"Admin identity ready: {user.email}")
    except SQLAlchemyError as e:
        logger.error(f"Error creating initial data: {str(e)}")
        db.rollback()
    finally:
        db.close()
