"""FastAPI dependencies"""
from typing import Generator
from sqlalchemy.orm import Session
from docpage.db.session import SessionLocal


def get_db() -> Generator:
    """
    Database session dependency
    Yields a database session and ensures it's closed after use
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
