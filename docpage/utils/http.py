"""Outbound HTTP client factory"""
import httpx

from docpage.core.config import settings


def get_http_client() -> httpx.AsyncClient:
    """Return a new AsyncClient; use it as ``async with get_http_client() as client``."""
    return httpx.AsyncClient(timeout=settings.HTTP_TIMEOUT_SECONDS)
