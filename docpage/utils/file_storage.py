"""Static site storage: rendered HTML documents on local disk"""
import logging
from pathlib import Path

from docpage.core.config import settings

logger = logging.getLogger(__name__)

HTML_FOLDER = "html"


def static_html_path(subdomain: str) -> Path:
    """Path of the rendered document for *subdomain*"""
    return Path(settings.STATIC_SITE_DIR) / HTML_FOLDER / f"{subdomain}.html"


def save_static_html(subdomain: str, document: str) -> str:
    """
    Write *document* for *subdomain*, replacing any previous version.

    Returns:
        str: Public URL of the written file
    """
    file_path = static_html_path(subdomain)
    file_path.parent.mkdir(parents=True, exist_ok=True)

    # Write to a sibling temp file first so readers never see a partial page
    tmp_path = file_path.with_suffix(".html.tmp")
    with open(tmp_path, "w", encoding="utf-8") as f:
        f.write(document)
    tmp_path.replace(file_path)

    return public_static_url(subdomain)


def public_static_url(subdomain: str) -> str:
    base = settings.STATIC_SITE_BASE_URL.rstrip("/")
    return f"{base}/{HTML_FOLDER}/{subdomain}.html"
