import logging
import traceback
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from docpage.core.config import settings

# Record attributes set through extra={} and rendered as key=value pairs
CONTEXT_FIELDS = ("user_id", "landing_page_id", "event_kind", "attempt")
_SEP = " | "


class StructuredFileHandler(logging.FileHandler):
    """File handler writing one pipe-separated line per record:

        2026-10-19T12:00:00Z | ERROR | publish | page=abc kind=static_html attempt=2 | message

    Context fields missing on the record are left out. Tracebacks follow on
    indented lines.
    """

    def __init__(self, log_file_path: str):
        super().__init__(log_file_path, mode="a", encoding="utf-8")

    def format_context(self, record: logging.LogRecord) -> str:
        labels = {"user_id": "user", "landing_page_id": "page", "event_kind": "kind", "attempt": "attempt"}
        pairs = [
            f"{labels[field]}={getattr(record, field)}"
            for field in CONTEXT_FIELDS
            if getattr(record, field, None) not in (None, "", "-")
        ]
        return " ".join(pairs) or "-"

    def format(self, record: logging.LogRecord) -> str:
        stamp = datetime.fromtimestamp(record.created, tz=timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
        line = _SEP.join([
            stamp,
            record.levelname,
            record.name,
            self.format_context(record),
            record.getMessage(),
        ])
        if record.exc_info:
            tb = "".join(traceback.format_exception(*record.exc_info)).rstrip()
            line += "\n" + "\n".join(f"    {part}" for part in tb.splitlines())
        return line


def setup_file_logging(log_level: int = logging.WARNING) -> logging.Logger:
    """Console logging at *log_level*, plus WARNING and above in LOG_DIR/docpage.log"""
    log_dir = Path(settings.LOG_DIR)
    log_dir.mkdir(parents=True, exist_ok=True)

    file_handler = StructuredFileHandler(str(log_dir / "docpage.log"))
    file_handler.setLevel(logging.WARNING)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(
        logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s")
    )

    logging.basicConfig(level=log_level, handlers=[file_handler, console_handler], force=True)
    return logging.getLogger("docpage")


def log_publish_side_effect(
    kind: str,
    landing_page_id: str,
    error: Optional[str] = None,
    attempt: int = 1,
    user_id: Optional[str] = None,
):
    """Outcome of one outbox dispatch. Successes log at WARNING so they reach the file."""
    _log = logging.getLogger("docpage.publish")
    extra = {
        "user_id": user_id,
        "landing_page_id": landing_page_id,
        "event_kind": kind,
        "attempt": attempt,
    }
    if error:
        _log.error("publish side effect failed: %s", error, extra=extra)
    else:
        _log.warning("publish side effect done", extra=extra)


def log_upstream_call(service: str, status_code: int, duration: float, target: str = ""):
    """Warn about a third-party call that was slow or did not answer 2xx/404"""
    _log = logging.getLogger("docpage.upstream")
    if status_code >= 400 and status_code != 404:
        _log.warning("%s %s -> HTTP %s (%.2fs)", service, target, status_code, duration)
    elif duration > 5.0:
        _log.warning("slow call: %s %s took %.2fs", service, target, duration)
