"""Structured operation log"""
import logging
import sys

import pytest

from docpage.utils.logger import StructuredFileHandler, log_publish_side_effect


@pytest.fixture
def publish_log(tmp_path):
    path = tmp_path / "docpage.log"
    handler = StructuredFileHandler(str(path))
    handler.setLevel(logging.WARNING)
    log = logging.getLogger("docpage.publish")
    log.addHandler(handler)
    yield path
    log.removeHandler(handler)
    handler.close()


def test_publish_outcomes_carry_page_and_attempt(publish_log):
    log_publish_side_effect("static_html", "page-1", attempt=1)
    log_publish_side_effect("notify", "page-1", error="SMTP down", attempt=2, user_id="admin-1")

    ok, failed = publish_log.read_text(encoding="utf-8").splitlines()

    assert " | WARNING | docpage.publish | page=page-1 kind=static_html attempt=1 | " in ok
    assert failed.split(" | ")[1:] == [
        "ERROR",
        "docpage.publish",
        "user=admin-1 page=page-1 kind=notify attempt=2",
        "publish side effect failed: SMTP down",
    ]


def test_record_without_context_and_with_traceback(tmp_path):
    handler = StructuredFileHandler(str(tmp_path / "docpage.log"))
    try:
        raise ValueError("boom")
    except ValueError:
        record = logging.getLogger("docpage.test").makeRecord(
            "docpage.test", logging.ERROR, __file__, 1, "it broke", (), exc_info=sys.exc_info(),
        )
    line = handler.format(record)
    handler.close()

    first, *trace = line.splitlines()
    assert first.endswith(" | ERROR | docpage.test | - | it broke")
    assert trace[-1].strip() == "ValueError: boom"
    assert all(part.startswith("    ") for part in trace)
