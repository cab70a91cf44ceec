#!/usr/bin/env python3
"""
Regenerate static HTML for every published landing page.

Usage: python -m scripts.generate_all_static_html
"""
import logging
import sys

from docpage.db.session import SessionLocal
from docpage.services.publish_service import generate_all_static_html


def main() -> int:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s | %(levelname)s | %(message)s")
    db = SessionLocal()
    try:
        summary = generate_all_static_html(db)
    finally:
        db.close()

    print(f"\n{summary['message']}")
    for item in summary["results"]:
        mark = "OK  " if item["success"] else "FAIL"
        line = f"  {mark} {item['subdomain']} ({item['landingPageId']})"
        if item.get("error"):
            line += f" - {item['error']}"
        print(line)
    return 0


if __name__ == "__main__":
    sys.exit(main())
