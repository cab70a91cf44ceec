#!/usr/bin/env python3
"""
Regenerate static HTML for one landing page.

Usage: python -m scripts.generate_single_static_html <landing-page-id | subdomain>
"""
import argparse
import logging
import sys

from fastapi import HTTPException
from sqlalchemy import or_

from docpage.db.session import SessionLocal
from docpage.models.landing_page import LandingPage
from docpage.services.publish_service import generate_static_html


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("page", help="landing page id or subdomain")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(asctime)s | %(levelname)s | %(message)s")
    db = SessionLocal()
    try:
        page = (
            db.query(LandingPage)
            .filter(or_(LandingPage.id == args.page, LandingPage.subdomain == args.page.lower()))
            .first()
        )
        if page is None:
            print(f"Landing page not found: {args.page}")
            return 1
        result = generate_static_html(db, page.id)
    except HTTPException as e:
        print(f"Failed: {e.detail}")
        return 1
    finally:
        db.close()

    print(f"Generated {result.subdomain}: {result.publicUrl}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
