#!/usr/bin/env python3
"""
Re-dispatch publish side effects (notification email, static HTML) that are
still pending or previously failed.

Usage: python -m scripts.retry_publish_events [--max-attempts N]
"""
import argparse
import logging
import sys

from docpage.db.session import SessionLocal
from docpage.services.publish_service import dispatch_pending, retry_failed_events


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("--max-attempts", type=int, default=5,
                        help="skip failed events that already ran this many times")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(asctime)s | %(levelname)s | %(message)s")
    db = SessionLocal()
    try:
        pending_ok = dispatch_pending(db)
        summary = retry_failed_events(db, max_attempts=args.max_attempts)
    finally:
        db.close()

    print(f"Pending dispatched: {pending_ok} succeeded")
    print(f"Failed retried: {summary['retried']} ({summary['succeeded']} succeeded, {summary['failed']} failed)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
