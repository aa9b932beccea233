#!/usr/bin/env python3
"""Load every accounts-payable page from Siigo into a new generated request.

Runs outside the web process so the full page loop is not bound to a
request timeout. Uses the active Siigo credentials stored in the database.

Usage:
    python scripts/load_all_accounts_payable.py
    python scripts/load_all_accounts_payable.py --page-size 50 --page-delay 1.0
"""
from __future__ import annotations

import argparse

from backoffice.db import SessionLocal
from backoffice.logging import configure_logging
from backoffice.models.siigo import ImportStatus
from backoffice.services.siigo.accounts_payable_import import accounts_payable_import
from backoffice.services.siigo.client import SiigoError


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Load all Siigo accounts payable.")
    parser.add_argument(
        "--page-size",
        type=int,
        default=None,
        help="Records per page (defaults to SIIGO_PAGE_SIZE).",
    )
    parser.add_argument(
        "--page-delay",
        type=float,
        default=None,
        help="Seconds to wait between pages (defaults to SIIGO_PAGE_DELAY_SECONDS).",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Override LOG_LEVEL for this run.",
    )
    return parser.parse_args()


def main() -> int:
    args = parse_args()
    configure_logging(level=args.log_level)

    db = SessionLocal()
    try:
        result = accounts_payable_import.load_all(
            db,
            page_delay=args.page_delay,
            page_size=args.page_size,
            user_agent="scripts/load_all_accounts_payable.py",
        )
    except SiigoError as exc:
        print(f"Siigo request failed: {exc}")
        return 1
    finally:
        db.close()

    print(f"Request ID: {result.request_id}")
    print(f"Pages: {result.total_pages}")
    print(f"Total results: {result.total_results}")
    print(f"Processed: {result.total_processed}")
    print(f"Errors: {result.total_errors}")
    print(f"Duration: {result.duration_ms} ms")
    print(f"Status: {result.status.value}")
    for message in result.page_errors:
        print(f"  - {message}")
    return 0 if result.status != ImportStatus.error else 1


if __name__ == "__main__":
    raise SystemExit(main())
