#!/usr/bin/env python3
"""
redirect_sync.py
Fills the "Redirect To" column of the 404 sheet.

Sheet layout (Sheet1):
  A: Redirect From (full dead URL, e.g. exported from Search Console)
  B: Redirect To   (left blank by the operator; written by this script)

Rows that already have a Redirect To value are never overwritten.

Usage:
    python -m seo_sync.api.redirect_sync [--range "Sheet1!A:B"] [--dry-run]
"""

import argparse
import logging
import time

from seo_sync.api.sheets_client import SheetsClient
from seo_sync.api.shopify_client import ShopifyClient
from seo_sync.utils import settings
from seo_sync.utils.job_report import JobReport
from seo_sync.utils.redirect_matcher import resolve_redirect

log = logging.getLogger(__name__)


def redirect_cell(data_row_index: int) -> str:
    """Data row 0 sits under the header, i.e. on sheet row 2."""
    return f"{settings.REDIRECT_TAB}!{settings.REDIRECT_TO_COLUMN}{data_row_index + 2}"


def process_404_redirects(range_name: str = settings.REDIRECT_RANGE,
                          shopify: ShopifyClient | None = None,
                          sheets: SheetsClient | None = None,
                          dry_run: bool = False) -> JobReport:
    shopify = shopify or ShopifyClient()
    sheets = sheets or SheetsClient()
    report = JobReport(job="process-404-redirects")
    row_delay = settings.delays()["row"]

    log.info("Starting 404 redirect processing...")
    rows = sheets.read_range(range_name)
    if not rows:
        report.error = "No data found in Google Sheet"
        log.error(f"❌ {report.error}")
        return report

    data_rows = rows[1:]
    log.info(f"Found {len(data_rows)} URLs to process")

    log.info("Fetching all products and collections from Shopify...")
    products = shopify.get_all_products()
    collections = shopify.get_all_collections()
    log.info(f"Loaded {len(products)} products and {len(collections)} collections")

    for i, row in enumerate(data_rows):
        redirect_from = (row[0] if len(row) > 0 else "") or ""
        existing_to = (row[1] if len(row) > 1 else "") or ""

        if not redirect_from.strip():
            log.info(f"Skipping row {i + 2}: No redirect from URL")
            report.skipped += 1
            continue

        if existing_to.strip():
            log.info(f"Skipping row {i + 2}: Redirect To already filled")
            report.skipped += 1
            continue

        report.processed += 1
        log.info(f"--- Processing Row {i + 2} ---")
        log.info(f"Redirect From: {redirect_from}")

        target, reason = resolve_redirect(redirect_from.strip(), products, collections)
        report.reasons[reason] += 1
        log.info(f"Redirect To: {target}")

        if dry_run:
            log.info(f"  > [DRY RUN] Would write {target} to {redirect_cell(i)}")
            report.updated += 1
        elif sheets.update_cell(redirect_cell(i), target):
            report.updated += 1
        else:
            report.failed += 1

        # Only rows that went through keyword scoring pause.
        if reason not in ("home_keyword", "exact_match", "no_keywords"):
            time.sleep(row_delay)

    log.info("404 redirect processing completed!")
    log.info(report.summary())
    return report


def main(argv=None, **clients):
    parser = argparse.ArgumentParser(description="Map 404 URLs in the sheet to live products/collections.")
    parser.add_argument("--range", default=settings.REDIRECT_RANGE, help="Sheet range holding Redirect From / Redirect To.")
    parser.add_argument("--dry-run", action="store_true", help="Resolve redirects without writing to the sheet.")
    args = parser.parse_args(argv)

    settings.setup_logging()
    return process_404_redirects(args.range, dry_run=args.dry_run, **clients)


if __name__ == "__main__":
    main()
