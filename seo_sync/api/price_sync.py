#!/usr/bin/env python3
"""
price_sync.py
Reads SKU / Variant Price / Variant Compare At Price rows from the Google
Sheet and pushes the cleaned prices onto the matching Shopify variants.
SKUs that do not exist on the store are appended to the
"Missing SKU on Website" tab.

Usage:
    python -m seo_sync.api.price_sync [--range "Sheet1!A:C"] [--dry-run]
"""

import argparse
import logging
import time

from seo_sync.api.sheets_client import SheetsClient
from seo_sync.api.shopify_client import ShopifyClient
from seo_sync.utils import settings
from seo_sync.utils.job_report import JobReport
from seo_sync.utils.pricing import clean_price

log = logging.getLogger(__name__)


def update_prices_from_sheet(range_name: str = settings.PRICE_RANGE,
                             shopify: ShopifyClient | None = None,
                             sheets: SheetsClient | None = None,
                             dry_run: bool = False) -> JobReport:
    shopify = shopify or ShopifyClient()
    sheets = sheets or SheetsClient()
    report = JobReport(job="update-prices")
    row_delay = settings.delays()["row"]

    df = sheets.read_frame(range_name)
    required = [settings.SKU_HEADER, settings.PRICE_HEADER, settings.COMPARE_AT_HEADER]
    missing_cols = [col for col in required if col not in df.columns]
    if missing_cols:
        report.error = f"Required columns not found in Google Sheet: {', '.join(missing_cols)}"
        log.error(f"❌ {report.error}")
        return report

    log.info(f"Found {len(df)} price rows to process")

    for _, row in df.iterrows():
        sku = (row[settings.SKU_HEADER] or "").strip()
        price = clean_price(row[settings.PRICE_HEADER])
        compare_at = clean_price(row[settings.COMPARE_AT_HEADER])

        if not sku or not price or not compare_at:
            log.warning(f"⚠️ Skipping row: Missing SKU or price fields (sku={sku!r})")
            report.skipped += 1
            continue

        report.processed += 1
        log.info(f"Processing SKU: {sku}, Variant Price: {price}, Compare At Variant Price: {compare_at}")

        variant = shopify.get_variant_by_sku(sku)
        if not variant:
            log.warning(f"⚠️ SKU {sku} not found in Shopify")
            report.missing += 1
            if not dry_run:
                sheets.append_rows(settings.MISSING_SKU_RANGE, [[sku]])
            continue

        log.info(f"SKU found on store: {sku}")
        log.info(f"Current Store Prices -> Price: {variant.get('price')}, "
                 f"Compare At Price: {variant.get('compareAtPrice')}")

        product_gid = (variant.get("product") or {}).get("id")
        updated = shopify.update_variant_prices(product_gid, variant["id"], price, compare_at, dry_run=dry_run)
        if updated is not None:
            report.updated += 1
        else:
            report.failed += 1

        time.sleep(row_delay)

    log.info(report.summary())
    return report


def main(argv=None, **clients):
    parser = argparse.ArgumentParser(description="Push sheet prices onto Shopify variants.")
    parser.add_argument("--range", default=settings.PRICE_RANGE, help="Sheet range holding skus / prices.")
    parser.add_argument("--dry-run", action="store_true", help="Log intended writes without mutating Shopify or the sheet.")
    args = parser.parse_args(argv)

    settings.setup_logging()
    return update_prices_from_sheet(args.range, dry_run=args.dry_run, **clients)


if __name__ == "__main__":
    main()
