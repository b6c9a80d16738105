#!/usr/bin/env python3
"""
alt_text.py
Generates SEO alt text with Gemini for every image of every SKU listed in
the Google Sheet, writes it onto the Shopify media, and records one
tracking row per SKU in the "Alt Text Tracking" tab.

Tracking rows: [sku, alt texts joined with " | ", status]

Usage:
    python -m seo_sync.api.alt_text [--range "Sheet1!A:A"] [--dry-run]
"""

import argparse
import logging
import re
import time

from seo_sync.api.gemini_client import GeminiClient
from seo_sync.api.sheets_client import SheetsClient
from seo_sync.api.shopify_client import ShopifyClient
from seo_sync.utils import settings
from seo_sync.utils.job_report import JobReport

log = logging.getLogger(__name__)

DEFAULT_VARIANT_TITLE = "Default Title"


def build_alt_text_prompt(product_title: str, variant_info: str = "", image_index: int = 1) -> str:
    variant_line = f'Variant details: "{variant_info}"\n' if variant_info else ""
    return (
        "Create an SEO-friendly alt text for an e-commerce product image.\n"
        f'Product title: "{product_title}"\n'
        f"{variant_line}"
        f"Image number: {image_index}\n"
        "\n"
        "Requirements:\n"
        "- Make it descriptive and SEO-friendly\n"
        "- Include the product name\n"
        "- If variant info is provided, incorporate it naturally\n"
        "- Keep it under 125 characters\n"
        "- Make it natural and readable\n"
        "- Focus on what's visible in the image\n"
        "\n"
        "Return only the alt text, nothing else."
    )


def fallback_alt_text(product_title: str, variant_info: str = "", image_index: int = 1) -> str:
    return re.sub(r"\s+", " ", f"{product_title} {variant_info} img {image_index}").strip()


def generate_alt_text(gemini: GeminiClient, product_title: str, variant_info: str = "",
                      image_index: int = 1) -> str:
    text = gemini.generate(build_alt_text_prompt(product_title, variant_info, image_index))
    if not text:
        return fallback_alt_text(product_title, variant_info, image_index)
    return text


def variant_info_for(details: dict) -> str:
    product_title = (details.get("product") or {}).get("title") or ""
    variant_title = details.get("title") or ""
    if variant_title and variant_title != product_title and variant_title != DEFAULT_VARIANT_TITLE:
        return variant_title
    return ""


def _track(sheets: SheetsClient, sku: str, alt_text: str, status: str, dry_run: bool) -> None:
    if dry_run:
        log.info(f"  > [DRY RUN] Would track {sku}: {status}")
        return
    if sheets.append_rows(settings.ALT_TEXT_TRACKING_RANGE, [[sku, alt_text, status]]):
        log.info(f"Alt text data added for SKU: {sku}")


def update_alt_text_from_sheet(range_name: str = settings.ALT_TEXT_RANGE,
                               shopify: ShopifyClient | None = None,
                               sheets: SheetsClient | None = None,
                               gemini: GeminiClient | None = None,
                               dry_run: bool = False) -> JobReport:
    shopify = shopify or ShopifyClient()
    sheets = sheets or SheetsClient()
    gemini = gemini or GeminiClient()
    report = JobReport(job="update-alt-text")
    pause = settings.delays()

    df = sheets.read_frame(range_name)
    if settings.SKU_HEADER not in df.columns:
        report.error = "SKU column not found in Google Sheet"
        log.error(f"❌ {report.error}")
        return report

    for sku in df[settings.SKU_HEADER]:
        sku = (sku or "").strip()
        if not sku:
            log.warning("⚠️ Skipping row: Missing SKU")
            report.skipped += 1
            continue

        report.processed += 1
        log.info(f"--- Processing SKU: {sku} ---")

        details = shopify.get_product_details_by_sku(sku)
        if not details:
            log.warning(f"⚠️ SKU {sku} not found in Shopify")
            report.missing += 1
            if not dry_run:
                sheets.append_rows(settings.MISSING_SKU_RANGE, [[sku]])
            _track(sheets, sku, "N/A", "SKU not found", dry_run)
            continue

        product = details.get("product") or {}
        product_title = product.get("title") or ""
        media_edges = (product.get("media") or {}).get("edges", [])

        if not media_edges:
            log.info(f"No media found for SKU: {sku}")
            report.reasons["no_media"] += 1
            _track(sheets, sku, "N/A", "No media found", dry_run)
            continue

        variant_info = variant_info_for(details)
        success_count = 0
        fail_count = 0
        alt_texts = []

        for image_index, edge in enumerate(media_edges, start=1):
            media = edge.get("node") or {}
            if not media.get("image"):
                log.info(f"Skipping non-image media for SKU: {sku}")
                continue

            log.info(f"Processing image {image_index} for SKU: {sku}")
            log.info(f"Current alt text: \"{media.get('alt') or 'Empty'}\"")

            alt_text = generate_alt_text(gemini, product_title, variant_info, image_index)
            log.info(f"Generated alt text: \"{alt_text}\"")
            alt_texts.append(alt_text)

            if shopify.update_media_alt_text(media["id"], alt_text, dry_run=dry_run):
                success_count += 1
                log.info(f"✅ Updated alt text for image {image_index}")
            else:
                fail_count += 1
                log.warning(f"❌ Failed to update alt text for image {image_index}")

            time.sleep(pause["image"])

        if fail_count == 0:
            status = "All images updated"
            report.updated += 1
        else:
            status = f"{success_count} success, {fail_count} failed"
            report.failed += 1
        _track(sheets, sku, " | ".join(alt_texts), status, dry_run)

        log.info(f"--- Completed SKU: {sku} ({success_count}/{success_count + fail_count} images updated) ---")
        time.sleep(pause["product"])

    log.info(report.summary())
    return report


def main(argv=None, **clients):
    parser = argparse.ArgumentParser(description="Generate and write SEO alt text for sheet SKUs.")
    parser.add_argument("--range", default=settings.ALT_TEXT_RANGE, help="Sheet range holding the skus column.")
    parser.add_argument("--dry-run", action="store_true", help="Generate alt text but do not write anywhere.")
    args = parser.parse_args(argv)

    settings.setup_logging()
    return update_alt_text_from_sheet(args.range, dry_run=args.dry_run, **clients)


if __name__ == "__main__":
    main()
