#!/usr/bin/env python3
"""
server.py
Flask app exposing GET triggers for the sheet sync jobs.

Each request runs its job to completion before answering with a plain-text
message (HTTP 500 and a fixed message on any failure).

Usage:
    python -m seo_sync.api.server
"""

import logging

from flask import Flask

from seo_sync.api.alt_text import update_alt_text_from_sheet
from seo_sync.api.gemini_client import GeminiClient
from seo_sync.api.price_sync import update_prices_from_sheet
from seo_sync.api.redirect_sync import process_404_redirects
from seo_sync.api.sheets_client import SheetsClient
from seo_sync.api.shopify_client import ShopifyClient
from seo_sync.utils import settings

log = logging.getLogger(__name__)

ENDPOINTS = [
    ("/update-prices", "price update from Sheet1!A:C"),
    ("/update-alt-text", "SEO alt text generation for Sheet1 skus"),
    ("/update-all", "price update, then alt text update"),
    ("/process-404-redirects", "map 404 URLs to products/collections"),
]


def default_clients() -> dict:
    return {
        "shopify": ShopifyClient(),
        "sheets": SheetsClient(),
        "gemini": GeminiClient(),
    }


def create_app(client_factory=default_clients) -> Flask:
    """
    `client_factory` returns {"shopify", "sheets", "gemini"} and is called
    once per request, so a misconfigured environment surfaces as a 500
    instead of stopping the server from starting.
    """
    app = Flask(__name__)

    @app.get("/")
    def root():
        return "Status: Online", 200

    @app.get("/update-prices")
    def update_prices():
        try:
            clients = client_factory()
            update_prices_from_sheet(settings.PRICE_RANGE, shopify=clients["shopify"], sheets=clients["sheets"])
            return "Prices updated successfully", 200
        except Exception:
            log.exception("Error while updating prices")
            return "Error updating prices", 500

    @app.get("/update-alt-text")
    def update_alt_text():
        try:
            clients = client_factory()
            update_alt_text_from_sheet(settings.ALT_TEXT_RANGE, **clients)
            return "Alt text updated successfully", 200
        except Exception:
            log.exception("Error while updating alt text")
            return "Error updating alt text", 500

    @app.get("/update-all")
    def update_all():
        try:
            clients = client_factory()
            log.info("Starting price updates...")
            update_prices_from_sheet(settings.PRICE_RANGE, shopify=clients["shopify"], sheets=clients["sheets"])
            log.info("Starting alt text updates...")
            update_alt_text_from_sheet(settings.ALT_TEXT_RANGE, **clients)
            return "Both prices and alt text updated successfully", 200
        except Exception:
            log.exception("Error while updating")
            return "Error during update process", 500

    @app.get("/process-404-redirects")
    def redirects():
        try:
            clients = client_factory()
            process_404_redirects(settings.REDIRECT_RANGE, shopify=clients["shopify"], sheets=clients["sheets"])
            return "404 redirect processing completed successfully", 200
        except Exception:
            log.exception("Error processing 404 redirects")
            return "Error processing 404 redirects", 500

    return app


def main():
    settings.setup_logging()
    port = settings.env_int("PORT", 8700)
    log.info(f"Server is running on port {port}")
    log.info("Available endpoints:")
    for path, description in ENDPOINTS:
        log.info(f"- GET {path} ({description})")
    settings.validate_environment()

    app = create_app()
    app.run(host="0.0.0.0", port=port)


if __name__ == "__main__":
    main()
