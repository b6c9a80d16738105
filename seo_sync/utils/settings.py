#!/usr/bin/env python3
"""
settings.py
Environment, logging and sheet-layout configuration shared by the sync jobs.

Reads .env once at import time (python-dotenv). Every client still reads its
own credentials from the environment so a job can be run on its own.
"""

import logging
import os

from dotenv import load_dotenv

load_dotenv()

log = logging.getLogger(__name__)


def env_str(name: str, default: str = "") -> str:
    return os.getenv(name, default)


def env_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except ValueError:
        return default


def env_float(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, str(default)))
    except ValueError:
        return default


# --- Sheet layout -------------------------------------------------------------

PRICE_RANGE = "Sheet1!A:C"
ALT_TEXT_RANGE = "Sheet1!A:A"
REDIRECT_RANGE = "Sheet1!A:B"
REDIRECT_TAB = "Sheet1"
REDIRECT_TO_COLUMN = "B"

MISSING_SKU_RANGE = "Missing SKU on Website!A:A"
ALT_TEXT_TRACKING_RANGE = "Alt Text Tracking!A:C"

SKU_HEADER = "skus"
PRICE_HEADER = "Variant Price"
COMPARE_AT_HEADER = "Variant Compare At Price"

REQUIRED_ENV = ["SHOP_URL", "SHOPIFY_ACCESS_TOKEN", "GOOGLE_SHEET_ID"]


# --- Rate limiting (seconds) --------------------------------------------------

def delays() -> dict:
    """Current delay knobs. Read on every call so tests and .env edits apply."""
    return {
        "image": env_float("IMAGE_DELAY", 1.0),
        "product": env_float("PRODUCT_DELAY", 2.0),
        "row": env_float("ROW_DELAY", 1.0),
        "page": env_float("PAGE_DELAY", 0.5),
    }


# --- Logging ------------------------------------------------------------------

def setup_logging() -> None:
    level = env_str("LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def validate_environment(required: list | None = None) -> list:
    """
    Returns the names of required variables that are unset or blank.
    Logs one error per missing name; an empty list means we are good to go.
    """
    names = required if required is not None else REQUIRED_ENV
    missing = [name for name in names if not os.getenv(name, "").strip()]
    if missing:
        for name in missing:
            log.error(f"❌ Missing required environment variable: {name}")
        log.error("Set these in your .env file or environment.")
    else:
        log.info("✅ All required environment variables are set")
    return missing
