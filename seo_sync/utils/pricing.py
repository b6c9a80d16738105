"""
pricing.py
Normalizes operator-typed price cells ("$1,299.5", " 49 ", "n/a") before
they are sent to Shopify.
"""

import logging
import re

import pandas as pd

log = logging.getLogger(__name__)


def clean_price(value) -> str | None:
    """
    Strip everything except digits and '.', then format with two decimals.
    Returns None for blank or unparsable cells so the caller can skip the row.
    """
    if value is None:
        return None
    cleaned = re.sub(r"[^0-9.]", "", str(value))
    if not cleaned:
        return None
    number = pd.to_numeric(cleaned, errors="coerce")
    if pd.isna(number):
        log.debug(f"Could not parse price from {value!r}")
        return None
    formatted = f"{float(number):.2f}"
    log.debug(f"Cleaned price: {formatted}")
    return formatted
