#!/usr/bin/env python3
"""
redirect_matcher.py

Read-only helpers that decide where a dead (404) storefront URL should
redirect to, given the live product and collection catalog.

This module:
- DOES NOT call Shopify or Google Sheets
- ONLY answers: "Which existing path best replaces this URL?"

Matching is a keyword-overlap heuristic:
- keywords come from the URL path (minus /products/ or /collections/)
- each keyword found in an item scores 3 (title), 2 (handle) or 1 (elsewhere)
- the score is averaged over the keywords and must beat MATCH_THRESHOLD
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Optional, Tuple
from urllib.parse import urlsplit

log = logging.getLogger(__name__)

MATCH_THRESHOLD = 0.3
HOME_PATH = "/"

STOP_WORDS = {
    "the", "and", "or", "but", "in", "on", "at", "to", "for", "of",
    "with", "by", "from", "up", "about", "into", "over", "after",
}

# Any dead URL containing one of these goes straight to the home page.
HOME_KEYWORDS = ("abdos",)

PRODUCT = "product"
COLLECTION = "collection"


@dataclass(frozen=True)
class Match:
    item: dict
    type: str
    score: float
    exact: bool = False


def _path_of(url: str) -> Optional[str]:
    try:
        return urlsplit(str(url).strip()).path
    except ValueError:
        log.error(f"Error parsing URL: {url!r}")
        return None


def extract_keywords(url: str) -> list:
    path = _path_of(url)
    if path is None:
        return []

    clean = re.sub(r"^/+(products|collections)/+", "", path)
    clean = re.sub(r"/+$", "", clean)
    clean = re.sub(r"[^a-zA-Z0-9\-\s]", " ", clean)
    clean = clean.replace("-", " ").lower().strip()

    return [word for word in clean.split() if len(word) > 2 and word not in STOP_WORDS]


def similarity_score(keywords: list, item: dict) -> float:
    if not keywords:
        return 0.0

    title = (item.get("title") or "").lower()
    handle = (item.get("handle") or "").lower()
    item_text = " ".join([
        title,
        handle,
        item.get("productType") or "",
        " ".join(item.get("tags") or []),
        item.get("description") or "",
    ]).lower()

    score = 0
    for keyword in keywords:
        if keyword not in item_text:
            continue
        if keyword in title:
            score += 3
        elif keyword in handle:
            score += 2
        else:
            score += 1

    return score / len(keywords)


def url_type(url: str) -> Optional[str]:
    path = _path_of(url)
    if path is None:
        return None
    if "/collections/" in path:
        return COLLECTION
    if "/products/" in path:
        return PRODUCT
    return None


def find_best_match(keywords: list, products: list, collections: list,
                    preferred_type: Optional[str] = None) -> Optional[Match]:
    """
    With a preferred type only that half of the catalog is searched;
    otherwise products first, then collections. Ties keep the first item seen.
    """
    if preferred_type == PRODUCT:
        pools = [(PRODUCT, products)]
    elif preferred_type == COLLECTION:
        pools = [(COLLECTION, collections)]
    else:
        pools = [(PRODUCT, products), (COLLECTION, collections)]

    best: Optional[Match] = None
    best_score = 0.0
    for kind, items in pools:
        for item in items:
            score = similarity_score(keywords, item)
            if score > best_score:
                best_score = score
                best = Match(item=item, type=kind, score=score)

    if best is not None and best.score > MATCH_THRESHOLD:
        return best
    return None


def find_exact_match(url: str, products: list, collections: list) -> Optional[Match]:
    path = _path_of(url)
    if path is None:
        return None

    product_match = re.search(r"/products/([^/?]+)", path)
    if product_match:
        handle = product_match.group(1)
        for product in products:
            if product.get("handle") == handle:
                return Match(item=product, type=PRODUCT, score=1.0, exact=True)

    collection_match = re.search(r"/collections/([^/?]+)", path)
    if collection_match:
        handle = collection_match.group(1)
        for collection in collections:
            if collection.get("handle") == handle:
                return Match(item=collection, type=COLLECTION, score=1.0, exact=True)

    return None


def redirect_path(match: Match) -> str:
    prefix = "products" if match.type == PRODUCT else "collections"
    return f"/{prefix}/{match.item.get('handle')}"


def validate_redirect(path: str, products: list, collections: list) -> bool:
    clean = path[1:] if path.startswith("/") else path

    if clean.startswith("products/"):
        handle = clean.replace("products/", "", 1)
        return any(p.get("handle") == handle for p in products)

    if clean.startswith("collections/"):
        handle = clean.replace("collections/", "", 1)
        return any(c.get("handle") == handle for c in collections)

    return clean in ("", "/")


def resolve_redirect(url: str, products: list, collections: list) -> Tuple[str, str]:
    """
    Returns (redirect_path, reason). Every outcome has a target: the home
    page is the fallback for anything that cannot be matched.
    """
    lowered = str(url).lower()
    for keyword in HOME_KEYWORDS:
        if keyword in lowered:
            log.info(f"Found '{keyword}' keyword - redirecting to home page")
            return HOME_PATH, "home_keyword"

    exact = find_exact_match(url, products, collections)
    if exact:
        target = redirect_path(exact)
        log.info(f"Found EXACT {exact.type} match: {exact.item.get('title')} -> {target}")
        return target, "exact_match"

    keywords = extract_keywords(url)
    log.info(f"Extracted keywords: {', '.join(keywords)}")
    if not keywords:
        log.info("No keywords found - redirecting to home page")
        return HOME_PATH, "no_keywords"

    original_type = url_type(url)
    if original_type:
        log.info(f"Original URL type detected: {original_type}")
    else:
        log.info("Could not determine original URL type; searching products and collections")

    best = find_best_match(keywords, products, collections, original_type)
    if best is None:
        log.info(f"No suitable {original_type or 'catalog'} match found - redirecting to home page")
        return HOME_PATH, "no_match"

    target = redirect_path(best)
    log.info(f"Found {best.type} match: {best.item.get('title')} (score {best.score:.2f})")
    if not validate_redirect(target, products, collections):
        log.error(f"❌ Suggested URL {target} does not exist in the catalog; redirecting to home page")
        return HOME_PATH, "invalid_match"

    return target, "best_match"
