#!/usr/bin/env python3
"""
shopify_client.py
Central GraphQL helper for the sheet sync jobs.
Reads SHOP_URL, SHOPIFY_ACCESS_TOKEN, API_VERSION from .env
and exposes a `ShopifyClient` class.
"""

import json
import logging
import os
import time

import requests
from dotenv import load_dotenv

from seo_sync.utils.settings import delays

load_dotenv()

log = logging.getLogger(__name__)


class ShopifyClient:
    def __init__(self, session: requests.Session | None = None):
        self.shop_url = os.getenv("SHOP_URL", "").rstrip("/")
        self.token = os.getenv("SHOPIFY_ACCESS_TOKEN")
        self.api_version = os.getenv("API_VERSION", "2025-10")
        if not all([self.shop_url, self.token]):
            raise EnvironmentError("Missing SHOP_URL or SHOPIFY_ACCESS_TOKEN in .env")

        self.endpoint = f"{self.shop_url}/admin/api/{self.api_version}/graphql.json"
        self.session = session or requests.Session()
        self.session.headers.update({
            "Content-Type": "application/json",
            "X-Shopify-Access-Token": self.token,
        })

    # ------------------------------------------------------------------
    def graphql(self, query: str, variables: dict | None = None):
        """Perform a GraphQL POST with throttle awareness."""
        payload = {"query": query, "variables": variables or {}}
        resp = self.session.post(self.endpoint, json=payload, timeout=60)
        if resp.status_code != 200:
            raise RuntimeError(f"GraphQL HTTP {resp.status_code}: {resp.text}")

        data = resp.json()
        throttle = data.get('extensions', {}).get('cost', {}).get('throttleStatus', {})
        if throttle and throttle.get('currentlyAvailable', 1000) < 1000:
            time.sleep(2)
        return data

    # ------------------------------------------------------------------
    # --- SKU lookups (price sync, alt text) ---
    # ------------------------------------------------------------------

    def get_variant_by_sku(self, sku: str) -> dict | None:
        """
        Returns the first variant whose SKU matches, with its product GID
        (needed by productVariantsBulkUpdate), or None.
        """
        query = """
        query getVariantBySku($query: String!) {
          productVariants(first: 1, query: $query) {
            edges {
              node {
                id
                sku
                price
                compareAtPrice
                product {
                  id
                }
              }
            }
          }
        }
        """
        log.info(f"Fetching variant for SKU: {sku}")
        try:
            response = self.graphql(query, {"query": f"sku:{sku}"})
        except (requests.RequestException, RuntimeError) as e:
            log.error(f"❌ Error fetching variant by SKU {sku}: {e}")
            return None

        if 'errors' in response:
            log.error(f"❌ GraphQL errors fetching variant {sku}: {response['errors']}")
            return None

        edges = (response.get("data") or {}).get("productVariants", {}).get("edges", [])
        if edges:
            return edges[0]["node"]
        return None

    def get_product_details_by_sku(self, sku: str) -> dict | None:
        """
        Fetches the variant matching `sku` together with its product's title,
        media (first 50) and sibling variants. Returns the variant node or None.
        """
        query = """
        query getProductDetailsBySku($query: String!) {
          productVariants(first: 1, query: $query) {
            edges {
              node {
                id
                sku
                title
                product {
                  id
                  title
                  media(first: 50) {
                    edges {
                      node {
                        id
                        alt
                        ... on MediaImage {
                          image {
                            url
                          }
                        }
                        ... on Video {
                          sources {
                            url
                          }
                        }
                      }
                    }
                  }
                  variants(first: 50) {
                    edges {
                      node {
                        id
                        title
                        sku
                      }
                    }
                  }
                }
              }
            }
          }
        }
        """
        log.info(f"Fetching product details for SKU: {sku}")
        try:
            response = self.graphql(query, {"query": f"sku:{sku}"})
        except (requests.RequestException, RuntimeError) as e:
            log.error(f"❌ Error fetching product details for {sku}: {e}")
            return None

        if 'errors' in response:
            log.error(f"❌ GraphQL errors fetching product details {sku}: {response['errors']}")
            return None

        edges = (response.get("data") or {}).get("productVariants", {}).get("edges", [])
        if edges:
            return edges[0]["node"]
        return None

    # ------------------------------------------------------------------
    # --- Mutations with a fixed retry loop ---
    # ------------------------------------------------------------------

    def update_variant_prices(self, product_gid: str, variant_gid: str, price: str,
                              compare_at_price: str | None, retries: int = 3,
                              dry_run: bool = False) -> dict | None:
        """
        Sets price / compareAtPrice on a single variant.
        Returns the updated variant dict, or None on user errors or after
        `retries` failed attempts.
        """
        mutation = """
        mutation productVariantsBulkUpdate($productId: ID!, $variants: [ProductVariantsBulkInput!]!) {
          productVariantsBulkUpdate(productId: $productId, variants: $variants) {
            productVariants {
              id
              price
              compareAtPrice
            }
            userErrors {
              field
              message
            }
          }
        }
        """
        variables = {
            "productId": product_gid,
            "variants": [{
                "id": variant_gid,
                "price": str(price),
                "compareAtPrice": str(compare_at_price) if compare_at_price else None,
            }],
        }

        if dry_run:
            log.info(f"  > [DRY RUN] Would execute productVariantsBulkUpdate: {json.dumps(variables)}")
            return variables["variants"][0]

        for attempt in range(1, retries + 1):
            log.info(f"Attempt {attempt} - Updating variant with ID: {variant_gid}")
            log.debug(f"Payload: {json.dumps(variables)}")
            try:
                response = self.graphql(mutation, variables)
            except (requests.RequestException, RuntimeError) as e:
                log.error(f"❌ Error during attempt {attempt} updating variant {variant_gid}: {e}")
                continue

            if 'errors' in response:
                log.error(f"❌ GraphQL errors: {response['errors']}")
                if attempt < retries:
                    log.info("Retrying...")
                    time.sleep(2 * attempt)
                continue

            update_data = (response.get("data") or {}).get("productVariantsBulkUpdate") or {}
            user_errors = update_data.get("userErrors", [])
            if user_errors:
                error_msgs = [f"({e.get('field')}: {e.get('message')})" for e in user_errors]
                log.error(f"❌ Variant Update Error: {', '.join(error_msgs)}")
                return None

            variants = update_data.get("productVariants") or []
            variant = variants[0] if variants else {}
            log.info(f"✅ Updated variant {variant_gid}. New Price: {variant.get('price')}, "
                     f"Compare At Price: {variant.get('compareAtPrice')}")
            return variant

        return None

    def update_media_alt_text(self, media_gid: str, alt_text: str, retries: int = 3,
                              dry_run: bool = False) -> bool:
        """
        Writes `alt_text` onto a MediaImage via fileUpdate.
        Returns True on success, False on user errors or after `retries` failures.
        """
        mutation = """
        mutation fileUpdate($files: [FileUpdateInput!]!) {
          fileUpdate(files: $files) {
            files {
              id
              alt
            }
            userErrors {
              field
              message
            }
          }
        }
        """
        variables = {"files": [{"id": media_gid, "alt": alt_text}]}

        if dry_run:
            log.info(f"  > [DRY RUN] Would set alt text on {media_gid}: {alt_text}")
            return True

        for attempt in range(1, retries + 1):
            log.info(f"Attempt {attempt} - Updating media alt text for ID: {media_gid}")
            log.debug(f"New alt text: {alt_text}")
            try:
                response = self.graphql(mutation, variables)
            except (requests.RequestException, RuntimeError) as e:
                log.error(f"❌ Error during attempt {attempt} updating media {media_gid}: {e}")
                continue

            if 'errors' in response:
                log.error(f"❌ GraphQL errors: {response['errors']}")
                if attempt < retries:
                    log.info("Retrying...")
                    time.sleep(2 * attempt)
                continue

            update_data = (response.get("data") or {}).get("fileUpdate") or {}
            user_errors = update_data.get("userErrors", [])
            if user_errors:
                log.error(f"❌ Media update errors: {user_errors}")
                return False

            log.info(f"✅ Updated alt text for media {media_gid}")
            return True

        return False

    # ------------------------------------------------------------------
    # --- Catalog dumps (404 redirect mapping) ---
    # ------------------------------------------------------------------

    def _paginate(self, query: str, root: str) -> list:
        nodes = []
        hasNextPage = True
        cursor = None
        page_delay = delays()["page"]

        while hasNextPage:
            try:
                response = self.graphql(query, {"cursor": cursor})
            except (requests.RequestException, RuntimeError) as e:
                log.error(f"❌ Error fetching {root}: {e}")
                break

            if 'errors' in response:
                log.error(f"❌ GraphQL API returned errors fetching {root}: {response['errors']}")
                break

            data = (response.get("data") or {}).get(root)
            if data is None:
                log.warning(f"⚠️  The '{root}' key was not found. This may be a permission issue.")
                break

            for edge in data.get("edges", []):
                nodes.append(edge.get("node", {}))
                cursor = edge.get("cursor")

            page_info = data.get("pageInfo", {})
            hasNextPage = page_info.get("hasNextPage", False)
            cursor = page_info.get("endCursor") or cursor
            log.info(f"Fetched {len(nodes)} {root} so far...")

            if hasNextPage:
                time.sleep(page_delay)

        log.info(f"Total {root} fetched: {len(nodes)}")
        return nodes

    def get_all_products(self) -> list:
        """
        Fetches every product (id, title, handle, productType, tags).
        On a GraphQL error, returns whatever was fetched before it.
        """
        query = """
        query getAllProducts($cursor: String) {
          products(first: 250, after: $cursor) {
            edges {
              cursor
              node {
                id
                title
                handle
                productType
                tags
              }
            }
            pageInfo {
              hasNextPage
              endCursor
            }
          }
        }
        """
        return self._paginate(query, "products")

    def get_all_collections(self) -> list:
        """
        Fetches every collection (id, title, handle, description).
        """
        query = """
        query getAllCollections($cursor: String) {
          collections(first: 250, after: $cursor) {
            edges {
              cursor
              node {
                id
                title
                handle
                description
              }
            }
            pageInfo {
              hasNextPage
              endCursor
            }
          }
        }
        """
        return self._paginate(query, "collections")
