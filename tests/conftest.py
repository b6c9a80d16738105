import time

import httplib2
import pytest
from googleapiclient.errors import HttpError

from seo_sync.api.sheets_client import SheetsClient


class FakeResponse:
    def __init__(self, payload=None, status_code=200, text=""):
        self._payload = payload
        self.status_code = status_code
        self.text = text or str(payload)

    def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


class FakeSession:
    """Stands in for requests.Session: replays queued responses, records posts."""

    def __init__(self, responses=None):
        self.headers = {}
        self.responses = list(responses or [])
        self.posts = []

    def post(self, url, **kwargs):
        self.posts.append({"url": url, **kwargs})
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


class _Request:
    def __init__(self, fn):
        self._fn = fn

    def execute(self):
        return self._fn()


class FakeValues:
    def __init__(self, store):
        self.store = store

    def get(self, spreadsheetId, range):
        def run():
            if self.store.fail_reads:
                raise HttpError(httplib2.Response({"status": "500"}), b"read failed")
            return {"values": self.store.ranges.get(range, [])} if range in self.store.ranges else {}
        return _Request(run)

    def append(self, spreadsheetId, range, valueInputOption, body):
        def run():
            if self.store.write_error:
                raise self.store.write_error
            if self.store.fail_writes:
                raise HttpError(httplib2.Response({"status": "500"}), b"append failed")
            self.store.appends.append((range, body["values"], valueInputOption))
            return {}
        return _Request(run)

    def update(self, spreadsheetId, range, valueInputOption, body):
        def run():
            if self.store.write_error:
                raise self.store.write_error
            if self.store.fail_writes:
                raise HttpError(httplib2.Response({"status": "500"}), b"update failed")
            self.store.updates.append((range, body["values"], valueInputOption))
            return {}
        return _Request(run)


class FakeSheetsService:
    """In-memory stand-in for the discovery-built Sheets v4 service."""

    def __init__(self, ranges=None):
        self.ranges = dict(ranges or {})
        self.appends = []
        self.updates = []
        self.fail_reads = False
        self.fail_writes = False
        self.write_error = None

    def spreadsheets(self):
        return self

    def values(self):
        return FakeValues(self)


class FakeShopify:
    def __init__(self, variants=None, details=None, products=None, collections=None,
                 price_result=True, alt_results=None):
        self.variants = variants or {}
        self.details = details or {}
        self.products = products or []
        self.collections = collections or []
        self.price_result = price_result
        self.alt_results = list(alt_results or [])
        self.price_updates = []
        self.alt_updates = []

    def get_variant_by_sku(self, sku):
        return self.variants.get(sku)

    def get_product_details_by_sku(self, sku):
        return self.details.get(sku)

    def update_variant_prices(self, product_gid, variant_gid, price, compare_at_price, retries=3, dry_run=False):
        self.price_updates.append((product_gid, variant_gid, price, compare_at_price, dry_run))
        if not self.price_result:
            return None
        return {"id": variant_gid, "price": price, "compareAtPrice": compare_at_price}

    def update_media_alt_text(self, media_gid, alt_text, retries=3, dry_run=False):
        self.alt_updates.append((media_gid, alt_text, dry_run))
        return self.alt_results.pop(0) if self.alt_results else True

    def get_all_products(self):
        return self.products

    def get_all_collections(self):
        return self.collections


class FakeGemini:
    def __init__(self, texts=None):
        self.texts = list(texts or [])
        self.prompts = []

    def generate(self, prompt):
        self.prompts.append(prompt)
        return self.texts.pop(0) if self.texts else None


@pytest.fixture(autouse=True)
def env(monkeypatch):
    monkeypatch.setenv("SHOP_URL", "https://test-shop.myshopify.com/")
    monkeypatch.setenv("SHOPIFY_ACCESS_TOKEN", "shpat_test")
    monkeypatch.setenv("API_VERSION", "2025-10")
    monkeypatch.setenv("GOOGLE_SHEET_ID", "sheet-123")
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)


@pytest.fixture(autouse=True)
def sleeps(monkeypatch):
    calls = []
    monkeypatch.setattr(time, "sleep", lambda seconds: calls.append(seconds))
    return calls


@pytest.fixture
def sheet_service():
    return FakeSheetsService()


@pytest.fixture
def sheets(sheet_service):
    return SheetsClient(service=sheet_service)
