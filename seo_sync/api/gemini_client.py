#!/usr/bin/env python3
"""
gemini_client.py
Minimal REST client for the Gemini generateContent endpoint.
Reads GEMINI_API_KEY and GEMINI_MODEL from .env.

A missing key or a failed call never raises: `generate` returns None and
the caller substitutes its own default text.
"""

import logging
import os

import requests
from dotenv import load_dotenv

load_dotenv()

log = logging.getLogger(__name__)

GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/models"


class GeminiClient:
    def __init__(self, session: requests.Session | None = None, timeout: int = 60):
        self.api_key = os.getenv("GEMINI_API_KEY", "").strip()
        self.model = os.getenv("GEMINI_MODEL", "gemini-2.0-flash")
        self.endpoint = f"{GEMINI_BASE_URL}/{self.model}:generateContent"
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"Content-Type": "application/json"})

    def generate(self, prompt: str) -> str | None:
        if not self.api_key:
            log.warning("⚠️ GEMINI_API_KEY not set, falling back to default text")
            return None

        payload = {"contents": [{"parts": [{"text": prompt}]}]}
        try:
            resp = self.session.post(
                self.endpoint,
                params={"key": self.api_key},
                json=payload,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            log.error(f"❌ Gemini API ({self.model}) exception: {e}")
            return None

        if resp.status_code != 200:
            log.error(f"❌ Gemini API ({self.model}) error: {resp.status_code} - {resp.text[:200]}")
            return None

        try:
            data = resp.json()
        except ValueError:
            log.error(f"❌ Gemini API ({self.model}) returned non-JSON body")
            return None

        try:
            parts = data["candidates"][0]["content"]["parts"]
            text = (parts[0].get("text") or "").strip()
        except (AttributeError, IndexError, KeyError, TypeError):
            log.error(f"❌ Gemini API ({self.model}) returned an unexpected body: {str(data)[:200]}")
            return None
        return text or None
