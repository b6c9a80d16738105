#!/usr/bin/env python3
"""
sheets_client.py
Thin wrapper around the Google Sheets v4 values API.
Reads GOOGLE_SHEET_ID and GOOGLE_CREDENTIALS_FILE (service-account JSON)
from .env and exposes a `SheetsClient` class.
"""

import logging
import os

import pandas as pd
from dotenv import load_dotenv
from google.oauth2.service_account import Credentials
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

load_dotenv()

log = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]


def build_sheets_service(credentials_file: str):
    creds = Credentials.from_service_account_file(credentials_file, scopes=SCOPES)
    return build("sheets", "v4", credentials=creds, cache_discovery=False)


class SheetsClient:
    def __init__(self, service=None):
        self.spreadsheet_id = os.getenv("GOOGLE_SHEET_ID", "").strip()
        self.credentials_file = os.getenv("GOOGLE_CREDENTIALS_FILE", "credentials.json")
        if not self.spreadsheet_id:
            raise EnvironmentError("Missing GOOGLE_SHEET_ID in .env")
        self.service = service or build_sheets_service(self.credentials_file)

    def _values(self):
        return self.service.spreadsheets().values()

    # ------------------------------------------------------------------
    def read_range(self, range_name: str) -> list:
        """Returns the raw rows of `range_name`. Errors propagate: a job cannot run without its input."""
        try:
            response = self._values().get(
                spreadsheetId=self.spreadsheet_id,
                range=range_name,
            ).execute()
        except HttpError as e:
            log.error(f"❌ Error reading Google Sheet range {range_name}: {e}")
            raise
        return response.get("values", []) or []

    def read_frame(self, range_name: str) -> pd.DataFrame:
        """
        Reads `range_name` into a DataFrame, first row as headers.
        The API drops trailing empty cells, so short rows are padded with "".
        """
        rows = self.read_range(range_name)
        if not rows:
            return pd.DataFrame()
        headers = [str(h).strip() for h in rows[0]]
        width = len(headers)
        body = [(list(row) + [""] * width)[:width] for row in rows[1:]]
        return pd.DataFrame(body, columns=headers, dtype=str)

    def append_rows(self, range_name: str, rows: list) -> bool:
        try:
            self._values().append(
                spreadsheetId=self.spreadsheet_id,
                range=range_name,
                valueInputOption="RAW",
                body={"values": rows},
            ).execute()
        except Exception as e:
            log.error(f"❌ Error appending to {range_name}: {e}")
            return False
        log.info(f"Appended {len(rows)} row(s) to {range_name}")
        return True

    def update_cell(self, range_name: str, value) -> bool:
        try:
            self._values().update(
                spreadsheetId=self.spreadsheet_id,
                range=range_name,
                valueInputOption="RAW",
                body={"values": [[value]]},
            ).execute()
        except Exception as e:
            log.error(f"❌ Error updating {range_name}: {e}")
            return False
        log.info(f"Updated {range_name} with: {value}")
        return True
