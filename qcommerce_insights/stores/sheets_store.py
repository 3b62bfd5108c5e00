"""
qcommerce_insights/stores/sheets_store.py
-------------------------------------------
Append survey responses as rows of a Google Sheet.

The header row is initialised from the first record's keys. Later records are
aligned to the existing header; keys the header does not know yet are added as
new columns at the end.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import gspread
from google.oauth2.service_account import Credentials
from gspread.utils import rowcol_to_a1

from qcommerce_insights.config import Settings
from qcommerce_insights.errors import PersistenceError
from qcommerce_insights.stores.base import ResponseStore

logger = logging.getLogger(__name__)

SCOPES = [
    "https://www.googleapis.com/auth/spreadsheets",
    "https://www.googleapis.com/auth/drive",
]


def _cell(value: Any) -> Any:
    if value is None:
        return ""
    if isinstance(value, (str, int, float)):
        return value
    return str(value)


class SheetsStore(ResponseStore):
    name = "sheets"

    def __init__(self, settings: Settings, client: Optional[gspread.Client] = None):
        self.settings = settings
        self.sheet_id = settings.google_sheet_id
        self.worksheet_name = settings.google_worksheet_name
        self._client = client

    @property
    def is_configured(self) -> bool:
        return self._client is not None or self.settings.sheets_configured

    def _connect(self) -> gspread.Client:
        if self._client is None:
            info = self.settings.service_account_info()
            if not info:
                raise PersistenceError(
                    "No Google credentials. Set GOOGLE_SERVICE_ACCOUNT_EMAIL and GOOGLE_PRIVATE_KEY "
                    "or GOOGLE_APPLICATION_CREDENTIALS_JSON.",
                    backend=self.name,
                )
            creds = Credentials.from_service_account_info(info, scopes=SCOPES)
            self._client = gspread.authorize(creds)
        return self._client

    def _worksheet(self, min_cols: int) -> gspread.Worksheet:
        if not self.sheet_id:
            raise PersistenceError("Missing GOOGLE_SHEET_ID.", backend=self.name)
        sh = self._connect().open_by_key(self.sheet_id)
        if not self.worksheet_name:
            return sh.get_worksheet(0)
        try:
            return sh.worksheet(self.worksheet_name)
        except gspread.exceptions.WorksheetNotFound:
            logger.info("Creating worksheet %r", self.worksheet_name)
            return sh.add_worksheet(title=self.worksheet_name, rows=2, cols=max(1, min_cols))

    def _ensure_header(self, ws: gspread.Worksheet, keys: List[str]) -> List[str]:
        header = [h for h in ws.row_values(1)]
        missing = [k for k in keys if k not in header]
        if header and not missing:
            return header

        header = header + missing
        if ws.col_count < len(header):
            ws.resize(rows=max(ws.row_count, 2), cols=len(header))
        ws.update(range_name=f"A1:{rowcol_to_a1(1, len(header))}", values=[header])
        logger.info("Sheet header updated (%d columns, %d new)", len(header), len(missing))
        return header

    def append(self, record: Dict[str, Any]) -> None:
        try:
            ws = self._worksheet(len(record))
            header = self._ensure_header(ws, list(record))
            row = [_cell(record.get(col, "")) for col in header]
            ws.append_row(row, value_input_option="RAW", insert_data_option="INSERT_ROWS")
        except PersistenceError:
            raise
        except Exception as e:
            raise PersistenceError(f"Google Sheets append failed: {e}", backend=self.name) from e
        logger.info("Appended survey response to sheet %s", self.sheet_id)
