"""Row-store clients for the product spreadsheet.

Two backends expose the same four calls (``read_range``, ``append_row``,
``update_range``, ``delete_row_range``):

* :class:`GoogleSheetsClient` talks to the Google Sheets v4 API using a
  service account. Set ``GOOGLE_SHEETS_ID`` plus either
  ``GOOGLE_SHEETS_CLIENT_EMAIL``/``GOOGLE_SHEETS_PRIVATE_KEY`` or
  ``GOOGLE_APPLICATION_CREDENTIALS`` (path to the JSON key). The sheet must
  be shared with the service account email as editor.
* :class:`MemorySheetsClient` keeps rows in process memory, for local
  development and the test-suite (``SHEETS_BACKEND=memory``).
"""

from __future__ import annotations

import copy
import logging
import re
from typing import Any, Dict, List, Optional, Sequence

from flask import current_app
from google.auth.exceptions import GoogleAuthError
from google.oauth2 import service_account
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError
from httplib2 import HttpLib2Error

SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]
TOKEN_URI = "https://oauth2.googleapis.com/token"

logger = logging.getLogger(__name__)

Rows = List[List[Any]]


class SheetsError(RuntimeError):
    """Raised when the spreadsheet service cannot complete a call."""


class StoreNotConfigured(SheetsError):
    pass


_A1_RANGE = re.compile(
    r"^(?:(?P<sheet>'(?:[^']|'')+'|[^!]+)!)?"
    r"(?P<col1>[A-Z]+)(?P<row1>\d*)"
    r"(?::(?P<col2>[A-Z]+)(?P<row2>\d*))?$"
)


def _column_index(letters: str) -> int:
    index = 0
    for char in letters:
        index = index * 26 + (ord(char) - ord("A") + 1)
    return index - 1


def parse_a1(range_name: str) -> Dict[str, Any]:
    """Split an A1 range such as ``Productos!A2:J2`` into its parts.

    Row numbers are 1-based; a missing row bound is ``None`` (open range).
    """
    match = _A1_RANGE.match(range_name.strip())
    if not match:
        raise SheetsError(f"Unsupported range {range_name!r}")
    sheet = match.group("sheet") or ""
    if len(sheet) >= 2 and sheet[0] == sheet[-1] == "'":
        sheet = sheet[1:-1].replace("''", "'")
    col1 = _column_index(match.group("col1"))
    col2 = _column_index(match.group("col2") or match.group("col1"))
    row1 = int(match.group("row1")) if match.group("row1") else None
    row2 = int(match.group("row2")) if match.group("row2") else row1
    if match.group("col2") and not match.group("row2"):
        row2 = None
    return {"sheet": sheet, "col1": col1, "col2": col2, "row1": row1, "row2": row2}


def quote_sheet_name(title: str) -> str:
    """Quote a sheet title for use in an A1 range (``Mi hoja`` -> ``'Mi hoja'``)."""
    return "'" + title.replace("'", "''") + "'"


class GoogleSheetsClient:
    def __init__(
        self,
        spreadsheet_id: str,
        client_email: Optional[str] = None,
        private_key: Optional[str] = None,
        credentials_file: Optional[str] = None,
    ) -> None:
        self.spreadsheet_id = spreadsheet_id
        self._client_email = client_email
        self._private_key = private_key.replace("\\n", "\n") if private_key else None
        self._credentials_file = credentials_file
        self._service = None

    def _credentials(self) -> service_account.Credentials:
        if self._credentials_file:
            return service_account.Credentials.from_service_account_file(self._credentials_file, scopes=SCOPES)
        if self._client_email and self._private_key:
            info = {
                "type": "service_account",
                "client_email": self._client_email,
                "private_key": self._private_key,
                "token_uri": TOKEN_URI,
            }
            return service_account.Credentials.from_service_account_info(info, scopes=SCOPES)
        raise StoreNotConfigured("Google Sheets credentials are not configured.")

    @property
    def service(self):
        if self._service is None:
            if not self.spreadsheet_id:
                raise StoreNotConfigured("GOOGLE_SHEETS_ID is not configured.")
            try:
                creds = self._credentials()
                self._service = build("sheets", "v4", credentials=creds, cache_discovery=False)
            except StoreNotConfigured:
                raise
            except Exception as exc:
                logger.exception("Google Sheets service creation failed: %s", exc)
                raise SheetsError(f"Unable to create Google Sheets client: {exc}") from exc
        return self._service

    def _execute(self, request, action: str):
        # token refresh happens inside execute(), so auth failures surface here too
        try:
            return request.execute()
        except (HttpError, GoogleAuthError, HttpLib2Error, OSError) as exc:
            logger.error("Google Sheets %s failed: %s", action, exc)
            raise SheetsError(f"Google Sheets {action} failed: {exc}") from exc

    def read_range(self, range_name: str) -> Rows:
        request = self.service.spreadsheets().values().get(
            spreadsheetId=self.spreadsheet_id,
            range=range_name,
            valueRenderOption="UNFORMATTED_VALUE",
            dateTimeRenderOption="FORMATTED_STRING",
        )
        response = self._execute(request, "read")
        return response.get("values", [])

    def append_row(self, range_name: str, row: Sequence[Any]) -> None:
        request = self.service.spreadsheets().values().append(
            spreadsheetId=self.spreadsheet_id,
            range=range_name,
            valueInputOption="RAW",
            insertDataOption="INSERT_ROWS",
            body={"values": [list(row)]},
        )
        self._execute(request, "append")

    def update_range(self, range_name: str, rows: Sequence[Sequence[Any]]) -> None:
        request = self.service.spreadsheets().values().update(
            spreadsheetId=self.spreadsheet_id,
            range=range_name,
            valueInputOption="RAW",
            body={"values": [list(row) for row in rows]},
        )
        self._execute(request, "update")

    def delete_row_range(self, sheet_id: int, start_index: int, end_index: int) -> None:
        body = {
            "requests": [
                {
                    "deleteDimension": {
                        "range": {
                            "sheetId": sheet_id,
                            "dimension": "ROWS",
                            "startIndex": start_index,
                            "endIndex": end_index,
                        }
                    }
                }
            ]
        }
        request = self.service.spreadsheets().batchUpdate(spreadsheetId=self.spreadsheet_id, body=body)
        self._execute(request, "row delete")

    def sheet_id_for(self, title: str) -> Optional[int]:
        request = self.service.spreadsheets().get(
            spreadsheetId=self.spreadsheet_id,
            fields="sheets.properties(sheetId,title)",
        )
        response = self._execute(request, "metadata read")
        for sheet in response.get("sheets", []):
            props = sheet.get("properties", {})
            if props.get("title") == title:
                return props.get("sheetId")
        return None


class MemorySheetsClient:
    """In-process stand-in for a spreadsheet, one list of rows per sheet."""

    def __init__(self, sheets: Optional[Dict[str, Rows]] = None) -> None:
        self.sheets: Dict[str, Rows] = {title: [list(row) for row in rows] for title, rows in (sheets or {}).items()}
        self._grid_ids: Dict[int, str] = {}
        for title in self.sheets:
            self._grid_ids[len(self._grid_ids)] = title

    def _sheet(self, title: str) -> Rows:
        if title not in self.sheets:
            self.sheets[title] = []
            self._grid_ids[len(self._grid_ids)] = title
        return self.sheets[title]

    def read_range(self, range_name: str) -> Rows:
        parts = parse_a1(range_name)
        rows = self._sheet(parts["sheet"])
        start = (parts["row1"] or 1) - 1
        stop = parts["row2"] if parts["row2"] is not None else len(rows)
        selected = [row[parts["col1"]:parts["col2"] + 1] for row in rows[start:stop]]
        while selected and not selected[-1]:
            selected.pop()
        return copy.deepcopy(selected)

    def append_row(self, range_name: str, row: Sequence[Any]) -> None:
        parts = parse_a1(range_name)
        self._sheet(parts["sheet"]).append(list(row))

    def update_range(self, range_name: str, rows: Sequence[Sequence[Any]]) -> None:
        parts = parse_a1(range_name)
        sheet = self._sheet(parts["sheet"])
        first = (parts["row1"] or 1) - 1
        for offset, values in enumerate(rows):
            position = first + offset
            while len(sheet) <= position:
                sheet.append([])
            target = sheet[position]
            end = parts["col1"] + len(values)
            if len(target) < end:
                target.extend([""] * (end - len(target)))
            target[parts["col1"]:end] = list(values)

    def delete_row_range(self, sheet_id: int, start_index: int, end_index: int) -> None:
        title = self._grid_ids.get(sheet_id)
        if title is None:
            raise SheetsError(f"No sheet with id {sheet_id}")
        del self.sheets[title][start_index:end_index]

    def sheet_id_for(self, title: str) -> Optional[int]:
        self._sheet(title)
        for grid_id, name in self._grid_ids.items():
            if name == title:
                return grid_id
        return None


class SheetsExtension:
    """Flask extension holding the row-store client for each app."""

    def init_app(self, app) -> None:
        cfg = app.config
        backend = (cfg.get("SHEETS_BACKEND") or "google").lower()
        if backend == "memory":
            client = MemorySheetsClient({cfg.get("SHEET_NAME", "Productos"): []})
        elif backend == "google":
            client = GoogleSheetsClient(
                spreadsheet_id=cfg.get("GOOGLE_SHEETS_ID") or "",
                client_email=cfg.get("GOOGLE_SHEETS_CLIENT_EMAIL"),
                private_key=cfg.get("GOOGLE_SHEETS_PRIVATE_KEY"),
                credentials_file=cfg.get("GOOGLE_APPLICATION_CREDENTIALS"),
            )
            if not client.spreadsheet_id:
                app.logger.warning("GOOGLE_SHEETS_ID is empty; product calls will fail until it is set.")
        else:
            raise ValueError(f"Unknown SHEETS_BACKEND: {backend!r}")
        app.extensions["librestock.sheets"] = client

    @property
    def client(self):
        return current_app.extensions["librestock.sheets"]
