"""Google Sheets output for a finished TripResult.

The worksheet is dropped and re-created on every publish so stale rows and
merges never survive a rerun.
"""
import json
import logging
from datetime import date, datetime
from typing import Any, List, Optional

import gspread
from google.oauth2.service_account import Credentials
from gspread.utils import rowcol_to_a1

from core.config import Settings, settings as default_settings
from core.state import FlightResult, TripResult

logger = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]
TOKEN_URI = "https://oauth2.googleapis.com/token"

HEADERS = [
    f"  {h}  "
    for h in ("Reptér", "Reptér", "Dátum", "Felszállás", "Érkezés", "Ár (EUR)", "Társaság")
]


def format_time(value: datetime) -> str:
    return value.strftime("%H:%M")


def format_date(value: str) -> str:
    d = date.fromisoformat(value)
    return f"{d.month:02d}.{d.day:02d}."


def hyperlink(url: str, label: str) -> str:
    # Sheet locale uses ';' as the argument separator
    return f'=HYPERLINK({json.dumps(url)}; "{label}")'


def flight_row(flight: FlightResult) -> List[Any]:
    return [
        flight.origin,
        flight.destination,
        hyperlink(flight.url, format_date(flight.date)),
        format_time(flight.departs_at),
        format_time(flight.arrives_at),
        flight.price,
        flight.carrier or "",
    ]


def build_rows(result: TripResult) -> List[List[Any]]:
    """Header, outbound rows, one blank separator row, inbound rows."""
    rows: List[List[Any]] = [list(HEADERS)]
    rows.extend(flight_row(f) for f in result.outbound)
    rows.append([])
    rows.extend(flight_row(f) for f in result.inbound)
    return rows


def client_from_settings(settings: Optional[Settings] = None) -> gspread.Client:
    """Authorize a gspread client from the service-account email and key in settings."""
    settings = settings or default_settings
    info = {
        "type": "service_account",
        "client_email": settings.require("google_client_email"),
        "private_key": settings.require("google_private_key"),
        "token_uri": TOKEN_URI,
    }
    creds = Credentials.from_service_account_info(info, scopes=SCOPES)
    return gspread.authorize(creds)


class SheetsPresenter:
    def __init__(self, client: gspread.Client, spreadsheet_id: str, sheet_name: str):
        self.client = client
        self.spreadsheet_id = spreadsheet_id
        self.sheet_name = sheet_name

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "SheetsPresenter":
        settings = settings or default_settings
        spreadsheet_id = settings.require("google_spreadsheet_id")
        return cls(client_from_settings(settings), spreadsheet_id, settings.sheet_name)

    def _replace_worksheet(self, spreadsheet: gspread.Spreadsheet, rows: int, cols: int) -> gspread.Worksheet:
        try:
            existing = spreadsheet.worksheet(self.sheet_name)
        except gspread.WorksheetNotFound:
            existing = None
        if existing is None:
            return spreadsheet.add_worksheet(title=self.sheet_name, rows=rows, cols=cols)

        # A spreadsheet must always keep at least one sheet
        worksheet = spreadsheet.add_worksheet(title=f"{self.sheet_name} (new)", rows=rows, cols=cols)
        spreadsheet.del_worksheet(existing)
        worksheet.update_title(self.sheet_name)
        return worksheet

    def publish(self, result: TripResult) -> gspread.Worksheet:
        rows = build_rows(result)
        width = len(HEADERS)

        spreadsheet = self.client.open_by_key(self.spreadsheet_id)
        worksheet = self._replace_worksheet(spreadsheet, rows=len(rows), cols=width)

        worksheet.update(values=rows, range_name="A1", value_input_option="USER_ENTERED")
        worksheet.columns_auto_resize(0, width)
        worksheet.merge_cells("A1:B1", merge_type="MERGE_ALL")

        last_cell = rowcol_to_a1(len(rows), width)
        header_end = rowcol_to_a1(1, width)
        worksheet.batch_format([
            {
                "range": f"A1:{last_cell}",
                "format": {"horizontalAlignment": "CENTER", "verticalAlignment": "MIDDLE"},
            },
            {
                "range": f"A1:{header_end}",
                "format": {
                    "horizontalAlignment": "CENTER",
                    "verticalAlignment": "MIDDLE",
                    "textFormat": {"bold": True},
                },
            },
        ])

        logger.info(
            "Wrote %d outbound and %d inbound flight(s) to sheet %r",
            len(result.outbound), len(result.inbound), self.sheet_name,
        )
        return worksheet
