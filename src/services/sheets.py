"""
Timesheet sources: Google Sheets and local CSV/XLSX fixture files.
"""

import asyncio
import csv
from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path
from typing import Protocol

import gspread
from openpyxl import load_workbook

from core.config import DEFAULT_SHEET_RANGE, FETCH_CONCURRENCY, GSHEETS_CREDENTIALS_FILE
from core.errors import SheetSourceError


class RowSource(Protocol):
    def get_rows(self, sheet_id: str) -> list[list[str]]: ...


@dataclass
class SheetData:
    """Raw rows retrieved for one billing target."""

    target: str
    rows: list[list[str]]


# =============================================================================
# GOOGLE SHEETS
# =============================================================================


class GoogleSheetsSource:
    """Reads the first worksheet of a spreadsheet with a service account."""

    def __init__(
        self,
        credentials_file: Path = GSHEETS_CREDENTIALS_FILE,
        sheet_range: str = DEFAULT_SHEET_RANGE,
    ):
        self.credentials_file = credentials_file
        self.sheet_range = sheet_range
        self._client: gspread.Client | None = None

    @property
    def client(self) -> gspread.Client:
        if self._client is None:
            self._client = gspread.service_account(filename=str(self.credentials_file))
        return self._client

    def get_rows(self, sheet_id: str) -> list[list[str]]:
        try:
            response = self.client.open_by_key(sheet_id).values_get(self.sheet_range)
        except gspread.exceptions.GSpreadException as e:
            raise SheetSourceError(f"Google Sheets API error for {sheet_id}: {e}") from e
        return response.get("values", [])


# =============================================================================
# LOCAL FILES
# =============================================================================


class LocalFileSource:
    """Serves the same local file for every sheet id."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def get_rows(self, sheet_id: str) -> list[list[str]]:
        return read_local_rows(self.path)


def parse_csv(text: str) -> list[list[str]]:
    """Parse ';'-separated rows, skipping blank lines."""
    lines = [line for line in text.splitlines() if line.strip()]
    return [row for row in csv.reader(lines, delimiter=";")]


def _cell_to_str(value) -> str:
    if value is None:
        return ""
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def read_xlsx(path: Path) -> list[list[str]]:
    """Read the active sheet of a workbook as strings."""
    wb = load_workbook(str(path), read_only=True, data_only=True)
    try:
        ws = wb.active
        return [
            [_cell_to_str(value) for value in row]
            for row in ws.iter_rows(values_only=True)
            if any(value not in (None, "") for value in row)
        ]
    finally:
        wb.close()


def read_local_rows(path: Path) -> list[list[str]]:
    """Read rows from a .csv or .xlsx file."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Input file not found: {path}")
    if path.suffix.lower() == ".xlsx":
        return read_xlsx(path)
    return parse_csv(path.read_text(encoding="utf-8"))


# =============================================================================
# PARALLEL RETRIEVAL
# =============================================================================


async def fetch_all_rows(
    targets: dict[str, str],
    source: RowSource,
    concurrency: int = FETCH_CONCURRENCY,
) -> list[SheetData]:
    """
    Fetch the rows of every target with at most `concurrency` requests in flight.

    Args:
        targets: Target name -> sheet id
        source: Blocking row source, run in worker threads

    Returns:
        One SheetData per target, in the order of `targets`
    """
    semaphore = asyncio.Semaphore(concurrency)

    async def fetch(target: str, sheet_id: str) -> SheetData:
        async with semaphore:
            rows = await asyncio.to_thread(source.get_rows, sheet_id)
        return SheetData(target=target, rows=rows)

    return list(
        await asyncio.gather(*(fetch(target, sheet_id) for target, sheet_id in targets.items()))
    )
