"""
Timesheet Parsing Service

Turns the raw cell matrix of a timesheet (first row holds the headers) into
invoice line items. Rows without hours are never billed. Without a date range
only rows that have no invoice number yet are returned; with a date range all
rows in the period are returned, invoiced or not, so past months can be
reported on.
"""

import re
import sys
from dataclasses import dataclass
from datetime import MAXYEAR, MINYEAR, date

from core.columns import ColumnMap, map_columns
from core.config import ColumnNames
from core.errors import ConfigurationError, RowParseError
from models.line_item import InvoiceLineItem, parse_date

MONTH_PATTERN = re.compile(r"^[0-9]{4}-(?:0[1-9]|1[0-2])$")


# =============================================================================
# DATE RANGES
# =============================================================================


@dataclass(frozen=True)
class DateRange:
    """Half-open period: start is included, end is not."""

    start: date
    end: date

    def __contains__(self, day: date) -> bool:
        return self.start <= day < self.end

    @classmethod
    def for_month(cls, month: str) -> "DateRange":
        """Build the range for a 'YYYY-MM' month."""
        if not MONTH_PATTERN.match(month):
            raise ConfigurationError(f"Invalid month '{month}', expected YYYY-MM")
        year, mon = (int(part) for part in month.split("-"))
        check_year(year)
        start = date(year, mon, 1)
        end = date(year + 1, 1, 1) if mon == 12 else date(year, mon + 1, 1)
        return cls(start, end)

    @classmethod
    def for_year(cls, year: int) -> "DateRange":
        check_year(year)
        return cls(date(year, 1, 1), date(year + 1, 1, 1))


def check_year(year: int) -> None:
    """Years whose whole period, including the exclusive end, is a valid date."""
    if not MINYEAR <= year < MAXYEAR:
        raise ConfigurationError(
            f"Invalid year {year}, expected {MINYEAR}-{MAXYEAR - 1}"
        )


# =============================================================================
# CELL ACCESS
# =============================================================================


def cell(row: list[str], idx: int | None) -> str:
    """Cell value, with absent columns and short rows read as empty."""
    if idx is None or idx >= len(row) or row[idx] is None:
        return ""
    return row[idx]


# =============================================================================
# FILTERING
# =============================================================================

# Sheet row number of the first data row; row 1 holds the headers
FIRST_DATA_ROW = 2


def filter_rows(
    rows: list[list[str]],
    columns: ColumnMap,
    date_range: DateRange | None = None,
) -> list[tuple[int, list[str]]]:
    """
    Select the rows eligible for billing, keeping their order.

    Args:
        rows: Data rows (header already removed)
        columns: Resolved column indices
        date_range: Period to report on; None selects outstanding rows

    Returns:
        (sheet row number, row) pairs

    Raises:
        RowParseError: A date cell is filled but cannot be parsed
    """
    # No hours, nothing to bill
    eligible = [
        (number, row)
        for number, row in enumerate(rows, start=FIRST_DATA_ROW)
        if cell(row, columns.count)
    ]

    if date_range is None:
        return [(number, row) for number, row in eligible if not cell(row, columns.invoice_number)]

    in_range = []
    for number, row in eligible:
        raw_date = cell(row, columns.date)
        if not raw_date:
            print(f"Skipping row {number} due to missing date", file=sys.stderr)
            continue
        try:
            day = parse_date(raw_date)
        except ValueError as e:
            raise RowParseError(number, str(e), row) from e
        if day in date_range:
            in_range.append((number, row))
    return in_range


# =============================================================================
# NORMALIZATION
# =============================================================================


def build_description(row: list[str], columns: ColumnMap) -> str:
    client = cell(row, columns.client)
    description = cell(row, columns.description)
    return f"{client}: {description}" if client else description


def normalize_rows(
    rows: list[tuple[int, list[str]]],
    columns: ColumnMap,
    default_fee: float | None = None,
) -> list[InvoiceLineItem]:
    """
    Convert eligible (sheet row number, row) pairs into line items.

    Rows without a rate use default_fee. A row whose date cannot be parsed
    means the sheet itself is malformed and aborts the whole parse.
    """
    items = []
    for number, row in rows:
        fee_cell = cell(row, columns.fee)
        try:
            item = InvoiceLineItem.create(
                count=cell(row, columns.count),
                fee=fee_cell if fee_cell else default_fee,
                date_value=cell(row, columns.date),
                description=build_description(row, columns),
            )
        except ValueError as e:
            raise RowParseError(number, str(e), row) from e
        items.append(item)
    return items


def parse_invoice_rows(
    rows: list[list[str]],
    column_names: ColumnNames,
    default_fee: float | None = None,
    date_range: DateRange | None = None,
) -> list[InvoiceLineItem]:
    """
    Parse a full sheet (header row first) into line items.

    Raises:
        ConfigurationError: Empty sheet or mandatory columns missing
        RowParseError: Unparsable date in an eligible row
    """
    if not rows:
        raise ConfigurationError("No rows in the given sheet")

    columns = map_columns(rows[0], column_names)
    eligible = filter_rows(rows[1:], columns, date_range)
    return normalize_rows(eligible, columns, default_fee)
