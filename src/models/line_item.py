"""
Invoice line item: one billable row of a timesheet.
"""

import math
import re
from dataclasses import dataclass
from datetime import date

from models.accounting import DetailLine

ISO_DATE = re.compile(r"^([0-9]{4})-([0-9]{2})-([0-9]{2})$")
DAY_FIRST_DATE = re.compile(r"^([0-9]{2})-([0-9]{2})-([0-9]{4})$")
CURRENCY_PREFIX = re.compile(r"^\s*[€$£]\s?")
NUMERAL = re.compile(r"^-?[0-9]+(?:[.,][0-9]+)?$")


def parse_number(value: str | float | int | None) -> float:
    """
    Parse a numeral with '.' or ',' as decimal separator.

    Only plain numerals are accepted; exponents, digit separators and
    infinities are not hours or rates. Returns NaN for anything else,
    callers decide whether that is fatal.
    """
    if value is None:
        return math.nan
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else math.nan
    value = value.strip()
    if not NUMERAL.match(value):
        return math.nan
    return float(value.replace(",", ".", 1))


def parse_fee(value: str | float | int | None) -> float:
    """Parse an hourly rate, e.g. '€45,50', '€ 50.00' or '60'."""
    if isinstance(value, str):
        value = CURRENCY_PREFIX.sub("", value)
    return parse_number(value)


def parse_date(value: str) -> date:
    """
    Parse YYYY-MM-DD or DD-MM-YYYY into a date.

    Raises:
        ValueError: If neither pattern matches or the day does not exist
    """
    iso = ISO_DATE.match(value)
    if iso:
        year, month, day = iso.groups()
    else:
        day_first = DAY_FIRST_DATE.match(value)
        if not day_first:
            raise ValueError(f"Unexpected date format: {value}")
        day, month, year = day_first.groups()

    try:
        return date(int(year), int(month), int(day))
    except ValueError as e:
        raise ValueError(f"Unexpected date format: {value} ({e})") from e


@dataclass(frozen=True)
class InvoiceLineItem:
    """Hours times rate on a single day."""

    count: float
    fee: float
    date: date
    description: str

    @classmethod
    def create(
        cls,
        count: str | float,
        fee: str | float | None,
        date_value: str | date,
        description: str,
    ) -> "InvoiceLineItem":
        """
        Build a line item from raw cell values.

        Numbers that do not parse become NaN. An unparsable date raises
        ValueError, so no partially valid item can exist.
        """
        item_date = date_value if isinstance(date_value, date) else parse_date(date_value)
        return cls(
            count=parse_number(count),
            fee=parse_fee(fee),
            date=item_date,
            description=description,
        )

    @property
    def amount(self) -> float:
        return self.count * self.fee

    def to_detail_line(self) -> DetailLine:
        """Map to the accounting API's sales invoice detail shape."""
        day = self.date.strftime("%Y%m%d")
        return {
            "description": self.description,
            "period": f"{day}..{day}",
            "price": self.fee,
            "amount": self.count,
        }
