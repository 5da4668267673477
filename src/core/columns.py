"""
Header row to column index mapping.
"""

from dataclasses import dataclass, fields

from core.config import ColumnNames
from core.errors import ConfigurationError

REQUIRED_COLUMNS = ("count", "date", "description", "invoice_number")


@dataclass(frozen=True)
class ColumnMap:
    """Column index per logical field, None when the header was not found."""

    count: int | None = None
    fee: int | None = None
    date: int | None = None
    client: int | None = None
    description: int | None = None
    invoice_number: int | None = None


def map_columns(header: list[str], column_names: ColumnNames) -> ColumnMap:
    """
    Resolve configured header labels to column indices.

    Raises:
        ConfigurationError: If any of count, date, description or
            invoice_number is not present in the header row
    """
    labels = {getattr(column_names, f.name): f.name for f in fields(ColumnMap)}
    found: dict[str, int] = {}

    for idx, cell in enumerate(header):
        field_name = labels.get(cell)
        if field_name:
            found[field_name] = idx

    columns = ColumnMap(**found)
    missing = [name for name in REQUIRED_COLUMNS if getattr(columns, name) is None]
    if missing:
        raise ConfigurationError(
            "Not all necessary columns are included in the sheet; missing: "
            + ", ".join(f"{name} ('{getattr(column_names, name)}')" for name in missing),
            missing=missing,
        )

    return columns
