"""
Fee totals and amount formatting for status output.
"""

import math
import sys
from dataclasses import dataclass, field

from babel.numbers import format_decimal

from core.config import AMOUNT_LOCALE, AMOUNT_WIDTH
from models.line_item import InvoiceLineItem


@dataclass
class FeeTotal:
    """Sum of billable amounts and the items that made it up."""

    total: float = 0.0
    billable: list[InvoiceLineItem] = field(default_factory=list)
    skipped: list[InvoiceLineItem] = field(default_factory=list)


def aggregate_fees(items: list[InvoiceLineItem]) -> FeeTotal:
    """Sum count * fee over all items, skipping items where that is not a number."""
    result = FeeTotal()
    for item in items:
        amount = item.amount
        if math.isnan(amount):
            print(
                f'[!] Skipping row with invalid count or fee: "{item.description}"',
                file=sys.stderr,
            )
            result.skipped.append(item)
            continue
        result.total += amount
        result.billable.append(item)
    return result


def format_amount(total: float, width: int = AMOUNT_WIDTH) -> str:
    """Format as e.g. '     160,00': two decimals, no grouping, right-aligned."""
    return format_decimal(total, format="0.00", locale=AMOUNT_LOCALE).rjust(width)
