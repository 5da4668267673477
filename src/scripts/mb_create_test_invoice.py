#!/usr/bin/env python3
"""
Create a single-line test invoice to verify the Moneybird setup.

Usage:
    uv run python src/scripts/mb_create_test_invoice.py [--exclude-vat]
"""

import argparse
import sys
from datetime import date
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.accounting_client import AccountingClient
from core.config import load_accounting_config
from core.token_store import TokenStore
from models.line_item import InvoiceLineItem


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a Moneybird test invoice")
    parser.add_argument(
        "--exclude-vat",
        action="store_true",
        help="Use the 0%% VAT rate for the test line",
    )
    args = parser.parse_args(argv)

    try:
        client = AccountingClient(load_accounting_config(), TokenStore())
        client.init()
        items = [InvoiceLineItem.create(1, 12, date.today(), "Test test")]
        invoice_id = client.create_sales_invoice(items, include_vat=not args.exclude_vat)
    except Exception as e:
        print(f"\nError: {e}", file=sys.stderr)
        return 1

    print(f"Created invoice: {client.invoice_url(invoice_id)}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
