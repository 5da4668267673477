#!/usr/bin/env python3
"""
Show outstanding hours per client and create invoices in Moneybird.

Reads each client's timesheet from Google Sheets, totals the billable hours,
and optionally creates one draft sales invoice per client. Can also download
the PDFs of all existing sales invoices.

Usage:
    uv run python src/scripts/create_invoices.py --status [--clients a,b] [--month YYYY-MM | --year YYYY]
    uv run python src/scripts/create_invoices.py --create-invoice [--clients a,b]
    uv run python src/scripts/create_invoices.py --dl-pdf

Example:
    uv run python src/scripts/create_invoices.py --status --month 2024-01
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.accounting_client import AccountingClient
from core.config import (
    APP_CONFIG_FILE,
    GSHEETS_CREDENTIALS_FILE,
    TEST_FIXTURE_FILE,
    check_prerequisites,
    load_accounting_config,
    load_app_config,
)
from core.token_store import TokenStore
from services.billing import download_invoice_pdfs, run_billing, select_targets
from services.sheets import GoogleSheetsSource, LocalFileSource, SheetData, fetch_all_rows
from services.timesheet import DateRange

TEST_TARGET = "test"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Display outstanding hours and create invoices in Moneybird",
        usage="%(prog)s --create-invoice|--dl-pdf|--status [--clients ...] [--month YYYY-MM]",
    )
    parser.add_argument(
        "--clients",
        metavar="CLIENT1[,CLIENT2,...]",
        help="Filter names of clients to include",
    )
    parser.add_argument(
        "--create-invoice",
        action="store_true",
        help="Create invoices in Moneybird",
    )
    parser.add_argument(
        "--dl-pdf",
        action="store_true",
        help="Download sales invoice PDFs",
    )
    parser.add_argument(
        "--status",
        action="store_true",
        help="Display outstanding hours (implicit in --create-invoice)",
    )
    window = parser.add_mutually_exclusive_group()
    window.add_argument(
        "--month",
        help="Year and month to calculate revenue for. Will INCLUDE hours which are already invoiced.",
    )
    window.add_argument(
        "--year",
        type=int,
        help="Year to calculate revenue for. Will INCLUDE hours which are already invoiced.",
    )
    parser.add_argument(
        "--test",
        nargs="?",
        const=TEST_FIXTURE_FILE,
        type=Path,
        metavar="FILE",
        help="Use data from a local csv/xlsx file instead of Google Sheets",
    )
    return parser


def report_prerequisites(needs_sheets: bool, needs_accounting: bool) -> bool:
    """Print missing setup files. Returns False when the run cannot start."""
    errors, warnings = check_prerequisites(needs_sheets, needs_accounting)
    for line in warnings:
        print(line, file=sys.stderr)
    for line in errors:
        print(line, file=sys.stderr)
    return not errors


def build_client() -> AccountingClient:
    return AccountingClient(load_accounting_config(), TokenStore())


def download_pdfs() -> int:
    failed = download_invoice_pdfs(build_client())
    if failed:
        print(f"\n{len(failed)} invoice(s) could not be downloaded: {', '.join(failed)}", file=sys.stderr)
        return 1
    return 0


async def load_sheets(args, targets) -> list[SheetData]:
    if args.test:
        return await fetch_all_rows({TEST_TARGET: str(args.test)}, LocalFileSource(args.test))
    source = GoogleSheetsSource(GSHEETS_CREDENTIALS_FILE)
    return await fetch_all_rows(
        {name: target.sheet_id for name, target in targets.items()}, source
    )


def bill(args) -> int:
    app_config = load_app_config(APP_CONFIG_FILE)
    targets = {} if args.test else select_targets(app_config, args.clients)

    date_range = None
    if args.month:
        date_range = DateRange.for_month(args.month)
    elif args.year:
        date_range = DateRange.for_year(args.year)

    sheets = asyncio.run(load_sheets(args, targets))
    client = build_client() if args.create_invoice else None

    run_billing(
        sheets,
        targets,
        app_config,
        client=client,
        create_invoice=args.create_invoice,
        date_range=date_range,
    )
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not (args.create_invoice or args.dl_pdf or args.status):
        parser.print_help()
        return 0

    try:
        if args.dl_pdf:
            if args.create_invoice or args.status or args.clients or args.month or args.year or args.test:
                print("--dl-pdf found, ignoring other arguments", file=sys.stderr)
            if not report_prerequisites(needs_sheets=False, needs_accounting=True):
                return 1
            return download_pdfs()

        if not report_prerequisites(
            needs_sheets=not args.test, needs_accounting=args.create_invoice
        ):
            return 1
        return bill(args)
    except Exception as e:
        print(f"\nError: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
