"""
Billing Run Service

Runs the status / create-invoice flow over all selected targets: every
target's sheet is parsed and totalled in turn, and when invoice creation is
requested an invoice is created for it before moving on to the next target.
Also holds the PDF download loop for existing invoices.
"""

import sys
from dataclasses import dataclass
from pathlib import Path

from core.accounting_client import AccountingClient
from core.config import CURRENCY_SYMBOL, INVOICE_PDF_DIR, AppConfig, ClientConfig
from core.errors import ConfigurationError, RemoteApiError
from models.line_item import InvoiceLineItem
from services.fees import aggregate_fees, format_amount
from services.sheets import SheetData
from services.timesheet import DateRange, parse_invoice_rows


@dataclass
class TargetResult:
    """Outcome of processing one target."""

    target: str
    items: list[InvoiceLineItem]
    total: float
    invoice_id: str | None = None


@dataclass
class BillingSummary:
    results: list[TargetResult]
    total: float


# =============================================================================
# TARGET SELECTION
# =============================================================================


def select_targets(app_config: AppConfig, names: str | None = None) -> dict[str, ClientConfig]:
    """
    Pick the targets to process.

    Args:
        names: Comma-separated target names; None selects all configured targets

    Raises:
        ConfigurationError: A requested target is not configured
    """
    if not names:
        return dict(app_config.clients)

    selected = {}
    for name in (n.strip() for n in names.split(",")):
        if not name:
            continue
        if name not in app_config.clients:
            raise ConfigurationError(f"Client does not exist: {name}")
        selected[name] = app_config.clients[name]
    return selected


def resolve_default_fee(client: ClientConfig | None, app_config: AppConfig) -> float | None:
    if client is not None and client.default_fee is not None:
        return client.default_fee
    return app_config.default_fee


def resolve_include_vat(client: ClientConfig | None, app_config: AppConfig) -> bool:
    """Per-target override, else the global setting, else VAT is included."""
    if client is not None and client.include_vat is not None:
        return client.include_vat
    if app_config.include_vat is not None:
        return app_config.include_vat
    return True


# =============================================================================
# STATUS / INVOICE CREATION
# =============================================================================


def status_line(target: str, total: float, pad: int) -> str:
    return f"{target.ljust(pad)} - Total: {CURRENCY_SYMBOL}{format_amount(total)}"


def total_line(total: float, pad: int) -> str:
    return f"{'#' * pad}######### {CURRENCY_SYMBOL}{format_amount(total)}"


def run_billing(
    sheets: list[SheetData],
    targets: dict[str, ClientConfig],
    app_config: AppConfig,
    client: AccountingClient | None = None,
    create_invoice: bool = False,
    date_range: DateRange | None = None,
) -> BillingSummary:
    """
    Print totals per target and optionally create one invoice per target.

    Targets are processed strictly one after the other. Any error while
    creating an invoice aborts the run.
    """
    if create_invoice and client is None:
        raise ValueError("An accounting client is required to create invoices")

    pad = max((len(sheet.target) for sheet in sheets), default=0) + 2
    results = []
    grand_total = 0.0

    for sheet in sheets:
        target_config = targets.get(sheet.target)
        items = parse_invoice_rows(
            sheet.rows,
            app_config.column_names,
            default_fee=resolve_default_fee(target_config, app_config),
            date_range=date_range,
        )
        fees = aggregate_fees(items)
        print(status_line(sheet.target, fees.total, pad))
        grand_total += fees.total
        result = TargetResult(target=sheet.target, items=items, total=fees.total)
        results.append(result)

        if not create_invoice:
            continue
        if not fees.billable:
            print("Nothing to bill to client. Skipping invoice creation")
            continue

        print("Creating invoice ...")
        client.init()
        result.invoice_id = client.create_sales_invoice(
            fees.billable,
            include_vat=resolve_include_vat(target_config, app_config),
            contact_id=target_config.contact_id if target_config else None,
        )
        print(f"Created invoice: {client.invoice_url(result.invoice_id)}")

    print(total_line(grand_total, pad))
    return BillingSummary(results=results, total=grand_total)


# =============================================================================
# PDF DOWNLOAD
# =============================================================================


def download_invoice_pdfs(client: AccountingClient, output_dir: Path = INVOICE_PDF_DIR) -> list[str]:
    """
    Save the PDF of every sales invoice not yet present in output_dir.

    A failed download is reported and the loop continues with the next invoice.

    Returns:
        Invoice numbers whose download failed
    """
    client.init()
    output_dir.mkdir(parents=True, exist_ok=True)
    failed = []

    for invoice in client.list_sales_invoices():
        # Drafts have no invoice number yet
        name = invoice.get("invoice_id") or invoice["id"]
        outfile = output_dir / f"{name}.pdf"
        print(f"{outfile} --> ", end="")
        if outfile.exists():
            print("Exists, skipping")
            continue

        tmp_file = outfile.with_suffix(".pdf.part")
        try:
            chunks = client.fetch_sales_invoice_pdf(invoice["id"])
            with open(tmp_file, "wb") as f:
                for chunk in chunks:
                    f.write(chunk)
            tmp_file.replace(outfile)
        except (RemoteApiError, OSError) as e:
            tmp_file.unlink(missing_ok=True)
            print("Failed")
            print(f"  Error: {e}", file=sys.stderr)
            failed.append(name)
            continue
        print("Retrieved")

    return failed
