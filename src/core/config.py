"""
Configuration constants, environment setup and config file models.
"""

import json
import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from core.errors import ConfigurationError

load_dotenv()

# =============================================================================
# PATHS
# =============================================================================

PROJECT_ROOT = Path(__file__).parent.parent.parent
CONFIG_DIR = Path(os.environ.get("INVOICER_CONFIG_DIR", PROJECT_ROOT / "config"))
DATA_DIR = Path(os.environ.get("INVOICER_DATA_DIR", PROJECT_ROOT / "data"))

APP_CONFIG_FILE = CONFIG_DIR / "config.json"
ACCOUNTING_CONFIG_FILE = CONFIG_DIR / "moneybird.json"
TOKEN_FILE = CONFIG_DIR / "moneybird-token.json"
GSHEETS_CREDENTIALS_FILE = CONFIG_DIR / "gsheets-token.json"

INVOICE_PDF_DIR = DATA_DIR / "invoices"
TEST_FIXTURE_FILE = PROJECT_ROOT / "tests" / "fixtures" / "timesheet.csv"

# =============================================================================
# ACCOUNTING API
# =============================================================================

MONEYBIRD_BASE_URL = os.environ.get("MONEYBIRD_BASE_URL", "https://moneybird.com")
MONEYBIRD_API_VERSION = "v2"
OAUTH_REDIRECT_URI = "urn:ietf:wg:oauth:2.0:oob"

# =============================================================================
# SHEETS
# =============================================================================

DEFAULT_SHEET_RANGE = "A1:M10000"
FETCH_CONCURRENCY = 2  # Sheets fetched in parallel per run

# =============================================================================
# FORMATTING
# =============================================================================

AMOUNT_LOCALE = "nl_NL"
AMOUNT_WIDTH = 11
CURRENCY_SYMBOL = "€"


# =============================================================================
# CONFIG FILE MODELS
# =============================================================================


class ColumnNames(BaseModel):
    """Literal header labels searched for in the first sheet row."""

    model_config = ConfigDict(populate_by_name=True)

    date: str = "Date"
    count: str = Field("Hours", alias="numberOfHours")
    description: str = "Description"
    invoice_number: str = Field("Invoice no.", alias="invoiceNumber")
    fee: str = Field("Rate", alias="hourlyRate")
    client: str = Field("Customer", alias="customer")


class ClientConfig(BaseModel):
    """A billing target: one spreadsheet plus optional overrides."""

    model_config = ConfigDict(populate_by_name=True)

    sheet_id: str = Field(alias="sheetId")
    default_fee: float | None = Field(None, alias="defaultFee")
    include_vat: bool | None = Field(None, alias="includeVat")
    contact_id: str | None = Field(None, alias="contactId")


class AppConfig(BaseModel):
    """Contents of config/config.json."""

    model_config = ConfigDict(populate_by_name=True)

    clients: dict[str, ClientConfig] = {}
    column_names: ColumnNames = Field(default_factory=ColumnNames, alias="columnNames")
    default_fee: float | None = Field(None, alias="defaultFee")
    include_vat: bool | None = Field(None, alias="includeVat")


class AccountingConfig(BaseModel):
    """Contents of config/moneybird.json. Read-only for the life of a process."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    client_id: str
    client_secret: str
    administration_id: str
    contact_id: str = Field(alias="dummy_contact_id")


def _read_json(path: Path) -> dict:
    if not path.exists():
        raise ConfigurationError(f"Config file not found: {path}")
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON in {path}: {e}") from e


def load_app_config(path: Path = APP_CONFIG_FILE) -> AppConfig:
    """Load and validate the targets/columns configuration."""
    try:
        return AppConfig.model_validate(_read_json(path))
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration in {path}:\n{e}") from e


def load_accounting_config(path: Path = ACCOUNTING_CONFIG_FILE) -> AccountingConfig:
    """
    Load the accounting API credentials.

    MONEYBIRD_CLIENT_ID and MONEYBIRD_CLIENT_SECRET from the environment take
    precedence over the values in the file.
    """
    data = _read_json(path)
    if "contact_id" in data and "dummy_contact_id" not in data:
        data["dummy_contact_id"] = data.pop("contact_id")
    for key, env_name in (
        ("client_id", "MONEYBIRD_CLIENT_ID"),
        ("client_secret", "MONEYBIRD_CLIENT_SECRET"),
    ):
        if os.environ.get(env_name):
            data[key] = os.environ[env_name]
    try:
        return AccountingConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid accounting configuration in {path}:\n{e}") from e


# =============================================================================
# PREREQUISITES
# =============================================================================


def check_prerequisites(
    needs_sheets: bool,
    needs_accounting: bool,
    config_dir: Path | None = None,
) -> tuple[list[str], list[str]]:
    """
    Check that the setup files a run depends on are present.

    Returns:
        Tuple of (errors, warnings). Errors are instruction lines for files
        that must exist; warnings do not block the run.
    """
    config_dir = config_dir or CONFIG_DIR
    errors = []
    warnings = []

    if needs_sheets and not (config_dir / GSHEETS_CREDENTIALS_FILE.name).exists():
        errors += [
            f"File '{config_dir / GSHEETS_CREDENTIALS_FILE.name}' not found.",
            "  1. Obtain it by creating a service account on https://console.developers.google.com/apis/credentials",
            "  2. In the sheet(s), under 'Sharing', share access with the client_email listed within the token",
        ]

    if needs_accounting:
        if not (config_dir / ACCOUNTING_CONFIG_FILE.name).exists():
            errors += [
                f"File '{config_dir / ACCOUNTING_CONFIG_FILE.name}' not found.",
                "  Create it, containing an object with: client_id, client_secret, administration_id, dummy_contact_id",
                "  The client_* details can be obtained through https://moneybird.com/user/applications",
                "  The administration id can be seen in the URL path when viewing the administration on moneybird.com",
                "  The dummy contact id can be seen in the URL path when viewing your dummy contact on moneybird.com",
            ]
        if not (config_dir / TOKEN_FILE.name).exists():
            warnings += [
                f"File '{config_dir / TOKEN_FILE.name}' not found, requests will be unauthenticated.",
                "  Run: python src/scripts/mb_initial_token.py and follow the steps",
            ]

    return errors, warnings
