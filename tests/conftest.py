"""
Pytest configuration and shared fixtures.
"""

import json
import sys
from pathlib import Path

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from core.config import AccountingConfig, AppConfig, ColumnNames
from core.token_store import TokenStore

FIXTURES_DIR = Path(__file__).parent / "fixtures"


class FakeResponse:
    """Minimal stand-in for requests.Response."""

    def __init__(self, status_code: int = 200, json_data=None, chunks: list[bytes] | None = None):
        self.status_code = status_code
        self._json = json_data
        self._chunks = chunks or []
        self.closed = False

    @property
    def text(self) -> str:
        return json.dumps(self._json) if self._json is not None else ""

    def json(self):
        return self._json

    def iter_content(self, chunk_size: int = 1):
        yield from self._chunks

    def close(self):
        self.closed = True


class FakeSession:
    """Records requests and answers them from a route table keyed on (method, path suffix)."""

    def __init__(self, routes: dict[tuple[str, str], FakeResponse] | None = None):
        self.routes = routes or {}
        self.calls: list[dict] = []

    def _respond(self, method: str, url: str, **kwargs) -> FakeResponse:
        self.calls.append({"method": method, "url": url, **kwargs})
        for (route_method, suffix), response in self.routes.items():
            if route_method == method and url.endswith(suffix):
                return response
        raise AssertionError(f"Unexpected request: {method} {url}")

    def get(self, url, **kwargs):
        return self._respond("GET", url, **kwargs)

    def post(self, url, **kwargs):
        return self._respond("POST", url, **kwargs)

    def calls_to(self, method: str, suffix: str) -> list[dict]:
        return [c for c in self.calls if c["method"] == method and c["url"].endswith(suffix)]


@pytest.fixture
def column_names():
    """Header labels matching the sample sheets."""
    return ColumnNames(
        date="Date",
        count="Hours",
        description="Description",
        invoice_number="Invoice no.",
        fee="Rate",
        client="Customer",
    )


@pytest.fixture
def app_config(column_names):
    return AppConfig(
        clients={
            "acme": {"sheetId": "sheet-acme", "defaultFee": 60, "includeVat": False},
            "globex": {"sheetId": "sheet-globex", "contactId": "contact-globex"},
        },
        columnNames=column_names,
        defaultFee=50,
    )


@pytest.fixture
def accounting_config():
    return AccountingConfig(
        client_id="cid",
        client_secret="secret",
        administration_id="123456",
        dummy_contact_id="contact-dummy",
    )


@pytest.fixture
def token_store(tmp_path):
    return TokenStore(tmp_path / "config" / "moneybird-token.json")


@pytest.fixture
def sample_rows():
    """Header plus rows from a typical timesheet."""
    return [
        ["Date", "Hours", "Description", "Invoice no.", "Rate"],
        ["2024-01-15", "4", "Work", "", "€50"],
        ["2024-01-16", "", "Empty", "", ""],
        ["2024-01-17", "2", "Billed", "INV-1", "€50"],
    ]


@pytest.fixture
def token_response():
    return {
        "access_token": "access-2",
        "refresh_token": "refresh-2",
        "token_type": "bearer",
        "expires_in": 3600,
        "scope": "sales_invoices",
        "created_at": 1700000000,
    }
