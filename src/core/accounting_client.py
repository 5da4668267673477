"""
Moneybird accounting API client with OAuth refresh-token handling.
"""

from enum import Enum
from typing import Iterator
from urllib.parse import urlencode

import requests

from core.config import (
    MONEYBIRD_API_VERSION,
    MONEYBIRD_BASE_URL,
    OAUTH_REDIRECT_URI,
    AccountingConfig,
)
from core.errors import AuthenticationError, RemoteApiError, VatResolutionError
from core.token_store import TokenStore
from models.accounting import Contact, DetailLine, OAuthTokenRecord, SalesInvoice, TaxRate
from models.line_item import InvoiceLineItem

PDF_CHUNK_SIZE = 64 * 1024


class ClientState(Enum):
    UNINITIALIZED = "uninitialized"
    ANONYMOUS = "anonymous"
    AUTHENTICATED = "authenticated"


class AccountingClient:
    """
    Client for one administration.

    Call init() once before any API request. The access token obtained there
    is used for the rest of the process; it is never refreshed again.
    """

    def __init__(
        self,
        config: AccountingConfig,
        token_store: TokenStore,
        session: requests.Session | None = None,
        base_url: str = MONEYBIRD_BASE_URL,
    ):
        self.config = config
        self.token_store = token_store
        self.session = session or requests.Session()
        self.base_url = base_url.rstrip("/")
        self.api_base = (
            f"{self.base_url}/api/{MONEYBIRD_API_VERSION}/{config.administration_id}"
        )
        self.state = ClientState.UNINITIALIZED
        self._access_token: str | None = None

    # =========================================================================
    # AUTHENTICATION
    # =========================================================================

    def init(self) -> ClientState:
        """
        Refresh the stored token, if any.

        Without a stored token the client stays anonymous. Each refresh rotates
        the refresh token, so the new record is persisted immediately.

        Raises:
            AuthenticationError: The token endpoint rejected the refresh token
        """
        if self.state is not ClientState.UNINITIALIZED:
            return self.state

        stored = self.token_store.load()
        if stored is None:
            self.state = ClientState.ANONYMOUS
            return self.state

        record = self._post_token(
            {
                "grant_type": "refresh_token",
                "refresh_token": stored.refresh_token,
                "client_id": self.config.client_id,
                "client_secret": self.config.client_secret,
            },
            "Error refreshing access token",
        )
        self.persist_token(record)
        self._access_token = record.access_token
        self.state = ClientState.AUTHENTICATED
        return self.state

    def authorize_url(self) -> str:
        """URL where the user grants access and receives an authorization code."""
        params = {
            "client_id": self.config.client_id,
            "redirect_uri": OAUTH_REDIRECT_URI,
            "response_type": "code",
        }
        return f"{self.base_url}/oauth/authorize?{urlencode(params)}"

    def exchange_auth_code(self, auth_code: str) -> OAuthTokenRecord:
        """Trade a one-time authorization code for the first token record."""
        return self._post_token(
            {
                "redirect_uri": OAUTH_REDIRECT_URI,
                "grant_type": "authorization_code",
                "client_id": self.config.client_id,
                "client_secret": self.config.client_secret,
                "code": auth_code,
            },
            "Error requesting access token",
        )

    def persist_token(self, record: OAuthTokenRecord) -> None:
        self.token_store.save(record)

    def _post_token(self, payload: dict, error_message: str) -> OAuthTokenRecord:
        res = self.session.post(f"{self.base_url}/oauth/token", json=payload)
        if not 200 <= res.status_code < 300:
            raise AuthenticationError(f"{error_message}: {res.status_code} {res.text}")
        return OAuthTokenRecord.model_validate(res.json())

    # =========================================================================
    # REQUESTS
    # =========================================================================

    def _headers(self, access_token: str | None) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if access_token:
            headers["Authorization"] = f"Bearer {access_token}"
        return headers

    def _get(self, path: str, **kwargs) -> requests.Response:
        return self.session.get(
            f"{self.api_base}{path}", headers=self._headers(self._access_token), **kwargs
        )

    def _post(self, path: str, payload: dict) -> requests.Response:
        return self.session.post(
            f"{self.api_base}{path}", json=payload, headers=self._headers(self._access_token)
        )

    # =========================================================================
    # TAX RATES
    # =========================================================================

    def list_tax_rates(self) -> list[TaxRate]:
        res = self._get("/tax_rates")
        if res.status_code != 200:
            raise RemoteApiError("Unable to get tax rates", res.status_code, res.text)
        return res.json()

    def get_zero_vat_rate_id(self) -> str | None:
        """Id of the first tax rate with a percentage of zero, None if there is none."""
        for rate in self.list_tax_rates():
            try:
                if float(rate["percentage"]) == 0:
                    return rate["id"]
            except (TypeError, ValueError):
                continue
        return None

    # =========================================================================
    # SALES INVOICES
    # =========================================================================

    def create_sales_invoice(
        self,
        items: list[InvoiceLineItem],
        include_vat: bool = True,
        contact_id: str | None = None,
    ) -> str:
        """
        Create a draft sales invoice with one detail line per item.

        Args:
            items: Line items to bill
            include_vat: When False, every line gets the 0% tax rate
            contact_id: Remote contact; defaults to the configured dummy contact

        Returns:
            Id of the created invoice

        Raises:
            VatResolutionError: VAT exclusion requested without a 0% rate
            RemoteApiError: Invoice was not created
        """
        details: list[DetailLine] = [item.to_detail_line() for item in items]

        if not include_vat:
            rate_id = self.get_zero_vat_rate_id()
            if not rate_id:
                raise VatResolutionError(
                    "VAT to be excluded, but 0%-VAT rate ID could not be determined"
                )
            for detail in details:
                detail["tax_rate_id"] = rate_id

        res = self._post(
            "/sales_invoices",
            {
                "sales_invoice": {
                    "contact_id": contact_id or self.config.contact_id,
                    "details_attributes": details,
                }
            },
        )
        if res.status_code != 201:
            raise RemoteApiError("Error creating sales invoice", res.status_code, res.text)
        return res.json()["id"]

    def list_sales_invoices(self) -> list[SalesInvoice]:
        """All invoices on the first page the API returns."""
        res = self._get("/sales_invoices")
        if res.status_code != 200:
            raise RemoteApiError("Error listing sales invoices", res.status_code, res.text)
        return res.json()

    def fetch_sales_invoice_pdf(self, invoice_id: str) -> Iterator[bytes]:
        """Stream the rendered PDF of one invoice."""
        res = self._get(f"/sales_invoices/{invoice_id}/download_pdf", stream=True)
        if res.status_code != 200:
            body = res.text
            res.close()
            raise RemoteApiError("Error downloading sales invoice", res.status_code, body)
        return res.iter_content(chunk_size=PDF_CHUNK_SIZE)

    def invoice_url(self, invoice_id: str) -> str:
        return f"{self.base_url}/{self.config.administration_id}/sales_invoices/{invoice_id}"

    # =========================================================================
    # CONTACTS
    # =========================================================================

    def list_contacts(self) -> list[Contact]:
        res = self._get("/contacts")
        if res.status_code != 200:
            raise RemoteApiError("Error fetching contacts", res.status_code, res.text)
        return res.json()
