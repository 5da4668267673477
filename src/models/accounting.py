"""
Data models for the accounting API.

Wire payloads use TypedDict for type hints; the persisted OAuth token is a
Pydantic model so it is validated when read back from disk.
"""

from typing import NotRequired, TypedDict

from pydantic import BaseModel, ConfigDict


class OAuthTokenRecord(BaseModel):
    """Token endpoint response, persisted as the client's only durable state."""

    model_config = ConfigDict(extra="allow")

    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int | None = None
    scope: str | None = None
    created_at: int | None = None


class DetailLine(TypedDict):
    """Sales invoice detail line."""
    description: str
    period: str
    price: float
    amount: float
    tax_rate_id: NotRequired[str]


class SalesInvoice(TypedDict):
    """Sales invoice as returned by the API (subset of fields used here)."""
    id: str
    invoice_id: str | None
    contact_id: str
    state: NotRequired[str]


class TaxRate(TypedDict):
    id: str
    name: str
    percentage: str


class Contact(TypedDict):
    id: str
    company_name: str | None
    firstname: str | None
    lastname: str | None
