#!/usr/bin/env python3
"""
List all contacts in the Moneybird administration.

Useful to look up the id of the placeholder contact for config/moneybird.json
or a per-client contactId.

Usage:
    uv run python src/scripts/mb_list_contacts.py
"""

import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.accounting_client import AccountingClient
from core.config import load_accounting_config
from core.token_store import TokenStore
from models.accounting import Contact


def contact_name(contact: Contact) -> str:
    """Company name, else full name, else a placeholder."""
    if contact.get("company_name"):
        return contact["company_name"]
    full_name = f"{contact.get('firstname') or ''} {contact.get('lastname') or ''}".strip()
    return full_name or "(no name)"


def main() -> int:
    try:
        client = AccountingClient(load_accounting_config(), TokenStore())
        client.init()
        contacts = client.list_contacts()
    except Exception as e:
        print(f"\nError: {e}", file=sys.stderr)
        return 1

    print("ID                    Company / Name")
    print("--------------------  ----------------------------------------")
    for contact in contacts:
        print(f"{contact['id']:<22}{contact_name(contact)}")
    print(f"\nTotal: {len(contacts)} contacts")
    return 0


if __name__ == "__main__":
    sys.exit(main())
