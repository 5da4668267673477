#!/usr/bin/env python3
"""
Obtain the first Moneybird OAuth token and store it.

Run without arguments to get the authorization URL, then run again with the
code shown after granting access.

Usage:
    uv run python src/scripts/mb_initial_token.py [AUTH_CODE]
"""

import argparse
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.accounting_client import AccountingClient
from core.config import ACCOUNTING_CONFIG_FILE, load_accounting_config
from core.token_store import TokenStore


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Store the initial Moneybird OAuth token")
    parser.add_argument("auth_code", nargs="?", help="Authorization code from Moneybird")
    args = parser.parse_args(argv)

    try:
        token_store = TokenStore()
        client = AccountingClient(load_accounting_config(ACCOUNTING_CONFIG_FILE), token_store)

        if not args.auth_code:
            print(f"First, get an initial auth code from {client.authorize_url()}", file=sys.stderr)
            print("Then, use it as the argument for this script", file=sys.stderr)
            return 1

        record = client.exchange_auth_code(args.auth_code)
        client.persist_token(record)
        print(f"Success! Token written to {token_store.path}")
        return 0
    except Exception as e:
        print(f"\nError: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
