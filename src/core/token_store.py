"""
Persistence of the OAuth token record.
"""

import os
import tempfile
from pathlib import Path

from core.config import TOKEN_FILE
from models.accounting import OAuthTokenRecord


class TokenStore:
    """Reads and overwrites the JSON token file."""

    def __init__(self, path: Path = TOKEN_FILE):
        self.path = Path(path)

    def load(self) -> OAuthTokenRecord | None:
        """Return the stored record, or None when no session was stored yet."""
        if not self.path.exists():
            return None
        return OAuthTokenRecord.model_validate_json(self.path.read_text(encoding="utf-8"))

    def save(self, record: OAuthTokenRecord) -> None:
        """Replace the stored record with a single whole-file write."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
        )
        tmp_path = Path(tmp_name)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(record.model_dump_json(indent=2))
            os.replace(tmp_path, self.path)
        finally:
            tmp_path.unlink(missing_ok=True)
