"""Ready-made ``TokenDelegate`` implementations.

``MemoryTokenStore`` keeps tokens for the life of the process;
``FileTokenStore`` persists them to a JSON file and backs the CLI.
Records are indexed by every scope they cover.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from finnotech.models.auth import TokenRecord

logger = logging.getLogger(__name__)


class MemoryTokenStore:
    """In-process token storage keyed by scope name."""

    def __init__(self) -> None:
        self._records: dict[str, TokenRecord] = {}

    def _get(self, scope_name: str) -> TokenRecord:
        record = self._records.get(scope_name)
        if record is None:
            raise LookupError(f"No token stored for scope '{scope_name}'")
        return record

    async def fetch_access(self, scope_name: str) -> str:
        return self._get(scope_name).access_token

    async def fetch_refresh(self, scope_name: str) -> str:
        return self._get(scope_name).refresh_token

    async def persist(self, record: TokenRecord) -> None:
        if not record.scopes:
            logger.warning("Token record covers no scopes; nothing stored")
        for scope in record.scopes:
            self._records[scope] = record

    @property
    def records(self) -> dict[str, TokenRecord]:
        """Snapshot of stored records by scope."""
        return dict(self._records)


class FileTokenStore(MemoryTokenStore):
    """Token storage backed by a JSON file."""

    def __init__(self, path: str) -> None:
        super().__init__()
        self._path = Path(path)
        self._load()

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> None:
        if not self._path.exists():
            return
        with open(self._path) as f:
            data = json.load(f)
        self._records = {
            scope: TokenRecord.model_validate(record)
            for scope, record in data.items()
        }

    def _save(self) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        data = {
            scope: record.model_dump(mode="json")
            for scope, record in self._records.items()
        }
        with open(self._path, "w") as f:
            json.dump(data, f, indent=2)

    async def persist(self, record: TokenRecord) -> None:
        await super().persist(record)
        self._save()
        logger.info(f"Saved token for {len(record.scopes)} scope(s) to {self._path}")
