"""Remote synchronization collaborators.

The engine only pushes; pulling and conflict handling belong to whatever sits
behind a ``RemoteSync``.
"""

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from ledgerline.domain.entities import LedgerData
from ledgerline.serialization import ledger_to_record

logger = logging.getLogger(__name__)

SYNC_KEYS = (
    "expenses",
    "incomes",
    "recurring_expenses",
    "recurring_incomes",
    "recurring_income_overrides",
    "initial_balance",
    "app_settings",
)


class SyncError(Exception):
    """A push to the remote failed."""


class RemoteSync(ABC):
    """Mirror of the persisted collections on another device or service."""

    @abstractmethod
    def push(self, key: str, value: Any) -> None:
        """Push one collection, replacing its remote value.

        Raises:
            SyncError: If the remote could not be written
        """
        pass

    @property
    def active(self) -> bool:
        return True

    def push_ledger(self, data: LedgerData, keys=SYNC_KEYS) -> None:
        """Push the given collections of a ledger without speculative tags."""
        record = ledger_to_record(data, include_speculative=False)
        for key in keys:
            self.push(key, record[key])


class NullSync(RemoteSync):
    """Used when no remote is configured."""

    def push(self, key: str, value: Any) -> None:
        pass

    @property
    def active(self) -> bool:
        return False


class DirectorySync(RemoteSync):
    """Mirrors each collection to ``<directory>/<key>.json``."""

    def __init__(self, directory: str | Path):
        self.directory = Path(directory).expanduser()

    def push(self, key: str, value: Any) -> None:
        if key not in SYNC_KEYS:
            raise SyncError(f"Unknown sync key '{key}'")
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            (self.directory / f"{key}.json").write_text(
                json.dumps({"value": value}, indent=2), encoding="utf-8"
            )
        except OSError as e:
            raise SyncError(f"Could not push '{key}' to {self.directory}: {e}") from e
        logger.debug("Pushed %s to %s", key, self.directory)

    def pull(self, key: str) -> Any:
        """Read back a pushed collection, or None if it was never pushed."""
        path = self.directory / f"{key}.json"
        if not path.exists():
            return None
        return json.loads(path.read_text(encoding="utf-8"))["value"]
