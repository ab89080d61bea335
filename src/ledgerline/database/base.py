"""Abstract data source and database interfaces."""

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Optional

# Import entities directly to avoid circular import through domain/__init__.py
from ledgerline.domain.entities import (
    AppSettings,
    Entry,
    EntryKind,
    LedgerData,
    Override,
    RecurringRule,
)


class DataSource(ABC):
    """Read-only view of every ledger collection."""

    @abstractmethod
    def list_entries(self, kind: EntryKind) -> list[Entry]:
        """List one-off entries of a kind, ordered by date."""
        pass

    @abstractmethod
    def list_rules(self, kind: EntryKind) -> list[RecurringRule]:
        """List recurring rules of a kind in insertion order."""
        pass

    @abstractmethod
    def list_overrides(self) -> list[Override]:
        """List recurring income overrides."""
        pass

    @abstractmethod
    def get_initial_balance(self) -> Optional[Decimal]:
        """Get the balance anchor, or None if it was never set."""
        pass

    @abstractmethod
    def get_settings(self) -> AppSettings:
        """Get user preferences."""
        pass

    @property
    def read_only(self) -> bool:
        return True

    def load_ledger(self) -> LedgerData:
        """Load every collection into one immutable value."""
        return LedgerData(
            expenses=tuple(self.list_entries(EntryKind.EXPENSE)),
            incomes=tuple(self.list_entries(EntryKind.INCOME)),
            recurring_expenses=tuple(self.list_rules(EntryKind.EXPENSE)),
            recurring_incomes=tuple(self.list_rules(EntryKind.INCOME)),
            overrides=tuple(self.list_overrides()),
            initial_balance=self.get_initial_balance(),
            settings=self.get_settings(),
        )


class Database(DataSource):
    """Writable store for ledgerline.

    Collections are written whole, mirroring a key-value store keyed by
    collection name; the domain layer owns ordering and matching.
    """

    @property
    def read_only(self) -> bool:
        return False

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    @abstractmethod
    def replace_entries(self, kind: EntryKind, entries: list[Entry]) -> None:
        """Replace the whole one-off collection of a kind, keeping order."""
        pass

    @abstractmethod
    def replace_rules(self, kind: EntryKind, rules: list[RecurringRule]) -> None:
        """Replace the whole recurring rule collection of a kind, keeping order."""
        pass

    @abstractmethod
    def replace_overrides(self, overrides: list[Override]) -> None:
        """Replace the whole override collection."""
        pass

    @abstractmethod
    def set_initial_balance(self, amount: Optional[Decimal]) -> None:
        """Set or clear the balance anchor."""
        pass

    @abstractmethod
    def set_settings(self, settings: AppSettings) -> None:
        """Store user preferences."""
        pass

    # Simulation snapshot
    @abstractmethod
    def save_snapshot(self, snapshot: LedgerData) -> None:
        """Persist the simulation snapshot, replacing any previous one."""
        pass

    @abstractmethod
    def load_snapshot(self) -> Optional[LedgerData]:
        """Load the simulation snapshot, or None when no simulation is active."""
        pass

    @abstractmethod
    def clear_snapshot(self) -> None:
        """Delete the simulation snapshot."""
        pass

    def restore_ledger(self, data: LedgerData) -> None:
        """Overwrite every collection with ``data``."""
        self.replace_entries(EntryKind.EXPENSE, list(data.expenses))
        self.replace_entries(EntryKind.INCOME, list(data.incomes))
        self.replace_rules(EntryKind.EXPENSE, list(data.recurring_expenses))
        self.replace_rules(EntryKind.INCOME, list(data.recurring_incomes))
        self.replace_overrides(list(data.overrides))
        self.set_initial_balance(data.initial_balance)
        self.set_settings(data.settings)
