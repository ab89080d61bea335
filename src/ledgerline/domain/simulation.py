"""Simulation overlay: stage speculative edits, then accept or discard them.

A simulation is active exactly while a snapshot is stored. Starting one
captures every persisted collection; discarding writes that capture back
verbatim; accepting strips the speculative tag from every record and pushes
the result to the remote.
"""

import logging
from collections import Counter
from dataclasses import replace
from typing import Callable, Hashable, Iterable, Optional, TypeVar

from ledgerline.database.base import Database
from ledgerline.domain.entities import ChangeSet, Entry, LedgerData
from ledgerline.sync import NullSync, RemoteSync, SyncError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def strip_speculative(data: LedgerData) -> LedgerData:
    """Return ``data`` with the speculative tag cleared on every record."""

    def clean(records):
        return tuple(replace(record, speculative=False) for record in records)

    return replace(
        data,
        expenses=clean(data.expenses),
        incomes=clean(data.incomes),
        recurring_expenses=clean(data.recurring_expenses),
        recurring_incomes=clean(data.recurring_incomes),
        overrides=clean(data.overrides),
    )


def count_speculative(data: LedgerData) -> int:
    """Count records tagged speculative across every collection."""
    collections = (
        data.expenses,
        data.incomes,
        data.recurring_expenses,
        data.recurring_incomes,
        data.overrides,
    )
    return sum(1 for records in collections for record in records if record.speculative)


def _entry_key(entry: Entry) -> tuple:
    return (entry.date, entry.description, entry.amount)


def diff_entries(before: Iterable[Entry], after: Iterable[Entry]) -> ChangeSet:
    """Diff entry collections as multisets of (date, description, amount)."""
    before_by_key = {_entry_key(e): e for e in before}
    after_by_key = {_entry_key(e): e for e in after}
    before_counts = Counter(_entry_key(e) for e in before)
    after_counts = Counter(_entry_key(e) for e in after)

    added = []
    for key, count in (after_counts - before_counts).items():
        added.extend([after_by_key[key]] * count)
    removed = []
    for key, count in (before_counts - after_counts).items():
        removed.extend([before_by_key[key]] * count)
    return ChangeSet(added=tuple(added), removed=tuple(removed))


def diff_keyed(
    before: Iterable[T], after: Iterable[T], key: Callable[[T], Hashable]
) -> ChangeSet:
    """Diff collections of records with a unique key.

    Records present on both sides count as modified when they differ in
    anything but the speculative tag; ``modified`` holds (before, after) pairs.
    """
    before_by_key = {key(record): record for record in before}
    after_by_key = {key(record): record for record in after}

    added = tuple(r for k, r in after_by_key.items() if k not in before_by_key)
    removed = tuple(r for k, r in before_by_key.items() if k not in after_by_key)
    modified = tuple(
        (before_by_key[k], r)
        for k, r in after_by_key.items()
        if k in before_by_key
        and replace(before_by_key[k], speculative=False) != replace(r, speculative=False)
    )
    return ChangeSet(added=added, removed=removed, modified=modified)


def diff_ledgers(before: LedgerData, after: LedgerData) -> dict[str, ChangeSet]:
    """Diff two ledgers collection by collection."""
    changes = {
        "expenses": diff_entries(before.expenses, after.expenses),
        "incomes": diff_entries(before.incomes, after.incomes),
        "recurring_expenses": diff_keyed(
            before.recurring_expenses, after.recurring_expenses, lambda r: r.id
        ),
        "recurring_incomes": diff_keyed(
            before.recurring_incomes, after.recurring_incomes, lambda r: r.id
        ),
        "recurring_income_overrides": diff_keyed(
            before.overrides, after.overrides, lambda o: o.key
        ),
        "initial_balance": ChangeSet(),
        "app_settings": ChangeSet(),
    }
    if before.initial_balance != after.initial_balance:
        changes["initial_balance"] = ChangeSet(
            modified=((before.initial_balance, after.initial_balance),)
        )
    if before.settings != after.settings:
        changes["app_settings"] = ChangeSet(modified=((before.settings, after.settings),))
    return changes


class SimulationOverlay:
    """Idle/simulating state machine over a database."""

    def __init__(
        self,
        db: Database,
        sync: Optional[RemoteSync] = None,
        on_change: Optional[Callable[[], None]] = None,
    ):
        """Initialize simulation overlay.

        Args:
            db: Database holding the live collections and the snapshot
            sync: Remote to push accepted data to
            on_change: Called after every start, accept or discard
        """
        self.db = db
        self.sync = sync or NullSync()
        self.on_change = on_change

    @property
    def active(self) -> bool:
        return self.db.load_snapshot() is not None

    def baseline(self) -> Optional[LedgerData]:
        """Return the committed state captured at start, if simulating."""
        return self.db.load_snapshot()

    def start(self) -> bool:
        """Capture a snapshot and enter simulation.

        Returns:
            False if a simulation was already active (its snapshot is kept)
        """
        if self.active:
            logger.info("Simulation already active; keeping existing snapshot")
            return False
        self.db.save_snapshot(self.db.load_ledger())
        logger.info("Simulation started")
        self._changed()
        return True

    def accept(self) -> bool:
        """Commit speculative changes and push them to the remote.

        Returns:
            False if no simulation was active
        """
        if not self.active:
            return False

        committed = strip_speculative(self.db.load_ledger())
        self.db.restore_ledger(committed)
        self.db.clear_snapshot()
        try:
            self.sync.push_ledger(committed)
        except SyncError as e:
            logger.warning("Accepted simulation but remote push failed: %s", e)
        logger.info("Simulation accepted")
        self._changed()
        return True

    def discard(self) -> bool:
        """Restore the snapshot exactly and leave simulation.

        Returns:
            False if no simulation was active
        """
        snapshot = self.db.load_snapshot()
        if snapshot is None:
            return False

        self.db.restore_ledger(snapshot)
        self.db.clear_snapshot()
        logger.info("Simulation discarded")
        self._changed()
        return True

    def pending_changes(self) -> dict[str, ChangeSet]:
        """Diff current data against the snapshot; empty when idle."""
        snapshot = self.db.load_snapshot()
        if snapshot is None:
            return {}
        return diff_ledgers(snapshot, self.db.load_ledger())

    def _changed(self) -> None:
        if self.on_change is not None:
            self.on_change()
