"""Read-side façade over the projection engine."""

from datetime import date
from typing import Optional

from ledgerline.context import LedgerContext
from ledgerline.domain.aggregation import aggregate_month, occurrences_for_month
from ledgerline.domain.entities import (
    ChangeSet,
    Entry,
    EntryKind,
    Granularity,
    LedgerData,
    MonthTotals,
    Projection,
)
from ledgerline.domain.errors import ReadOnlyError, read_only_source
from ledgerline.domain.periods import YearMonth
from ledgerline.domain.projection import BalanceProjector


def _year_month(value: YearMonth | str) -> YearMonth:
    return value if isinstance(value, YearMonth) else YearMonth.parse(value)


class LedgerEngine:
    """Answers month, range and year queries against current data.

    Every query reloads the data source, so results always reflect whichever
    state is live, committed or speculative.
    """

    def __init__(self, context: LedgerContext):
        """Initialize ledger engine.

        Args:
            context: Session context
        """
        self.context = context

    def load(self) -> LedgerData:
        return self.context.source.load_ledger()

    def expand_recurring_for_month(
        self, kind: EntryKind, year_month: YearMonth | str
    ) -> list[Entry]:
        """Return the recurring occurrences of ``kind`` for a month as entries."""
        occurrences = occurrences_for_month(self.load(), EntryKind(kind), _year_month(year_month))
        return [occurrence.to_entry() for occurrence in occurrences]

    def month_entries(self, kind: EntryKind, year_month: YearMonth | str) -> list[Entry]:
        """Return one-off and recurring entries of ``kind`` for a month by date."""
        data = self.load()
        kind = EntryKind(kind)
        month = _year_month(year_month)
        entries = [e for e in data.entries(kind) if month.contains(e.date)]
        entries.extend(o.to_entry() for o in occurrences_for_month(data, kind, month))
        return sorted(entries, key=lambda e: e.date)

    def month_totals(self, year_month: YearMonth | str) -> MonthTotals:
        return aggregate_month(self.load(), _year_month(year_month))

    def project_range(
        self, start: date, end: date, granularity: Granularity = Granularity.MONTH
    ) -> Projection:
        return BalanceProjector(self.load()).project_range(start, end, granularity)

    def project_year(self, year: int) -> Projection:
        return BalanceProjector(self.load()).project_year(year)

    def baseline_projection(
        self, start: date, end: date, granularity: Granularity = Granularity.MONTH
    ) -> Optional[Projection]:
        """Project the committed state captured when the simulation started.

        Returns None when no simulation is active.
        """
        if self.context.simulation is None:
            return None
        baseline = self.context.simulation.baseline()
        if baseline is None:
            return None
        return BalanceProjector(baseline).project_range(start, end, granularity)

    # Simulation
    @property
    def is_simulating(self) -> bool:
        return self.context.simulating

    def _simulation(self):
        if self.context.simulation is None:
            raise ReadOnlyError(read_only_source())
        return self.context.simulation

    def start_simulation(self) -> bool:
        return self._simulation().start()

    def accept_simulation(self) -> bool:
        return self._simulation().accept()

    def discard_simulation(self) -> bool:
        return self._simulation().discard()

    def pending_changes(self) -> dict[str, ChangeSet]:
        if self.context.simulation is None:
            return {}
        return self.context.simulation.pending_changes()
