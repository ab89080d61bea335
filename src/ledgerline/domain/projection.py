"""Running-balance projection."""

import logging
from datetime import date, timedelta
from decimal import Decimal
from typing import Optional

from ledgerline.domain.aggregation import aggregate_month, aggregate_period
from ledgerline.domain.entities import (
    Granularity,
    LedgerData,
    Projection,
    ProjectionStep,
)
from ledgerline.domain.periods import YearMonth, iter_days, iter_months
from ledgerline.utils.amount_parser import ZERO

logger = logging.getLogger(__name__)


def earliest_month(data: LedgerData) -> Optional[YearMonth]:
    """Return the earliest month referenced by any entry or rule."""
    candidates = [entry.date for entry in data.expenses]
    candidates.extend(entry.date for entry in data.incomes)
    candidates.extend(rule.start_date for rule in data.recurring_expenses)
    candidates.extend(rule.start_date for rule in data.recurring_incomes)
    if not candidates:
        return None
    return YearMonth.from_date(min(candidates))


def carried_in_balance(data: LedgerData, start: date) -> Decimal:
    """Return the balance accumulated strictly before ``start``.

    Full months are walked from the earliest referenced month up to the month
    containing ``start``; days of that month before ``start`` are added on
    top so ranges need not begin on a month boundary.
    """
    balance = data.initial_balance if data.initial_balance is not None else ZERO
    first = earliest_month(data)
    if first is None:
        return balance

    start_month = YearMonth.from_date(start)
    if first < start_month:
        for year_month in iter_months(first, start_month.previous()):
            balance += aggregate_month(data, year_month).net

    if start.day > 1 and first <= start_month:
        balance += aggregate_period(data, start_month.first_day, start - timedelta(days=1)).net

    return balance


def _month_windows(start: date, end: date) -> list[tuple[str, date, date]]:
    windows = []
    for year_month in iter_months(YearMonth.from_date(start), YearMonth.from_date(end)):
        windows.append(
            (
                str(year_month),
                max(start, year_month.first_day),
                min(end, year_month.last_day),
            )
        )
    return windows


def _day_windows(start: date, end: date) -> list[tuple[str, date, date]]:
    return [(day.isoformat(), day, day) for day in iter_days(start, end)]


class BalanceProjector:
    """Projects running balances over a ledger snapshot."""

    def __init__(self, data: LedgerData):
        """Initialize projector.

        Args:
            data: Ledger data to project; never modified
        """
        self.data = data

    def carried_in_balance(self, start: date) -> Decimal:
        return carried_in_balance(self.data, start)

    def project_range(
        self,
        start: date,
        end: date,
        granularity: Granularity = Granularity.MONTH,
    ) -> Projection:
        """Project the running balance from ``start`` to ``end`` inclusive.

        Args:
            start: First day of the range
            end: Last day of the range
            granularity: One step per month (clipped to the range) or per day

        Returns:
            Projection; an inverted range yields no steps
        """
        carried_in = self.carried_in_balance(start)
        if end < start:
            logger.debug("Inverted range %s..%s, returning empty series", start, end)
            return Projection(start=start, end=end, carried_in_balance=carried_in)

        if Granularity(granularity) == Granularity.DAY:
            windows = _day_windows(start, end)
        else:
            windows = _month_windows(start, end)

        balance = carried_in
        steps = []
        for label, window_start, window_end in windows:
            totals = aggregate_period(self.data, window_start, window_end)
            balance += totals.net
            steps.append(
                ProjectionStep(
                    label=label,
                    start=window_start,
                    end=window_end,
                    income=totals.income,
                    expense=totals.expense,
                    balance=balance,
                )
            )

        return Projection(
            start=start, end=end, carried_in_balance=carried_in, steps=tuple(steps)
        )

    def project_year(self, year: int) -> Projection:
        """Project the twelve months of a calendar year."""
        return self.project_range(date(year, 1, 1), date(year, 12, 31))
