"""Per-month override resolution for recurring income."""

from typing import Iterable, Optional

from ledgerline.domain.entities import Override, RecurringRule
from ledgerline.domain.periods import YearMonth


def find_override(
    rule_id: str, overrides: Iterable[Override], year_month: YearMonth | str
) -> Optional[Override]:
    """Return the override for (rule_id, year_month), or None."""
    key = str(year_month)
    for override in overrides:
        if override.recurring_id == rule_id and override.year_month == key:
            return override
    return None


def resolve_amount(
    rule: RecurringRule, overrides: Iterable[Override], year_month: YearMonth | str
) -> str:
    """Return the effective amount of ``rule`` in ``year_month``.

    An override for the month always wins over the rule's base amount.
    """
    override = find_override(rule.id, overrides, year_month)
    if override is not None:
        return override.amount
    return rule.amount
