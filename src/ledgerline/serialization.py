"""Conversion between domain entities and plain JSON-compatible records.

Records are what crosses the storage and sync boundaries. The
``speculative`` flag is written only when ``include_speculative`` is set,
which the sync path never does.
"""

import logging
from datetime import date
from decimal import Decimal
from typing import Any, Callable, Iterable, Optional, TypeVar

from ledgerline.domain.entities import (
    AppSettings,
    Entry,
    LedgerData,
    Override,
    RecurringRule,
    Theme,
    build_schedule,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _flag(record: dict[str, Any], speculative: bool, include_speculative: bool) -> dict[str, Any]:
    if include_speculative and speculative:
        record["speculative"] = True
    return record


def entry_to_record(entry: Entry, include_speculative: bool = False) -> dict[str, Any]:
    record = {
        "amount": entry.amount,
        "description": entry.description,
        "date": entry.date.isoformat(),
    }
    return _flag(record, entry.speculative, include_speculative)


def entry_from_record(record: dict[str, Any]) -> Entry:
    return Entry(
        amount=str(record["amount"]),
        description=record.get("description", ""),
        date=date.fromisoformat(record["date"]),
        speculative=bool(record.get("speculative", False)),
    )


def rule_to_record(rule: RecurringRule, include_speculative: bool = False) -> dict[str, Any]:
    record: dict[str, Any] = {
        "id": rule.id,
        "amount": rule.amount,
        "description": rule.description,
        "frequency": rule.frequency.value,
        "start_date": rule.start_date.isoformat(),
    }
    if rule.end_date is not None:
        record["end_date"] = rule.end_date.isoformat()
    if rule.day_of_month is not None:
        record["day_of_month"] = rule.day_of_month
    if rule.day_of_week is not None:
        record["day_of_week"] = rule.day_of_week
    return _flag(record, rule.speculative, include_speculative)


def stored_day_of_month(day_of_month: Optional[int]) -> Optional[int]:
    """Read a stored day of month; 0 or missing means the 1st."""
    return day_of_month or None


def load_rules(items: Iterable[T], convert: Callable[[T], RecurringRule]) -> list[RecurringRule]:
    """Convert stored rules, dropping the ones that cannot be read.

    A single malformed rule must not block every projection. Rules that fail
    validation are logged by id and skipped.
    """
    rules = []
    for item in items:
        try:
            rules.append(convert(item))
        except (KeyError, TypeError, ValueError) as e:
            rule_id = item.get("id") if isinstance(item, dict) else getattr(item, "id", None)
            logger.warning("Skipping unreadable recurring rule %r: %s", rule_id, e)
    return rules


def rule_from_record(record: dict[str, Any]) -> RecurringRule:
    end_date = record.get("end_date")
    return RecurringRule(
        id=record["id"],
        amount=str(record["amount"]),
        description=record.get("description", ""),
        schedule=build_schedule(
            record["frequency"],
            day_of_month=stored_day_of_month(record.get("day_of_month")),
            day_of_week=record.get("day_of_week"),
        ),
        start_date=date.fromisoformat(record["start_date"]),
        end_date=date.fromisoformat(end_date) if end_date else None,
        speculative=bool(record.get("speculative", False)),
    )


def override_to_record(override: Override, include_speculative: bool = False) -> dict[str, Any]:
    record = {
        "recurring_id": override.recurring_id,
        "year_month": override.year_month,
        "amount": override.amount,
    }
    return _flag(record, override.speculative, include_speculative)


def override_from_record(record: dict[str, Any]) -> Override:
    return Override(
        recurring_id=record["recurring_id"],
        year_month=record["year_month"],
        amount=str(record["amount"]),
        speculative=bool(record.get("speculative", False)),
    )


def balance_to_record(amount: Optional[Decimal]) -> Optional[str]:
    return None if amount is None else str(amount)


def balance_from_record(value: Optional[str]) -> Optional[Decimal]:
    return None if value is None else Decimal(value)


def settings_to_record(settings: AppSettings) -> dict[str, Any]:
    return {"currency": settings.currency, "theme": settings.theme.value}


def settings_from_record(record: Optional[dict[str, Any]]) -> AppSettings:
    """Build settings from a stored record, falling back to defaults per field."""
    defaults = AppSettings()
    if not record:
        return defaults
    try:
        theme = Theme(record.get("theme", defaults.theme.value))
    except ValueError:
        theme = defaults.theme
    return AppSettings(currency=record.get("currency") or defaults.currency, theme=theme)


def ledger_to_record(data: LedgerData, include_speculative: bool = True) -> dict[str, Any]:
    """Serialize a complete ledger, keyed by collection name."""
    return {
        "expenses": [entry_to_record(e, include_speculative) for e in data.expenses],
        "incomes": [entry_to_record(e, include_speculative) for e in data.incomes],
        "recurring_expenses": [
            rule_to_record(r, include_speculative) for r in data.recurring_expenses
        ],
        "recurring_incomes": [
            rule_to_record(r, include_speculative) for r in data.recurring_incomes
        ],
        "recurring_income_overrides": [
            override_to_record(o, include_speculative) for o in data.overrides
        ],
        "initial_balance": balance_to_record(data.initial_balance),
        "app_settings": settings_to_record(data.settings),
    }


def ledger_from_record(record: dict[str, Any]) -> LedgerData:
    return LedgerData(
        expenses=tuple(entry_from_record(r) for r in record.get("expenses", [])),
        incomes=tuple(entry_from_record(r) for r in record.get("incomes", [])),
        recurring_expenses=tuple(
            load_rules(record.get("recurring_expenses", []), rule_from_record)
        ),
        recurring_incomes=tuple(
            load_rules(record.get("recurring_incomes", []), rule_from_record)
        ),
        overrides=tuple(
            override_from_record(r) for r in record.get("recurring_income_overrides", [])
        ),
        initial_balance=balance_from_record(record.get("initial_balance")),
        settings=settings_from_record(record.get("app_settings")),
    )
