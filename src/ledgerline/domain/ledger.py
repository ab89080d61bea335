"""Ledger write path.

Every mutation of persisted data goes through ``LedgerService``. While a
simulation is active each written record is tagged speculative and nothing
is pushed to the remote; otherwise the touched collections are pushed after
the write.
"""

import logging
import uuid
from dataclasses import replace
from datetime import date
from decimal import Decimal
from typing import Optional

from ledgerline.context import LedgerContext
from ledgerline.domain.entities import (
    AppSettings,
    Entry,
    EntryKind,
    Frequency,
    Override,
    RecurringRule,
    Theme,
    build_schedule,
)
from ledgerline.domain.errors import (
    NotFoundError,
    ValidationError,
    duplicate_recurring_rule,
    recurring_rule_not_found,
)
from ledgerline.domain.overrides import find_override
from ledgerline.domain.periods import YearMonth
from ledgerline.sync import SyncError
from ledgerline.utils.amount_parser import normalize_amount, parse_amount

logger = logging.getLogger(__name__)

ENTRY_KEYS = {EntryKind.EXPENSE: "expenses", EntryKind.INCOME: "incomes"}
RULE_KEYS = {
    EntryKind.EXPENSE: "recurring_expenses",
    EntryKind.INCOME: "recurring_incomes",
}
OVERRIDES_KEY = "recurring_income_overrides"


def _amount(amount: str) -> str:
    try:
        return normalize_amount(amount)
    except ValueError as e:
        raise ValidationError(str(e))


class LedgerService:
    """Service for writing ledger data."""

    def __init__(self, context: LedgerContext):
        """Initialize ledger service.

        Args:
            context: Session context; its source must be writable
        """
        self.context = context
        self.db = context.db

    # Helpers
    def _tag(self, record):
        return replace(record, speculative=self.context.simulating)

    def _written(self, *keys: str) -> None:
        """Mirror the touched collections and tell listeners."""
        if self.context.simulating:
            logger.debug("Simulating; not pushing %s", ", ".join(keys))
        elif self.context.sync.active:
            try:
                self.context.sync.push_ledger(self.db.load_ledger(), keys=keys)
            except SyncError as e:
                logger.warning("Remote push failed: %s", e)
        self.context.notifier.notify()

    # One-off entries
    def list_entries(self, kind: EntryKind) -> list[Entry]:
        return self.db.list_entries(kind)

    def add_entries(self, kind: EntryKind, entries: list[Entry]) -> None:
        """Append entries, keeping the collection sorted by date.

        The sort is stable, so entries on the same day keep insertion order.
        """
        kind = EntryKind(kind)
        combined = self.db.list_entries(kind) + [self._tag(e) for e in entries]
        combined.sort(key=lambda e: e.date)
        self.db.replace_entries(kind, combined)
        self._written(ENTRY_KEYS[kind])

    def add_entry(self, kind: EntryKind, amount: str, description: str, date: date) -> Entry:
        """Record a one-off expense or income.

        Raises:
            ValidationError: If the amount cannot be parsed
        """
        entry = self._tag(
            Entry(amount=_amount(amount), description=(description or "").strip(), date=date)
        )
        self.add_entries(kind, [entry])
        return entry

    def delete_entry(self, kind: EntryKind, entry: Entry) -> bool:
        """Remove the first entry matching on (date, description, amount).

        Returns:
            True if an entry was removed
        """
        kind = EntryKind(kind)
        entries = self.db.list_entries(kind)
        for index, existing in enumerate(entries):
            if existing.matches(entry):
                del entries[index]
                self.db.replace_entries(kind, entries)
                self._written(ENTRY_KEYS[kind])
                return True
        return False

    def update_entry(self, kind: EntryKind, match: Entry, updated: Entry) -> bool:
        """Replace the first entry matching ``match`` with ``updated``.

        Returns:
            True if an entry was updated
        """
        kind = EntryKind(kind)
        entries = self.db.list_entries(kind)
        for index, existing in enumerate(entries):
            if existing.matches(match):
                entries[index] = self._tag(
                    replace(
                        updated,
                        amount=_amount(updated.amount),
                        description=(updated.description or "").strip(),
                    )
                )
                entries.sort(key=lambda e: e.date)
                self.db.replace_entries(kind, entries)
                self._written(ENTRY_KEYS[kind])
                return True
        return False

    # Recurring rules
    def list_rules(self, kind: EntryKind) -> list[RecurringRule]:
        return self.db.list_rules(kind)

    def get_rule(self, kind: EntryKind, rule_id: str) -> Optional[RecurringRule]:
        for rule in self.db.list_rules(kind):
            if rule.id == rule_id:
                return rule
        return None

    def add_rule(
        self,
        kind: EntryKind,
        amount: str,
        description: str,
        frequency: Frequency,
        start_date: date,
        end_date: Optional[date] = None,
        day_of_month: Optional[int] = None,
        day_of_week: Optional[int] = None,
        rule_id: Optional[str] = None,
    ) -> RecurringRule:
        """Create a recurring rule.

        Args:
            kind: Expense or income
            amount: Base amount
            description: Description shown on every occurrence
            frequency: daily, weekly, monthly or yearly
            start_date: First day the rule can fire
            end_date: Optional last day the rule can fire
            day_of_month: Day for monthly rules (defaults to 1)
            day_of_week: Day for weekly rules, 0 = Sunday
            rule_id: Optional id (generated if not provided)

        Returns:
            The stored rule

        Raises:
            ValidationError: If any field is invalid or the id is taken
        """
        kind = EntryKind(kind)
        rule_id = rule_id or uuid.uuid4().hex
        if any(r.id == rule_id for r in self._all_rules()):
            raise ValidationError(duplicate_recurring_rule(rule_id))

        rule = self._tag(
            RecurringRule(
                id=rule_id,
                amount=_amount(amount),
                description=(description or "").strip(),
                schedule=build_schedule(frequency, day_of_month, day_of_week),
                start_date=start_date,
                end_date=end_date,
            )
        )
        self.db.replace_rules(kind, self.db.list_rules(kind) + [rule])
        self._written(RULE_KEYS[kind])
        return rule

    def update_rule(
        self,
        kind: EntryKind,
        rule_id: str,
        amount: Optional[str] = None,
        description: Optional[str] = None,
        frequency: Optional[Frequency] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        day_of_month: Optional[int] = None,
        day_of_week: Optional[int] = None,
        clear_end_date: bool = False,
    ) -> RecurringRule:
        """Replace base fields of a rule; its overrides are untouched.

        Fields left as None keep their current value.

        Raises:
            NotFoundError: If no rule of this kind has the id
            ValidationError: If the resulting rule is invalid
        """
        kind = EntryKind(kind)
        rules = self.db.list_rules(kind)
        for index, rule in enumerate(rules):
            if rule.id != rule_id:
                continue

            new_frequency = frequency if frequency is not None else rule.frequency
            schedule = build_schedule(
                new_frequency,
                day_of_month if day_of_month is not None else rule.day_of_month,
                day_of_week if day_of_week is not None else rule.day_of_week,
            )
            updated = RecurringRule(
                id=rule.id,
                amount=_amount(amount) if amount is not None else rule.amount,
                description=description.strip() if description is not None else rule.description,
                schedule=schedule,
                start_date=start_date or rule.start_date,
                end_date=None if clear_end_date else (end_date or rule.end_date),
            )
            rules[index] = self._tag(updated)
            self.db.replace_rules(kind, rules)
            self._written(RULE_KEYS[kind])
            return rules[index]

        raise NotFoundError(recurring_rule_not_found(rule_id))

    def delete_rule(self, kind: EntryKind, rule_id: str) -> None:
        """Delete a rule; deleting an income rule also deletes its overrides.

        Raises:
            NotFoundError: If no rule of this kind has the id
        """
        kind = EntryKind(kind)
        rules = self.db.list_rules(kind)
        remaining = [r for r in rules if r.id != rule_id]
        if len(remaining) == len(rules):
            raise NotFoundError(recurring_rule_not_found(rule_id))

        self.db.replace_rules(kind, remaining)
        keys = [RULE_KEYS[kind]]
        if kind == EntryKind.INCOME:
            overrides = self.db.list_overrides()
            kept = [o for o in overrides if o.recurring_id != rule_id]
            if len(kept) != len(overrides):
                self.db.replace_overrides(kept)
                keys.append(OVERRIDES_KEY)
        self._written(*keys)

    def _all_rules(self) -> list[RecurringRule]:
        return self.db.list_rules(EntryKind.EXPENSE) + self.db.list_rules(EntryKind.INCOME)

    # Overrides
    def list_overrides(self, rule_id: Optional[str] = None) -> list[Override]:
        overrides = self.db.list_overrides()
        if rule_id is None:
            return overrides
        return [o for o in overrides if o.recurring_id == rule_id]

    def set_override(self, rule_id: str, year_month: str, amount: str) -> Override:
        """Upsert the override for (rule_id, year_month).

        Raises:
            NotFoundError: If no income rule has the id
            ValidationError: If the month or amount is invalid
        """
        key = str(YearMonth.parse(year_month))
        if self.get_rule(EntryKind.INCOME, rule_id) is None:
            raise NotFoundError(recurring_rule_not_found(rule_id))

        override = self._tag(Override(recurring_id=rule_id, year_month=key, amount=_amount(amount)))
        overrides = self.db.list_overrides()
        existing = find_override(rule_id, overrides, key)
        if existing is None:
            overrides.append(override)
        else:
            overrides[overrides.index(existing)] = override
        self.db.replace_overrides(overrides)
        self._written(OVERRIDES_KEY)
        return override

    def delete_override(self, rule_id: str, year_month: str) -> bool:
        """Delete one override.

        Returns:
            True if an override was removed
        """
        key = str(YearMonth.parse(year_month))
        overrides = self.db.list_overrides()
        kept = [o for o in overrides if o.key != (rule_id, key)]
        if len(kept) == len(overrides):
            return False
        self.db.replace_overrides(kept)
        self._written(OVERRIDES_KEY)
        return True

    # Balance anchor
    def get_initial_balance(self) -> Optional[Decimal]:
        return self.db.get_initial_balance()

    def set_initial_balance(self, amount: str | Decimal) -> Decimal:
        """Set the balance anchor.

        This clears all one-off expenses and incomes: the anchor is the
        balance before any recorded entry. Recurring rules and overrides stay.

        Raises:
            ValidationError: If the amount cannot be parsed
        """
        try:
            balance = parse_amount(str(amount))
        except ValueError as e:
            raise ValidationError(str(e))

        self.db.replace_entries(EntryKind.EXPENSE, [])
        self.db.replace_entries(EntryKind.INCOME, [])
        self.db.set_initial_balance(balance)
        self._written("expenses", "incomes", "initial_balance")
        return balance

    # Settings
    def get_settings(self) -> AppSettings:
        return self.db.get_settings()

    def update_settings(
        self, currency: Optional[str] = None, theme: Optional[Theme] = None
    ) -> AppSettings:
        current = self.db.get_settings()
        try:
            new_theme = Theme(theme) if theme is not None else current.theme
        except ValueError:
            raise ValidationError(f"Unknown theme '{theme}'")
        settings = AppSettings(
            currency=currency.strip().upper() if currency else current.currency,
            theme=new_theme,
        )
        self.db.set_settings(settings)
        self._written("app_settings")
        return settings

    # Resets
    def reset_transactions(self) -> None:
        """Wipe one-off entries; recurring rules and balance are kept."""
        self.db.replace_entries(EntryKind.EXPENSE, [])
        self.db.replace_entries(EntryKind.INCOME, [])
        self._written("expenses", "incomes")

    def reset_recurring(self) -> None:
        """Wipe recurring rules and overrides; one-off entries are kept."""
        self.db.replace_rules(EntryKind.EXPENSE, [])
        self.db.replace_rules(EntryKind.INCOME, [])
        self.db.replace_overrides([])
        self._written("recurring_expenses", "recurring_incomes", OVERRIDES_KEY)

    def reset_all(self) -> None:
        """Wipe every collection and the balance anchor. Settings are kept."""
        self.db.replace_entries(EntryKind.EXPENSE, [])
        self.db.replace_entries(EntryKind.INCOME, [])
        self.db.replace_rules(EntryKind.EXPENSE, [])
        self.db.replace_rules(EntryKind.INCOME, [])
        self.db.replace_overrides([])
        self.db.set_initial_balance(None)
        self._written(
            "expenses",
            "incomes",
            "recurring_expenses",
            "recurring_incomes",
            OVERRIDES_KEY,
            "initial_balance",
        )
