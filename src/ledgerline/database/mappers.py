"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic: the flat frequency columns in the
database become the schedule variants of the domain model here and nowhere
else.
"""

from ledgerline.domain import entities as domain
from ledgerline.database.models import (
    Entry as ORMEntry,
    RecurringRule as ORMRecurringRule,
    RecurringOverride as ORMRecurringOverride,
)
from ledgerline.serialization import stored_day_of_month


def entry_to_domain(orm_entry: ORMEntry) -> domain.Entry:
    """Convert SQLAlchemy Entry model to domain Entry entity."""
    return domain.Entry(
        amount=orm_entry.amount,
        description=orm_entry.description,
        date=orm_entry.date,
        speculative=bool(orm_entry.speculative),
    )


def entry_to_orm(entry: domain.Entry, kind: domain.EntryKind, position: int) -> ORMEntry:
    """Convert domain Entry entity to a new SQLAlchemy Entry row."""
    return ORMEntry(
        kind=kind.value,
        position=position,
        date=entry.date,
        amount=entry.amount,
        description=entry.description,
        speculative=entry.speculative,
    )


def recurring_rule_to_domain(orm_rule: ORMRecurringRule) -> domain.RecurringRule:
    """Convert SQLAlchemy RecurringRule model to domain RecurringRule entity."""
    return domain.RecurringRule(
        id=orm_rule.id,
        amount=orm_rule.amount,
        description=orm_rule.description,
        schedule=domain.build_schedule(
            domain.Frequency(orm_rule.frequency),
            day_of_month=stored_day_of_month(orm_rule.day_of_month),
            day_of_week=orm_rule.day_of_week,
        ),
        start_date=orm_rule.start_date,
        end_date=orm_rule.end_date,
        speculative=bool(orm_rule.speculative),
    )


def recurring_rule_to_orm(
    rule: domain.RecurringRule, kind: domain.EntryKind, position: int
) -> ORMRecurringRule:
    """Convert domain RecurringRule entity to a new SQLAlchemy row."""
    return ORMRecurringRule(
        id=rule.id,
        kind=kind.value,
        position=position,
        amount=rule.amount,
        description=rule.description,
        frequency=rule.frequency.value,
        start_date=rule.start_date,
        end_date=rule.end_date,
        day_of_month=rule.day_of_month,
        day_of_week=rule.day_of_week,
        speculative=rule.speculative,
    )


def override_to_domain(orm_override: ORMRecurringOverride) -> domain.Override:
    """Convert SQLAlchemy RecurringOverride model to domain Override entity."""
    return domain.Override(
        recurring_id=orm_override.recurring_id,
        year_month=orm_override.year_month,
        amount=orm_override.amount,
        speculative=bool(orm_override.speculative),
    )


def override_to_orm(override: domain.Override, position: int) -> ORMRecurringOverride:
    """Convert domain Override entity to a new SQLAlchemy row."""
    return ORMRecurringOverride(
        position=position,
        recurring_id=override.recurring_id,
        year_month=override.year_month,
        amount=override.amount,
        speculative=override.speculative,
    )
