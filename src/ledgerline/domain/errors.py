"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ReadOnlyError(DomainError):
    """Write attempted against a read-only data source."""


def invalid_year_month(value: str) -> str:
    """Return message for a malformed year-month string."""
    return f"Invalid year-month '{value}', expected YYYY-MM"


def invalid_day_of_week(day_of_week: int) -> str:
    """Return message for a weekday outside 0..6."""
    return f"Day of week must be between 0 (Sunday) and 6 (Saturday), got {day_of_week}"


def invalid_day_of_month(day_of_month: int) -> str:
    """Return message for a day of month outside 1..31."""
    return f"Day of month must be between 1 and 31, got {day_of_month}"


def end_before_start(start_date, end_date) -> str:
    """Return message for a rule whose end precedes its start."""
    return f"End date {end_date} is before start date {start_date}"


def recurring_rule_not_found(rule_id: str) -> str:
    """Return message for missing recurring rule."""
    return f"Recurring rule '{rule_id}' not found"


def duplicate_recurring_rule(rule_id: str) -> str:
    """Return message for a rule id that is already taken."""
    return f"Recurring rule '{rule_id}' already exists"


def read_only_source() -> str:
    """Return message for writes against sample data."""
    return "Sample data is read-only; run without --sample-data to make changes"
