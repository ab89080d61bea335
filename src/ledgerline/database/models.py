"""SQLAlchemy models for ledgerline database."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    DateTime,
    Date,
    Boolean,
    Text,
    UniqueConstraint,
    create_engine,
)
from sqlalchemy.orm import declarative_base, sessionmaker, Session

Base = declarative_base()


class Entry(Base):
    """One-off expense or income entry.

    Amounts are stored as entered; ``position`` preserves collection order.
    """

    __tablename__ = "entries"

    id = Column(Integer, primary_key=True)
    kind = Column(String, nullable=False, index=True)
    position = Column(Integer, nullable=False)
    date = Column(Date, nullable=False)
    amount = Column(String, nullable=False)
    description = Column(String, nullable=False, default="")
    speculative = Column(Boolean, default=False, nullable=False)


class RecurringRule(Base):
    """Recurring expense or income rule."""

    __tablename__ = "recurring_rules"

    id = Column(String, primary_key=True)
    kind = Column(String, nullable=False, index=True)
    position = Column(Integer, nullable=False)
    amount = Column(String, nullable=False)
    description = Column(String, nullable=False, default="")
    frequency = Column(String, nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=True)
    day_of_month = Column(Integer, nullable=True)
    day_of_week = Column(Integer, nullable=True)
    speculative = Column(Boolean, default=False, nullable=False)


class RecurringOverride(Base):
    """Per-month amount override for a recurring income rule.

    No foreign key: an override whose rule is gone is inert, not invalid.
    """

    __tablename__ = "recurring_overrides"

    id = Column(Integer, primary_key=True)
    position = Column(Integer, nullable=False)
    recurring_id = Column(String, nullable=False)
    year_month = Column(String, nullable=False)
    amount = Column(String, nullable=False)
    speculative = Column(Boolean, default=False, nullable=False)

    __table_args__ = (
        UniqueConstraint("recurring_id", "year_month", name="uq_override_rule_month"),
    )


class Setting(Base):
    """Scalar values (balance anchor, preferences, simulation snapshot)."""

    __tablename__ = "settings"

    key = Column(String, primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
