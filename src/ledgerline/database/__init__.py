"""Database layer for ledgerline application."""

from ledgerline.database.base import Database, DataSource
from ledgerline.database.factories import create_sqlite_database
from ledgerline.database.sample_data import SampleDataSource

__all__ = ["Database", "DataSource", "create_sqlite_database", "SampleDataSource"]
