"""Process-wide ledger context.

Everything the engine and write path share (data source, remote, change
listeners, simulation state) lives on one ``LedgerContext`` that callers
create with ``init_context`` and release with ``LedgerContext.reset``.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Optional

from ledgerline.config import get_settings
from ledgerline.database.base import Database, DataSource
from ledgerline.database.factories import create_sqlite_database
from ledgerline.database.sample_data import SampleDataSource
from ledgerline.domain.errors import ReadOnlyError, read_only_source
from ledgerline.domain.simulation import SimulationOverlay
from ledgerline.sync import DirectorySync, NullSync, RemoteSync

logger = logging.getLogger(__name__)

Listener = Callable[[], None]


class ChangeNotifier:
    """Broadcasts a generic "data changed" signal to subscribers."""

    def __init__(self):
        self._listeners: list[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener; returns a function that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def notify(self) -> None:
        for listener in list(self._listeners):
            listener()

    def clear(self) -> None:
        self._listeners.clear()


@dataclass
class LedgerContext:
    """Shared state for one session."""

    source: DataSource
    sync: RemoteSync = field(default_factory=NullSync)
    notifier: ChangeNotifier = field(default_factory=ChangeNotifier)
    simulation: Optional[SimulationOverlay] = None

    def __post_init__(self):
        if self.simulation is None and isinstance(self.source, Database):
            self.simulation = SimulationOverlay(
                self.source, sync=self.sync, on_change=self.notifier.notify
            )

    @property
    def db(self) -> Database:
        """Writable store.

        Raises:
            ReadOnlyError: If the session reads sample data
        """
        if not isinstance(self.source, Database):
            raise ReadOnlyError(read_only_source())
        return self.source

    @property
    def simulating(self) -> bool:
        return self.simulation is not None and self.simulation.active

    def reset(self) -> None:
        """Drop listeners and close the store."""
        self.notifier.clear()
        if isinstance(self.source, Database):
            self.source.disconnect()


def init_context(
    database_path: Optional[str] = None,
    sample_data: Optional[bool] = None,
    sync_dir: Optional[str] = None,
) -> LedgerContext:
    """Create the context for a session.

    Arguments left as None fall back to the environment configuration.
    Sample data and the live store are mutually exclusive; the choice is made
    here once per session.
    """
    settings = get_settings()
    if sample_data is None:
        sample_data = settings.sample_data
    if sync_dir is None:
        sync_dir = settings.sync_dir

    if sample_data:
        logger.info("Using generated sample data")
        return LedgerContext(source=SampleDataSource())

    db = create_sqlite_database(database_path=database_path)
    db.connect()
    db.initialize_schema()
    sync = DirectorySync(sync_dir) if sync_dir else NullSync()
    return LedgerContext(source=db, sync=sync)
