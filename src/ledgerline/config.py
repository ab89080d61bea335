import os
from functools import lru_cache
from pathlib import Path
from typing import Optional

TRUE_VALUES = {"1", "true", "yes", "on"}


class Settings:
    def __init__(
        self,
        database_path: str,
        sample_data: bool,
        sync_dir: Optional[str],
        log_level: str,
    ) -> None:
        self.database_path = database_path
        self.sample_data = sample_data
        self.sync_dir = sync_dir
        self.log_level = log_level


def _default_database_path() -> Path:
    return Path.home() / ".ledgerline" / "ledgerline.db"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    database_path = os.getenv("LEDGERLINE_DB_PATH", str(_default_database_path()))
    sample_data = os.getenv("LEDGERLINE_SAMPLE_DATA", "").strip().lower() in TRUE_VALUES
    sync_dir = os.getenv("LEDGERLINE_SYNC_DIR") or None
    log_level = os.getenv("LEDGERLINE_LOG_LEVEL", "WARNING").upper()
    return Settings(
        database_path=database_path,
        sample_data=sample_data,
        sync_dir=sync_dir,
        log_level=log_level,
    )
