"""
Application configuration and logging setup.

Settings come from the environment (a local .env file is loaded first):

    EZSCHEDULE_DATA_DIR     where scheduler.json / preferences.json live
                            (default: the package's own data/ folder)
    EZSCHEDULE_PREFS_FILE   preferences file (default: <data dir>/preferences.json)
    EZSCHEDULE_LOG_LEVEL    loguru level for stderr (default: WARNING)
    EZSCHEDULE_LOG_FILE     optional log file (rotated at 1 MB)
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from loguru import logger

load_dotenv()


PACKAGE_DIR = Path(__file__).resolve().parent


def _default_data_dir() -> Path:
    return PACKAGE_DIR / "data"


@dataclass
class Settings:
    data_dir: Path = field(default_factory=_default_data_dir)
    prefs_file: Optional[Path] = None
    log_level: str = "WARNING"
    log_file: Optional[Path] = None

    @property
    def user_prefs_file_path(self) -> Path:
        return self.prefs_file if self.prefs_file is not None else self.data_dir / "preferences.json"

    @property
    def default_scheduler_file_path(self) -> Path:
        return self.data_dir / "scheduler.json"

    @classmethod
    def from_env(cls) -> "Settings":
        data_dir = os.getenv("EZSCHEDULE_DATA_DIR", "").strip()
        prefs_file = os.getenv("EZSCHEDULE_PREFS_FILE", "").strip()
        log_file = os.getenv("EZSCHEDULE_LOG_FILE", "").strip()

        return cls(
            data_dir=Path(data_dir).expanduser() if data_dir else _default_data_dir(),
            prefs_file=Path(prefs_file).expanduser() if prefs_file else None,
            log_level=os.getenv("EZSCHEDULE_LOG_LEVEL", "WARNING").strip().upper() or "WARNING",
            log_file=Path(log_file).expanduser() if log_file else None,
        )


def setup_logging(settings: Settings) -> None:
    """
    Replace loguru's default sink with the configured ones.
    """
    logger.remove()
    logger.add(sys.stderr, level=settings.log_level)
    if settings.log_file is not None:
        logger.add(settings.log_file, level="DEBUG", rotation="1 MB", encoding="utf-8")
