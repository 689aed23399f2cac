"""
Engine settings: where the static-data store lives, cache lifetime, logging.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from shipfit_app.config.limits import CACHE_TTL_S

_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s - %(message)s"


def _default_data_dir() -> Path:
    return Path(__file__).resolve().parents[2] / "shipfit_app_data"


@dataclass(slots=True)
class Settings:
    data_dir: Path
    db_path: Path
    cache_ttl_s: float = CACHE_TTL_S
    log_level: int = logging.INFO

    @classmethod
    def default(cls, data_dir: Path | None = None) -> "Settings":
        """Settings rooted at `data_dir` (created if missing); static data in one SQLite file there."""
        data_dir = Path(data_dir) if data_dir is not None else _default_data_dir()
        data_dir.mkdir(parents=True, exist_ok=True)
        return cls(data_dir=data_dir, db_path=data_dir / "static_data.db")

    @property
    def log_file(self) -> Path:
        return self.data_dir / "shipfit.log"


def init_logging(settings: Settings) -> logging.Handler:
    """Send the engine's log records to a file in the data directory."""
    logger = logging.getLogger("shipfit_app")
    logger.setLevel(settings.log_level)

    target = os.path.abspath(settings.log_file)
    for handler in logger.handlers:
        if isinstance(handler, logging.FileHandler) and handler.baseFilename == target:
            return handler

    handler = logging.FileHandler(settings.log_file, encoding="utf-8")
    handler.setFormatter(logging.Formatter(_LOG_FORMAT))
    logger.addHandler(handler)

    logging.getLogger(__name__).info("Logging initialized. Static data at %s", settings.db_path)
    return handler
