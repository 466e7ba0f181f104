# =============================================================================
# fabstock_core/logging/config.py
# Logging setup for FabStock Manager
# =============================================================================
"""
One root configuration per server process: console output plus a daily file
under ``FABSTOCK_LOG_DIR``. Streamlit reruns call ``setup_logging`` through a
cached resource, so handlers are not stacked.
"""

import logging
import sys
import time
from datetime import date
from pathlib import Path
from typing import List, Optional

from fabstock_core.config import get_log_dir, get_log_level

LOG_FORMAT = "%(asctime)s | %(name)s | %(levelname)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# HTTP clients used by supabase/openai log every request at INFO
NOISY_LOGGERS = ("urllib3", "httpx", "httpcore", "hpack", "supabase", "postgrest", "openai")


def daily_log_file(log_dir: Path, day: Optional[date] = None) -> Path:
    return log_dir / f"fabstock_{(day or date.today()).isoformat()}.log"


def setup_logging(level: Optional[int] = None, log_dir: Optional[Path] = None) -> None:
    """
    Configure the root logger.

    Args:
        level: Root level, defaults to ``FABSTOCK_LOG_LEVEL``
        log_dir: Directory of the daily file, defaults to ``FABSTOCK_LOG_DIR``
            (console only when that is ``-``)
    """
    level = get_log_level() if level is None else level
    log_dir = get_log_dir() if log_dir is None else log_dir

    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_dir is not None:
        log_dir.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(daily_log_file(log_dir), encoding="utf-8"))

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        handlers=handlers,
        force=True,
    )

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    logging.getLogger("fabstock_core").info(
        f"Logging ready (level={logging.getLevelName(level)}, file={log_dir or 'off'})"
    )


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


class LogContext:
    """
    Log the start, duration and outcome of a storage or sync step.

    Usage:
        with LogContext(logger, "Initializing data provider (remote)"):
            provider.initialize()
    """

    def __init__(self, logger: logging.Logger, operation: str):
        self.logger = logger
        self.operation = operation
        self.started: Optional[float] = None

    def __enter__(self):
        self.started = time.perf_counter()
        self.logger.info(f"{self.operation}...")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        elapsed = time.perf_counter() - self.started
        if exc_type is None:
            self.logger.info(f"{self.operation} done in {elapsed:.2f}s")
        else:
            self.logger.error(
                f"{self.operation} failed after {elapsed:.2f}s: {exc_val}",
                exc_info=True,
            )
        return False
