"""
Compass logging setup.

Everything logs under the "compass" namespace (compass.goal_store,
compass.recurrence, ...). setup_logging() is called once by main.py;
library use and tests only get loggers and never touch handlers.

Files in the log directory:
- system.log: store mutations, imports, seeding (INFO+)
- error.log: failures only (ERROR+)
"""
import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from compass.paths import get_logs_dir

MAX_BYTES = 5 * 1024 * 1024
BACKUP_COUNT = 3

ROOT_LOGGER_NAME = "compass"

FILE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
CONSOLE_FORMAT = "[%(levelname)s] %(name)s: %(message)s"


def _rotating_handler(path: Path, level: int, formatter: logging.Formatter) -> RotatingFileHandler:
    handler = RotatingFileHandler(path, maxBytes=MAX_BYTES, backupCount=BACKUP_COUNT, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def setup_logging(
    log_level: int = logging.INFO,
    console_level: int = logging.WARNING,
    logs_dir: Optional[Path] = None,
) -> logging.Logger:
    """
    Attach the file and console handlers to the "compass" logger.

    Args:
        log_level: threshold for system.log
        console_level: threshold for stderr; uvicorn prints its own access log
        logs_dir: log directory (default COMPASS_LOG_DIR or <project>/logs)

    Calling it again replaces the handlers instead of stacking them.
    """
    logs_dir = logs_dir or get_logs_dir()
    logs_dir.mkdir(parents=True, exist_ok=True)

    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(logging.DEBUG)
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    file_formatter = logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
    root.addHandler(_rotating_handler(logs_dir / "system.log", log_level, file_formatter))
    root.addHandler(_rotating_handler(logs_dir / "error.log", logging.ERROR, file_formatter))

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    root.addHandler(console)

    root.info("Logging to %s", logs_dir)
    return root


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Logger for a compass module, e.g. get_logger("storage") -> "compass.storage"."""
    if name:
        return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
    return logging.getLogger(ROOT_LOGGER_NAME)
