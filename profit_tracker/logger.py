import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

from . import settings

# Libraries whose INFO chatter would drown out the tracker's own messages.
QUIET_LOGGERS = ("urllib3", "requests")

FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _file_handler(log_file: Path, log_level: int | str) -> RotatingFileHandler:
    log_file.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        log_file,
        maxBytes=settings.LOG_MAX_BYTES,
        backupCount=settings.LOG_BACKUP_COUNT,
        encoding="utf-8",
    )
    handler.setLevel(log_level)
    handler.setFormatter(logging.Formatter(FILE_FORMAT))
    return handler


def setup_logger(
    name: str | None = None,
    log_level: int | str = settings.LOG_LEVEL,
    log_file: Path | None = None,
) -> logging.Logger:
    """
    Configures a logger for command line runs.

    Sales, reports and import results go to stdout as bare messages so the CLI
    output stays readable; the rotating file under LOG_DIR keeps the timestamped
    history. Calling it again on a configured logger only updates the level.
    """
    logger = logging.getLogger(name)
    logger.setLevel(log_level)

    if logger.handlers:
        return logger

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(log_level)
    console.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(console)

    logger.addHandler(_file_handler(log_file or settings.LOG_DIR / settings.LOG_FILENAME, log_level))

    for noisy in QUIET_LOGGERS:
        logging.getLogger(noisy).setLevel(logging.WARNING)

    return logger
