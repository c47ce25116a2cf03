import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path


LOG_DIR_ENV = "HARDWARE_POS_LOG_DIR"
LOG_FILE_NAME = "hardware_pos.log"


def resolve_log_dir() -> Path:
    """Return the directory for the log file.

    ``HARDWARE_POS_LOG_DIR`` wins when set; otherwise logs go to ``.logs``
    under the working directory, never inside the installed package.
    """

    override = os.environ.get(LOG_DIR_ENV)
    if override:
        return Path(override).expanduser()
    return Path.cwd() / ".logs"


LOG_DIR = resolve_log_dir()
LOG_FILE = LOG_DIR / LOG_FILE_NAME


def _configure_logging() -> logging.Logger:
    """Configure package-wide logging with file and console handlers."""

    logger = logging.getLogger(__name__)
    if logger.handlers:
        return logger

    logger.setLevel(logging.INFO)
    formatter = logging.Formatter(
        fmt="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    try:
        LOG_DIR.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            LOG_FILE,
            maxBytes=1_000_000,
            backupCount=5,
            encoding="utf-8",
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)
    except (OSError, PermissionError) as exc:
        print(
            f"Warning: unable to initialize log file at '{LOG_FILE}': {exc}",
            file=sys.stderr,
        )

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.WARNING)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    return logger


def set_log_level(level: str) -> None:
    """Apply a configured level name (``DEBUG``, ``INFO`` ...) to the package logger."""

    resolved = logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level}")
    log.setLevel(resolved)


log = _configure_logging()
log.debug("Logger initialized for the 'hardware_pos' package.")
