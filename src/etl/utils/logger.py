"""Logger factory shared by the API, the ingestion pipeline and scripts.

Each named logger writes to stdout and, unless LOG_TO_FILE is off,
to one daily file shared by every logger of the process.
"""

import logging
import sys
from datetime import date
from pathlib import Path

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_loggers: dict[str, logging.Logger] = {}
_file_handlers: dict[Path, logging.FileHandler] = {}


def setup_logger(
    name: str,
    level: int | str | None = None,
    log_dir: Path | None = None,
) -> logging.Logger:
    """Return the configured logger for name, creating it on first use.

    Args:
        name: Dotted logger name (e.g. 'etl.pipeline.ingestion').
        level: Level override; LOG_LEVEL when None.
        log_dir: Log file directory override; LOG_DIR when None.

    Returns:
        Logger that does not propagate to the root logger.
    """
    if name in _loggers:
        return _loggers[name]

    from src.settings.base import LoggingSettings

    config = LoggingSettings()
    level = level if level is not None else config.level

    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.handlers.clear()
    logger.propagate = False

    formatter = logging.Formatter(LOG_FORMAT, DATE_FORMAT)
    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(formatter)
    logger.addHandler(console)

    if config.to_file:
        handler = _daily_file_handler(log_dir or Path(config.log_dir), formatter)
        if handler is not None:
            logger.addHandler(handler)

    _loggers[name] = logger
    return logger


def log_file_path(log_dir: Path, day: date | None = None) -> Path:
    """Path of the log file for a day (today by default)."""
    day = day or date.today()
    return log_dir / f"reelfake_{day:%Y%m%d}.log"


def _daily_file_handler(log_dir: Path, formatter: logging.Formatter) -> logging.FileHandler | None:
    """Return the process-wide handler for today's log file.

    Returns:
        Shared FileHandler, or None when the file cannot be opened.
    """
    path = log_file_path(log_dir)
    handler = _file_handlers.get(path)
    if handler is not None:
        return handler
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(path, encoding="utf-8")
    except OSError as e:
        print(f"Warning: logging to stdout only, cannot open {path}: {e}", file=sys.stderr)
        return None
    handler.setFormatter(formatter)
    _file_handlers[path] = handler
    return handler
