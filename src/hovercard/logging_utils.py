from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
ROOT_LOGGER_NAME = "hovercard"


def build_rotating_handler(
    log_dir: Path,
    filename: str,
    *,
    retention: int,
    max_bytes: int,
    formatter: Optional[logging.Formatter] = None,
) -> logging.Handler:
    """Construct a rotating file handler for hovercard logs."""
    retention = max(1, retention)
    backup_count = max(0, retention - 1)
    log_dir.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        log_dir / filename,
        maxBytes=max_bytes,
        backupCount=backup_count,
        encoding="utf-8",
    )
    if formatter is not None:
        handler.setFormatter(formatter)
    handler.setLevel(logging.DEBUG)
    return handler


def setup_logging(
    level: int | str = logging.INFO,
    *,
    log_dir: Path | None = None,
    retention: int = 3,
    max_bytes: int = 512 * 1024,
) -> logging.Logger:
    """Attach console (and optionally file) handlers to the ``hovercard`` logger."""
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        level = resolved if isinstance(resolved, int) else logging.INFO
    logger.setLevel(level)
    formatter = logging.Formatter(LOG_FORMAT)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    console = logging.StreamHandler()
    console.setFormatter(formatter)
    console.setLevel(level)
    logger.addHandler(console)
    if log_dir is not None:
        logger.addHandler(
            build_rotating_handler(log_dir, "hovercard.log", retention=retention, max_bytes=max_bytes, formatter=formatter)
        )
    logger.propagate = False
    return logger
