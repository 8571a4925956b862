from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from .config import get_settings


_INITIALIZED = False


def configure_logging(level: Optional[str] = None, *, log_path: Optional[Path] = None) -> None:
    """Configure application-wide logging.

    Console output goes to stderr because stdout carries the MCP stdio
    transport. A rotating file handler is added when a log file is configured.
    """

    global _INITIALIZED
    if _INITIALIZED:
        return

    settings = get_settings().logging
    resolved_level = (level or settings.level).upper()
    log_file = log_path or settings.log_file

    formatter = logging.Formatter(
        fmt="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)

    root = logging.getLogger()
    root.setLevel(getattr(logging, resolved_level, logging.INFO))
    root.addHandler(console_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(str(log_file), maxBytes=1_000_000, backupCount=5)
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    _INITIALIZED = True
    logging.getLogger(__name__).debug("Logging configured. Output file: %s", log_file)


__all__ = ["configure_logging"]
