"""Logging setup for news-pulse: console at INFO, rotating file at DEBUG."""
from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOG_DIR = Path(__file__).resolve().parent.parent / "logs"
LOG_FILE = "newspulse.log"
_FORMATTER = logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")

_configured = False


def _with_level(handler: logging.Handler, level: int) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(_FORMATTER)
    return handler


def _configure_logging() -> None:
    global _configured
    if _configured:
        return

    LOG_DIR.mkdir(parents=True, exist_ok=True)
    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    root.addHandler(_with_level(logging.StreamHandler(), logging.INFO))
    root.addHandler(
        _with_level(RotatingFileHandler(LOG_DIR / LOG_FILE, maxBytes=1_000_000, backupCount=3), logging.DEBUG)
    )
    _configured = True


def get_logger(name: str, verbose: bool = False) -> logging.Logger:
    """Return a named logger; ``verbose`` drops the console handler to DEBUG too."""
    _configure_logging()
    if verbose:
        for handler in logging.getLogger().handlers:
            handler.setLevel(logging.DEBUG)
    return logging.getLogger(name)
