"""Logging for manifest generation runs."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Sequence

_ROOT = "extmanifest"
_CONSOLE_FORMAT = "[extmanifest] %(levelname)s %(message)s"
_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(name: str | None = None) -> logging.Logger:
    return logging.getLogger(f"{_ROOT}.{name}" if name else _ROOT)


def configure_logging(*, verbose: bool = False, log_file: Path | None = None) -> logging.Logger:
    """Send extmanifest records to stderr and, optionally, to ``log_file``.

    Existing handlers are replaced so repeated runs in one process log once.
    """
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_ROOT)
    logger.setLevel(level)
    logger.propagate = False
    logger.handlers.clear()

    sinks: list[tuple[logging.Handler, str]] = [(logging.StreamHandler(), _CONSOLE_FORMAT)]
    if log_file is not None:
        sinks.append((logging.FileHandler(log_file, encoding="utf-8"), _FILE_FORMAT))
    for handler, fmt in sinks:
        handler.setLevel(level)
        handler.setFormatter(logging.Formatter(fmt))
        logger.addHandler(handler)
    return logger


def report_warnings(warnings: Iterable[Sequence[str]], logger: logging.Logger | None = None) -> int:
    """Log each collected manifest warning tuple as one line; returns how many were logged."""
    target = logger or get_logger("warnings")
    count = 0
    for warning in warnings:
        target.warning(" ".join(str(part) for part in warning))
        count += 1
    return count


__all__ = ["configure_logging", "get_logger", "report_warnings"]
