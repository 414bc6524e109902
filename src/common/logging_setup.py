from __future__ import annotations

import logging
import sys
from typing import Optional, TextIO


_OWN_PREFIXES = ("common", "state", "auth", "dashboard", "console")


class _ConsoleNoiseFilter(logging.Filter):
    """
    Keep the interactive console readable:
    - allow our own loggers at the configured level
    - third-party loggers (httpx, httpcore) only at WARNING+
    """

    def filter(self, record: logging.LogRecord) -> bool:
        root_name = record.name.split(".", 1)[0]
        if root_name in _OWN_PREFIXES:
            return True
        return record.levelno >= logging.WARNING


def setup_logging(level: int | str = logging.WARNING, *, stream: Optional[TextIO] = None) -> None:
    """
    Configure a single stderr handler on the root logger.

    Call once, early, from the entry point. Safe to call again: previous
    handlers are replaced rather than duplicated.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.WARNING

    root = logging.getLogger()
    root.setLevel(level)
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(fmt)
    handler.addFilter(_ConsoleNoiseFilter())
    root.addHandler(handler)

    logging.captureWarnings(True)


__all__ = ["setup_logging"]
