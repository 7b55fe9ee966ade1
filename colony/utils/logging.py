"""Logging setup shared by the server and the headless runner."""

from __future__ import annotations

import logging
import sys


def setup_logging(level: str = "INFO", quiet_modules: tuple[str, ...] = ("colony.actions", "colony.engine.resolver")) -> None:
    """Send all records to stdout in one aligned format.

    Modules in *quiet_modules* are held at WARNING unless *level* is DEBUG;
    they log per-worker rejections every tick.
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(numeric_level)

    formatter = logging.Formatter(
        fmt="%(asctime)s [%(levelname)-5s] %(name)-25s | %(message)s",
        datefmt="%H:%M:%S",
    )
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.setLevel(numeric_level)
    root.handlers.clear()
    root.addHandler(handler)

    for name in quiet_modules:
        logging.getLogger(name).setLevel(logging.DEBUG if numeric_level <= logging.DEBUG else logging.WARNING)
