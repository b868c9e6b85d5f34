from __future__ import annotations

import logging
import os
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

_custom_theme = Theme({
    "ok": "bold green",
    "warn": "bold yellow",
    "err": "bold red",
    "info": "cyan",
})

console = Console(theme=_custom_theme)

logger = logging.getLogger("qualflow")


def configure_logging(verbose: bool = False, log_file: Optional[str] = None) -> None:
    """Route the ``qualflow`` logger through rich; DEBUG on the console when verbose.

    The logger itself always passes DEBUG records so that a log file, when
    given, receives the full trace whatever the console level.
    """
    level = logging.DEBUG if verbose else logging.WARNING
    rich_handler = next((h for h in logger.handlers if isinstance(h, RichHandler)), None)
    if rich_handler is None:
        rich_handler = RichHandler(console=console, show_path=False, markup=False)
        rich_handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
        logger.addHandler(rich_handler)
    rich_handler.setLevel(level)
    logger.setLevel(logging.DEBUG)
    if log_file:
        attach_log_file(log_file)


def attach_log_file(path: str) -> logging.FileHandler:
    """Write the ``qualflow`` log to ``path``; replaces any previous log file."""
    path = os.path.abspath(path)
    for handler in list(logger.handlers):
        if isinstance(handler, logging.FileHandler):
            if handler.baseFilename == path:
                return handler
            logger.removeHandler(handler)
            handler.close()
    os.makedirs(os.path.dirname(path), exist_ok=True)
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    logger.addHandler(handler)
    return handler
