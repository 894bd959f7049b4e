"""
FILE: jot/logging_setup.py
PURPOSE: One-time logging configuration for the CLI and REPL
EXPORTS:
  - setup_logging(level) -> None
DEPENDENCIES:
  - logging (stdlib)
  - rich.logging (RichHandler)
  - jot.config (default level)
NOTES:
  - Logs go to stderr so --json output on stdout stays parseable
  - Third-party loggers only pass WARNING and above
"""

import logging
from typing import Optional, Union

from rich.console import Console
from rich.logging import RichHandler

from .config import get_settings


class _OwnLogsFilter(logging.Filter):
    """Keep jot logs at the configured level, silence chatty libraries."""

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name == "jot" or record.name.startswith("jot."):
            return True
        return record.levelno >= logging.WARNING


def setup_logging(level: Optional[Union[int, str]] = None) -> None:
    """
    Configure the root logger with a Rich handler on stderr.

    Safe to call more than once; earlier handlers are replaced.
    """
    if level is None:
        level = get_settings().log_level
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.WARNING

    root = logging.getLogger()
    root.setLevel(level)

    for h in list(root.handlers):
        root.removeHandler(h)

    handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    handler.addFilter(_OwnLogsFilter())
    root.addHandler(handler)

    logging.captureWarnings(True)
