"""Process logging setup for servers started from the CLI."""

from __future__ import annotations

import logging
import sys

from rich.console import Console
from rich.logging import RichHandler

LOG_FORMAT = "[%(asctime)s] %(levelname)-5s | %(message)s"
DATE_FORMAT = "%Y/%m/%d - %H:%M:%S"

_HANDLER_MARKER = "_mcpkit_handler"


def configure_logging(level: str | int = "INFO", *, rich: bool = True) -> logging.Handler:
    """Attach one handler to the ``mcpkit`` logger and set its level.

    With ``rich=True`` records go through :class:`rich.logging.RichHandler`
    on stderr; otherwise a plain stream handler writes
    ``[2025/01/31 - 12:00:00] INFO  | message`` lines to stdout.

    Calling this again replaces the handler installed by the previous call.
    """
    logger = logging.getLogger("mcpkit")
    for existing in list(logger.handlers):
        if getattr(existing, _HANDLER_MARKER, False):
            logger.removeHandler(existing)

    handler: logging.Handler
    if rich:
        handler = RichHandler(
            console=Console(stderr=True),
            show_path=False,
            log_time_format=DATE_FORMAT,
        )
        handler.setFormatter(logging.Formatter("%(message)s"))
    else:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))

    setattr(handler, _HANDLER_MARKER, True)
    logger.addHandler(handler)
    logger.setLevel(level.upper() if isinstance(level, str) else level)
    return handler
