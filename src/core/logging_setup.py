"""Logging setup (stdlib `logging` rendered by Rich)."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

_HANDLER_NAME = "cms-migrate"


def configure_logging(level: str | int = "WARNING", *, console: Console | None = None) -> None:
    """Attach a single `RichHandler` to the root logger.

    Calling it again only changes the level; handlers are never stacked.
    """

    if isinstance(level, str):
        resolved = logging.getLevelName(level.strip().upper())
        if not isinstance(resolved, int):
            raise ValueError(f"Unknown log level: {level}")
        level = resolved

    root = logging.getLogger()
    root.setLevel(level)

    for handler in root.handlers:
        if handler.get_name() == _HANDLER_NAME:
            handler.setLevel(level)
            return

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    handler.set_name(_HANDLER_NAME)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    root.addHandler(handler)

    # httpx logs every request at INFO.
    logging.getLogger("httpx").setLevel(max(level, logging.WARNING))
