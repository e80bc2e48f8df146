"""Logging setup shared by the CLI and scripts."""

import logging

from rich.logging import RichHandler

_configured = False


def configure_logging(level: str = "WARNING") -> None:
    """Route the root logger through rich. Safe to call more than once."""
    global _configured
    resolved = getattr(logging, level.upper(), logging.WARNING)
    root = logging.getLogger()
    root.setLevel(resolved)
    if _configured:
        return
    handler = RichHandler(show_path=False, rich_tracebacks=True)
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
    root.addHandler(handler)
    # Chatty third-party loggers stay quiet unless explicitly debugging
    for name in ("urllib3", "yfinance", "peewee"):
        logging.getLogger(name).setLevel(max(resolved, logging.WARNING))
    _configured = True
