"""Console logging setup for the CLI."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

_configured = False


def setup_logging(level: str = "WARNING") -> None:
    """Attach a Rich stderr handler to the package logger once per process."""

    global _configured  # noqa: PLW0603
    resolved = getattr(logging, level.upper(), logging.WARNING)
    package_logger = logging.getLogger("council_fanout")
    package_logger.setLevel(resolved)
    if _configured:
        return
    _configured = True

    handler = RichHandler(
        console=Console(stderr=True),
        show_time=True,
        show_path=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    package_logger.addHandler(handler)
