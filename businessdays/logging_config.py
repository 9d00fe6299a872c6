"""
Logging setup with Rich console output.
"""

import logging

from rich.logging import RichHandler


def setup_logging(level: str = "INFO") -> None:
    """Route all application logs through a Rich handler."""
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
        force=True,
    )
    # Keep third-party noise out unless explicitly debugging
    if level.upper() != "DEBUG":
        logging.getLogger("urllib3").setLevel(logging.WARNING)
