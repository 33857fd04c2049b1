"""Logger configuration using loguru.

Components call ``get_logger`` to obtain the shared loguru logger bound to
their component name; ``setup_logger`` decides where records go and how
they look.
"""

import sys
from typing import Any

from loguru import logger

DEFAULT_COMPONENT = "report_verdict"

DEFAULT_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{extra[component]}</cyan> | "
    "<level>{message}</level>"
)


def setup_logger(
    log_level: str = "WARNING",
    stream: Any = sys.stderr,
    fmt: str = DEFAULT_FORMAT,
) -> int:
    """Replace all loguru sinks with a single sink at ``log_level``.

    Also sets a default ``component`` extra so records logged through the
    unbound ``logger`` still render with ``fmt``.

    Args:
        log_level: Minimum level name ("DEBUG", "INFO", "WARNING", ...).
        stream: File-like object or callable receiving formatted records.
        fmt: loguru format string; may reference ``{extra[component]}``.

    Returns:
        The id of the added sink, usable with ``logger.remove``.
    """
    logger.remove()
    logger.configure(extra={"component": DEFAULT_COMPONENT})
    return logger.add(stream, level=log_level.upper(), format=fmt, colorize=False)


def get_logger(component: str):
    """Return the shared loguru logger bound to a component name."""
    return logger.bind(component=component)
