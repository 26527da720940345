"""
Root logger setup for the catalog command-line tool.

Library modules only create named loggers; this is the one place that attaches
a handler, and it quiets the per-request INFO lines httpx emits.
"""

import logging
import sys


def configure_logging(level: str = "INFO") -> None:
    """Send pipe-separated log lines to stdout at ``level``."""
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        stream=sys.stdout,
    )
    # httpx logs every request at INFO.
    logging.getLogger("httpx").setLevel(logging.WARNING)


__all__ = ["configure_logging"]
