from __future__ import annotations

import logging
import sys


_LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_handler: logging.Handler | None = None


def configure_logging(level: str = "WARNING") -> None:
    """Send log records to stderr so stdout only carries search results."""
    global _handler
    resolved = logging.getLevelName(level.strip().upper())
    if not isinstance(resolved, int):
        resolved = logging.WARNING

    root = logging.getLogger()
    if _handler is not None:
        root.removeHandler(_handler)

    _handler = logging.StreamHandler(sys.stderr)
    _handler.setFormatter(logging.Formatter(_LOG_FORMAT))
    root.addHandler(_handler)
    root.setLevel(resolved)

    # opensearch-py logs every request at INFO
    logging.getLogger("opensearch").setLevel(max(resolved, logging.WARNING))
