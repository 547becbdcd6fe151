"""
Logging setup for the Critique API.

``configure_logging`` is called once from ``create_app``.  Library modules
only ever use ``logging.getLogger(__name__)``.
"""
from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"
HANDLER_NAME = "critique"


def configure_logging(level: str = "INFO") -> None:
    """Attach a stream handler to the root logger, once."""
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    if any(h.get_name() == HANDLER_NAME for h in root.handlers):
        return

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
    handler.set_name(HANDLER_NAME)
    root.addHandler(handler)
