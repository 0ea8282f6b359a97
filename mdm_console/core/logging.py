"""Logging utilities shared across the console package."""
from __future__ import annotations

import logging
import os

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# Third-party loggers that flood INFO with connection-pool chatter.
NOISY_LOGGERS = ("urllib3", "PIL")


def configure_logging(level: str | None = None) -> None:
    """Initialize basic logging with a shared format and log level.

    The level can be provided directly or via the ``LOG_LEVEL`` environment
    variable (defaults to ``INFO``). Streamlit reruns the app script on every
    interaction, so repeated calls only adjust the level of the root logger
    instead of stacking handlers.
    """

    resolved_level = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    root = logging.getLogger()
    if root.handlers:
        root.setLevel(resolved_level)
    else:
        logging.basicConfig(level=resolved_level, format=LOG_FORMAT)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
