"""Process-wide logging setup, called once from the app factory."""

from __future__ import annotations

import logging
import sys

LOG_FORMAT = "[timeclock-payroll] %(asctime)s %(levelname)s %(name)s: %(message)s"

_HANDLER_NAME = "timeclock-payroll"
# Top-level package logger, whichever import path the package was loaded under.
PACKAGE_LOGGER = __name__.rsplit(".", 2)[0]


def configure_logging(level: str | int = "INFO") -> logging.Logger:
    root = logging.getLogger(PACKAGE_LOGGER)
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    root.setLevel(level)

    # The app factory may run more than once per process.
    if not any(h.get_name() == _HANDLER_NAME for h in root.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.set_name(_HANDLER_NAME)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
    return root
