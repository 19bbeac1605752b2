from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def setup_logging(level: str | int = logging.INFO) -> None:
    """
    Configure the root logger with a single console handler.

    Safe to call more than once: an existing handler installed by us is reused.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    root = logging.getLogger()
    root.setLevel(level)

    for handler in root.handlers:
        if getattr(handler, "_smarttask", False):
            handler.setLevel(level)
            # stderr may have been swapped since the handler was created
            handler.setStream(sys.stderr)
            return

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._smarttask = True  # type: ignore[attr-defined]
    root.addHandler(handler)

    # uvicorn access logs are noisy at INFO
    logging.getLogger("uvicorn.access").setLevel(max(level, logging.WARNING))
