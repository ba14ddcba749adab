"""Logging setup for script-guard.

All records go to a single handler in a pipe-separated format with
ISO 8601 timestamps.  The handler writes to stderr by default so reports
printed on stdout stay machine-readable.
"""

from __future__ import annotations

import logging
import sys
from typing import TextIO

_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"

# Set on the handler owned by setup_logging.
_HANDLER_ATTR = "_script_guard_handler"


def resolve_level(name: str) -> int:
    """Return the numeric logging level for *name*, ignoring case.

    Raises:
        ValueError: If *name* is not a standard level name.
    """
    level = logging.getLevelName(name.strip().upper())
    if not isinstance(level, int):
        raise ValueError(f"Invalid log level: {name!r}")
    return level


def _owned_handler(root: logging.Logger) -> logging.Handler | None:
    return next((h for h in root.handlers if getattr(h, _HANDLER_ATTR, False)), None)


def setup_logging(level: str = "INFO", stream: TextIO | None = None) -> logging.Handler:
    """Route the root logger through the script-guard handler.

    Repeated calls reconfigure the same handler rather than stacking a new
    one.  Handlers installed by anything else are left untouched.

    Args:
        level: A standard level name such as ``"DEBUG"``.
        stream: Destination stream; ``sys.stderr`` when omitted.

    Returns:
        The configured handler.

    Raises:
        ValueError: If *level* is not a recognised level name.
    """
    numeric_level = resolve_level(level)
    root = logging.getLogger()
    root.setLevel(numeric_level)

    handler = _owned_handler(root)
    if handler is None:
        handler = logging.StreamHandler(stream or sys.stderr)
        handler.setFormatter(logging.Formatter(_LOG_FORMAT, datefmt=_DATE_FORMAT))
        setattr(handler, _HANDLER_ATTR, True)
        root.addHandler(handler)
    elif stream is not None and isinstance(handler, logging.StreamHandler):
        handler.setStream(stream)

    handler.setLevel(numeric_level)
    return handler
