"""Logging setup for the vCloud Director client and CLI."""

from __future__ import annotations

import logging
import os
import re
import sys
from typing import TextIO

# Library logger shared by the real client, the mock and the parser.
log = logging.getLogger("vcd_client")

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s - %(message)s"

_TOKEN_PATTERN = re.compile(r"(x-vcloud-authorization['\"]?\s*[:=]\s*['\"]?)([^'\",\s}]+)", re.IGNORECASE)


class SessionTokenFilter(logging.Filter):
    """Mask vCloud session tokens that end up in formatted log messages."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        masked = _TOKEN_PATTERN.sub(r"\1***", message)
        if masked != message:
            record.msg = masked
            record.args = None
        return True


def configure_logging(level: str | int | None = None, stream: TextIO | None = None) -> logging.Logger:
    """Attach a stream handler to the root logger and set levels.

    Args:
        level: Optional log level (e.g. ``"DEBUG"`` or ``logging.INFO``). When
            omitted, ``LOG_LEVEL`` from the environment is used, falling back
            to ``INFO`` when unset or invalid.
        stream: Handler target; defaults to ``sys.stderr`` so stdout stays free
            for command output.

    Returns:
        logging.Logger: The ``vcd_client`` logger.
    """
    resolved_level = _coerce_level(level)

    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler(stream or sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler.addFilter(SessionTokenFilter())
        root.addHandler(handler)
    root.setLevel(resolved_level)

    # httpx logs every request line at INFO.
    for name in ("httpx", "httpcore"):
        logging.getLogger(name).setLevel(logging.WARNING)

    log.setLevel(resolved_level)
    log.propagate = True
    log.debug("Logging configured at level %s", logging.getLevelName(resolved_level))
    return log


def _coerce_level(level: str | int | None) -> int:
    """Return a numeric logging level from user input or ``LOG_LEVEL``."""
    candidate = level if level is not None else os.getenv("LOG_LEVEL", "INFO")

    if isinstance(candidate, int):
        return candidate

    if isinstance(candidate, str):
        numeric = logging.getLevelName(candidate.upper())
        if isinstance(numeric, int):
            return numeric

    return logging.INFO
