"""
Logging Setup
===============
One `ssis_compliance` logger tree shared by every module.

The console shows the configured level. The optional log file always
records DEBUG, which keeps every compression attempt for later inspection.

    from ssis_compliance.utils.log import get_logger
    logger = get_logger(__name__)
    logger.debug("Attempt %d: q=%.2f -> %d bytes", n, quality, size)
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

ROOT_LOGGER = "ssis_compliance"

# HTTP and imaging libraries used underneath the providers and codec
_QUIET_LOGGERS = ("httpx", "httpcore", "openai", "ollama", "PIL")

_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_DATEFMT = "%Y-%m-%d %H:%M:%S"

_configured = False


def setup_logging(level: str = "INFO", log_file: Path | None = None) -> None:
    """Attach console (and optional file) handlers. Repeated calls are no-ops."""
    global _configured
    if _configured:
        return

    console_level = getattr(logging, level.upper(), logging.INFO)
    fmt = logging.Formatter(_FORMAT, datefmt=_DATEFMT)

    root = logging.getLogger(ROOT_LOGGER)
    root.setLevel(logging.DEBUG if log_file else console_level)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(fmt)
    root.addHandler(console)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(str(log_file), encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(fmt)
        root.addHandler(fh)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    _configured = True


def get_logger(name: str) -> logging.Logger:
    """Module logger under the `ssis_compliance` tree ('__main__' included)."""
    if not name.startswith(ROOT_LOGGER):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)
