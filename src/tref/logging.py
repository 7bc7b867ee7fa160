"""Package-local logging utilities.

This package is a library first. By default it emits no logs unless the host
application configures logging. CLI users can opt into logs via
``TREF_LOG_LEVEL`` or ``-v``.
"""

from __future__ import annotations

import logging
import os
import sys

from loguru import logger as _loguru

LOGGER_NAME = "tref"
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
_LOGURU_FORMAT = "{time:YYYY-MM-DD HH:mm:ss,SSS} | {level} | {name} | {message}"

logger = logging.getLogger(LOGGER_NAME)
logger.addHandler(logging.NullHandler())
_loguru.disable(LOGGER_NAME)

_loguru_handler_id: int | None = None


def configure_logging(level: str | None = None) -> None:
    """Configure package logging for CLI/runtime diagnostics.

    This is intentionally opt-in. If neither ``level`` nor
    ``TREF_LOG_LEVEL`` is provided, configuration is skipped and both the
    stdlib logger and the loguru records emitted under ``tref`` stay silent.
    """
    global _loguru_handler_id

    env_level = os.getenv("TREF_LOG_LEVEL", "")
    raw_level = level if level is not None else (env_level or "")
    resolved_level = raw_level.strip()
    pkg_logger = logging.getLogger(LOGGER_NAME)
    # Always reset handlers to avoid stale stderr streams across repeated CLI calls.
    pkg_logger.handlers = []
    if _loguru_handler_id is not None:
        _loguru.remove(_loguru_handler_id)
        _loguru_handler_id = None

    if not resolved_level:
        pkg_logger.addHandler(logging.NullHandler())
        pkg_logger.setLevel(logging.NOTSET)
        pkg_logger.propagate = False
        _loguru.disable(LOGGER_NAME)
        return

    level_name = resolved_level.upper()
    if not isinstance(getattr(logging, level_name, None), int):
        level_name = "INFO"

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    pkg_logger.addHandler(handler)
    pkg_logger.setLevel(getattr(logging, level_name))
    pkg_logger.propagate = False

    _loguru_handler_id = _loguru.add(
        sys.stderr,
        level=getattr(logging, level_name),
        format=_LOGURU_FORMAT,
        filter=LOGGER_NAME,
    )
    _loguru.enable(LOGGER_NAME)
