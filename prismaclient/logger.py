"""Debug and info loggers writing to standard output."""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Mapping
from datetime import datetime

LOG_ENV_VAR = "PRISMA_CLIENT_GO_LOG"

_DEBUG_PREFIX = "prisma-client-go debug: "
_INFO_PREFIX = "prisma-client-go info: "


class _PrefixFormatter(logging.Formatter):
    """Formats records as '<prefix><date> <time with microseconds> <message>'."""

    def __init__(self, prefix: str) -> None:
        super().__init__(prefix.replace("%", "%%") + "%(asctime)s %(message)s")

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:
        return datetime.fromtimestamp(record.created).strftime("%Y/%m/%d %H:%M:%S.%f")


def _configure(name: str, prefix: str, enabled: bool) -> logging.Logger:
    logger = logging.getLogger(name)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.propagate = False
    logger.setLevel(logging.DEBUG)
    logger.disabled = not enabled
    if enabled:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(_PrefixFormatter(prefix))
        logger.addHandler(handler)
    return logger


def logging_enabled(environ: Mapping[str, str] | None = None) -> bool:
    """Return whether debug logging is switched on by the environment."""
    env = os.environ if environ is None else environ
    return env.get(LOG_ENV_VAR, "") != ""


def debug_logger(environ: Mapping[str, str] | None = None) -> logging.Logger:
    """Return the debug logger; it discards everything unless logging is enabled."""
    return _configure("prismaclient.debug", _DEBUG_PREFIX, logging_enabled(environ))


def info_logger() -> logging.Logger:
    """Return the info logger, which always writes to standard output."""
    return _configure("prismaclient.info", _INFO_PREFIX, True)