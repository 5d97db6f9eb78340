"""Logging for the ``statement_ingest`` package.

Library modules call ``get_logger("statement_ingest.<module>")`` and never
attach handlers; the package logger stays silent behind a ``NullHandler``.
The CLI calls :func:`configure_logging` once at startup, which puts a single
stderr handler on the package logger at the ``STATEMENT_INGEST_LOG_LEVEL``
level (``INFO`` when unset).
"""

from __future__ import annotations

import logging
import os
import sys

_PKG_LOGGER_NAME = "statement_ingest"
_HANDLER_NAME = "statement_ingest.stderr"
LOG_LEVEL_ENV = "STATEMENT_INGEST_LOG_LEVEL"
_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"


def _parse_level(raw: str) -> int | None:
    raw = raw.strip().upper()
    if raw.isdigit():
        return int(raw)
    numeric = logging.getLevelName(raw)
    return numeric if isinstance(numeric, int) else None


def configure_logging(level: int | str | None = None) -> None:
    """Attach the stderr handler to the package logger; later calls are no-ops.

    ``level`` overrides the environment. An unrecognized level name falls back
    to ``INFO`` and is reported once through the configured logger.
    """

    logger = logging.getLogger(_PKG_LOGGER_NAME)
    if any(h.get_name() == _HANDLER_NAME for h in logger.handlers):
        return

    raw = level if level is not None else os.getenv(LOG_LEVEL_ENV)
    if isinstance(raw, int):
        resolved: int | None = raw
    else:
        resolved = _parse_level(raw) if raw else logging.INFO

    for h in list(logger.handlers):
        if isinstance(h, logging.NullHandler):
            logger.removeHandler(h)

    handler = logging.StreamHandler(sys.stderr)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(logging.Formatter(_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(resolved if resolved is not None else logging.INFO)
    logger.propagate = False

    if resolved is None:
        logger.warning("unknown log level %r, using INFO", raw)


def get_logger(name: str) -> logging.Logger:
    """Return ``name``'s logger, silent until :func:`configure_logging` runs."""

    pkg_logger = logging.getLogger(_PKG_LOGGER_NAME)
    if not pkg_logger.handlers:
        pkg_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)


__all__ = ["LOG_LEVEL_ENV", "configure_logging", "get_logger"]
