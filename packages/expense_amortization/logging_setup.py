"""Logging for the ``expense_amortization`` package.

Library modules only call :func:`get_logger`. Until an application calls
:func:`configure_logging` the package logger carries a ``NullHandler`` and
stays silent.

The CLI configures logging on every invocation with ``replace=True`` so that
``--log-level`` and the current ``sys.stderr`` are honored even when several
commands run in one process. Range reads log from the ``ea-month-*`` worker
threads, so the default format includes the thread name.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import IO

PACKAGE_LOGGER = "expense_amortization"
LEVEL_ENV = "EXPENSE_AMORTIZATION_LOG_LEVEL"
DEFAULT_FORMAT = "%(asctime)s %(levelname)s [%(threadName)s] %(name)s: %(message)s"

# The StreamHandler installed by configure_logging, if any.
_handler: logging.Handler | None = None


def resolve_level(level: int | str | None = None) -> int:
    """Numeric level for ``level``, falling back to ``EXPENSE_AMORTIZATION_LOG_LEVEL``.

    An explicit unknown name raises ``ValueError``; an unusable environment
    value is ignored in favor of ``INFO``.
    """

    if isinstance(level, int):
        return level
    if level is not None:
        numeric = _level_from_name(level)
        if numeric is None:
            raise ValueError(f"unknown log level {level!r}")
        return numeric
    env_numeric = _level_from_name(os.getenv(LEVEL_ENV) or "")
    return env_numeric if env_numeric is not None else logging.INFO


def _level_from_name(name: str) -> int | None:
    name = name.strip().upper()
    if not name:
        return None
    if name.isdigit():
        return int(name)
    numeric = logging.getLevelNamesMapping().get(name)
    return numeric if isinstance(numeric, int) else None


def configure_logging(
    level: int | str | None = None,
    *,
    stream: IO[str] | None = None,
    fmt: str | None = None,
    replace: bool = False,
) -> logging.Logger:
    """Attach a single stream handler to the package logger.

    A second call is a no-op unless ``replace`` is set, in which case the
    previous handler is swapped out. ``stream`` defaults to the
    ``sys.stderr`` current at call time.
    """

    global _handler
    logger = logging.getLogger(PACKAGE_LOGGER)
    if _handler is not None and not replace:
        return logger

    resolved = resolve_level(level)
    _detach(logger)

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(logging.Formatter(fmt or DEFAULT_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(resolved)
    logger.propagate = False
    _handler = handler
    return logger


def reset_logging() -> None:
    """Undo :func:`configure_logging` and return to silent library defaults."""

    global _handler
    logger = logging.getLogger(PACKAGE_LOGGER)
    _detach(logger)
    _handler = None
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
    logger.addHandler(logging.NullHandler())


def _detach(logger: logging.Logger) -> None:
    for h in list(logger.handlers):
        if h is _handler or isinstance(h, logging.NullHandler):
            logger.removeHandler(h)


def get_logger(name: str) -> logging.Logger:
    pkg_logger = logging.getLogger(PACKAGE_LOGGER)
    if _handler is None and not pkg_logger.handlers:
        pkg_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)


__all__ = [
    "DEFAULT_FORMAT",
    "LEVEL_ENV",
    "PACKAGE_LOGGER",
    "configure_logging",
    "get_logger",
    "reset_logging",
    "resolve_level",
]
