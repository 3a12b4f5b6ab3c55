"""Logging helpers for pico-limit.

Every limiter logs under the ``pico_limit`` namespace.  Scheduling events
(dispatch, completion, queue clears) go out at ``DEBUG``; the library never
logs work-function failures above ``DEBUG`` because those belong to the
caller that scheduled the work.
"""

import logging
import os
import sys
from typing import Optional, Union

DEFAULT_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
"""str: Default log format used by ``configure_logging``."""

ROOT_LOGGER_NAME = "pico_limit"


def get_logger(name: str) -> logging.Logger:
    """Return a logger inside the ``pico_limit`` namespace.

    Args:
        name: Logger name, usually ``__name__``. Prefixed with
            ``pico_limit.`` when it is not already.
    """
    if not name.startswith(ROOT_LOGGER_NAME):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def _coerce_level(level: Union[int, str]) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.strip().upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return resolved


def configure_logging(
    level: Union[int, str, None] = None,
    handler: Optional[logging.Handler] = None,
    fmt: str = DEFAULT_FORMAT,
) -> None:
    """Configure the ``pico_limit`` logger tree.

    Args:
        level: Level as an int or a name such as ``"debug"``. Defaults to
            ``PICO_LIMIT_LOG_LEVEL`` or ``INFO``.
        handler: Custom handler. If None, a StreamHandler to stderr is used.
            Only installed when the namespace has no handler yet.
        fmt: Format string applied to the installed handler.
    """
    if level is None:
        level = os.getenv("PICO_LIMIT_LOG_LEVEL", "") or logging.INFO
    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(_coerce_level(level))

    if not root_logger.handlers:
        if handler is None:
            handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(fmt))
        root_logger.addHandler(handler)
