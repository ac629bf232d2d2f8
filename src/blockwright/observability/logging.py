"""structlog configuration for compiler diagnostics."""

from __future__ import annotations

import logging
import sys
from collections.abc import Mapping
from typing import Any, Final, TextIO

import structlog

_DEFAULT_LOGGER_NAME: Final[str] = "blockwright"


def setup_logging(
    logging_config: Mapping[str, object] | None = None,
    *,
    stream: TextIO | None = None,
    logger_name: str = _DEFAULT_LOGGER_NAME,
) -> Any:
    """Configure structlog from a ``[logging]`` mapping and return a bound logger.

    Parameters
    ----------
    logging_config:
        Mapping compatible with the ``logging`` section of the blockwright config.
    stream:
        Output stream, ``sys.stderr`` when omitted.
    logger_name:
        Name bound to the returned logger.
    """

    cfg = dict(logging_config or {})
    level = _level_number(cfg.get("log_level", "WARNING"))
    renderer: Any
    if cfg.get("log_format", "text") == "json":
        renderer = structlog.processors.JSONRenderer(sort_keys=True)
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(file=stream or sys.stderr),
        cache_logger_on_first_use=False,
    )
    return structlog.get_logger(logger_name)


def _level_number(raw: object) -> int:
    if isinstance(raw, int) and not isinstance(raw, bool):
        return raw
    if isinstance(raw, str):
        resolved = logging.getLevelName(raw.strip().upper())
        if isinstance(resolved, int):
            return resolved
    raise ValueError(f"unknown log level {raw!r}")


__all__ = ["setup_logging"]
