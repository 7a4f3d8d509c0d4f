from __future__ import annotations

import logging
import os
import sys
from typing import Optional

import structlog

_TRUTHY = {"1", "true", "yes", "on"}


def _configure_structlog(json: bool) -> None:
    renderer = structlog.processors.JSONRenderer() if json else structlog.dev.ConsoleRenderer(colors=False)
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )


def configure_logging(level: Optional[str] = None, json: Optional[bool] = None) -> None:
    """
    Route structlog through the stdlib logging module.

    Level and renderer default to PFCORE_LOG_LEVEL (WARNING) and
    PFCORE_LOG_JSON (off). Hosts that own logging should skip this and
    configure the stdlib root logger themselves.
    """
    level_name = (level or os.environ.get("PFCORE_LOG_LEVEL", "WARNING")).upper()
    if json is None:
        json = os.environ.get("PFCORE_LOG_JSON", "").strip().lower() in _TRUTHY

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, level_name, logging.WARNING),
        force=True,
    )
    _configure_structlog(json)


def get_logger(name: str):
    return structlog.get_logger(name)


# Library default: go through stdlib so an unconfigured host only sees warnings.
if not structlog.is_configured():
    _configure_structlog(json=False)
