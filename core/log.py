"""
Structured logging setup.

The engine only emits events through stdlib loggers that carry a NullHandler,
so nothing is printed until the application calls configure_logging() once
at start-up.
"""

from __future__ import annotations

import logging
import sys

import structlog

PACKAGES = ("core", "schedule", "engine", "networth", "data_prep")

for _package in PACKAGES:
    logging.getLogger(_package).addHandler(logging.NullHandler())


def configure_logging(level: int = logging.INFO, *, json: bool = True) -> None:
    """Route structlog through the stdlib logging module at the given level."""
    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=level)

    renderer = (
        structlog.processors.JSONRenderer()
        if json
        else structlog.dev.ConsoleRenderer(colors=False)
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str):
    """structlog logger over the stdlib logger `name`; silent until configured."""
    return structlog.wrap_logger(
        logging.getLogger(name), wrapper_class=structlog.stdlib.BoundLogger
    )
