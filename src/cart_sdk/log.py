"""Logging setup for the cart SDK.

The library only creates loggers; handlers are installed by applications
(or the CLI) through ``setup_logging``.
"""

from __future__ import annotations

import logging
import logging.config
from typing import Any

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logging(level: str = "INFO") -> None:
    """Send ``cart_sdk`` logs to stderr at the given level."""
    resolved = getattr(logging, level.upper(), logging.INFO)
    logging_config: dict[str, Any] = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"default": {"format": LOG_FORMAT}},
        "handlers": {
            "default": {
                "class": "logging.StreamHandler",
                "formatter": "default",
            }
        },
        "loggers": {
            "cart_sdk": {
                "handlers": ["default"],
                "level": resolved,
                "propagate": False,
            },
        },
    }
    logging.config.dictConfig(logging_config)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
