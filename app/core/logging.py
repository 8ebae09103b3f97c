"""
Logging configuration for the fee ledger service.
Console output only; the level comes from settings.
"""

import logging
import logging.config
from typing import Any, Dict, Optional

from app.core.config import settings


def build_logging_config(level: str) -> Dict[str, Any]:
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {
                "format": "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "standard",
                "stream": "ext://sys.stdout",
            },
        },
        "loggers": {
            "app": {"handlers": ["console"], "level": level, "propagate": False},
            "sqlalchemy.engine": {"handlers": ["console"], "level": "WARNING", "propagate": False},
        },
        "root": {"handlers": ["console"], "level": "WARNING"},
    }


def setup_logging(level: Optional[str] = None) -> None:
    """Apply the logging config. Safe to call more than once."""
    logging.config.dictConfig(build_logging_config((level or settings.log_level).upper()))
