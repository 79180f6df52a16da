"""Logging configuration

Console logging through ``logging.config.dictConfig``. Called once at startup.
"""

import logging
import logging.config

from .config import settings


DETAILED_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s"

# Third-party loggers that are noisy at INFO
MODULE_LOG_LEVELS = {
    "sqlalchemy.engine": "WARNING",
    "httpx": "WARNING",
    "httpcore": "WARNING",
    "passlib": "ERROR",
}


def setup_logging(level: str = None) -> None:
    """Configure root and per-module log levels."""
    root_level = (level or settings.LOG_LEVEL).upper()

    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "detailed": {"format": DETAILED_FORMAT},
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "detailed",
                "level": root_level,
            },
        },
        "root": {"handlers": ["console"], "level": root_level},
        "loggers": {
            name: {"level": module_level, "propagate": True}
            for name, module_level in MODULE_LOG_LEVELS.items()
        },
    })
    logging.getLogger(__name__).debug("Logging configured at %s", root_level)
