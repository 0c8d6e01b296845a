"""Application-wide logging configuration.

Installs a single stdout handler on the root logger so the module loggers
(``answer_service``, ``statistics_service``, ...) emit without per-module
setup, and keeps the uvicorn loggers on the same handler.
"""
import logging
from logging.config import dictConfig

from qa_system.core.config import settings


def _dict_config(level: str) -> dict:
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "format": "%(asctime)s %(levelname)s:%(name)s:%(message)s",
            }
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": level,
                "formatter": "default",
                "stream": "ext://sys.stdout",
            }
        },
        "root": {"level": level, "handlers": ["console"]},
        "loggers": {
            "uvicorn": {"level": "INFO", "handlers": ["console"], "propagate": False},
            "uvicorn.error": {"level": "INFO", "handlers": ["console"], "propagate": False},
            "uvicorn.access": {"level": "INFO", "handlers": ["console"], "propagate": False},
        },
    }


def configure_logging() -> None:
    """Configure logging once; a root logger that already has handlers is left alone (reloaders)."""
    root = logging.getLogger()
    if root.handlers:
        return
    dictConfig(_dict_config(settings.log_level.upper()))
