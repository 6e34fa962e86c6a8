"""Structured JSON logging configuration.

Configures Python stdlib logging to emit one JSON object per line on stdout,
so batch and import runs can be piped into log tooling and filtered by
``severity`` or ``logger``.

Usage:
    from onenote_migrator.logging_config import configure_logging
    configure_logging()
"""

import copy
import logging
import logging.config

from onenote_migrator.config import get_settings

LOGGING_CONFIG: dict = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "json": {
            "()": "pythonjsonlogger.json.JsonFormatter",
            "format": "%(asctime)s %(levelname)s %(name)s %(funcName)s %(message)s",
            "rename_fields": {
                "levelname": "severity",
                "asctime": "timestamp",
                "name": "logger",
            },
            "static_fields": {
                "service": "onenote-migrator",
            },
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "json",
            "stream": "ext://sys.stdout",
        },
    },
    "root": {
        "level": "INFO",
        "handlers": ["console"],
    },
}


def build_logging_config(level: str | None = None) -> dict:
    """Return a copy of LOGGING_CONFIG with the root level applied.

    Falls back to ``log_level`` from settings when no level is given.
    """
    config = copy.deepcopy(LOGGING_CONFIG)
    config["root"]["level"] = (level or get_settings().log_level).upper()
    return config


def configure_logging(level: str | None = None) -> None:
    """Apply structured JSON logging configuration.

    Call once at process startup, before running a migration.
    """
    logging.config.dictConfig(build_logging_config(level))
