"""Logging configuration.

Services log through ``logging.getLogger(__name__)``; this module only decides
where records go and how they are formatted.
"""

from __future__ import annotations

import logging
import logging.config
from typing import Any, Dict

from pythonjsonlogger import jsonlogger


class JsonFormatter(jsonlogger.JsonFormatter):
    """JSON formatter that always carries level and logger name."""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["level"] = record.levelname
        log_record["logger"] = record.name
        if hasattr(record, "employee_id"):
            log_record["employee_id"] = record.employee_id


def build_logging_config(*, level: str = "INFO", json_output: bool = False) -> Dict[str, Any]:
    formatter = "json" if json_output else "standard"
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {"format": "%(asctime)s [%(levelname)s] %(name)s: %(message)s"},
            "json": {"()": JsonFormatter, "fmt": "%(asctime)s %(level)s %(logger)s %(message)s"},
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": formatter,
                "stream": "ext://sys.stdout",
            },
        },
        "loggers": {
            "src.hr_lifecycle": {"handlers": ["console"], "level": level.upper(), "propagate": False},
        },
        "root": {"handlers": ["console"], "level": "WARNING"},
    }


def configure_logging(*, level: str = "INFO", json_output: bool = False) -> None:
    logging.config.dictConfig(build_logging_config(level=level, json_output=json_output))
