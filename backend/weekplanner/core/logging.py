"""Centralized logging configuration."""
from __future__ import annotations

import logging
from logging.config import dictConfig

from weekplanner.core.context import get_generation_seq, get_request_id


class PlannerContextFilter(logging.Filter):
    """Attach request_id and generation seq attributes to log records."""

    def filter(self, record: logging.LogRecord) -> bool:  # pragma: no cover - minimal logic
        record.request_id = get_request_id() or "-"
        seq = get_generation_seq()
        record.generation_seq = f"seq={seq}" if seq is not None else "-"
        return True


def configure_logging(*, log_level: str = "INFO") -> None:
    """Configure application logging once at startup."""
    if getattr(configure_logging, "_configured", False):
        return

    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {
                    "format": "%(asctime)s | %(levelname)s | %(name)s | %(request_id)s | %(generation_seq)s | %(message)s",
                }
            },
            "filters": {
                "planner_context": {
                    "()": "weekplanner.core.logging.PlannerContextFilter",
                }
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "default",
                    "level": log_level,
                    "filters": ["planner_context"],
                }
            },
            "loggers": {
                "httpx": {"level": "WARNING"},
            },
            "root": {
                "handlers": ["console"],
                "level": log_level,
            },
        }
    )

    logging.getLogger(__name__).debug("Logging configured at %s", log_level)
    setattr(configure_logging, "_configured", True)
