"""Structured JSON logging for the card engine"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict

from pythonjsonlogger import jsonlogger

from cardtracker_engine.config import settings


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def __init__(self, *args: Any, service_name: str = settings.service_name, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.service_name = service_name

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = self.service_name


def setup_logging(level: str = "INFO", service_name: str = settings.service_name) -> None:
    """Configure structured JSON logging on the root logger; called by the host application"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s",
        service_name=service_name,
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_dashboard_built(
    total_cards: int,
    upcoming_count: int,
    overdue_count: int,
    activity_count: int,
    duration_ms: float,
) -> None:
    """Log structured dashboard build outcome"""
    logging.getLogger("cardtracker_engine.dashboard").info(
        "Dashboard built",
        extra={
            "step": "dashboard_built",
            "total_cards": total_cards,
            "upcoming_count": upcoming_count,
            "overdue_count": overdue_count,
            "activity_count": activity_count,
            "duration_ms": duration_ms,
        },
    )
