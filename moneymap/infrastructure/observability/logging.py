"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger import jsonlogger

from moneymap.config import settings


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


def setup_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    # JSON handler for stdout
    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_reconciliation(
    request_id: str,
    user_id: str,
    month: str,
    epf_added: int,
    investments_added: int,
    failures: int,
    duration_ms: float,
) -> None:
    """Log structured reconciliation outcome for analysis"""
    logging.info(
        "Reconciliation completed",
        extra={
            "request_id": request_id,
            "user_id": user_id,
            "step": "reconcile_complete",
            "month": month,
            "epf_added": epf_added,
            "investments_added": investments_added,
            "failures": failures,
            "duration_ms": duration_ms,
        },
    )
