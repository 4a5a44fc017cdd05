"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger import jsonlogger

from settlement_gateway.config import settings


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


def log_schedule_generated(
    request_id: str,
    cadence: str,
    installment_count: int,
    total_cents: int,
    duration_ms: float,
    order_id: str | None = None,
) -> None:
    """Log a generated (or submitted) installment schedule"""
    logging.info(
        "Schedule generated",
        extra={
            "request_id": request_id,
            "order_id": order_id,
            "step": "schedule_generated",
            "cadence": cadence,
            "installment_count": installment_count,
            "total_cents": total_cents,
            "duration_ms": duration_ms,
        },
    )


def log_schedule_rejected(request_id: str, reason: str, order_id: str | None = None) -> None:
    """Log installment text or a schedule the user has to fix"""
    logging.warning(
        "Schedule rejected",
        extra={
            "request_id": request_id,
            "order_id": order_id,
            "step": "schedule_rejected",
            "reason": reason,
        },
    )


def log_payment_reconciled(
    request_id: str,
    account_id: str | None,
    mode: str,
    outcome: str,
    applied_amount_cents: int,
    duration_ms: float,
) -> None:
    """Log the outcome of a payment reconciliation"""
    logging.info(
        "Payment reconciled",
        extra={
            "request_id": request_id,
            "account_id": account_id,
            "step": "payment_reconciled",
            "mode": mode,
            "outcome": outcome,
            "applied_amount_cents": applied_amount_cents,
            "duration_ms": duration_ms,
        },
    )
