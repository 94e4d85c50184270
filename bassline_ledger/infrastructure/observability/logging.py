"""Structured JSON logging for ledger events"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger import jsonlogger

from bassline_ledger.config import settings


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


def log_transaction_recorded(
    transaction_id: str,
    user_id: str,
    method: str,
    amount: float,
    loan_id: str | None = None,
) -> None:
    """Log a newly recorded transaction"""
    logging.info(
        "Transaction recorded",
        extra={
            "step": "transaction_recorded",
            "transaction_id": transaction_id,
            "user_id": user_id,
            "method": method,
            "amount": amount,
            "loan_id": loan_id,
        },
    )


def log_loan_opened(loan_id: str, user_id: str, total_amount: float, term: int) -> None:
    """Log a loan schedule being opened"""
    logging.info(
        "Loan opened",
        extra={
            "step": "loan_opened",
            "loan_id": loan_id,
            "user_id": user_id,
            "total_amount": total_amount,
            "term": term,
        },
    )


def log_payment_applied(loan_id: str, amount: float, remaining_term: int, status: str) -> None:
    """Log a payment applied against a loan"""
    logging.info(
        "Loan payment applied",
        extra={
            "step": "payment_applied",
            "loan_id": loan_id,
            "amount": amount,
            "remaining_term": remaining_term,
            "loan_status": status,
        },
    )
