"""Structured JSON logging"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger import jsonlogger
from credit_desk.config import settings


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """JSON formatter adding timestamp, level and service name to every record"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


def setup_logging(level: str = "INFO") -> None:
    """Route the root logger to stdout as JSON lines"""
    logger = logging.getLogger()
    logger.setLevel(level)
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(CustomJsonFormatter("%(timestamp)s %(level)s %(name)s %(message)s"))
    logger.addHandler(handler)


def log_assessment(
    request_id: str,
    user_id: str,
    risk_level: str,
    credit_limit: int,
    saved: bool,
) -> None:
    """Log a completed credit assessment"""
    logging.info(
        "Credit assessment completed",
        extra={
            "request_id": request_id,
            "user_id": user_id,
            "step": "assessment_complete",
            "risk_level": risk_level,
            "credit_limit": credit_limit,
            "saved": saved,
        },
    )


def log_import(
    request_id: str,
    user_id: str,
    filename: str,
    accepted: int,
    rejected: int,
    committed: bool,
) -> None:
    """Log the outcome of an import preview or commit"""
    logging.info(
        "Customer import processed",
        extra={
            "request_id": request_id,
            "user_id": user_id,
            "step": "import_commit" if committed else "import_preview",
            "import_filename": filename,
            "rows_accepted": accepted,
            "rows_rejected": rejected,
        },
    )
