"""구조화 로깅 및 리포트 추적(Structured logging and per-report tracing)."""
from __future__ import annotations

import logging
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict, Iterator

from pythonjsonlogger import jsonlogger

# Context variable holding the report currently being processed by this task
report_id_ctx: ContextVar[str] = ContextVar("report_id", default="-")


def get_report_id() -> str:
    """현재 리포트 ID 조회(Retrieve the current report ID).

    Returns:
        Report ID bound to the running task, or "-" if none is set.
    """
    return report_id_ctx.get()


@contextmanager
def bind_report_id(report_id: str) -> Iterator[None]:
    """리포트 ID를 컨텍스트에 바인딩(Bind a report ID for the duration of a block)."""

    token = report_id_ctx.set(report_id)
    try:
        yield
    finally:
        report_id_ctx.reset(token)


class ReportIdFilter(logging.Filter):
    """레코드에 리포트 ID 부여(Attach the current report ID to every record)."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "report_id"):
            record.report_id = get_report_id()
        return True


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """사용자 정의 JSON 포매터(Custom JSON formatter with report ID injection).

    Extends pythonjsonlogger.JsonFormatter to inject report_id
    and manually handle all field creation to avoid KeyErrors.
    """

    def add_fields(
        self,
        log_record: Dict[str, Any],
        record: logging.LogRecord,
        message_dict: Dict[str, Any],
    ) -> None:
        """
        필드 추가 및 리포트 ID 삽입(Add fields and inject report ID).

        Args:
            log_record: The log record dictionary
            record: The LogRecord object
            message_dict: The message dictionary
        """
        super().add_fields(log_record, record, message_dict)

        if "timestamp" not in log_record:
            log_record["timestamp"] = datetime.now(timezone.utc).isoformat()

        log_record.pop("asctime", None)

        log_record["report_id"] = get_report_id()

        if "level" not in log_record:
            log_record["level"] = record.levelname

        if "message" not in log_record:
            log_record["message"] = record.getMessage()

        if "name" not in log_record:
            log_record["name"] = record.name
