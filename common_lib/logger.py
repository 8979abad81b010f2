"""로깅 설정(Logging setup shared by every component)."""
import logging
import sys

_logging_configured = False

PLAIN_FORMAT = "[%(asctime)s] %(levelname)s [%(report_id)s] %(name)s: %(message)s"


def setup_logging(level: str | None = None, json_format: bool | None = None):
    """루트 로거 1회 설정(Configure the root logger once).

    Log lines go to stderr so that command output on stdout stays machine
    readable. Every record carries the id of the report being processed.
    """
    global _logging_configured
    if _logging_configured:
        return

    from .config import get_settings
    from .observability import CustomJsonFormatter, ReportIdFilter

    settings = get_settings()
    level = level or settings.log_level
    json_format = settings.log_json if json_format is None else json_format

    handler = logging.StreamHandler(sys.stderr)
    handler.addFilter(ReportIdFilter())
    if json_format:
        handler.setFormatter(CustomJsonFormatter("%(levelname)s %(name)s %(message)s"))
    else:
        handler.setFormatter(logging.Formatter(PLAIN_FORMAT))

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        handlers=[handler],
        force=True  # 기존 설정 강제 덮어쓰기
    )

    # 라이브러리 로그 레벨 조정
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    _logging_configured = True


def get_logger(name: str):
    """명명된 로거 가져오기(Get a named logger).

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured logger instance
    """
    setup_logging()
    return logging.getLogger(name)
