"""공통 라이브러리 패키지 초기화(Common library package init)."""
from . import ai_clients, config, logger, observability, retry_config

__all__ = [
    "ai_clients",
    "config",
    "logger",
    "observability",
    "retry_config",
]
