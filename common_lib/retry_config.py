"""외부 호출 재시도 정책(Retry policy for OSV and Claude calls)."""
from __future__ import annotations

import logging
from typing import Any, Callable

import anthropic
import httpx
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from .logger import get_logger

logger = get_logger(__name__)

MAX_ATTEMPTS = 3

# Transport failures worth another attempt; anything else is final.
_TRANSIENT_ERRORS = (httpx.ConnectError, httpx.ReadTimeout, anthropic.APIConnectionError)


def _is_server_error(status_code: int) -> bool:
    return 500 <= status_code < 600


def _is_retryable_exception(exc: BaseException) -> bool:
    """재시도 가능한 예외인지 확인(Check if exception is retryable).

    Connection failures, read timeouts and 5xx responses are retried. Client
    errors are not: an alias unknown to OSV answers 404 and a bad Claude
    request answers 400, and neither improves on a second try.
    """
    if isinstance(exc, _TRANSIENT_ERRORS):
        return True
    if isinstance(exc, httpx.HTTPStatusError):
        return _is_server_error(exc.response.status_code)
    if isinstance(exc, anthropic.APIStatusError):
        return _is_server_error(exc.status_code)
    return False


def get_retry_strategy() -> dict[str, Any]:
    """
    AsyncRetrying용 재시도 전략 설정 반환(Return retry strategy configuration for AsyncRetrying).

    Up to MAX_ATTEMPTS tries with exponential back-off (1s, 2s, 4s); the last
    error is re-raised unchanged.
    """
    return {
        "stop": stop_after_attempt(MAX_ATTEMPTS),
        "wait": wait_exponential(multiplier=1, min=1, max=4),
        "retry": retry_if_exception(_is_retryable_exception),
        "before_sleep": before_sleep_log(logger, logging.WARNING),
        "reraise": True,
    }


def get_retry_decorator() -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """재시도 데코레이터 생성(Create a retry decorator using the shared strategy)."""

    return retry(**get_retry_strategy())
