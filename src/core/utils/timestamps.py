"""Timestamp utilities for consistent datetime handling across the pipeline."""

from datetime import datetime, timezone
from typing import Any, Optional

from common_lib.logger import get_logger

logger = get_logger(__name__)


def utc_now() -> datetime:
    """Current time, timezone-aware UTC, truncated to whole seconds."""
    return datetime.now(timezone.utc).replace(microsecond=0)


def ensure_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes and convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def format_rfc3339(value: datetime) -> str:
    """
    Format a datetime the way OSV entries expect it.

    Args:
        value: Naive (assumed UTC) or aware datetime

    Returns:
        RFC 3339 string in UTC with a trailing "Z" (YYYY-MM-DDTHH:MM:SSZ)
    """
    value = ensure_utc(value)
    if value.microsecond:
        return value.strftime("%Y-%m-%dT%H:%M:%S.%fZ")
    return value.strftime("%Y-%m-%dT%H:%M:%SZ")


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Convert various timestamp formats to an aware datetime.

    Args:
        value: A datetime object, an ISO 8601 string (a trailing "Z" is accepted), or None

    Returns:
        datetime in UTC, or None when value is empty or cannot be parsed
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return ensure_utc(value)
    if isinstance(value, str):
        try:
            return ensure_utc(datetime.fromisoformat(value.replace("Z", "+00:00")))
        except ValueError:
            logger.warning("Invalid datetime format encountered: %s", value)
    return None
