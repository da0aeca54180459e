"""
Datetime utilities for bridge timestamps.

Layer timestamps (createdAt / updatedAt) are epoch milliseconds, the unit the
drawing engine and the line storage API exchange. Naive datetimes are
treated as UTC.
"""

import logging
import math
import time
from datetime import datetime, timezone
from typing import Any, Optional

logger = logging.getLogger(__name__)


def now_ms() -> int:
    """Current time as epoch milliseconds."""
    return int(time.time() * 1000)


def now_iso() -> str:
    """Current UTC time as an ISO-8601 string with millisecond precision."""
    return datetime.now(timezone.utc).isoformat(timespec='milliseconds').replace('+00:00', 'Z')


def parse_datetime_string_to_utc(dt_str: str) -> datetime:
    """
    Parse an ISO format datetime string and convert to UTC.

    Handles:
    - ISO format with timezone (e.g., "2024-01-01T09:00:00+08:00")
    - ISO format with Z (e.g., "2024-01-01T01:00:00Z")
    - ISO format without timezone (assumed UTC)
    - Date only (e.g., "2024-01-01")

    Raises:
        ValueError: If datetime string cannot be parsed
    """
    try:
        dt = datetime.fromisoformat(dt_str.strip().replace('Z', '+00:00'))
    except ValueError as e:
        raise ValueError(f"Invalid datetime string format: {dt_str}") from e

    if dt.tzinfo:
        return dt.astimezone(timezone.utc)
    return dt.replace(tzinfo=timezone.utc)


def parse_timestamp_ms(value: Any) -> Optional[int]:
    """
    Convert an epoch number, ISO string or datetime to epoch milliseconds.

    Numbers are taken to already be milliseconds. Returns None when the
    value cannot be interpreted as a point in time.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return int(value)
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            return None
        return int(value)
    if isinstance(value, datetime):
        dt = value if value.tzinfo else value.replace(tzinfo=timezone.utc)
        return int(dt.timestamp() * 1000)
    if isinstance(value, str) and value.strip():
        try:
            return int(parse_datetime_string_to_utc(value).timestamp() * 1000)
        except ValueError as e:
            logger.debug(f"Unparseable timestamp {value!r}: {e}")
            return None
    return None
