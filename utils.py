"""
Shared utility functions for the GitHub Activity Dashboard application.

This module contains common functionality used across multiple files to eliminate code duplication.
"""

from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Optional, Tuple, Union

from constants import DEFAULT_TEXT_TRUNCATION_SUFFIX, MONTH_LABEL_FORMAT, SECONDS_PER_DAY


def parse_github_timestamp(value: Union[str, datetime, None]) -> Optional[datetime]:
    """
    Parse a GitHub timestamp into a timezone-aware datetime.

    Malformed or missing values yield None instead of raising, so callers can
    skip the record.

    Args:
        value: ISO 8601 string (e.g., "2025-07-20T10:00:00Z") or datetime

    Returns:
        Aware datetime (UTC when the input carries no offset), or None
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        if not value.strip():
            return None
        try:
            parsed = datetime.fromisoformat(value.strip().replace('Z', '+00:00'))
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_timestamp_to_local(utc_timestamp: Union[str, datetime, None]) -> str:
    """
    Convert UTC timestamp to local timezone formatted string.

    Args:
        utc_timestamp: UTC timestamp string in ISO format or datetime

    Returns:
        Formatted timestamp string in local timezone (e.g., "2025-07-20 03:00 PM"),
        or an empty string when the timestamp cannot be parsed
    """
    parsed = parse_github_timestamp(utc_timestamp)
    if parsed is None:
        return ""
    return parsed.astimezone().strftime('%Y-%m-%d %I:%M %p')


def to_iso_date(value: Union[str, datetime, None]) -> str:
    """Return the YYYY-MM-DD portion of a timestamp, or an empty string."""
    parsed = parse_github_timestamp(value)
    if parsed is None:
        return ""
    return parsed.astimezone(timezone.utc).date().isoformat()


def days_between(start: datetime, end: datetime) -> float:
    """
    Calculate the number of days between two datetimes.

    Args:
        start: Earlier datetime
        end: Later datetime

    Returns:
        Fractional day count (negative if end precedes start)
    """
    return (end - start).total_seconds() / SECONDS_PER_DAY


def month_index(year: int, month: int) -> int:
    """Map a calendar month to a monotonically increasing integer."""
    return year * 12 + (month - 1)


def shift_month(year: int, month: int, offset: int) -> Tuple[int, int]:
    """
    Move a calendar month by a number of months.

    Args:
        year: Calendar year
        month: Calendar month (1-12)
        offset: Months to move (negative moves backwards)

    Returns:
        Tuple of (year, month)
    """
    index = month_index(year, month) + offset
    return index // 12, index % 12 + 1


def format_month_label(year: int, month: int) -> str:
    """Format a calendar month as a chart label (e.g., "Jan 2024")."""
    return datetime(year, month, 1).strftime(MONTH_LABEL_FORMAT)


def get_repository_display_name(repo_full_name: str) -> str:
    """
    Extract the repository name from a full repository path.

    Args:
        repo_full_name: Full repository name (e.g., "owner/repository-name")

    Returns:
        Just the repository name (e.g., "repository-name")
    """
    return repo_full_name.split("/")[-1]


def safe_get_field(record: dict, field: str, default: Any = "") -> Any:
    """
    Safely get a field from a raw API record with fallback to default.

    Args:
        record: Raw data dictionary
        field: Field name to retrieve
        default: Default value if field is missing or None

    Returns:
        Field value or default if not found
    """
    return record.get(field, default) or default


def contains_query(value: Optional[str], query: str) -> bool:
    """Case-insensitive substring test; missing values never match."""
    if not value:
        return False
    return query in value.lower()


def truncate_text(text: str, max_length: int, suffix: str = DEFAULT_TEXT_TRUNCATION_SUFFIX) -> str:
    """
    Truncate text to a maximum length with optional suffix.

    Args:
        text: Text to truncate
        max_length: Maximum length before truncation
        suffix: Suffix to add if text is truncated

    Returns:
        Truncated text with suffix if needed
    """
    if len(text) <= max_length:
        return text
    return text[:max_length - len(suffix)] + suffix


def hash_color(name: str) -> str:
    """
    Generate a stable hex color from a name.

    Channel values stay within 55-254 so the color is never too dark or too light.
    """
    hash_value = 0
    for char in name:
        hash_value = ord(char) + ((hash_value << 5) - hash_value)
        # wrap to signed 32-bit
        hash_value = ((hash_value + 2 ** 31) % 2 ** 32) - 2 ** 31

    red = (hash_value & 0xFF) % 200 + 55
    green = ((hash_value >> 8) & 0xFF) % 200 + 55
    blue = ((hash_value >> 16) & 0xFF) % 200 + 55
    return f"#{red:02x}{green:02x}{blue:02x}"


def round_half_up(value: float, digits: int = 1) -> float:
    """
    Round to a number of decimal places with halves rounded away from zero.

    For example 6.25 -> 6.3 and 58.5 -> 59.

    Args:
        value: Number to round
        digits: Decimal places to keep

    Returns:
        Rounded value as a float
    """
    quantum = Decimal(1).scaleb(-digits)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def parse_positive_int(value: Optional[str], default: int) -> int:
    """Parse a positive integer setting, falling back to default when missing or invalid."""
    if value is None or not str(value).strip():
        return default
    try:
        parsed = int(str(value).strip())
    except ValueError:
        print(f"⚠️  [CONFIG] Invalid integer setting {value!r}, using {default}")
        return default
    if parsed <= 0:
        print(f"⚠️  [CONFIG] Setting must be positive, got {parsed}, using {default}")
        return default
    return parsed
