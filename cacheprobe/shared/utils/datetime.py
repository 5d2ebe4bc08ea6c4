"""
UTC datetime utilities for report headers.

All timestamps printed by the harness are timezone-aware UTC.
"""

from datetime import UTC, datetime


def utc_now() -> datetime:
    """
    Return the current UTC datetime with timezone info.

    Returns:
        Timezone-aware datetime in UTC
    """
    return datetime.now(UTC)


def format_timestamp(dt: datetime | None = None) -> str:
    """Format a datetime (default: now) as 'YYYY-MM-DD HH:MM:SS UTC'."""
    return (dt or utc_now()).strftime("%Y-%m-%d %H:%M:%S UTC")
