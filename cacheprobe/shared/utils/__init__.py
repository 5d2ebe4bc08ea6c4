"""Shared utilities: datetime."""

from cacheprobe.shared.utils.datetime import format_timestamp, utc_now

__all__ = ["utc_now", "format_timestamp"]
