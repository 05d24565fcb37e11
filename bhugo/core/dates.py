"""Date conversion functions for bhugo."""

from __future__ import annotations

from datetime import datetime, tzinfo

# Seconds between the Unix epoch and Core Data's reference date (2001-01-01 UTC).
CORE_DATA_EPOCH_OFFSET = 978307200


def core_data_to_datetime(timestamp: float, tz: tzinfo | None = None) -> datetime:
    """Convert a Core Data timestamp into an aware datetime.

    Fractional seconds are truncated.

    Args:
        timestamp: Seconds since 2001-01-01 UTC.
        tz: Target timezone, local time when None.

    Returns:
        Timezone-aware datetime.
    """
    unix = int(timestamp) + CORE_DATA_EPOCH_OFFSET
    if tz is None:
        return datetime.fromtimestamp(unix).astimezone()
    return datetime.fromtimestamp(unix, tz)


def format_creation_date(
    timestamp: float, time_format: str, tz: tzinfo | None = None
) -> str:
    """Format a Core Data timestamp with a strftime pattern."""
    return core_data_to_datetime(timestamp, tz).strftime(time_format)
