"""Date and time formatting utilities."""

from datetime import datetime, timezone
from typing import Any


def format_date(date: Any) -> str:
    """
    Format a date to a YYYY-MM-DD string.

    Args:
        date: datetime, seconds since the epoch, or anything else (stringified)

    Returns:
        Formatted date string
    """
    if isinstance(date, (int, float)) and not isinstance(date, bool):
        date = datetime.fromtimestamp(date, tz=timezone.utc)
    if hasattr(date, "strftime"):
        return date.strftime("%Y-%m-%d")
    return str(date)
