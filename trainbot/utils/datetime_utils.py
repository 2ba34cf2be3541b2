"""Utility functions for time-of-day operations.

Schedule times are stored as zero-padded 24-hour "HH:MM" strings so that
they compare correctly both in SQL and in Python. Replies present them in
12-hour "h:mm am/pm" form.
"""

from datetime import datetime
from typing import Optional

from trainbot.utils.logger import get_logger

logger = get_logger()

# Accepted input formats, tried in order
TIME_OF_DAY_FORMATS = [
    "%H:%M",      # 07:18, 7:18, 19:00
    "%I:%M %p",   # 7:18 am
    "%I:%M%p",    # 7:18am
    "%I %p",      # 7 pm
    "%I%p",       # 7pm
]


def current_time_of_day(now: Optional[datetime] = None) -> str:
    """
    Get the current local time of day at minute resolution.

    Args:
        now: Reference datetime (default: local system time)

    Returns:
        str: Time of day as "HH:MM" (seconds dropped)
    """
    if now is None:
        now = datetime.now()
    return now.strftime("%H:%M")


def parse_time_of_day(value: Optional[str]) -> Optional[str]:
    """
    Parse a user or file supplied time of day.

    Supports 24-hour ("07:18", "7:18") and 12-hour ("7:18 am", "7pm")
    forms, case-insensitively.

    Args:
        value: Time string to parse

    Returns:
        Normalized "HH:MM" string or None if parsing fails
    """
    if not value:
        return None

    text = value.strip().upper()

    for fmt in TIME_OF_DAY_FORMATS:
        try:
            return datetime.strptime(text, fmt).strftime("%H:%M")
        except ValueError:
            continue

    logger.debug(f"Could not parse time of day: {value!r}")
    return None


def format_time_of_day(value: str) -> str:
    """
    Format a stored "HH:MM" time for display.

    Args:
        value: Time of day as "HH:MM"

    Returns:
        str: 12-hour form without a leading zero, e.g. "7:18 am"

    Raises:
        ValueError: If value is not a valid "HH:MM" time
    """
    parsed = datetime.strptime(value, "%H:%M")
    hour = parsed.hour % 12 or 12
    suffix = "am" if parsed.hour < 12 else "pm"
    return f"{hour}:{parsed.minute:02d} {suffix}"
