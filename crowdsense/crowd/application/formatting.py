"""
Relative age strings for report timestamps ("5 minutes ago").
"""
import calendar
from datetime import datetime, timezone, tzinfo
from typing import Optional

from .aggregation import current_millis

MINUTE_MS = 60_000
HOUR_MS = 3_600_000
DAY_MS = 86_400_000
WEEK_MS = 7 * DAY_MS

def _plural(count: int, unit: str) -> str:
    suffix = "" if count == 1 else "s"
    return f"{count} {unit}{suffix} ago"

def format_date(timestamp: int, tz: tzinfo = timezone.utc) -> str:
    """Absolute date in day-month-year order, e.g. '5 Mar 2024'."""
    moment = datetime.fromtimestamp(timestamp / 1000, tz=tz)
    return f"{moment.day} {calendar.month_abbr[moment.month]} {moment.year}"

def format_age(
    timestamp: int,
    now: Optional[int] = None,
    tz: tzinfo = timezone.utc
) -> str:
    """
    Converts an absolute timestamp (ms) into a relative age phrase.
    Future timestamps are reported as "Just now".
    """
    if now is None:
        now = current_millis()
    age = now - timestamp

    if age < MINUTE_MS:
        return "Just now"
    if age < HOUR_MS:
        return _plural(int(age // MINUTE_MS), "minute")
    if age < DAY_MS:
        return _plural(int(age // HOUR_MS), "hour")
    if age < WEEK_MS:
        return _plural(int(age // DAY_MS), "day")
    return format_date(timestamp, tz)
