"""Date and time utilities for Dailies Checklist.

Pure Python date/time functions with ZERO Home Assistant dependencies.
All functions here can be unit tested without Home Assistant mocking.

Every reset boundary is computed in UTC, so this module never consults a
local time zone. Naive datetimes are reinterpreted as UTC, never converted.

Functions:
    - dt_now_utc: Get current datetime in UTC
    - as_utc: Normalize an aware or naive datetime to UTC
    - dt_to_utc: Parse an ISO string into an aware UTC datetime
    - dt_to_iso: Serialize a datetime as an ISO string with offset
    - dt_next_time_of_day: Next occurrence of a UTC wall-clock time
    - dt_next_weekday_time: Next occurrence of a UTC weekday and time
    - dt_format_duration: Format a timedelta as "2h 30m" / "1d 5h" / "Now"
    - dt_time_until: Human-readable time remaining until a target
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
import logging

# Third-party date utilities (no HA dependency)
from dateutil.relativedelta import relativedelta, weekday

_LOGGER = logging.getLogger(__name__)

# Display constant
DISPLAY_NOW = "Now"


# ==============================================================================
# Current Date/Time Functions
# ==============================================================================


def dt_now_utc() -> datetime:
    """Return the current datetime in UTC (timezone-aware)."""
    return datetime.now(UTC)


def as_utc(dt_obj: datetime) -> datetime:
    """Return dt_obj as an aware UTC datetime.

    Naive values are assumed to already be UTC and only get tzinfo attached.
    """
    if dt_obj.tzinfo is None:
        return dt_obj.replace(tzinfo=UTC)
    return dt_obj.astimezone(UTC)


# ==============================================================================
# Parsing / Serialization
# ==============================================================================


def dt_to_utc(value: str | datetime | None) -> datetime | None:
    """Parse an ISO string (or pass through a datetime) as aware UTC.

    Args:
        value: ISO 8601 string, datetime, or None

    Returns:
        UTC-aware datetime, or None if value is empty or unparsable.

    Example:
        "2025-04-07T14:30:00" → datetime(2025, 4, 7, 14, 30, tzinfo=UTC)
    """
    if value is None or value == "":
        return None

    if isinstance(value, datetime):
        try:
            return as_utc(value)
        except OverflowError:
            _LOGGER.debug("dt_to_utc: out of range value '%s'", value)
            return None

    if not isinstance(value, str):
        _LOGGER.debug("dt_to_utc: unsupported type %s", type(value).__name__)
        return None

    try:
        return as_utc(datetime.fromisoformat(value))
    except (ValueError, OverflowError):
        _LOGGER.debug("dt_to_utc: could not parse '%s'", value)
        return None


def dt_to_iso(dt_obj: datetime | None) -> str | None:
    """Serialize a datetime as an ISO string carrying an explicit UTC offset."""
    if dt_obj is None:
        return None
    return as_utc(dt_obj).isoformat()


# ==============================================================================
# Occurrence Calculations
# ==============================================================================


def dt_next_time_of_day(hour: int, minute: int, now: datetime) -> datetime:
    """Return the next UTC instant at hour:minute strictly after now.

    Today's target is returned if now is strictly before it. An exact match
    counts as already passed and yields tomorrow's target.
    """
    now = as_utc(now)
    target = now.replace(hour=hour, minute=minute, second=0, microsecond=0)
    if now < target:
        return target
    return target + timedelta(days=1)


def dt_next_weekday_time(
    weekday_index: int, hour: int, minute: int, now: datetime
) -> datetime:
    """Return the next UTC instant on weekday_index at hour:minute.

    weekday_index follows datetime.weekday() (0=Monday .. 6=Sunday). On the
    target day, once the time has passed (or is exactly now), the result is
    seven days ahead, never zero.

    Example:
        Tuesday 09:00 with target Tuesday 08:00 → following Tuesday 08:00
    """
    now = as_utc(now)
    target = now + relativedelta(
        weekday=weekday(weekday_index),
        hour=hour,
        minute=minute,
        second=0,
        microsecond=0,
    )
    if target <= now:
        target += timedelta(days=7)
    return target


# ==============================================================================
# Duration Formatting
# ==============================================================================


def dt_format_duration(td: timedelta | None) -> str:
    """Format a timedelta using its two most significant units.

    Args:
        td: timedelta to format, or None

    Returns:
        "Now" for None or negative values, otherwise one of
        "{d}d {h}h", "{h}h {m}m", "{m}m {s}s" or "{s}s". A zero
        secondary unit is omitted ("1d", "2h", "5m").

    Examples:
        dt_format_duration(timedelta(hours=2, minutes=30)) → "2h 30m"
        dt_format_duration(timedelta(days=1, hours=5)) → "1d 5h"
        dt_format_duration(timedelta(seconds=-1)) → "Now"
    """
    if td is None or td < timedelta():
        return DISPLAY_NOW

    total_seconds = int(td.total_seconds())
    days, remainder = divmod(total_seconds, 86400)  # 24 * 60 * 60
    hours, remainder = divmod(remainder, 3600)  # 60 * 60
    minutes, seconds = divmod(remainder, 60)

    if days >= 1:
        return f"{days}d {hours}h" if hours > 0 else f"{days}d"
    if hours >= 1:
        return f"{hours}h {minutes}m" if minutes > 0 else f"{hours}h"
    if minutes >= 1:
        return f"{minutes}m {seconds}s" if seconds > 0 else f"{minutes}m"
    return f"{seconds}s"


def dt_time_until(target_dt: datetime | None, now: datetime | None = None) -> str:
    """Return a human-readable duration until target_dt ("Now" once past)."""
    if target_dt is None:
        return DISPLAY_NOW
    reference = as_utc(now) if now is not None else dt_now_utc()
    return dt_format_duration(as_utc(target_dt) - reference)
