# File: utils/dt_utils.py
"""Date and time utilities for CatCare.

Pure Python date/time functions with ZERO Home Assistant dependencies.
All functions here can be unit tested without Home Assistant mocking.

⚠️ UTILS PURITY: NO `homeassistant.*` imports allowed.
   Uses standard library: datetime, zoneinfo, dateutil.

Functions:
    - dt_now_local: Get current datetime in local timezone
    - dt_now_iso: Get current datetime as ISO string
    - dt_now_utc: Get current datetime in UTC
    - as_local: Convert a datetime to the local timezone
    - dt_parse_date: Parse date strings
    - dt_parse: Normalize datetime inputs
    - clamp_day_start_hour: Coerce a configured day start hour to 0-23
    - dt_business_date: Business date for a moment and day start hour
    - dt_business_date_iso: Business date as YYYY-MM-DD
    - dt_business_day_start: Start datetime of the active business day
    - dt_period_bounds: [start, end) window of a daily/weekly/monthly period
"""

from __future__ import annotations

from datetime import UTC, date, datetime, time, timedelta
import logging
from zoneinfo import ZoneInfo

# Third-party date utilities (no HA dependency)
from dateutil.relativedelta import relativedelta

# Module-level logger (no HA dependency)
_LOGGER = logging.getLogger(__name__)

# ==============================================================================
# Constants (local copies to avoid circular imports)
# These mirror const.py values but are defined locally for purity.
# ==============================================================================

# Default timezone - can be overridden by caller
DEFAULT_TIME_ZONE: ZoneInfo = ZoneInfo("UTC")

# Frequency constants
FREQUENCY_DAILY = "daily"
FREQUENCY_WEEKLY = "weekly"
FREQUENCY_MONTHLY = "monthly"

# Day start hour bounds and fallback
DAY_START_HOUR_MIN = 0
DAY_START_HOUR_MAX = 23
DAY_START_HOUR_DEFAULT = 4


# ==============================================================================
# Timezone Configuration
# ==============================================================================


def set_default_timezone(tz: ZoneInfo) -> None:
    """Set the default timezone for all dt_utils functions.

    Call this during integration setup to configure the user's timezone.

    Args:
        tz: ZoneInfo object representing the default timezone
    """
    global DEFAULT_TIME_ZONE  # noqa: PLW0603
    DEFAULT_TIME_ZONE = tz


def get_default_timezone() -> ZoneInfo:
    """Get the current default timezone."""
    return DEFAULT_TIME_ZONE


# ==============================================================================
# Current Date/Time Functions
# ==============================================================================


def dt_now_local(tz: ZoneInfo | None = None) -> datetime:
    """Return the current datetime in local timezone (timezone-aware).

    Args:
        tz: Optional timezone override. Uses DEFAULT_TIME_ZONE if not provided.

    Returns:
        Current datetime in the specified timezone.
    """
    tz_info = tz or DEFAULT_TIME_ZONE
    return datetime.now(tz_info)


def dt_now_iso(tz: ZoneInfo | None = None) -> str:
    """Return the current local datetime as an ISO 8601 string.

    Example:
        "2025-04-07T14:30:00-05:00"
    """
    return dt_now_local(tz).isoformat()


def dt_now_utc() -> datetime:
    """Return the current datetime in UTC (timezone-aware)."""
    return datetime.now(UTC)


def as_local(dt_obj: datetime, tz: ZoneInfo | None = None) -> datetime:
    """Convert a datetime to local timezone.

    Naive datetimes are assumed to be UTC.
    """
    tz_info = tz or DEFAULT_TIME_ZONE
    if dt_obj.tzinfo is None:
        dt_obj = dt_obj.replace(tzinfo=UTC)
    return dt_obj.astimezone(tz_info)


def dt_ensure_aware(dt_obj: datetime, tz: ZoneInfo | None = None) -> datetime:
    """Attach the default timezone to a naive datetime, keeping its wall clock.

    Aware datetimes are returned unchanged.
    """
    if dt_obj.tzinfo is not None:
        return dt_obj
    return dt_obj.replace(tzinfo=tz or DEFAULT_TIME_ZONE)


# ==============================================================================
# Date/Time Parsing
# ==============================================================================


def dt_parse_date(date_str: str | None) -> date | None:
    """Safely parse a date string into a `datetime.date`.

    Accepts "2025-04-07" (ISO) plus "04/07/2025" and "2025/04/07".

    Returns:
        datetime.date or None if parsing fails.
    """
    if not date_str or not isinstance(date_str, str):
        return None

    try:
        return date.fromisoformat(date_str)
    except ValueError:
        pass

    for fmt in ("%m/%d/%Y", "%Y/%m/%d"):
        try:
            return datetime.strptime(date_str, fmt).date()
        except ValueError:
            continue

    return None


def dt_parse(
    dt_input: str | date | datetime | None,
    default_tzinfo: ZoneInfo | None = None,
) -> datetime | None:
    """Normalize various datetime input formats to an aware datetime.

    Args:
        dt_input: String, date or datetime to normalize, or None
        default_tzinfo: Timezone to use if the input is naive
                        (defaults to DEFAULT_TIME_ZONE if None)

    Returns:
        Timezone-aware datetime, or None if the input could not be parsed.

    Example:
        >>> dt_parse("2025-04-15")
        datetime.datetime(2025, 4, 15, 0, 0, tzinfo=ZoneInfo('UTC'))
    """
    if not dt_input:
        return None

    tz_info = default_tzinfo or DEFAULT_TIME_ZONE
    result: datetime | None = None

    if isinstance(dt_input, str):
        try:
            result = datetime.fromisoformat(dt_input)
        except ValueError:
            parsed_date = dt_parse_date(dt_input)
            if parsed_date is None:
                _LOGGER.debug("Unparseable datetime value: %s", dt_input)
                return None
            result = datetime.combine(parsed_date, time.min)

    elif isinstance(dt_input, datetime):
        result = dt_input

    elif isinstance(dt_input, date):
        result = datetime.combine(dt_input, time.min)

    else:
        _LOGGER.debug("Unsupported datetime input type: %s", type(dt_input))
        return None

    if result.tzinfo is None:
        result = result.replace(tzinfo=tz_info)

    return result


# ==============================================================================
# Business Day Functions
# ==============================================================================


def clamp_day_start_hour(value: object) -> int:
    """Coerce a configured day start hour into the 0-23 range.

    Invalid values fall back to DAY_START_HOUR_DEFAULT rather than raising.

    Examples:
        clamp_day_start_hour(6) → 6
        clamp_day_start_hour("5") → 5
        clamp_day_start_hour(27) → 23
        clamp_day_start_hour(None) → 4
    """
    try:
        hour = int(value)  # type: ignore[call-overload]
    except (TypeError, ValueError):
        _LOGGER.warning(
            "Invalid day start hour %r, using default %s",
            value,
            DAY_START_HOUR_DEFAULT,
        )
        return DAY_START_HOUR_DEFAULT
    return max(DAY_START_HOUR_MIN, min(hour, DAY_START_HOUR_MAX))


def dt_business_date(now: datetime, day_start_hour: int) -> date:
    """Return the business date in effect at `now`.

    Moments before `day_start_hour` belong to the previous calendar day, so a
    household that goes to bed at 2am still sees yesterday's tasks.

    Args:
        now: Current moment (aware or naive; its own wall clock is used)
        day_start_hour: Hour (0-23) at which a new business day begins

    Returns:
        The calendar date of the active business day.

    Examples:
        dt_business_date(2025-03-01 03:00, 6) → 2025-02-28
        dt_business_date(2025-03-01 06:00, 6) → 2025-03-01
    """
    business_date = now.date()
    if now.hour < clamp_day_start_hour(day_start_hour):
        business_date -= timedelta(days=1)
    return business_date


def dt_business_date_iso(now: datetime, day_start_hour: int) -> str:
    """Return the business date as an ISO string (YYYY-MM-DD)."""
    return dt_business_date(now, day_start_hour).isoformat()


def dt_business_day_start(now: datetime, day_start_hour: int) -> datetime:
    """Return the moment the active business day began.

    The result carries `now`'s tzinfo.
    """
    hour = clamp_day_start_hour(day_start_hour)
    return datetime.combine(
        dt_business_date(now, hour), time(hour=hour), tzinfo=now.tzinfo
    )


def dt_period_bounds(
    frequency: str, now: datetime, day_start_hour: int
) -> tuple[datetime, datetime]:
    """Return the [start, end) window of the period containing `now`.

    - daily: the business day
    - weekly: Monday of the business week at the day start hour, 7 days
    - monthly: first of the business month at the day start hour, 1 month

    Unknown frequencies are treated as daily.

    Args:
        frequency: FREQUENCY_DAILY, FREQUENCY_WEEKLY or FREQUENCY_MONTHLY
        now: Current moment
        day_start_hour: Hour (0-23) at which a new business day begins

    Returns:
        Tuple of (period_start, period_end) sharing `now`'s tzinfo.
    """
    hour = clamp_day_start_hour(day_start_hour)
    business_date = dt_business_date(now, hour)

    if frequency == FREQUENCY_WEEKLY:
        start_date = business_date - timedelta(days=business_date.weekday())
        start = datetime.combine(start_date, time(hour=hour), tzinfo=now.tzinfo)
        return start, start + timedelta(days=7)

    if frequency == FREQUENCY_MONTHLY:
        start_date = business_date.replace(day=1)
        start = datetime.combine(start_date, time(hour=hour), tzinfo=now.tzinfo)
        return start, start + relativedelta(months=1)

    if frequency != FREQUENCY_DAILY:
        _LOGGER.debug("Unknown frequency '%s', using daily period", frequency)

    start = datetime.combine(business_date, time(hour=hour), tzinfo=now.tzinfo)
    return start, start + timedelta(days=1)
