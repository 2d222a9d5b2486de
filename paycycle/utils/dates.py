"""
Calendar Helpers

Dates are local calendar dates: no time component, no time zone.
Weeks run Sunday through Saturday regardless of locale.
"""

import calendar
from datetime import date, datetime, timedelta
from typing import Any, Optional


MONTH_FORMAT = "%Y-%m"

_DATE_FORMATS = ("%Y-%m-%d", "%Y/%m/%d", "%Y.%m.%d")

# date.weekday() numbering
MONDAY = 0
FRIDAY = 4
SATURDAY = 5
SUNDAY = 6


# =============================================================================
# PARSING
# =============================================================================

def parse_date(value: Any) -> Optional[date]:
    """
    Coerce a storage value to a calendar date, returning None on failure.

    Accepts date and datetime objects, 'YYYY-MM-DD' style strings and ISO
    timestamps (only the date part is kept).
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None

    text = value.strip()
    if "T" in text:
        text = text.split("T", 1)[0]
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


def parse_month(month_str: Optional[str]) -> Optional[date]:
    """Return the first day of the given YYYY-MM month string."""
    if not month_str:
        return None
    try:
        return datetime.strptime(month_str.strip(), MONTH_FORMAT).date()
    except ValueError:
        return None


def month_key(d: date) -> str:
    """YYYY-MM key of the month containing d."""
    return d.strftime(MONTH_FORMAT)


# =============================================================================
# MONTH ARITHMETIC
# =============================================================================

def shift_month(year: int, month: int, n: int) -> tuple[int, int]:
    """(year, month) moved by n months."""
    index = year * 12 + (month - 1) + n
    return index // 12, index % 12 + 1


def clamp_day_to_month(year: int, month: int, day: int) -> int:
    """Clamp day to the valid range for the given year/month."""
    max_day = calendar.monthrange(year, month)[1]
    return max(1, min(day, max_day))


def day_in_month(year: int, month: int, day: int) -> date:
    """The given day of the month, clamped to the month's last day."""
    return date(year, month, clamp_day_to_month(year, month, day))


def add_months(d: date, n: int) -> date:
    """Add n months to date d, clamping the day to month end."""
    year, month = shift_month(d.year, d.month, n)
    return day_in_month(year, month, d.day)


def first_day_of_month(year: int, month: int) -> date:
    return date(year, month, 1)


def last_day_of_month(year: int, month: int) -> date:
    return date(year, month, calendar.monthrange(year, month)[1])


def last_business_day_of_month(year: int, month: int) -> date:
    """Last calendar day of the month, stepped back over Saturday and Sunday."""
    d = last_day_of_month(year, month)
    while d.weekday() in (SATURDAY, SUNDAY):
        d -= timedelta(days=1)
    return d


def months_between(earlier: date, later: date) -> int:
    """Number of complete months from `earlier` to `later` (negative if reversed)."""
    if later < earlier:
        return -months_between(later, earlier)
    months = (later.year - earlier.year) * 12 + (later.month - earlier.month)
    if later.day < earlier.day:
        months -= 1
    return months


# =============================================================================
# WEEKS
# =============================================================================

def week_start(d: date) -> date:
    """Sunday on or before d."""
    return d - timedelta(days=(d.weekday() + 1) % 7)


def week_end(d: date) -> date:
    """Saturday on or after d."""
    return week_start(d) + timedelta(days=6)


def week_range(d: date) -> tuple[date, date]:
    """(Sunday, Saturday) of the week containing d."""
    start = week_start(d)
    return start, start + timedelta(days=6)


def weeks_between(start: date, end: date) -> list[date]:
    """Sunday of every week overlapping [start, end], oldest first."""
    if end < start:
        return []
    current = week_start(start)
    sundays = []
    while current <= end:
        sundays.append(current)
        current += timedelta(weeks=1)
    return sundays


def next_weekday_on_or_after(d: date, weekday: int) -> date:
    """First date >= d falling on `weekday` (0=Monday .. 6=Sunday)."""
    return d + timedelta(days=(weekday - d.weekday()) % 7)


def format_week_label(start: date, end: date) -> str:
    """e.g. 'Jan 7 - Jan 13'."""
    return f"{start:%b} {start.day} - {end:%b} {end.day}"
