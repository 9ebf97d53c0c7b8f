"""
moments.py
==========
Absolute instants ("moments") and the local-calendar arithmetic around them.

A moment is always a timezone-aware UTC datetime. Local wall-clock input
arrives as (date, HH:MM, UTC offset in hours); the offset may be fractional
(+5.5 for IST) and is rounded to whole minutes before use.
"""

import re
from datetime import date, datetime, timedelta, timezone
from enum import IntEnum
from typing import Tuple

from ..errors import InvalidInputError

UTC = timezone.utc
MINUTES_PER_DAY = 24 * 60

# Calendar years accepted by every request-level operation
MIN_YEAR = 1800
MAX_YEAR = 2400

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_TIME_RE = re.compile(r"^\d{1,2}:\d{2}$")


class Weekday(IntEnum):
    """Sunday-first weekday numbering used by every rule table."""
    SUNDAY    = 0
    MONDAY    = 1
    TUESDAY   = 2
    WEDNESDAY = 3
    THURSDAY  = 4
    FRIDAY    = 5
    SATURDAY  = 6

    @classmethod
    def of(cls, day: date) -> "Weekday":
        # date.weekday(): Monday == 0
        return cls((day.weekday() + 1) % 7)


WEEKDAY_TAMIL = {
    Weekday.SUNDAY:    "ஞாயிற்றுக்கிழமை",
    Weekday.MONDAY:    "திங்கட்கிழமை",
    Weekday.TUESDAY:   "செவ்வாய்கிழமை",
    Weekday.WEDNESDAY: "புதன்கிழமை",
    Weekday.THURSDAY:  "வியாழக்கிழமை",
    Weekday.FRIDAY:    "வெள்ளிக்கிழமை",
    Weekday.SATURDAY:  "சனிக்கிழமை",
}


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------

def parse_date(text: str) -> date:
    """Parse a YYYY-MM-DD calendar date."""
    if not text or not _DATE_RE.match(text.strip()):
        raise InvalidInputError(f"date must be YYYY-MM-DD, got {text!r}")
    try:
        day = datetime.strptime(text.strip(), "%Y-%m-%d").date()
    except ValueError as e:
        raise InvalidInputError(f"invalid calendar date {text!r}: {e}") from e
    check_year(day.year)
    return day


def check_year(year: int) -> int:
    if not MIN_YEAR <= year <= MAX_YEAR:
        raise InvalidInputError(
            f"year {year} outside the supported range {MIN_YEAR}–{MAX_YEAR}"
        )
    return year


def parse_time(text: str) -> Tuple[int, int]:
    """Parse a 24-hour HH:MM time of day into (hour, minute)."""
    if not text or not _TIME_RE.match(text.strip()):
        raise InvalidInputError(f"time must be HH:MM (24-hour), got {text!r}")
    hh, mm = (int(p) for p in text.strip().split(":"))
    if not (0 <= hh <= 23 and 0 <= mm <= 59):
        raise InvalidInputError(f"time out of range: {text!r}")
    return hh, mm


# ---------------------------------------------------------------------------
# Offsets and moments
# ---------------------------------------------------------------------------

def offset_minutes(utc_offset_hours: float) -> int:
    """Fractional hour offset rounded to whole minutes (5.5 -> 330)."""
    return int(round(utc_offset_hours * 60))


def fixed_zone(utc_offset_hours: float) -> timezone:
    return timezone(timedelta(minutes=offset_minutes(utc_offset_hours)))


def moment_from_local(day: date, hour: int, minute: int,
                      utc_offset_hours: float) -> datetime:
    """
    Local wall-clock time -> UTC moment, with explicit day rollover.
    E.g. 2025-01-01 03:00 at +5.5 -> 2024-12-31 21:30 UTC.
    """
    utc_minutes = hour * 60 + minute - offset_minutes(utc_offset_hours)
    day_shift, minute_of_day = divmod(utc_minutes, MINUTES_PER_DAY)
    base = datetime(day.year, day.month, day.day, tzinfo=UTC)
    return base + timedelta(days=day_shift, minutes=minute_of_day)


def local_midnight(day: date, utc_offset_hours: float) -> datetime:
    return moment_from_local(day, 0, 0, utc_offset_hours)


def local_noon(day: date, utc_offset_hours: float) -> datetime:
    return moment_from_local(day, 12, 0, utc_offset_hours)


def to_local(moment: datetime, utc_offset_hours: float) -> datetime:
    return moment.astimezone(fixed_zone(utc_offset_hours))


def day_marker(moment: datetime, day: date, utc_offset_hours: float) -> str:
    """'' when moment falls on `day` locally, else '+1', '-1', '+2', ..."""
    delta = (to_local(moment, utc_offset_hours).date() - day).days
    if delta == 0:
        return ""
    return f"{delta:+d}"


# ---------------------------------------------------------------------------
# Display
# ---------------------------------------------------------------------------

def format_clock(moment: datetime, utc_offset_hours: float) -> str:
    """12-hour local clock string without a leading zero: '6:05 AM'."""
    local = to_local(moment, utc_offset_hours)
    hour12 = local.hour % 12 or 12
    period = "AM" if local.hour < 12 else "PM"
    return f"{hour12}:{local.minute:02d} {period}"


def format_clock24(moment: datetime, utc_offset_hours: float) -> str:
    return to_local(moment, utc_offset_hours).strftime("%H:%M")


def format_duration(minutes: float) -> str:
    total = int(round(minutes))
    h, m = divmod(total, 60)
    return f"{h}h {m}m"


def isoformat_local(moment: datetime, utc_offset_hours: float) -> str:
    return to_local(moment, utc_offset_hours).isoformat()
