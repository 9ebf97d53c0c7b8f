"""
tamil_calendar.py
=================
Tamil solar calendar built on the Sun's sidereal sign.

  month index = floor(sidereal Sun at local noon / 30)    0 = Chittirai
  month start = first date, walking back, whose month index matches
  Tamil day   = (date − month start) + 1
  year start  = latest date with index 0 whose previous day had index 11
  year name   = 60-year Samvatsara cycle anchored at 1987 (Prabhava),
                reported only for start years 1987–2100

Both backward walks are capped; running out of iterations raises
TamilCalendarSearchError instead of looping.

Observance tags are rule-of-thumb labels read off the day's tithi and
nakshatra numbers. They are approximations and can disagree with a
printed almanac (Pradosham, for instance, ignores the sunset window).
"""

import calendar
import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Callable, Dict, List, Optional, Tuple

from ..errors import InvalidInputError, TamilCalendarSearchError
from .ephemeris import EphemerisAdapter
from .locations import GeoLocation
from .moments import Weekday, check_year, local_noon
from .panchang import PanchangReport, compute_panchang
from .positions import sun_moon_sidereal

log = logging.getLogger(__name__)

# (english, tamil); list position == month index
TAMIL_MONTHS = [
    ("Chittirai", "சித்திரை"),
    ("Vaikasi",   "வைகாசி"),
    ("Aani",      "ஆனி"),
    ("Aadi",      "ஆடி"),
    ("Aavani",    "ஆவணி"),
    ("Purattasi", "புரட்டாசி"),
    ("Aippasi",   "ஐப்பசி"),
    ("Karthigai", "கார்த்திகை"),
    ("Margazhi",  "மார்கழி"),
    ("Thai",      "தை"),
    ("Maasi",     "மாசி"),
    ("Panguni",   "பங்குனி"),
]

SAMVATSARA_60 = [
    "Prabhava", "Vibhava", "Shukla", "Pramodoota", "Prajothpatti",
    "Aangirasa", "Shrimukha", "Bhava", "Yuva", "Dhata",
    "Eeshwara", "Bahudhanya", "Pramathi", "Vikrama", "Vishu",
    "Chitrabhanu", "Subhanu", "Dharana", "Parthiva", "Vyaya",
    "Sarvajit", "Sarvadhari", "Virodhi", "Vikruti", "Khara",
    "Nandana", "Vijaya", "Jaya", "Manmatha", "Durmukhi",
    "Hevilambi", "Vilambi", "Vikari", "Sharvari", "Plava",
    "Shubhakrit", "Shobhakrit", "Krodhi", "Vishvavasu", "Parabhava",
    "Plavanga", "Keelaka", "Saumya", "Sadharana", "Virodhikrit",
    "Paridhavi", "Pramadeesha", "Ananda", "Rakshasa", "Nala",
    "Pingala", "Kalayukti", "Siddharthi", "Raudri", "Durmati",
    "Dundubhi", "Rudhirodgari", "Raktakshi", "Krodhana", "Akshaya",
]

SAMVATSARA_BASE_YEAR = 1987
SAMVATSARA_LAST_YEAR = 2100

MONTH_START_MAX_STEPS = 40     # a solar month is 29–32 days
YEAR_START_MAX_STEPS  = 420

CALENDAR_NOTES = (
    "Tamil month/day derived from Sun sidereal longitude (Lahiri ayanamsa, noon-local approximation).",
    "Observance tags are rule-based heuristics derived from the computed panchang; "
    "they may differ from local almanacs.",
    "Pradosham tagging is based on tithi number only (Trayodashi), not sunset intersection.",
)


# ---------------------------------------------------------------------------
# Year names and observance tags
# ---------------------------------------------------------------------------

def samvatsara_name(start_year: int) -> Optional[str]:
    """Year name for a Tamil year starting in `start_year`; None outside 1987–2100."""
    if start_year < SAMVATSARA_BASE_YEAR or start_year > SAMVATSARA_LAST_YEAR:
        return None
    return SAMVATSARA_60[(start_year - SAMVATSARA_BASE_YEAR) % 60]


@dataclass(frozen=True)
class ObservanceTag:
    key:    str
    label:  str
    method: Optional[str] = None

    def to_dict(self) -> dict:
        d = {"key": self.key, "label": self.label}
        if self.method is not None:
            d["method"] = self.method
        return d


def observance_tags(tithi_number: int, nakshatra_number: int) -> List[ObservanceTag]:
    tags = []
    if tithi_number == 30:
        tags.append(ObservanceTag("AMAVASAI", "Amavasai"))
    if tithi_number == 15:
        tags.append(ObservanceTag("POURNAMI", "Pournami"))
    if tithi_number in (11, 26):
        tags.append(ObservanceTag("EKADASHI", "Ekadashi"))
    if tithi_number in (6, 21):
        tags.append(ObservanceTag("SASHTI", "Sashti"))
    if nakshatra_number == 3:
        tags.append(ObservanceTag("KIRUTHIGAI", "Kiruthigai"))
    if tithi_number in (13, 28):
        tags.append(ObservanceTag("PRADOSHAM", "Pradosham", method="tithiNumberOnly"))
    return tags


# ---------------------------------------------------------------------------
# Bounded search
# ---------------------------------------------------------------------------

def walk_back(start: date, max_steps: int,
              found: Callable[[date], bool]) -> Optional[date]:
    """First date d = start, start−1, ... (at most max_steps) with found(d); else None."""
    cursor = start
    for _ in range(max_steps):
        if found(cursor):
            return cursor
        cursor -= timedelta(days=1)
    return None


# ---------------------------------------------------------------------------
# Calendar
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TamilYear:
    start_date:         date
    start_gregorian:    int
    name:               Optional[str]


@dataclass(frozen=True)
class TamilMonthDay:
    day:           date
    weekday:       Weekday
    month_index:   int
    tamil_day:     int
    month_start:   date
    year:          TamilYear
    panchang:      PanchangReport
    tags:          Tuple[ObservanceTag, ...]

    @property
    def month_name(self) -> str:
        return TAMIL_MONTHS[self.month_index][0]

    @property
    def month_tamil(self) -> str:
        return TAMIL_MONTHS[self.month_index][1]


@dataclass(frozen=True)
class TamilMonthGrid:
    year:        int
    month:       int
    location:    GeoLocation
    label_index: int                                  # Tamil month of the 15th
    weeks:       Tuple[Tuple[Optional[TamilMonthDay], ...], ...]
    notes:       Tuple[str, ...] = CALENDAR_NOTES


class TamilCalendar:
    """
    Tamil calendar queries for one location.

    Month indices are memoized per instance; build a fresh instance per
    request so nothing is shared between callers.
    """

    def __init__(self, adapter: EphemerisAdapter, location: GeoLocation):
        self.adapter = adapter
        self.location = location
        self._month_index: Dict[date, int] = {}

    def month_index(self, day: date) -> int:
        idx = self._month_index.get(day)
        if idx is None:
            noon = local_noon(day, self.location.utc_offset)
            sun_sid, _, _ = sun_moon_sidereal(self.adapter, noon)
            idx = int(sun_sid // 30) % 12
            self._month_index[day] = idx
        return idx

    def month_start(self, day: date) -> date:
        current = self.month_index(day)
        start = walk_back(
            day, MONTH_START_MAX_STEPS,
            lambda d: self.month_index(d - timedelta(days=1)) != current,
        )
        if start is None:
            log.error("Tamil month start not found within %d days of %s",
                      MONTH_START_MAX_STEPS, day)
            raise TamilCalendarSearchError(
                f"Tamil month start not found within {MONTH_START_MAX_STEPS} days of {day.isoformat()}"
            )
        return start

    def year_start(self, day: date) -> date:
        start = walk_back(
            day, YEAR_START_MAX_STEPS,
            lambda d: (self.month_index(d) == 0
                       and self.month_index(d - timedelta(days=1)) == 11),
        )
        if start is None:
            log.error("Tamil year start not found within %d days of %s",
                      YEAR_START_MAX_STEPS, day)
            raise TamilCalendarSearchError(
                f"Tamil year start not found within {YEAR_START_MAX_STEPS} days of {day.isoformat()}"
            )
        return start

    def tamil_day(self, day: date) -> int:
        return (day - self.month_start(day)).days + 1

    def year(self, day: date) -> TamilYear:
        start = self.year_start(day)
        return TamilYear(start, start.year, samvatsara_name(start.year))

    def day(self, day: date) -> TamilMonthDay:
        month_start = self.month_start(day)
        report = compute_panchang(self.adapter, day, self.location)
        return TamilMonthDay(
            day=day,
            weekday=Weekday.of(day),
            month_index=self.month_index(day),
            tamil_day=(day - month_start).days + 1,
            month_start=month_start,
            year=self.year(day),
            panchang=report,
            tags=tuple(observance_tags(report.tithi.number, report.nakshatra.number)),
        )

    def month(self, year: int, month: int) -> TamilMonthGrid:
        """Gregorian month laid out in Sunday-first weeks, padded with None."""
        if not 1 <= month <= 12:
            raise InvalidInputError(f"month must be 1–12, got {month}")
        check_year(year)
        last_day = calendar.monthrange(year, month)[1]

        weeks = []
        week: List[Optional[TamilMonthDay]] = [None] * 7
        for n in range(1, last_day + 1):
            entry = self.day(date(year, month, n))
            week[entry.weekday] = entry
            if entry.weekday == Weekday.SATURDAY:
                weeks.append(tuple(week))
                week = [None] * 7
        if any(week):
            weeks.append(tuple(week))

        return TamilMonthGrid(
            year=year,
            month=month,
            location=self.location,
            label_index=self.month_index(date(year, month, min(15, last_day))),
            weeks=tuple(weeks),
        )
