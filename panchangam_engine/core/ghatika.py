"""
ghatika.py
==========
Day/night partition into 8 equal ghatikas each.

  day   = [sunrise, sunset)
  night = [sunset, next day's sunrise)

Segments are recomputed for every date and location; day length changes
continuously with season and latitude.
"""

from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from typing import Tuple

from .sun_times import SunTimes

GHATIKAS_PER_SPAN = 8


@dataclass(frozen=True)
class Ghatika:
    index:   int          # 1–8
    start:   datetime
    end:     datetime
    flagged: bool = False

    @property
    def duration_minutes(self) -> float:
        return (self.end - self.start).total_seconds() / 60.0

    def overlaps(self, start: datetime, end: datetime) -> bool:
        return intervals_overlap(self.start, self.end, start, end)


def intervals_overlap(s1: datetime, e1: datetime, s2: datetime, e2: datetime) -> bool:
    """Half-open [s1, e1) and [s2, e2) overlap."""
    return s1 < e2 and e1 > s2


def divide_span(start: datetime, end: datetime,
                parts: int = GHATIKAS_PER_SPAN) -> Tuple[Ghatika, ...]:
    """Split [start, end) into `parts` contiguous, gap-free segments."""
    span = end - start
    bounds = [start + (span * i) / parts for i in range(parts)] + [end]
    return tuple(
        Ghatika(index=i + 1, start=bounds[i], end=bounds[i + 1])
        for i in range(parts)
    )


def flag_ghatika(ghatikas: Tuple[Ghatika, ...], index: int) -> Tuple[Ghatika, ...]:
    return tuple(replace(g, flagged=(g.index == index)) for g in ghatikas)


@dataclass(frozen=True)
class DayNightPartition:
    sun_times:    SunTimes
    next_sunrise: datetime
    day:          Tuple[Ghatika, ...]
    night:        Tuple[Ghatika, ...]

    @property
    def day_slot_minutes(self) -> float:
        return self.day[0].duration_minutes

    @property
    def night_slot_minutes(self) -> float:
        return self.night[0].duration_minutes

    def day_ghatika(self, index: int) -> Ghatika:
        return self.day[index - 1]

    def night_ghatika(self, index: int) -> Ghatika:
        return self.night[index - 1]


def partition_day_and_night(today: SunTimes, tomorrow: SunTimes) -> DayNightPartition:
    next_sunrise = tomorrow.sunrise
    if next_sunrise <= today.sunset:
        next_sunrise += timedelta(hours=24)
    return DayNightPartition(
        sun_times=today,
        next_sunrise=next_sunrise,
        day=divide_span(today.sunrise, today.sunset),
        night=divide_span(today.sunset, next_sunrise),
    )
