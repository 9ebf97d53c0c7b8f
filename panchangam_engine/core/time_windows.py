"""
time_windows.py
===============
Weekday rule tables over the 8-fold day/night partition.

  Rahu Kaal      — one day ghatika per weekday
  Yamaganda      — one day ghatika per weekday + night ghatika 4 (every day)
  Gowri          — Good / Average / Bad quality of each day and night ghatika
  Nalla Neram    — Gowri-Good day ghatikas that are neither the Rahu Kaal
                   ghatika nor overlap Yamaganda (day), plus every
                   Gowri-Good night ghatika (no night exclusions)

Tables are checked for completeness at import time; a missing weekday is
a programming defect and stops the process from starting.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Dict, List, Mapping, Tuple

from .ghatika import (
    GHATIKAS_PER_SPAN, DayNightPartition, Ghatika, flag_ghatika,
)
from .moments import Weekday


class GowriQuality(str, Enum):
    GOOD    = "Good"
    AVERAGE = "Average"
    BAD     = "Bad"


class Period(str, Enum):
    DAY   = "day"
    NIGHT = "night"


# ---------------------------------------------------------------------------
# Rule tables (ghatika indices are 1-based)
# ---------------------------------------------------------------------------

RAHU_KAAL_GHATIKA: Mapping[Weekday, int] = {
    Weekday.SUNDAY:    8,   # ~4:30–6:00 PM on a 6-to-6 day
    Weekday.MONDAY:    2,   # ~7:30–9:00 AM
    Weekday.TUESDAY:   7,   # ~3:00–4:30 PM
    Weekday.WEDNESDAY: 5,   # ~12:00–1:30 PM
    Weekday.THURSDAY:  6,   # ~1:30–3:00 PM
    Weekday.FRIDAY:    4,   # ~10:30 AM–12:00 PM
    Weekday.SATURDAY:  3,   # ~9:00–10:30 AM
}

YAMAGANDA_DAY_GHATIKA: Mapping[Weekday, int] = {
    Weekday.SUNDAY:    5,
    Weekday.MONDAY:    4,
    Weekday.TUESDAY:   3,
    Weekday.WEDNESDAY: 2,
    Weekday.THURSDAY:  1,
    Weekday.FRIDAY:    6,
    Weekday.SATURDAY:  7,
}

YAMAGANDA_NIGHT_GHATIKA = 4

# Good ghatikas per weekday; every other index is Average.
_GOWRI_GOOD: Mapping[Weekday, Mapping[Period, Tuple[int, ...]]] = {
    Weekday.SUNDAY:    {Period.DAY: (1, 8), Period.NIGHT: (4, 7)},
    Weekday.MONDAY:    {Period.DAY: (1, 6), Period.NIGHT: (2, 7)},
    Weekday.TUESDAY:   {Period.DAY: (2, 7), Period.NIGHT: (1, 6)},
    Weekday.WEDNESDAY: {Period.DAY: (3, 8), Period.NIGHT: (4,)},
    Weekday.THURSDAY:  {Period.DAY: (4, 5), Period.NIGHT: (3, 8)},
    Weekday.FRIDAY:    {Period.DAY: (6, 7), Period.NIGHT: (1,)},
    Weekday.SATURDAY:  {Period.DAY: (5,),   Period.NIGHT: (2, 6)},
}


def _build_gowri_table() -> Dict[Weekday, Dict[Period, Tuple[GowriQuality, ...]]]:
    table = {}
    for wd, periods in _GOWRI_GOOD.items():
        table[wd] = {
            period: tuple(
                GowriQuality.GOOD if i in good else GowriQuality.AVERAGE
                for i in range(1, GHATIKAS_PER_SPAN + 1)
            )
            for period, good in periods.items()
        }
    return table


# weekday -> day/night -> 8 qualities (index 0 == ghatika 1)
GOWRI_TABLE = _build_gowri_table()


def _validate_tables() -> None:
    valid = range(1, GHATIKAS_PER_SPAN + 1)
    for name, table in (("Rahu Kaal", RAHU_KAAL_GHATIKA),
                        ("Yamaganda", YAMAGANDA_DAY_GHATIKA)):
        missing = set(Weekday) - set(table)
        if missing:
            raise RuntimeError(f"{name} table missing weekdays: {sorted(missing)}")
        bad = {wd: i for wd, i in table.items() if i not in valid}
        if bad:
            raise RuntimeError(f"{name} table has out-of-range ghatika indices: {bad}")
    if YAMAGANDA_NIGHT_GHATIKA not in valid:
        raise RuntimeError("Yamaganda night ghatika out of range")
    for wd in Weekday:
        periods = GOWRI_TABLE.get(wd)
        if periods is None or set(periods) != set(Period):
            raise RuntimeError(f"Gowri table incomplete for {wd.name}")
        for good in _GOWRI_GOOD[wd].values():
            if any(i not in valid for i in good):
                raise RuntimeError(f"Gowri table has out-of-range index for {wd.name}")


_validate_tables()


# ---------------------------------------------------------------------------
# Result records
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TimeWindow:
    name:          str
    period:        Period
    ghatika_index: int
    start:         datetime
    end:           datetime

    @property
    def duration_minutes(self) -> float:
        return (self.end - self.start).total_seconds() / 60.0


@dataclass(frozen=True)
class Yamaganda:
    day_period:     TimeWindow
    night_period:   TimeWindow
    day_ghatikas:   Tuple[Ghatika, ...]    # flagged == active day index
    night_ghatikas: Tuple[Ghatika, ...]    # flagged == night index 4


@dataclass(frozen=True)
class GowriSlot:
    period:  Period
    ghatika: Ghatika
    quality: GowriQuality


@dataclass(frozen=True)
class NallaNeramSlot:
    period:          Period
    gowri_index:     int
    start:           datetime
    end:             datetime
    filters_applied: Tuple[str, ...]

    @property
    def duration_minutes(self) -> float:
        return (self.end - self.start).total_seconds() / 60.0


# ---------------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------------

def _window(name: str, period: Period, g: Ghatika) -> TimeWindow:
    return TimeWindow(name, period, g.index, g.start, g.end)


def rahu_kaal(weekday: Weekday, partition: DayNightPartition) -> TimeWindow:
    g = partition.day_ghatika(RAHU_KAAL_GHATIKA[weekday])
    return _window("Rahu Kaal", Period.DAY, g)


def yamaganda(weekday: Weekday, partition: DayNightPartition) -> Yamaganda:
    day_idx = YAMAGANDA_DAY_GHATIKA[weekday]
    return Yamaganda(
        day_period=_window("Yamaganda", Period.DAY, partition.day_ghatika(day_idx)),
        night_period=_window("Yamaganda", Period.NIGHT,
                             partition.night_ghatika(YAMAGANDA_NIGHT_GHATIKA)),
        day_ghatikas=flag_ghatika(partition.day, day_idx),
        night_ghatikas=flag_ghatika(partition.night, YAMAGANDA_NIGHT_GHATIKA),
    )


def gowri_slots(weekday: Weekday,
                partition: DayNightPartition) -> Tuple[List[GowriSlot], List[GowriSlot]]:
    """(day_slots, night_slots), 8 each, in chronological order."""
    qualities = GOWRI_TABLE[weekday]
    day = [GowriSlot(Period.DAY, g, qualities[Period.DAY][g.index - 1])
           for g in partition.day]
    night = [GowriSlot(Period.NIGHT, g, qualities[Period.NIGHT][g.index - 1])
             for g in partition.night]
    return day, night


def nalla_neram(weekday: Weekday, partition: DayNightPartition) -> List[NallaNeramSlot]:
    """
    Auspicious windows: Gowri-Good day ghatikas minus Rahu Kaal and
    Yamaganda (day) overlaps, followed by all Gowri-Good night ghatikas.
    """
    rahu_idx = RAHU_KAAL_GHATIKA[weekday]
    yg = partition.day_ghatika(YAMAGANDA_DAY_GHATIKA[weekday])
    day_slots, night_slots = gowri_slots(weekday, partition)

    result = []
    for slot in day_slots:
        g = slot.ghatika
        if slot.quality is not GowriQuality.GOOD:
            continue
        if g.index == rahu_idx:
            continue
        if g.overlaps(yg.start, yg.end):
            continue
        result.append(NallaNeramSlot(Period.DAY, g.index, g.start, g.end,
                                     ("rahu_kaal", "yamaganda")))
    for slot in night_slots:
        if slot.quality is GowriQuality.GOOD:
            g = slot.ghatika
            result.append(NallaNeramSlot(Period.NIGHT, g.index, g.start, g.end, ()))
    return result
