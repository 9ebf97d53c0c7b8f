"""
test_tamil_calendar.py
======================
Tamil month/day/year derivation, samvatsara names, observance tags and the
month grid. Uses the mean-motion ephemeris from conftest, whose Sun moves
monotonically, so every month and year boundary exists.
"""

from datetime import date, timedelta

import pytest

from panchangam_engine.conftest import FixedEphemeris, LinearEphemeris
from panchangam_engine.core.ephemeris import Body
from panchangam_engine.core.locations import CITIES
from panchangam_engine.core.moments import Weekday
from panchangam_engine.core.tamil_calendar import (
    MONTH_START_MAX_STEPS, TAMIL_MONTHS, TamilCalendar,
    observance_tags, samvatsara_name, walk_back,
)
from panchangam_engine.errors import InvalidInputError, TamilCalendarSearchError

CHENNAI = CITIES["Chennai"]


@pytest.fixture
def tamil_calendar():
    return TamilCalendar(LinearEphemeris(), CHENNAI)


# ---------------------------------------------------------------------------
# Samvatsara
# ---------------------------------------------------------------------------

SAMVATSARA_VECTORS = [
    {"id": "SAM-01", "description": "anchor year",         "input": 1987, "expected": "Prabhava"},
    {"id": "SAM-02", "description": "2025-26",             "input": 2025, "expected": "Vishvavasu"},
    {"id": "SAM-03", "description": "cycle restarts",      "input": 2047, "expected": "Prabhava"},
    {"id": "SAM-04", "description": "last supported year", "input": 2100, "expected": "Raudri"},
    {"id": "SAM-05", "description": "before anchor",       "input": 1986, "expected": None},
    {"id": "SAM-06", "description": "after range",         "input": 2101, "expected": None},
]


@pytest.mark.parametrize("tv", SAMVATSARA_VECTORS, ids=[tv["id"] for tv in SAMVATSARA_VECTORS])
def test_samvatsara_name(tv):
    assert samvatsara_name(tv["input"]) == tv["expected"]


# ---------------------------------------------------------------------------
# Observance tags
# ---------------------------------------------------------------------------

TAG_VECTORS = [
    {"id": "TAG-01", "input": (30, 10), "expected": ["AMAVASAI"]},
    {"id": "TAG-02", "input": (15, 10), "expected": ["POURNAMI"]},
    {"id": "TAG-03", "input": (11, 10), "expected": ["EKADASHI"]},
    {"id": "TAG-04", "input": (26, 10), "expected": ["EKADASHI"]},
    {"id": "TAG-05", "input": (21, 3),  "expected": ["SASHTI", "KIRUTHIGAI"]},
    {"id": "TAG-06", "input": (28, 1),  "expected": ["PRADOSHAM"]},
    {"id": "TAG-07", "input": (2, 5),   "expected": []},
]


@pytest.mark.parametrize("tv", TAG_VECTORS, ids=[tv["id"] for tv in TAG_VECTORS])
def test_observance_tags(tv):
    assert [t.key for t in observance_tags(*tv["input"])] == tv["expected"]


def test_pradosham_records_its_method():
    (tag,) = observance_tags(13, 1)
    assert tag.to_dict() == {"key": "PRADOSHAM", "label": "Pradosham",
                             "method": "tithiNumberOnly"}


@pytest.mark.parametrize("tithi", range(1, 31))
def test_new_and_full_moon_tags_follow_tithi(tithi):
    keys = [t.key for t in observance_tags(tithi, 1)]
    assert ("AMAVASAI" in keys) == (tithi == 30)
    assert ("POURNAMI" in keys) == (tithi == 15)


# ---------------------------------------------------------------------------
# Bounded walk
# ---------------------------------------------------------------------------

def test_walk_back_finds_first_match():
    start = date(2025, 12, 12)
    assert walk_back(start, 10, lambda d: d.day == 9) == date(2025, 12, 9)


def test_walk_back_gives_up_at_cap():
    calls = []

    def never(d):
        calls.append(d)
        return False

    assert walk_back(date(2025, 12, 12), 5, never) is None
    assert len(calls) == 5


# ---------------------------------------------------------------------------
# Month and year boundaries
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("day", [
    date(2025, 1, 14), date(2025, 4, 14), date(2025, 8, 31), date(2025, 12, 12),
])
def test_month_start_round_trip(tamil_calendar, day):
    start = tamil_calendar.month_start(day)
    idx = tamil_calendar.month_index(start)
    assert idx == tamil_calendar.month_index(day)
    assert tamil_calendar.month_index(start - timedelta(days=1)) == (idx - 1) % 12
    assert 1 <= tamil_calendar.tamil_day(day) <= 32
    assert start <= day


def test_year_start_is_entry_into_first_month(tamil_calendar):
    start = tamil_calendar.year_start(date(2025, 12, 12))
    assert tamil_calendar.month_index(start) == 0
    assert tamil_calendar.month_index(start - timedelta(days=1)) == 11
    assert date(2025, 3, 1) < start < date(2025, 5, 1)


def test_year_record(tamil_calendar):
    year = tamil_calendar.year(date(2025, 12, 12))
    assert year.start_gregorian == 2025
    assert year.name == "Vishvavasu"


def test_search_cap_is_a_computation_error():
    # a Sun that never moves never changes month
    frozen = TamilCalendar(FixedEphemeris({Body.SUN: 200.0, Body.MOON: 10.0}), CHENNAI)
    with pytest.raises(TamilCalendarSearchError):
        frozen.month_start(date(2025, 12, 12))
    with pytest.raises(TamilCalendarSearchError):
        frozen.year_start(date(2025, 12, 12))
    assert MONTH_START_MAX_STEPS == 40


# ---------------------------------------------------------------------------
# Month grid
# ---------------------------------------------------------------------------

def test_december_2025_grid(tamil_calendar):
    grid = tamil_calendar.month(2025, 12)

    assert len(grid.weeks) == 5
    assert all(len(week) == 7 for week in grid.weeks)
    # 1 December 2025 is a Monday
    assert grid.weeks[0][Weekday.SUNDAY] is None
    assert grid.weeks[0][Weekday.MONDAY].day == date(2025, 12, 1)
    assert grid.weeks[-1][Weekday.WEDNESDAY].day == date(2025, 12, 31)
    assert grid.weeks[-1][Weekday.THURSDAY] is None

    days = [d for week in grid.weeks for d in week if d is not None]
    assert [d.day.day for d in days] == list(range(1, 32))
    for d in days:
        assert d.weekday == Weekday.of(d.day)
        assert 0 <= d.month_index <= 11
        assert d.month_name == TAMIL_MONTHS[d.month_index][0]
        assert d.tamil_day == (d.day - d.month_start).days + 1

    assert grid.label_index == tamil_calendar.month_index(date(2025, 12, 15))
    assert any("Pradosham" in note for note in grid.notes)


def test_tags_match_each_day_panchang(tamil_calendar):
    grid = tamil_calendar.month(2025, 12)
    for week in grid.weeks:
        for d in week:
            if d is None:
                continue
            keys = [t.key for t in d.tags]
            assert ("AMAVASAI" in keys) == (d.panchang.tithi.number == 30)
            assert ("POURNAMI" in keys) == (d.panchang.tithi.number == 15)


@pytest.mark.parametrize("year,month", [(2025, 0), (2025, 13), (1799, 6), (2401, 1)])
def test_invalid_month_rejected(tamil_calendar, year, month):
    with pytest.raises(InvalidInputError):
        tamil_calendar.month(year, month)
