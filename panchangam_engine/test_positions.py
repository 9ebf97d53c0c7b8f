"""
test_positions.py
=================
Ayanamsa, sidereal positions, Julian Day helpers and the ascendant.

Run with: python -m pytest panchangam_engine -v
"""

from datetime import date, datetime, timezone

import pytest

from panchangam_engine.conftest import LinearEphemeris
from panchangam_engine.core import ephemeris
from panchangam_engine.core.ephemeris import (
    RISE, Body, Observer, SwissEphemerisAdapter,
    gregorian_to_jd, jd_to_moment, moment_to_jd, normalize,
)
from panchangam_engine.core.houses import (
    MAX_ASCENDANT_LATITUDE, compute_daily_chart, tropical_ascendant,
)
from panchangam_engine.core.moments import MAX_YEAR, MIN_YEAR, moment_from_local, parse_date
from panchangam_engine.core.positions import (
    PLANETS, compute_sidereal_positions, lahiri_ayanamsa, mean_node_longitude,
    rasi_index, tropical_to_sidereal,
)
from panchangam_engine.errors import EphemerisError, InvalidInputError, UnsupportedLatitudeError

UTC = timezone.utc


def angular_distance(a: float, b: float) -> float:
    d = abs(normalize(a) - normalize(b))
    return min(d, 360.0 - d)


# ---------------------------------------------------------------------------
# Julian Day
# ---------------------------------------------------------------------------

JD_VECTORS = [
    {"id": "JD-01", "description": "J2000.0 definition",
     "input": (2000, 1, 1, 12.0), "expected": 2451545.0},
    {"id": "JD-02", "description": "1900 epoch",
     "input": (1900, 1, 1, 0.0), "expected": 2415020.5},
    {"id": "JD-03", "description": "2023 June solstice date",
     "input": (2023, 6, 21, 0.0), "expected": 2460116.5},
]


@pytest.mark.parametrize("tv", JD_VECTORS, ids=[tv["id"] for tv in JD_VECTORS])
def test_gregorian_to_jd(tv):
    assert gregorian_to_jd(*tv["input"]) == pytest.approx(tv["expected"], abs=1e-6)


def test_moment_jd_round_trip():
    moment = datetime(2025, 12, 12, 6, 30, 15, tzinfo=UTC)
    assert jd_to_moment(moment_to_jd(moment)) == moment


def test_moment_from_local_rolls_back_a_day():
    # 03:00 IST is 21:30 UTC of the previous day
    m = moment_from_local(date(2025, 1, 1), 3, 0, 5.5)
    assert m == datetime(2024, 12, 31, 21, 30, tzinfo=UTC)


@pytest.mark.parametrize("text", ["0001-01-01", "1799-12-31", "2401-01-01", "9999-12-31"])
def test_parse_date_rejects_unsupported_years(text):
    with pytest.raises(InvalidInputError, match="supported range"):
        parse_date(text)


def test_parse_date_accepts_range_ends():
    assert parse_date(f"{MIN_YEAR}-01-01") == date(MIN_YEAR, 1, 1)
    assert parse_date(f"{MAX_YEAR}-12-31") == date(MAX_YEAR, 12, 31)


# ---------------------------------------------------------------------------
# Swiss Ephemeris failures
# ---------------------------------------------------------------------------

def _raise_swe_error(*args, **kwargs):
    raise ephemeris.swe.Error("out of range")


def test_longitude_failure_names_the_body(monkeypatch):
    adapter = SwissEphemerisAdapter()
    monkeypatch.setattr(ephemeris.swe, "calc_ut", _raise_swe_error)
    with pytest.raises(EphemerisError) as exc:
        adapter.ecliptic_longitude(Body.SUN, datetime(2025, 12, 12, tzinfo=UTC))
    assert str(exc.value).startswith("Sun longitude unavailable")
    assert "Body." not in str(exc.value)


def test_rise_set_failure_names_the_body(monkeypatch):
    adapter = SwissEphemerisAdapter()
    monkeypatch.setattr(ephemeris.swe, "rise_trans", _raise_swe_error)
    with pytest.raises(EphemerisError) as exc:
        adapter.search_rise_set(Body.MOON, Observer(13.0827, 80.2707), RISE,
                                datetime(2025, 12, 12, tzinfo=UTC), 1.0)
    assert str(exc.value).startswith("Moon rise/set search failed")


# ---------------------------------------------------------------------------
# Ayanamsa and sidereal conversion
# ---------------------------------------------------------------------------

def test_ayanamsa_at_j2000():
    assert lahiri_ayanamsa(0.0) == pytest.approx(23.8529)


def test_ayanamsa_grows_with_time():
    assert lahiri_ayanamsa(0.25) > lahiri_ayanamsa(0.0)


@pytest.mark.parametrize("lon,ayan,expected", [
    (100.0, 23.85, 76.15),
    (10.0,  23.85, 346.15),     # wraps below 0°
    (23.85, 23.85, 0.0),
])
def test_tropical_to_sidereal(lon, ayan, expected):
    assert tropical_to_sidereal(lon, ayan) == pytest.approx(expected)


@pytest.mark.parametrize("lon,expected", [
    (0.0, 0), (29.999, 0), (30.0, 1), (359.999, 11), (360.0, 0), (-0.5, 11),
])
def test_rasi_index(lon, expected):
    assert rasi_index(lon) == expected


def test_normalize_never_returns_360():
    assert normalize(-1e-17) == 0.0
    assert 0.0 <= normalize(-720.5) < 360.0


# ---------------------------------------------------------------------------
# Sidereal positions
# ---------------------------------------------------------------------------

SAMPLE_MOMENTS = [
    datetime(1950, 3, 1, 0, 0, tzinfo=UTC),
    datetime(2000, 1, 1, 12, 0, tzinfo=UTC),
    datetime(2025, 12, 12, 0, 0, tzinfo=UTC),
    datetime(2031, 7, 19, 18, 45, tzinfo=UTC),
]


@pytest.mark.parametrize("moment", SAMPLE_MOMENTS)
def test_positions_in_range_and_ordered(moment):
    positions = compute_sidereal_positions(LinearEphemeris(), moment)
    assert list(positions) == PLANETS
    for pos in positions.values():
        assert 0.0 <= pos.sidereal_longitude < 360.0
        assert 0 <= pos.rasi_index <= 11
        assert 0 <= pos.nakshatra_index <= 26


def test_explicit_ayanamsa_overrides_default():
    moment = datetime(2025, 12, 12, tzinfo=UTC)
    default = compute_sidereal_positions(LinearEphemeris(), moment)
    fixed = compute_sidereal_positions(LinearEphemeris(), moment, ayanamsa=0.0)
    for name in PLANETS:
        assert fixed[name].sidereal_longitude == pytest.approx(fixed[name].tropical_longitude)
        assert default[name].tropical_longitude == pytest.approx(fixed[name].tropical_longitude)


@pytest.mark.parametrize("moment", SAMPLE_MOMENTS)
def test_ketu_opposes_rahu(moment):
    positions = compute_sidereal_positions(LinearEphemeris(), moment)
    rahu = positions["Rahu"].sidereal_longitude
    ketu = positions["Ketu"].sidereal_longitude
    assert ketu == pytest.approx(normalize(rahu + 180.0), abs=1e-9)


def test_mean_node_at_j2000():
    assert mean_node_longitude(0.0) == pytest.approx(125.04455501)


# ---------------------------------------------------------------------------
# Ascendant
# ---------------------------------------------------------------------------

ASCENDANT_VECTORS = [
    # At the equator with ε = 23.44°: RAMC 0 → Asc 90, RAMC 90 → Asc 180
    {"id": "ASC-01", "input": (0.0, 23.44, 0.0),   "expected": 90.0},
    {"id": "ASC-02", "input": (90.0, 23.44, 0.0),  "expected": 180.0},
    {"id": "ASC-03", "input": (180.0, 23.44, 0.0), "expected": 270.0},
    {"id": "ASC-04", "input": (270.0, 23.44, 0.0), "expected": 0.0},
]


@pytest.mark.parametrize("tv", ASCENDANT_VECTORS, ids=[tv["id"] for tv in ASCENDANT_VECTORS])
def test_tropical_ascendant(tv):
    asc = tropical_ascendant(*tv["input"])
    assert angular_distance(asc, tv["expected"]) < 1e-6


def test_ascendant_is_eastern_point_at_chennai():
    # RAMC 0: the rising point sits a few degrees past 90° in the north
    asc = tropical_ascendant(0.0, 23.44, 13.08)
    assert 60.0 < asc < 120.0


@pytest.mark.parametrize("lat", [66.5, 70.0, -80.0, 90.0])
def test_polar_latitude_rejected(lat):
    with pytest.raises(UnsupportedLatitudeError):
        tropical_ascendant(45.0, 23.44, lat)


def test_just_below_polar_limit_is_finite():
    asc = tropical_ascendant(45.0, 23.44, MAX_ASCENDANT_LATITUDE - 0.01)
    assert 0.0 <= asc < 360.0


# ---------------------------------------------------------------------------
# Daily chart
# ---------------------------------------------------------------------------

def test_daily_chart_places_every_graha_once():
    moment = datetime(2025, 12, 12, 0, 0, tzinfo=UTC)
    chart = compute_daily_chart(LinearEphemeris(), moment, 13.0827, 80.2707)

    assert len(chart.rasis) == 12
    placed = [p for cell in chart.rasis for p in cell.planets]
    assert len(placed) == 9
    lagna_cells = [cell.index for cell in chart.rasis if cell.is_lagna]
    assert lagna_cells == [chart.lagna_index]
    assert 0.0 <= chart.ascendant_longitude < 360.0


def test_daily_chart_is_deterministic():
    moment = datetime(2025, 12, 12, 0, 0, tzinfo=UTC)
    a = compute_daily_chart(LinearEphemeris(), moment, 13.0827, 80.2707)
    b = compute_daily_chart(LinearEphemeris(), moment, 13.0827, 80.2707)
    assert a == b
