"""
Shared fixtures: deterministic stand-in ephemerides and ready-made
day/night partitions, so rule tests never depend on a real ephemeris.
"""

from datetime import datetime, timedelta, timezone

import pytest

from panchangam_engine.core.ephemeris import (
    J2000, RISE, Body, EphemerisAdapter, moment_to_jd, normalize,
)
from panchangam_engine.core.ghatika import partition_day_and_night
from panchangam_engine.core.sun_times import SunTimes, SunTimesCache, SunTimesSource
from panchangam_engine.tools.panchangam import EngineContext

UTC = timezone.utc


class LinearEphemeris(EphemerisAdapter):
    """
    Mean-motion Sun and Moon, fixed outer bodies, GMST sidereal time.
    Sunrise is local-midnight + 6h05m and sunset + 17h50m.
    """

    FIXED = {
        Body.MARS:    15.0,
        Body.MERCURY: 250.0,
        Body.JUPITER: 95.0,
        Body.VENUS:   240.0,
        Body.SATURN:  355.0,
    }
    RISE_AFTER = timedelta(hours=6, minutes=5)
    SET_AFTER  = timedelta(hours=17, minutes=50)

    def ecliptic_longitude(self, body, moment):
        days = moment_to_jd(moment) - J2000
        if body == Body.SUN:
            return normalize(280.46 + 0.9856474 * days)
        if body == Body.MOON:
            return normalize(218.316 + 13.176396 * days)
        return self.FIXED[Body(body)]

    def sidereal_time(self, moment):
        days = moment_to_jd(moment) - J2000
        return (18.697374558 + 24.06570982441908 * days) % 24.0

    def search_rise_set(self, body, observer, direction, search_start, window_days):
        return search_start + (self.RISE_AFTER if direction == RISE else self.SET_AFTER)


class FixedEphemeris(LinearEphemeris):
    """Every body frozen at a given tropical longitude."""

    def __init__(self, longitudes):
        self.longitudes = dict(longitudes)

    def ecliptic_longitude(self, body, moment):
        return self.longitudes.get(Body(body), 0.0)


class CircumpolarEphemeris(LinearEphemeris):
    """The Sun never crosses the horizon."""

    def search_rise_set(self, body, observer, direction, search_start, window_days):
        return None


@pytest.fixture
def linear_ephemeris():
    return LinearEphemeris()


@pytest.fixture
def fake_context(linear_ephemeris):
    return EngineContext(adapter=linear_ephemeris, sun_cache=SunTimesCache.empty(),
                         default_city="Chennai")


def make_partition(day=datetime(2025, 12, 12, tzinfo=UTC), rise_h=6, set_h=18):
    """Sunrise/sunset at whole UTC hours on `day` and the following day."""
    today = SunTimes(day + timedelta(hours=rise_h), day + timedelta(hours=set_h),
                     SunTimesSource.COMPUTED)
    nxt = day + timedelta(days=1)
    tomorrow = SunTimes(nxt + timedelta(hours=rise_h), nxt + timedelta(hours=set_h),
                        SunTimesSource.COMPUTED)
    return partition_day_and_night(today, tomorrow)


@pytest.fixture
def partition():
    return make_partition()
