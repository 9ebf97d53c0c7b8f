"""
ephemeris.py  —  Ephemeris adapter (external collaborator)
==========================================================
The engine never integrates planetary theory itself. It asks an adapter
three questions:

  ecliptic_longitude(body, moment)   tropical, geocentric, apparent (deg)
  sidereal_time(moment)              Greenwich apparent sidereal time (h)
  search_rise_set(body, observer, direction, start, window_days)
                                     next rise (+1) / set (-1) or None

SwissEphemerisAdapter answers them with pyswisseph. Without a configured
data path it uses the built-in Moshier ephemeris (FLG_MOSEPH), accurate to
well under an arcminute for the Sun and Moon over 1800–2100.

Julian Day helpers follow Meeus "Astronomical Algorithms" Ch. 7.
"""

import logging
import math
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Optional

import swisseph as swe

from ..errors import EphemerisError

log = logging.getLogger(__name__)

# ── Constants ──────────────────────────────────────────────────
J2000   = 2451545.0
DEG     = math.pi / 180.0
RAD     = 180.0 / math.pi
DEG_TO_RAD = DEG
RAD_TO_DEG = RAD

J2000_MOMENT = datetime(2000, 1, 1, 12, 0, 0, tzinfo=timezone.utc)

RISE = +1
SET  = -1


def normalize(x: float) -> float:
    """Normalize angle to [0, 360)."""
    r = x % 360.0
    # -1e-17 % 360.0 == 360.0 in IEEE arithmetic
    return 0.0 if r >= 360.0 else r


# ── Julian Day ─────────────────────────────────────────────────

def gregorian_to_jd(year: int, month: int, day: int, hour: float = 0.0) -> float:
    """Meeus Ch. 7."""
    if month <= 2:
        year -= 1; month += 12
    A = int(year / 100)
    B = 2 - A + int(A / 4)
    return int(365.25*(year+4716)) + int(30.6001*(month+1)) + day + B - 1524.5 + hour/24.0


def moment_to_jd(moment: datetime) -> float:
    """Julian Day (UT) of an aware datetime."""
    utc = moment.astimezone(timezone.utc)
    hours = utc.hour + utc.minute/60.0 + (utc.second + utc.microsecond/1e6)/3600.0
    return gregorian_to_jd(utc.year, utc.month, utc.day, hours)


def jd_to_moment(jd: float) -> datetime:
    """UTC datetime for a Julian Day, rounded to the whole second."""
    seconds = round((jd - J2000) * 86400.0)
    return J2000_MOMENT + timedelta(seconds=seconds)


def julian_centuries(moment: datetime) -> float:
    """T = (JD - 2451545.0) / 36525."""
    return (moment_to_jd(moment) - J2000) / 36525.0


# ── Bodies & observers ─────────────────────────────────────────

class Body(str, Enum):
    SUN     = "Sun"
    MOON    = "Moon"
    MARS    = "Mars"
    MERCURY = "Mercury"
    JUPITER = "Jupiter"
    VENUS   = "Venus"
    SATURN  = "Saturn"


SWE_BODY = {
    Body.SUN:     swe.SUN,
    Body.MOON:    swe.MOON,
    Body.MARS:    swe.MARS,
    Body.MERCURY: swe.MERCURY,
    Body.JUPITER: swe.JUPITER,
    Body.VENUS:   swe.VENUS,
    Body.SATURN:  swe.SATURN,
}


@dataclass(frozen=True)
class Observer:
    latitude:  float
    longitude: float
    elevation: float = 0.0


# ── Adapter interface ──────────────────────────────────────────

class EphemerisAdapter:
    """Black-box ephemeris. Subclasses answer the three queries."""

    def ecliptic_longitude(self, body: Body, moment: datetime) -> float:
        raise NotImplementedError

    def sidereal_time(self, moment: datetime) -> float:
        raise NotImplementedError

    def search_rise_set(self, body: Body, observer: Observer, direction: int,
                        search_start: datetime, window_days: float) -> Optional[datetime]:
        raise NotImplementedError


class SwissEphemerisAdapter(EphemerisAdapter):
    """pyswisseph-backed adapter (tropical, geocentric, apparent)."""

    def __init__(self, ephe_path: Optional[str] = None):
        if ephe_path:
            swe.set_ephe_path(ephe_path)
            self.flags = swe.FLG_SWIEPH
            log.info("Swiss Ephemeris data path: %s", ephe_path)
        else:
            self.flags = swe.FLG_MOSEPH
            log.info("Swiss Ephemeris running on built-in Moshier ephemeris")

    def ecliptic_longitude(self, body: Body, moment: datetime) -> float:
        jd = moment_to_jd(moment)
        try:
            xx, _ret = swe.calc_ut(jd, SWE_BODY[Body(body)], self.flags)
        except swe.Error as e:
            raise EphemerisError(f"{Body(body).value} longitude unavailable at JD {jd:.5f}: {e}") from e
        return normalize(xx[0])

    def sidereal_time(self, moment: datetime) -> float:
        return swe.sidtime(moment_to_jd(moment))

    def search_rise_set(self, body: Body, observer: Observer, direction: int,
                        search_start: datetime, window_days: float) -> Optional[datetime]:
        if direction not in (RISE, SET):
            raise ValueError(f"direction must be +1 (rise) or -1 (set), got {direction!r}")
        jd_start = moment_to_jd(search_start)
        rsmi = swe.CALC_RISE if direction == RISE else swe.CALC_SET
        geopos = (observer.longitude, observer.latitude, observer.elevation)
        try:
            res, tret = swe.rise_trans(jd_start, SWE_BODY[Body(body)], rsmi, geopos,
                                       atpress=0, attemp=0, flags=self.flags)
        except swe.Error as e:
            raise EphemerisError(f"{Body(body).value} rise/set search failed: {e}") from e

        # res == -2: circumpolar, never crosses the horizon
        if res != 0 or tret[0] <= 0.0:
            return None
        if tret[0] - jd_start > window_days:
            return None
        return jd_to_moment(tret[0])
