"""
positions.py  —  Sidereal planetary positions
=============================================
Tropical longitudes come from the ephemeris adapter; this module applies
the Lahiri ayanamsa and adds the mean lunar node.

  ayanamsa(T)   = 23.8529 + (50.2879·T + 0.0222·T²) / 3600
  Rahu (mean)   = 125.04455501 − 1934.1361849·T + 0.0020762·T²   (tropical)
  Ketu          = Rahu + 180°

T is Julian centuries since J2000.0. The same ayanamsa is used at every
call site (chart, panchang, Tamil month).
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Optional

from .ephemeris import Body, EphemerisAdapter, julian_centuries, normalize

# Nine grahas in chart order
PLANETS = ["Sun", "Moon", "Mars", "Mercury", "Jupiter", "Venus", "Saturn", "Rahu", "Ketu"]

PLANET_LABELS = {
    "Sun":     "ஞாயிறு (சூ) Sun",
    "Moon":    "திங்கள் (நிலவு) Moon",
    "Mars":    "செவ்வாய் Mars",
    "Mercury": "புதன் Mercury",
    "Jupiter": "வியாழன் (குரு) Jupiter",
    "Venus":   "வெள்ளி (சுக்) Venus",
    "Saturn":  "சனி (சனி) Saturn",
    "Rahu":    "இராகு Rahu",
    "Ketu":    "கேது Ketu",
}

RASIS = ["Mesha", "Vrishabha", "Mithuna", "Karka", "Simha", "Kanya",
         "Tula", "Vrischika", "Dhanu", "Makara", "Kumbha", "Meena"]

RASIS_TAMIL = ["மேஷம்", "ரிஷபம்", "மிதுனம்", "கடகம்", "சிம்மம்", "கன்னி",
               "துலாம்", "விருச்சிகம்", "தனுசு", "மகரம்", "கும்பம்", "மீனம்"]

NAKSHATRA_SPAN = 360.0 / 27.0


# ── Ayanamsa ────────────────────────────────────────────────────

LAHIRI_J2000   = 23.8529      # degrees at J2000.0
LAHIRI_RATE    = 50.2879      # arcsec, linear term in T
LAHIRI_ACCEL   = 0.0222       # arcsec, quadratic term in T


def lahiri_ayanamsa(T: float) -> float:
    return LAHIRI_J2000 + (LAHIRI_RATE*T + LAHIRI_ACCEL*T*T) / 3600.0


def ayanamsa_at(moment: datetime) -> float:
    return lahiri_ayanamsa(julian_centuries(moment))


def tropical_to_sidereal(lon: float, ayanamsa: float) -> float:
    return normalize(lon - ayanamsa)


def rasi_index(longitude: float) -> int:
    """Zodiac-sign bucket 0–11."""
    return int(normalize(longitude) // 30.0) % 12


# ── Mean node ───────────────────────────────────────────────────

def mean_node_longitude(T: float) -> float:
    """Tropical mean ascending node of the Moon (Rahu)."""
    return normalize(125.04455501 - 1934.1361849*T + 0.0020762*T*T)


# ── Positions ───────────────────────────────────────────────────

@dataclass(frozen=True)
class PlanetPosition:
    name:               str
    tropical_longitude: float
    sidereal_longitude: float

    @property
    def rasi_index(self) -> int:
        return rasi_index(self.sidereal_longitude)

    @property
    def degree_in_rasi(self) -> float:
        return self.sidereal_longitude % 30.0

    @property
    def nakshatra_index(self) -> int:
        return int(self.sidereal_longitude // NAKSHATRA_SPAN) % 27

    def degree_formatted(self) -> str:
        d = int(self.degree_in_rasi)
        mf = (self.degree_in_rasi - d) * 60
        m = int(mf)
        s = (mf - m) * 60
        return f"{d}°{m}'{s:.1f}\""


def sun_moon_sidereal(adapter: EphemerisAdapter, moment: datetime):
    """(sun_sidereal, moon_sidereal, ayanamsa) at `moment`."""
    ayan = ayanamsa_at(moment)
    sun  = tropical_to_sidereal(adapter.ecliptic_longitude(Body.SUN, moment), ayan)
    moon = tropical_to_sidereal(adapter.ecliptic_longitude(Body.MOON, moment), ayan)
    return sun, moon, ayan


def compute_sidereal_positions(adapter: EphemerisAdapter, moment: datetime,
                               ayanamsa: Optional[float] = None) -> Dict[str, PlanetPosition]:
    """
    Sidereal longitudes of the nine grahas at `moment`.
    Adapter failures propagate; a chart is all-or-nothing.
    """
    T = julian_centuries(moment)
    ayan = lahiri_ayanamsa(T) if ayanamsa is None else ayanamsa

    positions = {}
    for body in (Body.SUN, Body.MOON, Body.MARS, Body.MERCURY,
                 Body.JUPITER, Body.VENUS, Body.SATURN):
        trop = adapter.ecliptic_longitude(body, moment)
        positions[body.value] = PlanetPosition(
            name=body.value,
            tropical_longitude=trop,
            sidereal_longitude=tropical_to_sidereal(trop, ayan),
        )

    rahu_trop = mean_node_longitude(T)
    rahu_sid = tropical_to_sidereal(rahu_trop, ayan)
    positions["Rahu"] = PlanetPosition("Rahu", rahu_trop, rahu_sid)
    positions["Ketu"] = PlanetPosition(
        "Ketu", normalize(rahu_trop + 180.0), normalize(rahu_sid + 180.0),
    )
    return {name: positions[name] for name in PLANETS}
