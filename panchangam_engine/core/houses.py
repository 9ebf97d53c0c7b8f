"""
houses.py
=========
Ascendant (Lagna) and whole-sign Rasi placement for the daily transit chart.

Ascendant steps:
  1. GAST from the ephemeris adapter (hours)
  2. LST = GAST + longitude/15, in degrees mod 360 -> RAMC
  3. Mean obliquity ε = 23.439291 − 0.0130042·T
  4. Tropical ascendant from RAMC, ε and latitude φ
  5. Subtract the ayanamsa

Source: Meeus Ch. 13–14
"""

import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Tuple

from ..errors import UnsupportedLatitudeError
from .ephemeris import (
    DEG_TO_RAD, RAD_TO_DEG,
    EphemerisAdapter, julian_centuries, moment_to_jd, normalize,
)
from .positions import (
    PLANET_LABELS, RASIS, RASIS_TAMIL,
    PlanetPosition, ayanamsa_at, compute_sidereal_positions,
    rasi_index, tropical_to_sidereal,
)

# Above the polar circles the ecliptic can coincide with the horizon and
# tan(φ) grows without bound as φ -> ±90°.
MAX_ASCENDANT_LATITUDE = 66.5


# ---------------------------------------------------------------------------
# Sidereal time and obliquity
# ---------------------------------------------------------------------------

def local_sidereal_degrees(adapter: EphemerisAdapter, moment: datetime,
                           longitude_deg: float) -> float:
    """RAMC: local apparent sidereal time in degrees."""
    gast_hours = adapter.sidereal_time(moment)
    lst_hours = gast_hours + longitude_deg / 15.0
    return normalize(lst_hours * 15.0)


def mean_obliquity(T: float) -> float:
    return 23.439291 - 0.0130042 * T


# ---------------------------------------------------------------------------
# Ascendant (Lagna)
# ---------------------------------------------------------------------------

def tropical_ascendant(ramc: float, obliquity: float, latitude_deg: float) -> float:
    """
    Tropical ascendant (degrees) for a given RAMC, obliquity and latitude.

    tan(Asc) = cos(RAMC) / −(cos ε·sin RAMC + sin ε·tan φ)

    The negated denominator selects the eastern intersection of ecliptic
    and horizon; without it atan2 returns the point mirrored about 90°.
    """
    if abs(latitude_deg) >= MAX_ASCENDANT_LATITUDE:
        raise UnsupportedLatitudeError(
            f"ascendant undefined for polar latitude {latitude_deg:.4f}° "
            f"(supported: |lat| < {MAX_ASCENDANT_LATITUDE}°)"
        )
    ramc_r = ramc * DEG_TO_RAD
    e = obliquity * DEG_TO_RAD
    phi = latitude_deg * DEG_TO_RAD

    y = math.cos(ramc_r)
    x = -(math.cos(e) * math.sin(ramc_r) + math.sin(e) * math.tan(phi))
    return normalize(math.atan2(y, x) * RAD_TO_DEG)


def sidereal_ascendant(adapter: EphemerisAdapter, moment: datetime,
                       latitude_deg: float, longitude_deg: float,
                       ayanamsa: float) -> float:
    T = julian_centuries(moment)
    ramc = local_sidereal_degrees(adapter, moment, longitude_deg)
    asc = tropical_ascendant(ramc, mean_obliquity(T), latitude_deg)
    return tropical_to_sidereal(asc, ayanamsa)


# ---------------------------------------------------------------------------
# Rasi placement
# ---------------------------------------------------------------------------

@dataclass
class RasiCell:
    index:    int
    planets:  List[str] = field(default_factory=list)
    is_lagna: bool = False

    def to_dict(self) -> dict:
        return {
            "index": self.index,
            "name": RASIS[self.index],
            "tamil": RASIS_TAMIL[self.index],
            "planets": list(self.planets),
            "is_lagna": self.is_lagna,
        }


@dataclass(frozen=True)
class DailyChart:
    moment:              datetime
    julian_day:          float
    ayanamsa:            float
    ascendant_longitude: float
    positions:           Dict[str, PlanetPosition]
    rasis:               Tuple[RasiCell, ...]

    @property
    def lagna_index(self) -> int:
        return rasi_index(self.ascendant_longitude)


def place_in_rasis(positions: Dict[str, PlanetPosition],
                   ascendant_longitude: float) -> Tuple[RasiCell, ...]:
    """Bucket every graha into its 30° sign and flag the lagna sign."""
    cells = [RasiCell(index=i) for i in range(12)]
    for name, pos in positions.items():
        cells[pos.rasi_index].planets.append(PLANET_LABELS[name])
    cells[rasi_index(ascendant_longitude)].is_lagna = True
    return tuple(cells)


def compute_daily_chart(adapter: EphemerisAdapter, moment: datetime,
                        latitude_deg: float, longitude_deg: float) -> DailyChart:
    ayan = ayanamsa_at(moment)
    positions = compute_sidereal_positions(adapter, moment, ayan)
    asc = sidereal_ascendant(adapter, moment, latitude_deg, longitude_deg, ayan)
    return DailyChart(
        moment=moment,
        julian_day=moment_to_jd(moment),
        ayanamsa=ayan,
        ascendant_longitude=asc,
        positions=positions,
        rasis=place_in_rasis(positions, asc),
    )
