# Panchangam Engine - Core modules
from .ephemeris import EphemerisAdapter, SwissEphemerisAdapter, Body, Observer
from .positions import lahiri_ayanamsa, compute_sidereal_positions
from .houses import tropical_ascendant, compute_daily_chart
from .sun_times import SunTimesCache, resolve_sun_times
from .ghatika import partition_day_and_night
from .time_windows import rahu_kaal, yamaganda, gowri_slots, nalla_neram
from .panchang import compute_panchang
from .tamil_calendar import TamilCalendar

__all__ = [
    "EphemerisAdapter", "SwissEphemerisAdapter", "Body", "Observer",
    "lahiri_ayanamsa", "compute_sidereal_positions",
    "tropical_ascendant", "compute_daily_chart",
    "SunTimesCache", "resolve_sun_times",
    "partition_day_and_night",
    "rahu_kaal", "yamaganda", "gowri_slots", "nalla_neram",
    "compute_panchang",
    "TamilCalendar",
]
