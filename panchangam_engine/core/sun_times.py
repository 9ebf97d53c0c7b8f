"""
sun_times.py
============
Sunrise / sunset resolution.

1. Static cache: a JSON file loaded once at startup, keyed city -> date ->
   {"sunrise": "HH:MM", "sunset": "HH:MM"} in local wall-clock time.
2. Otherwise the ephemeris adapter's rise/set search, anchored at the
   absolute instant of local midnight and searching one day forward.

File layout:
    {
      "Chennai": {
        "2025-12-11": {"sunrise": "06:20", "sunset": "17:43"},
        ...
      }
    }
"""

import json
import logging
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Optional, Tuple, Union

from ..errors import InvalidInputError, SunTimesUnavailableError
from .ephemeris import RISE, SET, Body, EphemerisAdapter, Observer
from .locations import GeoLocation
from .moments import local_midnight, moment_from_local, parse_date, parse_time

log = logging.getLogger(__name__)

SEARCH_WINDOW_DAYS = 1.0


class SunTimesSource(str, Enum):
    CACHE    = "cache"
    COMPUTED = "computed"


@dataclass(frozen=True)
class SunTimes:
    sunrise: datetime
    sunset:  datetime
    source:  SunTimesSource

    @property
    def day_length_minutes(self) -> float:
        return (self.sunset - self.sunrise).total_seconds() / 60.0


# ---------------------------------------------------------------------------
# Static cache
# ---------------------------------------------------------------------------

class SunTimesCache:
    """Read-only city/date lookup of local sunrise and sunset clock times."""

    def __init__(self, entries: Mapping[str, Mapping[date, Tuple[Tuple[int, int], Tuple[int, int]]]] = None):
        self._entries = MappingProxyType({
            city.lower(): MappingProxyType(dict(days))
            for city, days in (entries or {}).items()
        })

    def __len__(self) -> int:
        return sum(len(days) for days in self._entries.values())

    def lookup(self, city: str, day: date):
        """((sunrise_h, sunrise_m), (sunset_h, sunset_m)) or None."""
        days = self._entries.get(city.lower())
        if days is None:
            return None
        return days.get(day)

    @classmethod
    def empty(cls) -> "SunTimesCache":
        return cls({})

    @classmethod
    def load(cls, path: Union[str, Path, None]) -> "SunTimesCache":
        """
        Load the cache file. A missing or unreadable file yields an empty
        cache; malformed entries are skipped with a warning.
        """
        if path is None:
            log.info("Sunrise/sunset cache disabled")
            return cls.empty()
        path = Path(path)
        if not path.exists():
            log.info("Sunrise/sunset cache not found at %s; computing all sun times", path)
            return cls.empty()
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            log.warning("Failed to load sunrise/sunset cache %s: %s", path, e)
            return cls.empty()

        entries = {}
        skipped = 0
        for city, days in raw.items():
            if not isinstance(days, dict):
                skipped += 1
                continue
            parsed = {}
            for day_text, entry in days.items():
                try:
                    day = parse_date(day_text)
                    parsed[day] = (parse_time(entry["sunrise"]), parse_time(entry["sunset"]))
                except (InvalidInputError, KeyError, TypeError):
                    skipped += 1
                    continue
            entries[city] = parsed

        if skipped:
            log.warning("Skipped %d malformed sunrise/sunset cache entries in %s", skipped, path)
        cache = cls(entries)
        log.info("Loaded %d sunrise/sunset cache entries from %s", len(cache), path)
        return cache


# ---------------------------------------------------------------------------
# Resolver
# ---------------------------------------------------------------------------

def compute_sun_times(adapter: EphemerisAdapter, day: date,
                      location: GeoLocation) -> SunTimes:
    """Rise/set search from local midnight (absolute instant), one day forward."""
    start = local_midnight(day, location.utc_offset)
    observer = Observer(location.latitude, location.longitude, 0.0)

    sunrise = adapter.search_rise_set(Body.SUN, observer, RISE, start, SEARCH_WINDOW_DAYS)
    sunset  = adapter.search_rise_set(Body.SUN, observer, SET,  start, SEARCH_WINDOW_DAYS)
    if sunrise is None or sunset is None:
        raise SunTimesUnavailableError(
            f"Could not calculate sunrise/sunset for {day.isoformat()} at "
            f"{location.name} ({location.latitude}, {location.longitude})"
        )
    return SunTimes(sunrise, sunset, SunTimesSource.COMPUTED)


def resolve_sun_times(adapter: EphemerisAdapter, day: date, location: GeoLocation,
                      cache: Optional[SunTimesCache] = None) -> SunTimes:
    if cache is not None:
        hit = cache.lookup(location.name, day)
        if hit is not None:
            (rh, rm), (sh, sm) = hit
            log.debug("Sun times for %s %s served from cache", location.name, day)
            return SunTimes(
                sunrise=moment_from_local(day, rh, rm, location.utc_offset),
                sunset=moment_from_local(day, sh, sm, location.utc_offset),
                source=SunTimesSource.CACHE,
            )
    log.debug("Sun times for %s %s computed by ephemeris search", location.name, day)
    return compute_sun_times(adapter, day, location)
