"""
locations.py
============
Closed registry of supported cities. Unknown names resolve to the default
city; that substitution is documented behaviour, not an error.
"""

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class GeoLocation:
    name:            str
    latitude:        float   # degrees, positive North
    longitude:       float   # degrees, positive East
    utc_offset:      float   # hours ahead of UTC

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "utc_offset": self.utc_offset,
        }


CITIES: Mapping[str, GeoLocation] = MappingProxyType({
    c.name: c for c in (
        GeoLocation("Chennai",          13.0827, 80.2707, 5.5),
        GeoLocation("Delhi",            28.7041, 77.1025, 5.5),
        GeoLocation("Mumbai",           19.0760, 72.8777, 5.5),
        GeoLocation("Bangalore",        12.9716, 77.5946, 5.5),
        GeoLocation("Kolkata",          22.5726, 88.3639, 5.5),
        GeoLocation("Hyderabad",        17.3850, 78.4867, 5.5),
        GeoLocation("Madurai",           9.9252, 78.1198, 5.5),
        GeoLocation("Coimbatore",       11.0168, 76.9558, 5.5),
        GeoLocation("Tiruchirappalli",  10.7905, 78.7047, 5.5),
    )
})

DEFAULT_CITY = "Chennai"


def resolve_city(name: Optional[str],
                 default: str = DEFAULT_CITY) -> Tuple[GeoLocation, bool]:
    """
    Look up a city by name (case-insensitive).
    Returns (location, matched); matched is False when the default was used.
    """
    if name:
        key = name.strip().lower()
        for city in CITIES.values():
            if city.name.lower() == key:
                return city, True
        log.info("Unknown city %r, falling back to %s", name, default)
    return CITIES[default], False
