"""
errors.py
=========
Exception taxonomy for the Panchangam engine.

  InvalidInputError         — malformed date/time/month, rejected before any work
  ComputationError          — a single request could not be computed
    EphemerisError          — the ephemeris library failed
    SunTimesUnavailableError — no sunrise/sunset crossing in the search window
    TamilCalendarSearchError — bounded backward date walk hit its cap
    UnsupportedLatitudeError — polar latitude for the ascendant formula

Unknown city names are NOT errors: they fall back to the default city.
"""


class PanchangamError(Exception):
    """Base class for every error raised by the engine."""


class InvalidInputError(PanchangamError, ValueError):
    """Missing or malformed request input."""


class ComputationError(PanchangamError):
    """A calculation failed for this request; nothing is retried."""


class EphemerisError(ComputationError):
    """The ephemeris adapter could not answer a query."""


class SunTimesUnavailableError(ComputationError):
    """Could not compute sunrise/sunset for the given date and location."""


class TamilCalendarSearchError(ComputationError):
    """Month or year start not found within the iteration cap."""


class UnsupportedLatitudeError(ComputationError):
    """Ascendant requested at a polar latitude, where tan(latitude) diverges."""
