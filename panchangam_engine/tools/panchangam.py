"""
panchangam.py
=============
Request-level operations of the Panchangam service.

Each operation takes textual inputs (YYYY-MM-DD dates, HH:MM times, a city
name), resolves them against the immutable EngineContext built at startup,
runs the core calculations, and returns a JSON-ready dict.

Usage:
    from panchangam_engine.tools.panchangam import build_context, auspicious_times

    ctx = build_context()
    result = auspicious_times(ctx, "2025-12-12", "Chennai")
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import List, Optional

from ..config import Settings, load_settings
from ..core.ephemeris import EphemerisAdapter, SwissEphemerisAdapter
from ..core.ghatika import DayNightPartition, Ghatika, partition_day_and_night
from ..core.houses import compute_daily_chart
from ..core.locations import CITIES, GeoLocation, resolve_city
from ..core.moments import (
    UTC, WEEKDAY_TAMIL, Weekday,
    format_clock, format_clock24, format_duration, isoformat_local,
    moment_from_local, parse_date, parse_time,
)
from ..core.panchang import (
    NAKSHATRAS, PAKSHA_TAMIL, PanchangElement, PanchangReport, compute_panchang,
)
from ..core.positions import PLANET_LABELS, RASIS, RASIS_TAMIL, NAKSHATRA_SPAN
from ..core.sun_times import SunTimes, SunTimesCache, resolve_sun_times
from ..core.tamil_calendar import TAMIL_MONTHS, TamilCalendar, TamilMonthDay
from ..core.time_windows import (
    RAHU_KAAL_GHATIKA, YAMAGANDA_DAY_GHATIKA, YAMAGANDA_NIGHT_GHATIKA,
    TimeWindow, gowri_slots, nalla_neram, rahu_kaal, yamaganda,
)

log = logging.getLogger(__name__)

DEFAULT_CHART_TIME = "05:30"

GOWRI_METHOD = (
    "Day (sunrise to sunset) and night (sunset to next sunrise) are each divided "
    "into 8 equal Gowri slots; slot quality comes from the weekday table."
)
GOWRI_NOTES = (
    "Nalla Neram = Gowri 'Good' slots.",
    "Day slots overlapping Rahu Kaal or Yamaganda are excluded.",
    "Night slots have no exclusions.",
)


# ---------------------------------------------------------------------------
# Engine context
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class EngineContext:
    """Everything a calculation needs besides its inputs. Built once, never mutated."""
    adapter:      EphemerisAdapter
    sun_cache:    SunTimesCache
    default_city: str = "Chennai"

    def resolve_city(self, name: Optional[str]):
        return resolve_city(name, self.default_city)


def build_context(settings: Optional[Settings] = None,
                  adapter: Optional[EphemerisAdapter] = None) -> EngineContext:
    settings = settings or load_settings()
    if settings.default_city not in CITIES:
        raise ValueError(
            f"default city {settings.default_city!r} is not in the registry: "
            f"{', '.join(CITIES)}"
        )
    if adapter is None:
        adapter = SwissEphemerisAdapter(settings.ephe_path)
    return EngineContext(
        adapter=adapter,
        sun_cache=SunTimesCache.load(settings.sun_cache),
        default_city=settings.default_city,
    )


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------

def _calculated_at() -> str:
    return datetime.now(UTC).isoformat()


def _location(location: GeoLocation, matched: bool) -> dict:
    d = location.to_dict()
    d["matched"] = matched
    return d


def _window(start: datetime, end: datetime, offset: float) -> dict:
    minutes = (end - start).total_seconds() / 60.0
    return {
        "start": format_clock(start, offset),
        "end": format_clock(end, offset),
        "start_iso": isoformat_local(start, offset),
        "end_iso": isoformat_local(end, offset),
        "duration": format_duration(minutes),
        "duration_minutes": int(round(minutes)),
    }


def _time_window(tw: TimeWindow, offset: float) -> dict:
    d = _window(tw.start, tw.end, offset)
    d.update({"name": tw.name, "period": tw.period.value, "ghatika": tw.ghatika_index})
    return d


def _ghatika(g: Ghatika, offset: float, flag_key: str) -> dict:
    d = _window(g.start, g.end, offset)
    d.update({"index": g.index, flag_key: g.flagged})
    return d


def _sun_block(sun: SunTimes, offset: float) -> dict:
    return {
        "sunrise": format_clock(sun.sunrise, offset),
        "sunset": format_clock(sun.sunset, offset),
        "sunrise_24h": format_clock24(sun.sunrise, offset),
        "sunset_24h": format_clock24(sun.sunset, offset),
        "sunrise_iso": isoformat_local(sun.sunrise, offset),
        "sunset_iso": isoformat_local(sun.sunset, offset),
        "day_length": format_duration(sun.day_length_minutes),
        "source": sun.source.value,
    }


def _weekday(day: date) -> dict:
    wd = Weekday.of(day)
    return {"index": int(wd), "name": wd.name.title(), "tamil": WEEKDAY_TAMIL[wd]}


def _element(el: PanchangElement, offset: float) -> dict:
    t = el.timing
    return {
        "number": el.number,
        "name": el.name,
        "tamil": el.tamil,
        "progress": t.progress_pct,
        "minutes_remaining": t.minutes_remaining,
        "remaining": format_duration(t.minutes_remaining),
        "start": format_clock(t.start, offset),
        "start_marker": t.start_marker,
        "end": format_clock(t.end, offset),
        "end_marker": t.end_marker,
        "start_iso": isoformat_local(t.start, offset),
        "end_iso": isoformat_local(t.end, offset),
    }


def panchang_elements(report: PanchangReport) -> dict:
    """Tithi / nakshatra / yoga / karana payloads for one report."""
    offset = report.location.utc_offset

    tithi = _element(report.tithi, offset)
    tithi.update({
        "paksha": report.tithi.paksha,
        "paksha_tamil": PAKSHA_TAMIL[report.tithi.paksha],
        "is_special": report.tithi.is_ekadashi,
        "special_note": report.tithi.special_note,
    })

    nak = _element(report.nakshatra, offset)
    nak.update({
        "lord": report.nakshatra.lord,
        "deity": report.nakshatra.deity,
        "pada": report.nakshatra.pada,
        "next": report.nakshatra.next_nakshatra,
    })

    yoga = _element(report.yoga, offset)
    yoga["nature"] = report.yoga.nature.value

    karana = _element(report.karana, offset)
    karana["nature"] = report.karana.nature.value

    return {
        "tithi": tithi,
        "nakshatra": nak,
        "yoga": yoga,
        "karana": karana,
        "ayanamsa": round(report.ayanamsa, 6),
        "observed_at": isoformat_local(report.observed_at, offset),
    }


def _partition(ctx: EngineContext, day: date, location: GeoLocation) -> DayNightPartition:
    today = resolve_sun_times(ctx.adapter, day, location, ctx.sun_cache)
    tomorrow = resolve_sun_times(ctx.adapter, day + timedelta(days=1), location, ctx.sun_cache)
    return partition_day_and_night(today, tomorrow)


# ---------------------------------------------------------------------------
# Daily transit chart
# ---------------------------------------------------------------------------

def daily_chart(ctx: EngineContext, date_text: str,
                time_text: Optional[str] = DEFAULT_CHART_TIME,
                city: Optional[str] = None) -> dict:
    """Rasi chart of the nine grahas plus lagna at a local date/time."""
    day = parse_date(date_text)
    hh, mm = parse_time(time_text or DEFAULT_CHART_TIME)
    location, matched = ctx.resolve_city(city)
    moment = moment_from_local(day, hh, mm, location.utc_offset)

    chart = compute_daily_chart(ctx.adapter, moment, location.latitude, location.longitude)

    planets = {}
    for name, pos in chart.positions.items():
        planets[name] = {
            "label": PLANET_LABELS[name],
            "tropical_longitude": round(pos.tropical_longitude, 4),
            "sidereal_longitude": round(pos.sidereal_longitude, 4),
            "rasi": RASIS[pos.rasi_index],
            "rasi_tamil": RASIS_TAMIL[pos.rasi_index],
            "rasi_index": pos.rasi_index,
            "degree_formatted": pos.degree_formatted(),
            "nakshatra": NAKSHATRAS[pos.nakshatra_index][0],
        }

    asc = chart.ascendant_longitude
    lagna = chart.lagna_index
    return {
        "date": day.isoformat(),
        "time": f"{hh:02d}:{mm:02d}",
        "moment_utc": moment.isoformat(),
        "location": _location(location, matched),
        "julian_day": round(chart.julian_day, 6),
        "ayanamsa": round(chart.ayanamsa, 6),
        "ascendant": {
            "longitude": round(asc, 4),
            "rasi_index": lagna,
            "rasi": RASIS[lagna],
            "rasi_tamil": RASIS_TAMIL[lagna],
            "nakshatra": NAKSHATRAS[int(asc // NAKSHATRA_SPAN) % 27][0],
        },
        "rasis": [cell.to_dict() for cell in chart.rasis],
        "planets": planets,
        "calculated_at": _calculated_at(),
    }


# ---------------------------------------------------------------------------
# Rahu Kaal / Yamaganda
# ---------------------------------------------------------------------------

def auspicious_times(ctx: EngineContext, date_text: str,
                     city: Optional[str] = None) -> dict:
    day = parse_date(date_text)
    location, matched = ctx.resolve_city(city)
    offset = location.utc_offset
    weekday = Weekday.of(day)
    partition = _partition(ctx, day, location)

    rk = rahu_kaal(weekday, partition)
    yg = yamaganda(weekday, partition)

    result = {
        "date": day.isoformat(),
        "weekday": _weekday(day),
        "location": _location(location, matched),
    }
    result.update(_sun_block(partition.sun_times, offset))
    result.update({
        "rahu_kaal": _time_window(rk, offset),
        "yamaganda": {
            "day_period": _time_window(yg.day_period, offset),
            "night_period": _time_window(yg.night_period, offset),
            "ghatikas": [_ghatika(g, offset, "is_yamaganda") for g in yg.day_ghatikas],
            "night_ghatikas": [_ghatika(g, offset, "is_yamaganda") for g in yg.night_ghatikas],
        },
        "calculated_at": _calculated_at(),
    })
    return result


# ---------------------------------------------------------------------------
# Complete panchang
# ---------------------------------------------------------------------------

def complete_panchang(ctx: EngineContext, date_text: str,
                      city: Optional[str] = None) -> dict:
    day = parse_date(date_text)
    location, matched = ctx.resolve_city(city)
    sun = resolve_sun_times(ctx.adapter, day, location, ctx.sun_cache)
    report = compute_panchang(ctx.adapter, day, location)

    result = {
        "date": day.isoformat(),
        "weekday": _weekday(day),
        "location": _location(location, matched),
    }
    result.update(_sun_block(sun, location.utc_offset))
    result.update(panchang_elements(report))
    result["calculated_at"] = _calculated_at()
    return result


# ---------------------------------------------------------------------------
# Gowri Nalla Neram
# ---------------------------------------------------------------------------

def gowri_nalla_neram(ctx: EngineContext, date_text: str,
                      city: Optional[str] = None) -> dict:
    day = parse_date(date_text)
    location, matched = ctx.resolve_city(city)
    offset = location.utc_offset
    weekday = Weekday.of(day)
    partition = _partition(ctx, day, location)

    day_slots, night_slots = gowri_slots(weekday, partition)

    def slot(s):
        d = _window(s.ghatika.start, s.ghatika.end, offset)
        d.update({"index": s.ghatika.index, "period": s.period.value,
                  "quality": s.quality.value})
        return d

    nalla = []
    for n in nalla_neram(weekday, partition):
        d = _window(n.start, n.end, offset)
        d.update({
            "period": n.period.value,
            "gowri_index": n.gowri_index,
            "filters_applied": list(n.filters_applied),
        })
        nalla.append(d)

    result = {
        "date": day.isoformat(),
        "weekday": _weekday(day),
        "location": _location(location, matched),
    }
    result.update(_sun_block(partition.sun_times, offset))
    result.update({
        "next_sunrise": format_clock(partition.next_sunrise, offset),
        "day_slots": [slot(s) for s in day_slots],
        "night_slots": [slot(s) for s in night_slots],
        "nalla_neram": nalla,
        "meta": {
            "method": GOWRI_METHOD,
            "location_factors": {
                "latitude": location.latitude,
                "longitude": location.longitude,
                "utc_offset": offset,
            },
            "day_slot_minutes": round(partition.day_slot_minutes, 2),
            "night_slot_minutes": round(partition.night_slot_minutes, 2),
            "rahu_kaal_ghatika": RAHU_KAAL_GHATIKA[weekday],
            "yamaganda_day_ghatika": YAMAGANDA_DAY_GHATIKA[weekday],
            "yamaganda_night_ghatika": YAMAGANDA_NIGHT_GHATIKA,
            "notes": list(GOWRI_NOTES),
        },
        "calculated_at": _calculated_at(),
    })
    return result


# ---------------------------------------------------------------------------
# Tamil calendar month
# ---------------------------------------------------------------------------

def _tamil_day(entry: TamilMonthDay) -> dict:
    return {
        "date": entry.day.isoformat(),
        "weekday": _weekday(entry.day),
        "gregorian": {"year": entry.day.year, "month": entry.day.month, "day": entry.day.day},
        "tamil": {
            "month": {
                "index": entry.month_index,
                "english": entry.month_name,
                "tamil": entry.month_tamil,
            },
            "day": entry.tamil_day,
            "month_start_date": entry.month_start.isoformat(),
            "year": {
                "start_date": entry.year.start_date.isoformat(),
                "start_gregorian_year": entry.year.start_gregorian,
                "name": entry.year.name,
            },
        },
        "panchang": panchang_elements(entry.panchang),
        "tags": [t.to_dict() for t in entry.tags],
    }


def tamil_calendar_month(ctx: EngineContext, year: int, month: int,
                         city: Optional[str] = None) -> dict:
    location, matched = ctx.resolve_city(city)
    grid = TamilCalendar(ctx.adapter, location).month(year, month)

    weeks: List[list] = [
        [_tamil_day(entry) if entry is not None else None for entry in week]
        for week in grid.weeks
    ]
    english, tamil = TAMIL_MONTHS[grid.label_index]
    return {
        "year": grid.year,
        "month": grid.month,
        "location": _location(location, matched),
        "month_label": {"index": grid.label_index, "english": english, "tamil": tamil},
        "weeks": weeks,
        "notes": list(grid.notes),
        "calculated_at": _calculated_at(),
    }
