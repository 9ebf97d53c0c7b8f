"""
panchang.py
===========
Daily Panchang (Hindu almanac) elements from sidereal Sun/Moon longitudes.

  1. Tithi     — (Moon − Sun) / 12°            1–30
  2. Nakshatra — Moon / 13°20'                 1–27
  3. Yoga      — (Sun + Moon) / 13°20'         1–27
  4. Karana    — (Moon − Sun) / 6°             1–60, names cycle through 11

Each element is observed at one reference moment for the date (local noon).
Its start and end are projected from that moment with a constant angular
rate; these are linear estimates, not root-found transition instants.
"""

from dataclasses import dataclass, replace
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Optional

from .ephemeris import EphemerisAdapter, normalize
from .locations import GeoLocation
from .moments import Weekday, day_marker, local_noon
from .positions import sun_moon_sidereal

# ---------------------------------------------------------------------------
# Lookup tables
# ---------------------------------------------------------------------------

TITHIS = [
    "Prathamai", "Dwitiya", "Tritiya", "Chaturthi", "Panchami",
    "Shashti", "Saptami", "Ashtami", "Navami", "Dasami",
    "Ekadashi", "Dwadashi", "Trayodashi", "Chaturdashi", "Pournami",   # Sukla Paksha (1–15)
    "Prathamai", "Dwitiya", "Tritiya", "Chaturthi", "Panchami",
    "Shashti", "Saptami", "Ashtami", "Navami", "Dasami",
    "Ekadashi", "Dwadashi", "Trayodashi", "Chaturdashi", "Amavasai",   # Krishna Paksha (16–30)
]

TITHIS_TAMIL = [
    "பிரதமை", "துவிதியை", "திரிதியை", "சதுர்த்தி", "பஞ்சமி",
    "சஷ்டி", "சப்தமி", "அஷ்டமி", "நவமி", "தசமி",
    "ஏகாதசி", "துவாதசி", "திரயோதசி", "சதுர்த்தசி", "பௌர்ணமி",
    "பிரதமை", "துவிதியை", "திரிதியை", "சதுர்த்தி", "பஞ்சமி",
    "சஷ்டி", "சப்தமி", "அஷ்டமி", "நவமி", "தசமி",
    "ஏகாதசி", "துவாதசி", "திரயோதசி", "சதுர்த்தசி", "அமாவாசை",
]

PAKSHA = ["Sukla"] * 15 + ["Krishna"] * 15
PAKSHA_TAMIL = {"Sukla": "சுக்ல பக்ஷம்", "Krishna": "கிருஷ்ண பக்ஷம்"}

# (name, tamil, lord, deity)
NAKSHATRAS = [
    ("Ashwini",           "அஸ்வினி",      "Ketu",    "Ashwini Kumaras"),
    ("Bharani",           "பரணி",         "Venus",   "Yama"),
    ("Krittika",          "கார்த்திகை",    "Sun",     "Agni"),
    ("Rohini",            "ரோகிணி",       "Moon",    "Brahma"),
    ("Mrigashira",        "மிருகசீரிஷம்",   "Mars",    "Soma"),
    ("Ardra",             "திருவாதிரை",    "Rahu",    "Rudra"),
    ("Punarvasu",         "புனர்பூசம்",     "Jupiter", "Aditi"),
    ("Pushya",            "பூசம்",         "Saturn",  "Brihaspati"),
    ("Ashlesha",          "ஆயில்யம்",      "Mercury", "Nagas"),
    ("Magha",             "மகம்",          "Ketu",    "Pitrs"),
    ("Purva Phalguni",    "பூரம்",         "Venus",   "Bhaga"),
    ("Uttara Phalguni",   "உத்திரம்",      "Sun",     "Aryaman"),
    ("Hasta",             "ஹஸ்தம்",        "Moon",    "Savitr"),
    ("Chitra",            "சித்திரை",      "Mars",    "Tvashtar"),
    ("Swati",             "ஸ்வாதி",        "Rahu",    "Vayu"),
    ("Vishakha",          "விசாகம்",       "Jupiter", "Indragni"),
    ("Anuradha",          "அனுஷம்",        "Saturn",  "Mitra"),
    ("Jyeshtha",          "கேட்டை",        "Mercury", "Indra"),
    ("Mula",              "மூலம்",         "Ketu",    "Nirriti"),
    ("Purva Ashadha",     "பூராடம்",       "Venus",   "Apas"),
    ("Uttara Ashadha",    "உத்திராடம்",     "Sun",     "Vishvedevas"),
    ("Shravana",          "திருவோணம்",     "Moon",    "Vishnu"),
    ("Dhanishta",         "அவிட்டம்",      "Mars",    "Vasus"),
    ("Shatabhisha",       "சதயம்",         "Rahu",    "Varuna"),
    ("Purva Bhadrapada",  "பூரட்டாதி",     "Jupiter", "Aja Ekapada"),
    ("Uttara Bhadrapada", "உத்திரட்டாதி",   "Saturn",  "Ahirbudhnya"),
    ("Revati",            "ரேவதி",         "Mercury", "Pushan"),
]


class Nature(str, Enum):
    AUSPICIOUS   = "Auspicious"
    INAUSPICIOUS = "Inauspicious"
    NEUTRAL      = "Neutral"


_A, _I, _N = Nature.AUSPICIOUS, Nature.INAUSPICIOUS, Nature.NEUTRAL

# (name, tamil, nature)
YOGAS = [
    ("Vishkambha", "விஷ்கம்பம்", _A), ("Priti",     "ப்ரீதி",    _A),
    ("Ayushman",   "ஆயுஷ்மான்", _A), ("Saubhagya", "சௌபாக்யம்", _A),
    ("Shobhana",   "சோபனம்",    _A), ("Atiganda",  "அதிகண்டம்", _I),
    ("Sukarma",    "சுகர்மம்",   _A), ("Dhriti",    "த்ருதி",    _A),
    ("Shula",      "சூலம்",     _I), ("Ganda",     "கண்டம்",    _I),
    ("Vriddhi",    "வ்ருத்தி",   _A), ("Dhruva",    "த்ருவம்",   _A),
    ("Vyaghata",   "வ்யாகாதம்",  _I), ("Harshana",  "ஹர்ஷணம்",   _A),
    ("Vajra",      "வஜ்ரம்",    _A), ("Siddhi",    "சித்தி",    _A),
    ("Vyatipata",  "வ்யதீபாதம்", _I), ("Variyan",   "வரியான்",   _I),
    ("Parigha",    "பரிகம்",    _I), ("Shiva",     "சிவம்",     _N),
    ("Siddha",     "சித்தம்",    _A), ("Sadhya",    "சாத்யம்",   _A),
    ("Shubha",     "சுபம்",     _A), ("Shukla",    "சுக்லம்",   _A),
    ("Brahma",     "பிரம்மம்",   _A), ("Aindra",    "ஐந்த்ரம்",  _A),
    ("Vaidhriti",  "வைத்ருதி",  _I),
]

# 11 names; karana number n uses KARANAS[(n - 1) % 11]
KARANAS = [
    ("Bava",            "பவ"),
    ("Balava",          "பாலவ"),
    ("Kaulava",         "கௌலவ"),
    ("Taitila",         "தைதில"),
    ("Gara",            "கர"),
    ("Vanija",          "வணிஜ"),
    ("Vishti (Bhadra)", "விஷ்டி"),
    ("Shakuni",         "சகுனி"),
    ("Chatushpada",     "சதுஷ்பாத"),
    ("Naga",            "நாக"),
    ("Kimstughna",      "கிம்ஸ்துக்ன"),
]
VISHTI = "Vishti (Bhadra)"

# Angular steps (degrees) and assumed rates (degrees per hour)
TITHI_SPAN     = 12.0
NAKSHATRA_SPAN = 360.0 / 27.0
YOGA_SPAN      = 360.0 / 27.0
KARANA_SPAN    = 6.0

TITHI_RATE     = 0.549    # Moon relative to Sun
NAKSHATRA_RATE = 0.549
YOGA_RATE      = 1.0      # rough combined Sun + Moon motion
KARANA_RATE    = 0.549


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ElementTiming:
    progress_pct:      int        # 0–100 through the current unit
    minutes_remaining: int        # until the next unit begins
    start:             datetime
    end:               datetime
    start_marker:      str = ""   # '' | '-1' relative to the local date
    end_marker:        str = ""   # '' | '+1'


@dataclass(frozen=True)
class PanchangElement:
    number: int
    name:   str
    tamil:  str
    timing: ElementTiming


@dataclass(frozen=True)
class Tithi(PanchangElement):
    paksha:      str
    is_ekadashi: bool

    @property
    def special_note(self) -> Optional[str]:
        return "ஏகாதசி விரதம் (Ekadashi Fasting)" if self.is_ekadashi else None


@dataclass(frozen=True)
class Nakshatra(PanchangElement):
    lord:           str
    deity:          str
    pada:           int
    next_nakshatra: str


@dataclass(frozen=True)
class Yoga(PanchangElement):
    nature: Nature


@dataclass(frozen=True)
class Karana(PanchangElement):
    nature: Nature


@dataclass(frozen=True)
class PanchangReport:
    day:            date
    weekday:        Weekday
    location:       GeoLocation
    observed_at:    datetime
    sun_longitude:  float
    moon_longitude: float
    ayanamsa:       float
    tithi:          Tithi
    nakshatra:      Nakshatra
    yoga:           Yoga
    karana:         Karana


# ---------------------------------------------------------------------------
# Timing projection
# ---------------------------------------------------------------------------

def project_timing(angle: float, span: float, rate_deg_per_hour: float,
                   observed_at: datetime) -> ElementTiming:
    """
    start = observed − elapsed·unit_duration
    end   = observed + remaining·unit_duration
    where unit_duration = span / rate (hours).
    """
    elapsed = (angle % span) / span
    remaining = 1.0 - elapsed
    unit_minutes = span / rate_deg_per_hour * 60.0
    return ElementTiming(
        progress_pct=int(round(elapsed * 100)),
        minutes_remaining=int(round(remaining * unit_minutes)),
        start=observed_at - timedelta(minutes=elapsed * unit_minutes),
        end=observed_at + timedelta(minutes=remaining * unit_minutes),
    )


def _mark(timing: ElementTiming, day: date, utc_offset: float) -> ElementTiming:
    return replace(
        timing,
        start_marker=day_marker(timing.start, day, utc_offset),
        end_marker=day_marker(timing.end, day, utc_offset),
    )


# ---------------------------------------------------------------------------
# Element computation
# ---------------------------------------------------------------------------

def compute_tithi(sun_sid: float, moon_sid: float, observed_at: datetime) -> Tithi:
    """Each tithi = 12° of Moon–Sun separation. 30 tithis per lunar month."""
    diff = normalize(moon_sid - sun_sid)
    idx = int(diff // TITHI_SPAN) % 30          # 0-based, 0–29
    number = idx + 1
    return Tithi(
        number=number,
        name=TITHIS[idx],
        tamil=TITHIS_TAMIL[idx],
        timing=project_timing(diff, TITHI_SPAN, TITHI_RATE, observed_at),
        paksha=PAKSHA[idx],
        is_ekadashi=number in (11, 26),
    )


def compute_nakshatra(moon_sid: float, observed_at: datetime) -> Nakshatra:
    """Nakshatra of the Moon. Each nakshatra = 360/27 = 13°20' arc."""
    moon = normalize(moon_sid)
    idx = int(moon // NAKSHATRA_SPAN) % 27
    name, tamil, lord, deity = NAKSHATRAS[idx]
    elapsed = (moon % NAKSHATRA_SPAN) / NAKSHATRA_SPAN
    return Nakshatra(
        number=idx + 1,
        name=name,
        tamil=tamil,
        timing=project_timing(moon, NAKSHATRA_SPAN, NAKSHATRA_RATE, observed_at),
        lord=lord,
        deity=deity,
        pada=min(int(elapsed * 4), 3) + 1,
        next_nakshatra=NAKSHATRAS[(idx + 1) % 27][0],
    )


def compute_yoga(sun_sid: float, moon_sid: float, observed_at: datetime) -> Yoga:
    """Yoga = (Sun + Moon) / (360/27). 27 yogas, each 13°20'."""
    combined = normalize(sun_sid + moon_sid)
    idx = int(combined // YOGA_SPAN) % 27
    name, tamil, nature = YOGAS[idx]
    return Yoga(
        number=idx + 1,
        name=name,
        tamil=tamil,
        timing=project_timing(combined, YOGA_SPAN, YOGA_RATE, observed_at),
        nature=nature,
    )


def compute_karana(sun_sid: float, moon_sid: float, observed_at: datetime) -> Karana:
    """Karana = half-tithi (6°). Numbers 1–60, names cycle through 11."""
    diff = normalize(moon_sid - sun_sid)
    number = int(diff // KARANA_SPAN) % 60 + 1
    name, tamil = KARANAS[(number - 1) % 11]
    return Karana(
        number=number,
        name=name,
        tamil=tamil,
        timing=project_timing(diff, KARANA_SPAN, KARANA_RATE, observed_at),
        nature=Nature.INAUSPICIOUS if name == VISHTI else Nature.AUSPICIOUS,
    )


# ---------------------------------------------------------------------------
# Full Panchang
# ---------------------------------------------------------------------------

def compute_panchang(adapter: EphemerisAdapter, day: date, location: GeoLocation,
                     observed_at: Optional[datetime] = None) -> PanchangReport:
    """
    Tithi, nakshatra, yoga and karana for `day` at `location`, observed at
    local noon unless another moment is given.
    """
    if observed_at is None:
        observed_at = local_noon(day, location.utc_offset)
    sun_sid, moon_sid, ayan = sun_moon_sidereal(adapter, observed_at)

    tithi     = compute_tithi(sun_sid, moon_sid, observed_at)
    nakshatra = compute_nakshatra(moon_sid, observed_at)
    yoga      = compute_yoga(sun_sid, moon_sid, observed_at)
    karana    = compute_karana(sun_sid, moon_sid, observed_at)

    def marked(element):
        return replace(element, timing=_mark(element.timing, day, location.utc_offset))

    return PanchangReport(
        day=day,
        weekday=Weekday.of(day),
        location=location,
        observed_at=observed_at,
        sun_longitude=sun_sid,
        moon_longitude=moon_sid,
        ayanamsa=ayan,
        tithi=marked(tithi),
        nakshatra=marked(nakshatra),
        yoga=marked(yoga),
        karana=marked(karana),
    )
