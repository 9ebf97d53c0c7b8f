"""
Panchangam Engine
=================
Hindu / Tamil Panchangam calculations: daily rasi chart, Rahu Kaal and
Yamaganda, Gowri Nalla Neram, tithi / nakshatra / yoga / karana and the
Tamil solar calendar.

Quick start:
    from panchangam_engine import build_context, complete_panchang

    ctx = build_context()
    panchang = complete_panchang(ctx, "2025-12-12", "Chennai")
"""

from .tools.panchangam import (
    EngineContext, build_context,
    daily_chart, auspicious_times, complete_panchang,
    gowri_nalla_neram, tamil_calendar_month,
)

__version__ = "1.0.0"
__all__ = [
    "EngineContext", "build_context",
    "daily_chart", "auspicious_times", "complete_panchang",
    "gowri_nalla_neram", "tamil_calendar_month",
]
