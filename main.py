"""
Panchangam API — FastAPI Backend v1.0
=====================================
Endpoints:
  POST /api/daily-chart       — Rasi chart of the day (nine grahas + lagna)
  POST /api/auspicious-times  — Sunrise/sunset, Rahu Kaal, Yamaganda
  POST /api/panchang          — Tithi, nakshatra, yoga, karana + Gowri Nalla Neram
  POST /api/gowri             — Gowri Nalla Neram slots
  POST /api/tamil-calendar    — Tamil calendar month grid
  GET  /api/cities            — Supported cities
  GET  /api/health            — Health check
"""

import logging
from typing import Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from panchangam_engine import (
    __version__,
    build_context, daily_chart, auspicious_times, complete_panchang,
    gowri_nalla_neram, tamil_calendar_month,
)
from panchangam_engine.config import load_settings
from panchangam_engine.core.locations import CITIES
from panchangam_engine.core.moments import MAX_YEAR, MIN_YEAR
from panchangam_engine.errors import ComputationError, InvalidInputError

settings = load_settings()
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
log = logging.getLogger("panchangam.api")

engine = build_context(settings)

app = FastAPI(
    title="Panchangam API",
    version=__version__,
    description="Tamil Panchangam: daily chart, Rahu Kaal, Yamaganda, Gowri Nalla Neram, "
                "tithi/nakshatra/yoga/karana and the Tamil calendar",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_origins),
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── Request Models ─────────────────────────────────────────────

DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"
TIME_PATTERN = r"^\d{1,2}:\d{2}$"


class ChartRequest(BaseModel):
    date: str           = Field(..., pattern=DATE_PATTERN, description="YYYY-MM-DD")
    time: str           = Field("05:30", pattern=TIME_PATTERN, description="HH:MM, 24-hour local")
    city: Optional[str] = None


class DateCityRequest(BaseModel):
    date: str           = Field(..., pattern=DATE_PATTERN, description="YYYY-MM-DD")
    city: Optional[str] = None


class TamilCalendarRequest(BaseModel):
    year:  int           = Field(..., ge=MIN_YEAR, le=MAX_YEAR)
    month: int           = Field(..., ge=1,    le=12)
    city:  Optional[str] = None


# ── Utilities ──────────────────────────────────────────────────

def _fail(e: Exception):
    """Map engine exceptions onto HTTP errors."""
    if isinstance(e, InvalidInputError):
        raise HTTPException(status_code=400, detail=str(e))
    log.exception("Calculation failed")
    raise HTTPException(
        status_code=500,
        detail={"type": type(e).__name__, "message": str(e)},
    )


# ── Endpoints ──────────────────────────────────────────────────

@app.get("/api/health")
def health():
    return {
        "status": "ok",
        "service": "Panchangam API",
        "version": __version__,
        "endpoints": [
            "POST /api/daily-chart",
            "POST /api/auspicious-times",
            "POST /api/panchang",
            "POST /api/gowri",
            "POST /api/tamil-calendar",
            "GET /api/cities",
        ],
    }


@app.get("/api/cities")
def cities():
    return {"success": True, "cities": list(CITIES), "default": engine.default_city}


@app.post("/api/daily-chart")
def daily_chart_endpoint(data: ChartRequest):
    try:
        chart = daily_chart(engine, data.date, data.time, data.city)
        return {"success": True, "chart": chart}
    except (InvalidInputError, ComputationError) as e:
        _fail(e)


@app.post("/api/auspicious-times")
def auspicious_times_endpoint(data: DateCityRequest):
    try:
        times = auspicious_times(engine, data.date, data.city)
        return {"success": True, "auspicious_times": times}
    except (InvalidInputError, ComputationError) as e:
        _fail(e)


@app.post("/api/panchang")
def panchang_endpoint(data: DateCityRequest):
    try:
        panchang = complete_panchang(engine, data.date, data.city)
        gowri = gowri_nalla_neram(engine, data.date, data.city)
        return {"success": True, "panchang": panchang, "gowri": gowri}
    except (InvalidInputError, ComputationError) as e:
        _fail(e)


@app.post("/api/gowri")
def gowri_endpoint(data: DateCityRequest):
    try:
        gowri = gowri_nalla_neram(engine, data.date, data.city)
        return {"success": True, "gowri": gowri}
    except (InvalidInputError, ComputationError) as e:
        _fail(e)


@app.post("/api/tamil-calendar")
def tamil_calendar_endpoint(data: TamilCalendarRequest):
    try:
        calendar = tamil_calendar_month(engine, data.year, data.month, data.city)
        return {"success": True, "calendar": calendar}
    except (InvalidInputError, ComputationError) as e:
        _fail(e)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
