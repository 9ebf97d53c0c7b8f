"""
config.py
=========
Process-wide settings, read once from the environment (and an optional
.env file) at startup. Settings are frozen; nothing mutates them later.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from dotenv import load_dotenv

PACKAGE_DIR = Path(__file__).resolve().parent
DEFAULT_SUN_CACHE = PACKAGE_DIR / "data" / "sunrise_sunset_cache.json"


@dataclass(frozen=True)
class Settings:
    default_city:  str            = "Chennai"
    sun_cache:     Optional[Path] = DEFAULT_SUN_CACHE
    ephe_path:     Optional[str]  = None
    log_level:     str            = "INFO"
    cors_origins:  Tuple[str, ...] = ("*",)


def load_settings() -> Settings:
    """Build Settings from PANCHANGAM_* environment variables."""
    load_dotenv()

    cache_raw = os.getenv("PANCHANGAM_SUN_CACHE")
    if cache_raw is None:
        sun_cache = DEFAULT_SUN_CACHE
    elif cache_raw.strip() == "":
        sun_cache = None            # explicitly disabled
    else:
        sun_cache = Path(cache_raw).expanduser()

    origins = os.getenv("PANCHANGAM_CORS_ORIGINS", "*")

    return Settings(
        default_city=os.getenv("PANCHANGAM_DEFAULT_CITY", "Chennai").strip() or "Chennai",
        sun_cache=sun_cache,
        ephe_path=os.getenv("PANCHANGAM_EPHE_PATH") or None,
        log_level=os.getenv("PANCHANGAM_LOG_LEVEL", "INFO").upper(),
        cors_origins=tuple(o.strip() for o in origins.split(",") if o.strip()),
    )
