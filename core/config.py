"""
Engine settings and logging setup.

Settings come from `RWH_*` environment variables; every value has an
explicit default.
"""

import os
import random
import logging
from dataclasses import dataclass, asdict
from typing import Dict, Optional

log = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s │ %(name)-20s │ %(levelname)-8s │ %(message)s"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    log.warning(f"Ignoring {name}={raw!r}: expected a boolean")
    return default


def _env_int(name: str) -> Optional[int]:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return None
    try:
        return int(raw)
    except ValueError:
        log.warning(f"Ignoring {name}={raw!r}: expected an integer")
        return None


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        log.warning(f"Ignoring {name}={raw!r}: expected a number")
        return default


@dataclass
class EngineSettings:
    """
    All configurable settings for the advisor.
    """

    jitter_enabled: bool = True
    """If False, estimators add no random noise and output is fully reproducible."""

    random_seed: Optional[int] = None
    """Seed for the estimators' random source. None means unseeded."""

    geocode_cache_path: str = "geocode_cache.db"
    """SQLite file used to cache geocoder responses."""

    geocoder_user_agent: str = "RainwaterHarvestAdvisor/1.0 (rooftop feasibility)"
    """User-Agent sent to Nominatim, which requires one."""

    water_tariff_per_liter: float = 0.02
    """Municipal water price (₹ per liter) used for savings and payback."""

    log_level: str = "INFO"
    """Root log level for the command line and Streamlit entry points."""

    @classmethod
    def from_env(cls) -> "EngineSettings":
        defaults = cls()
        return cls(
            jitter_enabled=_env_bool("RWH_JITTER", defaults.jitter_enabled),
            random_seed=_env_int("RWH_RANDOM_SEED"),
            geocode_cache_path=os.getenv("RWH_GEOCODE_CACHE", defaults.geocode_cache_path),
            geocoder_user_agent=os.getenv("RWH_GEOCODER_USER_AGENT", defaults.geocoder_user_agent),
            water_tariff_per_liter=_env_float("RWH_WATER_TARIFF", defaults.water_tariff_per_liter),
            log_level=os.getenv("RWH_LOG_LEVEL", defaults.log_level).upper(),
        )

    def make_rng(self) -> random.Random:
        """Random source for the estimators, seeded when a seed is configured."""
        return random.Random(self.random_seed)

    def to_dict(self) -> Dict:
        return asdict(self)


def configure_logging(level: str = "INFO"):
    """Configure root logging for an entry point. Library modules never call this."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt="%H:%M:%S",
    )
