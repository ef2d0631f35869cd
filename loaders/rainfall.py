"""
Rainfall Estimator - Annual and monthly rainfall for a site.

Lookup order (first hit wins):
1. Region name found in the location text
2. Nearest known region within 1° of the coordinates
3. Coarse geographic bands over India
4. National default (800 mm)

The monthly breakdown spreads the annual total over a seasonal pattern for
the region class and perturbs each month by up to ±10 %.
"""

import random
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from core.config import EngineSettings
from core.models import Coordinates, round_half_up
from loaders.regions import RegionClass, find_by_name, find_nearest

log = logging.getLogger(__name__)


MONTHS = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]

DEFAULT_ANNUAL_RAINFALL_MM = 800
DEFAULT_COORDINATES = Coordinates(lat=20.5937, lng=78.9629)  # centre of India
MONTHLY_NOISE = 0.10

# Fractions of the annual total per month; each pattern sums to 1.0
SEASONAL_PATTERNS: Dict[RegionClass, List[float]] = {
    RegionClass.COASTAL: [0.01, 0.01, 0.01, 0.02, 0.04, 0.10, 0.14, 0.15, 0.17, 0.20, 0.11, 0.04],
    RegionClass.DELTA: [0.01, 0.01, 0.01, 0.02, 0.04, 0.11, 0.17, 0.17, 0.16, 0.17, 0.09, 0.04],
    # South-west and north-east monsoons both contribute
    RegionClass.RAYALASEEMA: [0.01, 0.01, 0.01, 0.03, 0.07, 0.08, 0.10, 0.12, 0.17, 0.20, 0.15, 0.05],
    RegionClass.HILLY: [0.01, 0.01, 0.02, 0.04, 0.07, 0.14, 0.17, 0.17, 0.16, 0.13, 0.06, 0.02],
}
SOUTH_INDIA_PATTERN = [0.05, 0.03, 0.04, 0.06, 0.08, 0.15, 0.18, 0.16, 0.12, 0.08, 0.03, 0.02]
NORTH_INDIA_PATTERN = [0.02, 0.02, 0.03, 0.04, 0.06, 0.20, 0.25, 0.21, 0.12, 0.03, 0.01, 0.01]
SOUTH_INDIA_MAX_LAT = 15

# (min_lat, max_lat, min_lng, max_lng, annual_mm), checked in order
COARSE_RAINFALL_BANDS = [
    (8, 12, 75, 77, 3000),   # Kerala
    (18, 20, 72, 74, 2200),  # Konkan coast
    (22, 24, 88, 90, 1600),  # Gangetic delta
    (12, 14, 80, 82, 1200),  # Coromandel coast
    (12, 14, 77, 78, 900),   # South Karnataka plateau
    (17, 19, 78, 80, 800),   # Telangana
    (28, 30, 76, 78, 600),   # Delhi NCR
    (24, 27, 74, 76, 550),   # Rajasthan
]

# (exclusive lower bound mm, base days, random span)
RAINY_DAY_BANDS = [
    (300, 20, 8),
    (150, 12, 8),
    (50, 5, 7),
    (10, 2, 4),
]

RELIABILITY_COARSE = 0.75
RELIABILITY_DEFAULT = 0.60
NEAREST_RELIABILITY_PENALTY = 0.05

SOURCE_REGION = "Regional Normals"
SOURCE_NEAREST = "Nearest Region"
SOURCE_COARSE = "Geographic Estimation"
SOURCE_DEFAULT = "Estimated Data"


@dataclass
class MonthlyRainfall:
    month: str
    rainfall_mm: int
    rainy_days: int
    intensity: str  # low | medium | high

    def to_dict(self) -> Dict[str, Any]:
        return {
            "month": self.month,
            "rainfall_mm": self.rainfall_mm,
            "rainy_days": self.rainy_days,
            "intensity": self.intensity,
        }


@dataclass
class RainfallProfile:
    """Rainfall picture for one site."""
    location: str
    coordinates: Coordinates
    annual_rainfall_mm: float
    monthly_data: List[MonthlyRainfall] = field(default_factory=list)
    reliability: float = RELIABILITY_DEFAULT
    source: str = SOURCE_DEFAULT
    region_class: Optional[RegionClass] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "location": self.location,
            "coordinates": self.coordinates.to_dict(),
            "annual_rainfall_mm": self.annual_rainfall_mm,
            "monthly_data": [m.to_dict() for m in self.monthly_data],
            "reliability": self.reliability,
            "source": self.source,
            "region_class": self.region_class.value if self.region_class else None,
        }


def estimate_annual_rainfall(lat: float, lng: float) -> float:
    """Coarse annual rainfall from geographic bands; 800 mm outside all of them."""
    for min_lat, max_lat, min_lng, max_lng, annual in COARSE_RAINFALL_BANDS:
        if min_lat <= lat <= max_lat and min_lng <= lng <= max_lng:
            return annual
    return DEFAULT_ANNUAL_RAINFALL_MM


def intensity_for(rainfall_mm: float) -> str:
    if rainfall_mm < 50:
        return "low"
    elif rainfall_mm <= 200:
        return "medium"
    return "high"


def rainy_days_for(rainfall_mm: float, rng: Optional[random.Random] = None) -> int:
    """Rainy days in a month; the band midpoint when no random source is given."""
    base, span = 0, 2
    for threshold, band_base, band_span in RAINY_DAY_BANDS:
        if rainfall_mm > threshold:
            base, span = band_base, band_span
            break

    fraction = rng.random() if rng is not None else 0.5
    return round_half_up(base + fraction * span)


def seasonal_pattern(region_class: Optional[RegionClass], lat: float) -> List[float]:
    if region_class in SEASONAL_PATTERNS:
        return SEASONAL_PATTERNS[region_class]
    return SOUTH_INDIA_PATTERN if lat <= SOUTH_INDIA_MAX_LAT else NORTH_INDIA_PATTERN


class RainfallEstimator:
    """
    Offline rainfall estimator.

    Args:
        rng: Random source for the monthly noise
        jitter: If False, months follow the seasonal pattern exactly and
            rainy days use band midpoints
    """

    def __init__(self, rng: Optional[random.Random] = None, jitter: bool = True):
        self.jitter = jitter
        self.rng = rng if rng is not None else random.Random()

    def monthly_breakdown(self, annual_mm: float, region_class: Optional[RegionClass],
                          lat: float) -> List[MonthlyRainfall]:
        rng = self.rng if self.jitter else None
        months = []
        for month, weight in zip(MONTHS, seasonal_pattern(region_class, lat)):
            value = annual_mm * weight
            if rng is not None:
                value *= 1 + rng.uniform(-MONTHLY_NOISE, MONTHLY_NOISE)
            months.append(MonthlyRainfall(
                month=month,
                rainfall_mm=round_half_up(value),
                rainy_days=rainy_days_for(value, rng),
                intensity=intensity_for(value),
            ))
        return months

    def rainfall_for(self, location: str, coords: Optional[Coordinates] = None) -> RainfallProfile:
        """
        Estimate rainfall for a site.

        Args:
            location: Free-text place name, e.g. "Guntur, Andhra Pradesh"
            coords: Optional coordinates of the site

        Returns:
            RainfallProfile; never raises
        """
        record = find_by_name(location)
        if record is not None:
            log.debug(f"Rainfall for {location!r}: matched region {record.key!r} by name")
            profile = RainfallProfile(
                location=location,
                coordinates=coords or Coordinates(record.lat, record.lng),
                annual_rainfall_mm=record.annual_rainfall_mm,
                reliability=record.reliability,
                source=SOURCE_REGION,
                region_class=record.region_class,
            )
        elif coords is not None and (nearest := find_nearest(coords.lat, coords.lng)) is not None:
            record, distance = nearest
            log.debug(f"Rainfall for {location!r}: nearest region {record.key!r} ({distance:.2f}°)")
            profile = RainfallProfile(
                location=location,
                coordinates=coords,
                annual_rainfall_mm=record.annual_rainfall_mm,
                reliability=round(record.reliability - NEAREST_RELIABILITY_PENALTY, 2),
                source=SOURCE_NEAREST,
                region_class=record.region_class,
            )
        elif coords is not None:
            log.debug(f"Rainfall for {location!r}: coarse geographic estimate")
            profile = RainfallProfile(
                location=location,
                coordinates=coords,
                annual_rainfall_mm=estimate_annual_rainfall(coords.lat, coords.lng),
                reliability=RELIABILITY_COARSE,
                source=SOURCE_COARSE,
            )
        else:
            log.debug(f"Rainfall for {location!r}: national default")
            profile = RainfallProfile(
                location=location,
                coordinates=DEFAULT_COORDINATES,
                annual_rainfall_mm=DEFAULT_ANNUAL_RAINFALL_MM,
            )

        profile.monthly_data = self.monthly_breakdown(
            profile.annual_rainfall_mm, profile.region_class, profile.coordinates.lat
        )
        return profile


def get_rainfall_estimator(settings: Optional[EngineSettings] = None) -> RainfallEstimator:
    """Build a rainfall estimator from settings (environment by default)."""
    settings = settings or EngineSettings.from_env()
    return RainfallEstimator(rng=settings.make_rng(), jitter=settings.jitter_enabled)
