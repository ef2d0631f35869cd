"""
Groundwater Estimator - Depth, quality and aquifer for a site.

Uses the same lookup order as the rainfall estimator. Known regions take
their values from a per-class table; everywhere else falls back to coarse
hydrogeological bands.
"""

import random
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from core.config import EngineSettings
from core.models import Coordinates, round_half_up
from loaders.rainfall import DEFAULT_COORDINATES, estimate_annual_rainfall
from loaders.regions import RegionClass, find_by_name, find_nearest

log = logging.getLogger(__name__)


QUALITY_EXCELLENT = "Excellent (TDS < 300 mg/L)"
QUALITY_GOOD = "Good (TDS 300-600 mg/L)"
QUALITY_FAIR = "Fair (TDS 600-900 mg/L)"
QUALITY_POOR = "Poor (TDS > 900 mg/L)"


@dataclass(frozen=True)
class AquiferConditions:
    depth_m: float
    quality: str
    aquifer_type: str
    recharge_rate: int  # % of rainfall reaching the aquifer


GROUNDWATER_BY_CLASS: Dict[RegionClass, AquiferConditions] = {
    RegionClass.COASTAL: AquiferConditions(8, QUALITY_FAIR, "Coastal Alluvial Aquifer", 18),
    RegionClass.DELTA: AquiferConditions(5, QUALITY_GOOD, "Deltaic Alluvial Aquifer", 22),
    RegionClass.RAYALASEEMA: AquiferConditions(22, QUALITY_FAIR, "Hard Rock Aquifer (Granite-Gneiss)", 8),
    RegionClass.HILLY: AquiferConditions(12, QUALITY_EXCELLENT, "Fractured Rock Aquifer", 15),
    RegionClass.INLAND: AquiferConditions(15, QUALITY_GOOD, "Hard Rock Aquifer", 12),
}

# (min_lat, max_lat, min_lng, max_lng, depth_m), checked in order
COARSE_DEPTH_BANDS = [
    (24, 30, 74, 78, 25),  # Rajasthan
    (28, 30, 76, 78, 15),  # Delhi NCR
    (18, 22, 72, 76, 12),  # Maharashtra
    (8, 15, 75, 80, 8),    # Southern peninsula
    (22, 26, 85, 90, 6),   # Bengal basin
]
DEFAULT_DEPTH_M = 10

DEPTH_JITTER_M = 3.0
MIN_DEPTH_M = 1.0
PRE_MONSOON_DROP_M = 3.0
MONSOON_RISE_M = 2.0

CONFIDENCE_NAME = 0.85
CONFIDENCE_NEAREST = 0.75
CONFIDENCE_GENERIC = 0.5
CONFIDENCE_DEFAULT = 0.4


@dataclass
class SeasonalVariation:
    """Depth to water (m) through the year."""
    pre_monsoon: float
    monsoon: float
    post_monsoon: float

    def to_dict(self) -> Dict[str, float]:
        return {
            "pre_monsoon": self.pre_monsoon,
            "monsoon": self.monsoon,
            "post_monsoon": self.post_monsoon,
        }


@dataclass
class GroundwaterProfile:
    location: str
    coordinates: Coordinates
    depth_m: float
    quality: str
    aquifer_type: str
    seasonal_variation: SeasonalVariation
    recharge_rate: int
    confidence: float
    region_class: Optional[RegionClass] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "location": self.location,
            "coordinates": self.coordinates.to_dict(),
            "depth_m": self.depth_m,
            "quality": self.quality,
            "aquifer_type": self.aquifer_type,
            "seasonal_variation": self.seasonal_variation.to_dict(),
            "recharge_rate": self.recharge_rate,
            "confidence": self.confidence,
            "region_class": self.region_class.value if self.region_class else None,
        }


def estimate_depth(lat: float, lng: float) -> float:
    for min_lat, max_lat, min_lng, max_lng, depth in COARSE_DEPTH_BANDS:
        if min_lat <= lat <= max_lat and min_lng <= lng <= max_lng:
            return depth
    return DEFAULT_DEPTH_M


def estimate_aquifer_type(lat: float) -> str:
    if lat >= 25:
        return "Alluvial Aquifer"
    elif lat >= 15:
        return "Hard Rock Aquifer"
    return "Sedimentary Aquifer"


def seasonal_variation(depth_m: float) -> SeasonalVariation:
    """Water table falls before the monsoon and rises during it."""
    return SeasonalVariation(
        pre_monsoon=round(depth_m + PRE_MONSOON_DROP_M, 1),
        monsoon=round(max(0.0, depth_m - MONSOON_RISE_M), 1),
        post_monsoon=depth_m,
    )


class GroundwaterEstimator:
    """
    Offline groundwater estimator.

    Args:
        rng: Random source for depth jitter and generic quality grades
        jitter: If False, depths and qualities come straight from the tables
    """

    def __init__(self, rng: Optional[random.Random] = None, jitter: bool = True):
        self.jitter = jitter
        self.rng = rng if rng is not None else random.Random()

    def _jittered_depth(self, depth_m: float) -> float:
        if self.jitter:
            depth_m += self.rng.uniform(-DEPTH_JITTER_M, DEPTH_JITTER_M)
        return max(MIN_DEPTH_M, round_half_up(depth_m * 10) / 10)

    def _generic_quality(self) -> str:
        if not self.jitter:
            return QUALITY_GOOD
        draw = self.rng.random()
        if draw > 0.7:
            return QUALITY_EXCELLENT
        elif draw > 0.4:
            return QUALITY_GOOD
        elif draw > 0.2:
            return QUALITY_FAIR
        return QUALITY_POOR

    def _from_class(self, location: str, coords: Coordinates, region_class: RegionClass,
                    confidence: float) -> GroundwaterProfile:
        conditions = GROUNDWATER_BY_CLASS[region_class]
        depth = self._jittered_depth(conditions.depth_m)
        return GroundwaterProfile(
            location=location,
            coordinates=coords,
            depth_m=depth,
            quality=conditions.quality,
            aquifer_type=conditions.aquifer_type,
            seasonal_variation=seasonal_variation(depth),
            recharge_rate=conditions.recharge_rate,
            confidence=confidence,
            region_class=region_class,
        )

    def groundwater_for(self, location: str, coords: Optional[Coordinates] = None) -> GroundwaterProfile:
        """
        Estimate groundwater conditions for a site.

        Returns:
            GroundwaterProfile; never raises
        """
        record = find_by_name(location)
        if record is not None:
            log.debug(f"Groundwater for {location!r}: matched region {record.key!r} by name")
            return self._from_class(
                location, coords or Coordinates(record.lat, record.lng),
                record.region_class, CONFIDENCE_NAME,
            )

        if coords is not None:
            nearest = find_nearest(coords.lat, coords.lng)
            if nearest is not None:
                record, distance = nearest
                log.debug(f"Groundwater for {location!r}: nearest region {record.key!r} ({distance:.2f}°)")
                return self._from_class(location, coords, record.region_class, CONFIDENCE_NEAREST)

        if coords is not None:
            confidence = CONFIDENCE_GENERIC
            point = coords
        else:
            confidence = CONFIDENCE_DEFAULT
            point = DEFAULT_COORDINATES
        log.debug(f"Groundwater for {location!r}: generic estimate at ({point.lat}, {point.lng})")

        if coords is not None:
            base_depth = estimate_depth(point.lat, point.lng)
        else:
            base_depth = DEFAULT_DEPTH_M
        depth = self._jittered_depth(base_depth)
        annual_rain = estimate_annual_rainfall(point.lat, point.lng)

        return GroundwaterProfile(
            location=location,
            coordinates=point,
            depth_m=depth,
            quality=self._generic_quality(),
            aquifer_type=estimate_aquifer_type(point.lat),
            seasonal_variation=seasonal_variation(depth),
            recharge_rate=round_half_up(annual_rain / 1000 * 15),
            confidence=confidence,
        )


def get_groundwater_estimator(settings: Optional[EngineSettings] = None) -> GroundwaterEstimator:
    """Build a groundwater estimator from settings (environment by default)."""
    settings = settings or EngineSettings.from_env()
    return GroundwaterEstimator(rng=settings.make_rng(), jitter=settings.jitter_enabled)
