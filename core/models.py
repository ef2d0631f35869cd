"""
Core data models for the Rainwater Harvesting Advisor.
"""

import math
import numbers
from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Any, Dict, List, Optional

# Household consumption assumed everywhere demand is derived
LITERS_PER_PERSON_PER_DAY = 150
DAYS_PER_YEAR = 365


class InvalidInputError(ValueError):
    """Raised when a site description cannot be scored."""

    def __init__(self, problems: List[str]):
        self.problems = list(problems)
        super().__init__("Invalid site input: " + "; ".join(self.problems))


class SystemArchetype(Enum):
    """The seven canonical harvesting systems, in declaration order."""
    RECHARGE_PIT_WITH_STORAGE = "recharge_pit_with_storage"
    INJECTION_WELL_SYSTEM = "injection_well_system"
    LARGE_UNDERGROUND_TANK = "large_underground_tank"
    MODULAR_TANK_SYSTEM = "modular_tank_system"
    OVERHEAD_TANK_SYSTEM = "overhead_tank_system"
    HYBRID_STORAGE_RECHARGE = "hybrid_storage_recharge"
    STANDARD_UNDERGROUND_TANK = "standard_underground_tank"


@dataclass(frozen=True)
class Coordinates:
    """WGS84 point in decimal degrees."""
    lat: float
    lng: float

    def to_dict(self) -> Dict[str, float]:
        return {"lat": self.lat, "lng": self.lng}


@dataclass(frozen=True)
class SiteInput:
    """
    Normalized description of one property, as consumed by the scorers.

    `water_demand_liters_per_year` is accepted for callers that already
    computed it, but demand is always derived from `num_dwellers`.
    `budget` is carried through untouched.
    """
    roof_area_m2: float
    location: str
    coordinates: Coordinates
    annual_rainfall_mm: float
    groundwater_depth_m: float
    soil_type: str
    roof_type: str
    available_space_m2: float
    num_dwellers: int
    water_demand_liters_per_year: Optional[float] = None
    budget: Optional[float] = None

    @property
    def daily_demand_liters(self) -> float:
        return self.num_dwellers * LITERS_PER_PERSON_PER_DAY

    @property
    def annual_demand_liters(self) -> float:
        return self.daily_demand_liters * DAYS_PER_YEAR

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positive values."""
    return int(math.floor(value + 0.5))


def _is_number(value: Any) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def _finite(value: Any) -> bool:
    return _is_number(value) and math.isfinite(value)


def validate_site_input(site: SiteInput) -> None:
    """
    Reject inputs the scoring formulas cannot handle.

    Raises:
        InvalidInputError listing every problem found.
    """
    problems = []

    if not _finite(site.roof_area_m2) or site.roof_area_m2 <= 0:
        problems.append(f"roof area must be a positive number, got {site.roof_area_m2!r}")
    if not _finite(site.annual_rainfall_mm) or site.annual_rainfall_mm < 0:
        problems.append(f"annual rainfall must be >= 0, got {site.annual_rainfall_mm!r}")
    if not _finite(site.groundwater_depth_m) or site.groundwater_depth_m <= 0:
        problems.append(f"groundwater depth must be > 0, got {site.groundwater_depth_m!r}")
    if not _finite(site.available_space_m2) or site.available_space_m2 < 0:
        problems.append(f"available space must be >= 0, got {site.available_space_m2!r}")

    dwellers = site.num_dwellers
    if not _finite(dwellers) or dwellers != int(dwellers) or dwellers < 1:
        problems.append(f"number of dwellers must be an integer >= 1, got {dwellers!r}")

    coords = site.coordinates
    if coords is None:
        problems.append("coordinates are required")
    else:
        if not _finite(coords.lat) or not -90 <= coords.lat <= 90:
            problems.append(f"latitude out of range: {coords.lat!r}")
        if not _finite(coords.lng) or not -180 <= coords.lng <= 180:
            problems.append(f"longitude out of range: {coords.lng!r}")

    if site.budget is not None and (not _finite(site.budget) or site.budget < 0):
        problems.append(f"budget must be >= 0 when given, got {site.budget!r}")
    if site.water_demand_liters_per_year is not None and not _finite(site.water_demand_liters_per_year):
        problems.append("water demand must be a finite number when given")

    if not isinstance(site.roof_type, str):
        problems.append("roof type must be text")
    if not isinstance(site.soil_type, str):
        problems.append("soil type must be text")

    if problems:
        raise InvalidInputError(problems)


@dataclass(frozen=True)
class ScoreBreakdown:
    """Five sub-scores, each already bounded to 0-100 by its scorer."""
    rainfall: float
    roof_suitability: float
    space_availability: float
    groundwater_conditions: float
    cost_effectiveness: float

    def values(self) -> List[float]:
        return [
            self.rainfall,
            self.roof_suitability,
            self.space_availability,
            self.groundwater_conditions,
            self.cost_effectiveness,
        ]

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


def label_for_score(score: float) -> str:
    """Map a 0-100 feasibility score to its report label."""
    if score >= 80:
        return "Excellent"
    elif score >= 60:
        return "Good"
    elif score >= 40:
        return "Fair"
    return "Poor"


FEASIBILITY_DESCRIPTIONS = {
    "Excellent": "Highly recommended for rainwater harvesting implementation",
    "Good": "Good potential with some optimization opportunities",
    "Fair": "Moderate potential, consider system modifications",
    "Poor": "Limited potential, may require significant modifications",
}


@dataclass(frozen=True)
class AIRecommendation:
    """
    The engine's verdict for one site.
    Contains the chosen system, the reasoning trace and the score breakdown.
    """
    system_type: SystemArchetype
    confidence: int
    reasoning: List[str]
    alternative_options: List[SystemArchetype]
    feasibility_score: int
    score_breakdown: ScoreBreakdown

    @property
    def feasibility_label(self) -> str:
        return label_for_score(self.feasibility_score)

    @property
    def feasibility_description(self) -> str:
        return FEASIBILITY_DESCRIPTIONS[self.feasibility_label]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "system_type": self.system_type.value,
            "confidence": self.confidence,
            "reasoning": list(self.reasoning),
            "alternative_options": [a.value for a in self.alternative_options],
            "feasibility_score": self.feasibility_score,
            "feasibility_label": self.feasibility_label,
            "score_breakdown": self.score_breakdown.to_dict(),
        }


@dataclass(frozen=True)
class Dimensions:
    """Structure geometry in meters. `diameter` only for round structures."""
    length: float
    width: float
    height: float
    diameter: Optional[float] = None

    def to_dict(self) -> Dict[str, float]:
        data = {"length": self.length, "width": self.width, "height": self.height}
        if self.diameter is not None:
            data["diameter"] = self.diameter
        return data


@dataclass
class StructureSpecs:
    """Sized and priced harvesting structure."""
    type: str
    capacity: int  # liters
    dimensions: Dimensions
    materials: List[str] = field(default_factory=list)
    estimated_cost: int = 0
    installation_time: int = 0  # days
    maintenance_cost: int = 0  # per year

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "capacity": self.capacity,
            "dimensions": self.dimensions.to_dict(),
            "materials": list(self.materials),
            "estimated_cost": self.estimated_cost,
            "installation_time": self.installation_time,
            "maintenance_cost": self.maintenance_cost,
        }
