"""
Feasibility Scoring Module

Scores a site on five independent dimensions and combines them into:
- A weighted feasibility score (0-100)
- A confidence value that rewards agreement between the sub-scores
"""

import logging
from typing import Dict, List, Tuple

from core.models import (
    LITERS_PER_PERSON_PER_DAY,
    DAYS_PER_YEAR,
    ScoreBreakdown,
    SiteInput,
    round_half_up,
)

log = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════════
# WEIGHTS AND LOOKUP TABLES
# ═══════════════════════════════════════════════════════════════════════════
WEIGHTS: Dict[str, float] = {
    "rainfall": 0.25,
    "roof_suitability": 0.20,
    "space_availability": 0.20,
    "groundwater_conditions": 0.20,
    "cost_effectiveness": 0.15,
}

# Fraction of rain on the roof that reaches the gutters
COLLECTION_EFFICIENCY = 0.8

ROOF_MATERIAL_SCORES = {
    "concrete": 35,
    "tiles": 30,
    "metal": 40,
    "asbestos": 25,
    "green": 20,
}
DEFAULT_ROOF_MATERIAL_SCORE = 25

RUNOFF_COEFFICIENTS = {
    "concrete": 0.85,
    "tiles": 0.75,
    "metal": 0.90,
    "asbestos": 0.80,
    "green": 0.40,
}
DEFAULT_RUNOFF_COEFFICIENT = 0.80

# Matched by substring, in this order
SOIL_PERMEABILITY_SCORES = {
    "sandy": 50,
    "loam": 40,
    "clay": 20,
    "rocky": 15,
    "black cotton": 10,
}
DEFAULT_SOIL = "loam"


def runoff_coefficient(roof_type: str) -> float:
    return RUNOFF_COEFFICIENTS.get(roof_type.strip().lower(), DEFAULT_RUNOFF_COEFFICIENT)


def match_soil(soil_type: str) -> str:
    """Return the vocabulary key contained in `soil_type`, defaulting to loam."""
    lowered = soil_type.lower()
    for key in SOIL_PERMEABILITY_SCORES:
        if key in lowered:
            return key
    return DEFAULT_SOIL


def harvest_potential_m3(roof_area_m2: float, annual_rainfall_mm: float) -> float:
    """Annual collectable volume in cubic meters."""
    return roof_area_m2 * annual_rainfall_mm * COLLECTION_EFFICIENCY * 0.001


# ═══════════════════════════════════════════════════════════════════════════
# SCORING ENGINE
# ═══════════════════════════════════════════════════════════════════════════
class ScoringEngine:
    """
    Stateless multi-criteria scorer.

    Every scorer is a step function bounded to [0, 100]:

    feasibility = round(Σ weight_i × score_i)
    confidence  = round((consistency × 0.6 + mean/100 × 0.4) × 100)

    where consistency = max(0, 1 - variance / 1000), so a site with one
    strong score and four weak ones is not reported as confidently good.
    """

    weights = WEIGHTS

    def score(self, site: SiteInput) -> ScoreBreakdown:
        """Compute all five sub-scores for a validated site."""
        breakdown = ScoreBreakdown(
            rainfall=self.score_rainfall(site.annual_rainfall_mm),
            roof_suitability=self.score_roof_suitability(site.roof_area_m2, site.roof_type),
            space_availability=self.score_space_availability(site.available_space_m2, site.roof_area_m2),
            groundwater_conditions=self.score_groundwater_conditions(site.groundwater_depth_m, site.soil_type),
            cost_effectiveness=self.score_cost_effectiveness(
                site.roof_area_m2, site.annual_rainfall_mm, site.num_dwellers
            ),
        )
        log.debug(f"Scores for {site.location!r}: {breakdown.to_dict()}")
        return breakdown

    @staticmethod
    def score_rainfall(annual_rainfall_mm: float) -> float:
        if annual_rainfall_mm >= 1500:
            return 100
        elif annual_rainfall_mm >= 1000:
            return 80
        elif annual_rainfall_mm >= 600:
            return 60
        elif annual_rainfall_mm >= 400:
            return 40
        return 20

    @staticmethod
    def score_roof_suitability(roof_area_m2: float, roof_type: str) -> float:
        score = 0.0

        # Area
        if roof_area_m2 >= 200:
            score += 40
        elif roof_area_m2 >= 100:
            score += 30
        elif roof_area_m2 >= 50:
            score += 20
        else:
            score += 10

        # Material
        material = roof_type.strip().lower()
        score += ROOF_MATERIAL_SCORES.get(material, DEFAULT_ROOF_MATERIAL_SCORE)

        # Runoff bonus
        score += runoff_coefficient(roof_type) * 25

        return min(100.0, score)

    @staticmethod
    def score_space_availability(available_space_m2: float, roof_area_m2: float) -> float:
        ratio = available_space_m2 / roof_area_m2

        if ratio >= 0.3:
            return 100
        elif ratio >= 0.2:
            return 80
        elif ratio >= 0.15:
            return 60
        elif ratio >= 0.1:
            return 40
        return 20

    @staticmethod
    def score_groundwater_conditions(groundwater_depth_m: float, soil_type: str) -> float:
        score = 0.0

        if groundwater_depth_m <= 5:
            score += 20  # too shallow, contamination risk
        elif groundwater_depth_m <= 15:
            score += 50
        elif groundwater_depth_m <= 30:
            score += 40
        elif groundwater_depth_m <= 50:
            score += 30
        else:
            score += 20

        score += SOIL_PERMEABILITY_SCORES[match_soil(soil_type)]

        return min(100.0, score)

    @staticmethod
    def score_cost_effectiveness(roof_area_m2: float, annual_rainfall_mm: float, num_dwellers: int) -> float:
        potential = harvest_potential_m3(roof_area_m2, annual_rainfall_mm)
        demand = num_dwellers * LITERS_PER_PERSON_PER_DAY * DAYS_PER_YEAR * 0.001
        ratio = potential / demand

        if ratio >= 0.8:
            return 100
        elif ratio >= 0.6:
            return 85
        elif ratio >= 0.4:
            return 70
        elif ratio >= 0.2:
            return 55
        return 30

    def combine(self, breakdown: ScoreBreakdown) -> Tuple[int, int]:
        """
        Combine sub-scores.

        Returns:
            (feasibility_score, confidence), both integers in [0, 100]
        """
        scores = breakdown.to_dict()
        weighted = sum(scores[name] * weight for name, weight in self.weights.items())
        return round_half_up(weighted), self.confidence(breakdown.values())

    @staticmethod
    def confidence(scores: List[float]) -> int:
        mean = sum(scores) / len(scores)
        variance = sum((s - mean) ** 2 for s in scores) / len(scores)

        consistency_factor = max(0.0, 1 - variance / 1000)
        score_factor = mean / 100

        return round_half_up((consistency_factor * 0.6 + score_factor * 0.4) * 100)


# ═══════════════════════════════════════════════════════════════════════════
# FACTORY FUNCTIONS
# ═══════════════════════════════════════════════════════════════════════════
def get_scoring_engine() -> ScoringEngine:
    """Get a scoring engine."""
    return ScoringEngine()
