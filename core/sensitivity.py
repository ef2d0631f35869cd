"""
Sensitivity Analysis Module - What-if scenarios for a harvesting site.

Re-runs the full recommendation pipeline on perturbed copies of a site
(more or less rain, a bigger roof, less open space) and tabulates how the
system choice, cost and payback move.
"""

import math
import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, List, Optional

import pandas as pd

from core.engine import RecommendationEngine, get_recommendation_engine
from core.models import AIRecommendation, SiteInput, StructureSpecs, round_half_up
from core.sizing import COLLECTION_EFFICIENCY, DEFAULT_WATER_TARIFF

log = logging.getLogger(__name__)


class ScenarioType(Enum):
    """The fixed what-if scenarios, in display order."""
    CURRENT = "current"
    OPTIMISTIC = "optimistic"
    PESSIMISTIC = "pessimistic"
    EXPANDED_ROOF = "expanded_roof"
    COMPACT = "compact"


@dataclass(frozen=True)
class Scenario:
    """Multipliers applied to a site before re-running the engine."""
    scenario_type: ScenarioType
    label: str
    roof_factor: float = 1.0
    rainfall_factor: float = 1.0
    space_factor: float = 1.0

    def apply(self, site: SiteInput) -> SiteInput:
        return replace(
            site,
            roof_area_m2=site.roof_area_m2 * self.roof_factor,
            annual_rainfall_mm=site.annual_rainfall_mm * self.rainfall_factor,
            available_space_m2=site.available_space_m2 * self.space_factor,
        )


SCENARIOS: List[Scenario] = [
    Scenario(ScenarioType.CURRENT, "Current Scenario"),
    Scenario(ScenarioType.OPTIMISTIC, "Optimistic (20% more rain)", rainfall_factor=1.2),
    Scenario(ScenarioType.PESSIMISTIC, "Pessimistic (20% less rain)", rainfall_factor=0.8),
    Scenario(ScenarioType.EXPANDED_ROOF, "Expanded Roof (+50%)", roof_factor=1.5, space_factor=1.2),
    Scenario(ScenarioType.COMPACT, "Compact System (-30% space)", space_factor=0.7),
]


@dataclass
class ScenarioResult:
    """Outcome of one what-if scenario."""
    scenario: Scenario
    site: SiteInput
    recommendation: AIRecommendation
    specs: StructureSpecs
    harvest_potential: float  # liters / year
    water_savings: float  # liters / year
    money_savings: float  # ₹ / year
    payback_period: float  # years, inf when nothing is saved
    within_budget: Optional[bool] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "scenario": self.scenario.scenario_type.value,
            "label": self.scenario.label,
            "system_type": self.recommendation.system_type.value,
            "feasibility_score": self.recommendation.feasibility_score,
            "capacity": self.specs.capacity,
            "estimated_cost": self.specs.estimated_cost,
            "harvest_potential": round(self.harvest_potential),
            "water_savings": round(self.water_savings),
            "money_savings": round(self.money_savings, 2),
            "payback_period": self.payback_period,
            "within_budget": self.within_budget,
        }


class WhatIfSimulator:
    """
    Runs the five fixed scenarios through the recommendation engine.

    Savings are valued at `tariff` per liter of harvested water that
    actually displaces demand (harvest is capped at annual demand).
    """

    def __init__(self, engine: RecommendationEngine = None, tariff: float = DEFAULT_WATER_TARIFF):
        self.engine = engine or get_recommendation_engine()
        self.tariff = tariff

    def run_scenario(self, site: SiteInput, scenario: Scenario,
                     budget: Optional[float] = None) -> ScenarioResult:
        adjusted = scenario.apply(site)
        recommendation = self.engine.analyze_and_recommend(adjusted)
        specs = self.engine.generate_structure_specs(adjusted, recommendation.system_type)

        harvest = adjusted.roof_area_m2 * adjusted.annual_rainfall_mm * COLLECTION_EFFICIENCY
        water_savings = min(harvest, adjusted.annual_demand_liters)
        money_savings = water_savings * self.tariff

        if money_savings > 0:
            payback = round_half_up(specs.estimated_cost / money_savings * 10) / 10
        else:
            payback = math.inf

        return ScenarioResult(
            scenario=scenario,
            site=adjusted,
            recommendation=recommendation,
            specs=specs,
            harvest_potential=harvest,
            water_savings=water_savings,
            money_savings=money_savings,
            payback_period=payback,
            within_budget=None if budget is None else specs.estimated_cost <= budget,
        )

    def run(self, site: SiteInput, budget: Optional[float] = None) -> List[ScenarioResult]:
        """
        Run every scenario against `site`.

        Args:
            site: Baseline site; it is never modified
            budget: Optional spending limit, only used to flag each result

        Returns:
            One result per scenario, in SCENARIOS order
        """
        results = [self.run_scenario(site, scenario, budget) for scenario in SCENARIOS]
        log.debug(f"What-if for {site.location!r}: " +
                  ", ".join(f"{r.scenario.scenario_type.value}={r.recommendation.system_type.value}"
                            for r in results))
        return results


def to_dataframe(results: List[ScenarioResult]) -> pd.DataFrame:
    """Tabulate scenario results, one row per scenario."""
    return pd.DataFrame([r.to_dict() for r in results])


def get_what_if_simulator(tariff: float = DEFAULT_WATER_TARIFF) -> WhatIfSimulator:
    """Factory function for the what-if simulator."""
    return WhatIfSimulator(tariff=tariff)
