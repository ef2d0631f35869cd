"""
Recommendation Engine - the public entry point of the core.

Pipeline per call:
    validate -> score -> combine -> select -> size -> price

Every call builds fresh result objects; the engine holds no per-site state.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

from core.analyzer import SystemSelector, get_system_selector
from core.models import (
    AIRecommendation,
    InvalidInputError,
    SiteInput,
    StructureSpecs,
    SystemArchetype,
    validate_site_input,
)
from core.scoring import ScoringEngine, get_scoring_engine
from core.sizing import (
    DEFAULT_WATER_TARIFF,
    CostBenefit,
    CostBreakdown,
    StructureSizer,
    cost_benefit,
    get_structure_sizer,
)

log = logging.getLogger(__name__)


@dataclass
class FeasibilityReport:
    """Everything the report surfaces need for one site."""
    site: SiteInput
    recommendation: AIRecommendation
    structure: StructureSpecs
    cost_breakdown: CostBreakdown
    cost_benefit: CostBenefit
    rainfall: Optional[Any] = None  # RainfallProfile
    groundwater: Optional[Any] = None  # GroundwaterProfile

    def to_dict(self) -> Dict[str, Any]:
        return {
            "site": self.site.to_dict(),
            "recommendation": self.recommendation.to_dict(),
            "structure": self.structure.to_dict(),
            "cost_breakdown": self.cost_breakdown.to_dict(),
            "cost_benefit": self.cost_benefit.to_dict(),
            "rainfall": self.rainfall.to_dict() if self.rainfall is not None else None,
            "groundwater": self.groundwater.to_dict() if self.groundwater is not None else None,
        }


def coerce_archetype(value: Union[SystemArchetype, str]) -> SystemArchetype:
    """Accept an archetype or its string value."""
    if isinstance(value, SystemArchetype):
        return value
    try:
        return SystemArchetype(value)
    except ValueError:
        raise InvalidInputError([f"unknown system archetype: {value!r}"])


class RecommendationEngine:
    """
    Rule-based feasibility engine.

    Usage:
        engine = get_recommendation_engine()
        rec = engine.analyze_and_recommend(site)
        specs = engine.generate_structure_specs(site, rec.system_type)
    """

    def __init__(self, scorer: ScoringEngine = None, selector: SystemSelector = None,
                 sizer: StructureSizer = None):
        self.scorer = scorer or get_scoring_engine()
        self.selector = selector or get_system_selector()
        self.sizer = sizer or get_structure_sizer()

    def _check(self, site: SiteInput):
        validate_site_input(site)

        supplied = site.water_demand_liters_per_year
        if supplied is not None and supplied != site.annual_demand_liters:
            log.warning(
                f"Ignoring supplied water demand {supplied:,.0f} L/yr; "
                f"using {site.annual_demand_liters:,.0f} L/yr derived from "
                f"{site.num_dwellers} dwellers"
            )

    def analyze_and_recommend(self, site: SiteInput) -> AIRecommendation:
        """
        Score a site and pick a harvesting system.

        Raises:
            InvalidInputError: if the site fails validation
        """
        self._check(site)

        scores = self.scorer.score(site)
        feasibility, confidence = self.scorer.combine(scores)
        selection = self.selector.select(site, scores)

        log.info(
            f"{site.location!r}: feasibility {feasibility}, confidence {confidence}, "
            f"system {selection.primary.value}"
        )
        return AIRecommendation(
            system_type=selection.primary,
            confidence=confidence,
            reasoning=list(selection.reasoning),
            alternative_options=list(selection.alternatives),
            feasibility_score=feasibility,
            score_breakdown=scores,
        )

    def generate_structure_specs(self, site: SiteInput,
                                 archetype: Union[SystemArchetype, str]) -> StructureSpecs:
        """
        Size and price a structure of the given archetype for a site.

        Raises:
            InvalidInputError: if the site fails validation or the archetype is unknown
        """
        validate_site_input(site)
        system = coerce_archetype(archetype)

        specs = self.sizer.size(site, system)
        return self.sizer.price(specs, system, site.roof_area_m2)

    def build_report(self, site: SiteInput, rainfall=None, groundwater=None,
                     tariff: float = DEFAULT_WATER_TARIFF) -> FeasibilityReport:
        """Run the full pipeline and bundle the result with optional site profiles."""
        recommendation = self.analyze_and_recommend(site)
        system = recommendation.system_type
        specs = self.generate_structure_specs(site, system)

        return FeasibilityReport(
            site=site,
            recommendation=recommendation,
            structure=specs,
            cost_breakdown=self.sizer.cost_breakdown(system, specs.capacity, site.roof_area_m2),
            cost_benefit=cost_benefit(site, specs, tariff),
            rainfall=rainfall,
            groundwater=groundwater,
        )


# ═══════════════════════════════════════════════════════════════════════════
# FACTORY FUNCTIONS
# ═══════════════════════════════════════════════════════════════════════════
def get_recommendation_engine() -> RecommendationEngine:
    """Get a recommendation engine wired with the default components."""
    return RecommendationEngine()


def analyze_and_recommend(site: SiteInput) -> AIRecommendation:
    return get_recommendation_engine().analyze_and_recommend(site)


def generate_structure_specs(site: SiteInput, archetype: Union[SystemArchetype, str]) -> StructureSpecs:
    return get_recommendation_engine().generate_structure_specs(site, archetype)
