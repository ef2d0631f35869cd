"""
Core module for the Rainwater Harvesting Advisor.
Contains data models, scoring, system selection, sizing and costing.
"""

from core.models import (
    AIRecommendation,
    Coordinates,
    InvalidInputError,
    ScoreBreakdown,
    SiteInput,
    StructureSpecs,
    SystemArchetype,
    validate_site_input,
)
from core.scoring import ScoringEngine, get_scoring_engine
from core.analyzer import SystemSelector, get_system_selector
from core.sizing import StructureSizer, CostBenefit, cost_benefit, get_structure_sizer
from core.engine import (
    FeasibilityReport,
    RecommendationEngine,
    analyze_and_recommend,
    generate_structure_specs,
    get_recommendation_engine,
)
from core.config import EngineSettings

__all__ = [
    # Models
    "AIRecommendation",
    "Coordinates",
    "InvalidInputError",
    "ScoreBreakdown",
    "SiteInput",
    "StructureSpecs",
    "SystemArchetype",
    "validate_site_input",
    # Engines
    "ScoringEngine",
    "get_scoring_engine",
    "SystemSelector",
    "get_system_selector",
    "StructureSizer",
    "get_structure_sizer",
    "CostBenefit",
    "cost_benefit",
    "RecommendationEngine",
    "FeasibilityReport",
    "get_recommendation_engine",
    "analyze_and_recommend",
    "generate_structure_specs",
    # Settings
    "EngineSettings",
]
