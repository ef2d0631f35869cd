import logging

import pytest
from core.engine import (
    FeasibilityReport,
    RecommendationEngine,
    analyze_and_recommend,
    generate_structure_specs,
    get_recommendation_engine,
)
from core.models import InvalidInputError, SystemArchetype


@pytest.fixture
def engine():
    return get_recommendation_engine()


class TestAnalyzeAndRecommend:
    """Tests for the recommendation pipeline."""

    def test_reference_site(self, engine, site):
        rec = engine.analyze_and_recommend(site)
        assert rec.system_type is SystemArchetype.INJECTION_WELL_SYSTEM
        assert rec.feasibility_score == 73
        assert rec.confidence == 80
        assert rec.score_breakdown.roof_suitability == 86.25
        assert rec.score_breakdown.groundwater_conditions == 90
        assert len(rec.reasoning) == 5

    def test_no_open_space_gives_overhead(self, engine, make_site):
        site = make_site(available_space_m2=0, groundwater_depth_m=40, soil_type="clay")
        rec = engine.analyze_and_recommend(site)
        assert rec.score_breakdown.space_availability == 20
        assert rec.system_type is SystemArchetype.OVERHEAD_TANK_SYSTEM

    def test_zero_dwellers_rejected(self, engine, make_site):
        with pytest.raises(InvalidInputError, match="dwellers"):
            engine.analyze_and_recommend(make_site(num_dwellers=0))

    def test_deterministic(self, engine, site):
        assert engine.analyze_and_recommend(site) == engine.analyze_and_recommend(site)

    def test_alternatives(self, engine, site):
        rec = engine.analyze_and_recommend(site)
        assert len(rec.alternative_options) == 2
        assert rec.system_type not in rec.alternative_options

    def test_supplied_demand_is_ignored(self, engine, make_site, caplog):
        """Verify a mismatching water demand is logged and has no effect."""
        baseline = engine.analyze_and_recommend(make_site())
        with caplog.at_level(logging.WARNING, logger="core.engine"):
            rec = engine.analyze_and_recommend(make_site(water_demand_liters_per_year=10))
        assert rec == baseline
        assert "Ignoring supplied water demand" in caplog.text

    def test_matching_demand_is_silent(self, engine, make_site, caplog):
        with caplog.at_level(logging.WARNING, logger="core.engine"):
            engine.analyze_and_recommend(make_site(water_demand_liters_per_year=219000))
        assert "Ignoring" not in caplog.text

    def test_budget_is_inert(self, engine, make_site):
        assert (engine.analyze_and_recommend(make_site(budget=1000))
                == engine.analyze_and_recommend(make_site()))


class TestGenerateStructureSpecs:
    """Tests for sizing through the engine."""

    def test_priced(self, engine, site):
        specs = engine.generate_structure_specs(site, SystemArchetype.INJECTION_WELL_SYSTEM)
        assert specs.type == "Injection Well System"
        assert specs.capacity == 96000
        assert specs.estimated_cost == 2725680
        assert specs.maintenance_cost == 136284

    def test_accepts_archetype_value(self, engine, site):
        by_value = engine.generate_structure_specs(site, "overhead_tank_system")
        by_member = engine.generate_structure_specs(site, SystemArchetype.OVERHEAD_TANK_SYSTEM)
        assert by_value == by_member

    def test_unknown_archetype_rejected(self, engine, site):
        with pytest.raises(InvalidInputError, match="unknown system archetype"):
            engine.generate_structure_specs(site, "solar_panel")

    def test_validates_site(self, engine, make_site):
        with pytest.raises(InvalidInputError):
            engine.generate_structure_specs(make_site(roof_area_m2=-1),
                                            SystemArchetype.OVERHEAD_TANK_SYSTEM)


class TestBuildReport:
    """Tests for the assembled report."""

    def test_report_contents(self, engine, site):
        report = engine.build_report(site)
        assert isinstance(report, FeasibilityReport)
        assert report.structure.type == "Injection Well System"
        assert report.cost_breakdown.total == report.structure.estimated_cost
        assert report.cost_benefit.total_cost == report.structure.estimated_cost
        assert report.rainfall is None

    def test_to_dict(self, engine, site):
        data = engine.build_report(site).to_dict()
        assert data["recommendation"]["system_type"] == "injection_well_system"
        assert data["structure"]["dimensions"]["diameter"] == 0.3
        assert data["site"]["coordinates"] == {"lat": 16.3, "lng": 80.4}
        assert data["groundwater"] is None


def test_module_level_functions(site):
    rec = analyze_and_recommend(site)
    specs = generate_structure_specs(site, rec.system_type)
    assert specs.capacity == 96000


def test_custom_components_are_used(site):
    """Verify injected components replace the defaults."""
    from unittest.mock import MagicMock
    from core.analyzer import Selection

    selector = MagicMock()
    selector.select.return_value = Selection(
        primary=SystemArchetype.MODULAR_TANK_SYSTEM, alternatives=[], reasoning=["stub"],
    )
    engine = RecommendationEngine(selector=selector)
    rec = engine.analyze_and_recommend(site)
    assert rec.system_type is SystemArchetype.MODULAR_TANK_SYSTEM
    assert rec.reasoning == ["stub"]
    selector.select.assert_called_once()
