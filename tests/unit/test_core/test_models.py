import math

import pytest
from core.models import (
    AIRecommendation,
    Dimensions,
    InvalidInputError,
    ScoreBreakdown,
    StructureSpecs,
    SystemArchetype,
    label_for_score,
    round_half_up,
    validate_site_input,
)


def test_site_demand_derived_from_dwellers(site):
    """Verify daily and annual demand come from the household size."""
    assert site.daily_demand_liters == 600
    assert site.annual_demand_liters == 219000


def test_archetype_declaration_order():
    """Verify the seven archetypes keep their declared order."""
    assert [a.value for a in SystemArchetype] == [
        "recharge_pit_with_storage",
        "injection_well_system",
        "large_underground_tank",
        "modular_tank_system",
        "overhead_tank_system",
        "hybrid_storage_recharge",
        "standard_underground_tank",
    ]


def test_round_half_up():
    assert round_half_up(72.5) == 73
    assert round_half_up(72.49) == 72
    assert round_half_up(0.5) == 1
    assert round_half_up(2.5) == 3  # built-in round() would give 2


def test_valid_site_passes(site):
    validate_site_input(site)


@pytest.mark.parametrize("overrides", [
    {"roof_area_m2": 0},
    {"roof_area_m2": -10},
    {"roof_area_m2": float("nan")},
    {"annual_rainfall_mm": -1},
    {"annual_rainfall_mm": float("inf")},
    {"groundwater_depth_m": 0},
    {"available_space_m2": -5},
    {"num_dwellers": 0},
    {"num_dwellers": 2.5},
    {"num_dwellers": float("nan")},
    {"budget": -100},
    {"water_demand_liters_per_year": float("nan")},
])
def test_invalid_site_rejected(make_site, overrides):
    """Verify each out-of-domain field is rejected."""
    with pytest.raises(InvalidInputError):
        validate_site_input(make_site(**overrides))


def test_invalid_coordinates_rejected(make_site):
    from core.models import Coordinates
    with pytest.raises(InvalidInputError, match="latitude"):
        validate_site_input(make_site(coordinates=Coordinates(95.0, 80.0)))
    with pytest.raises(InvalidInputError, match="longitude"):
        validate_site_input(make_site(coordinates=Coordinates(16.0, math.nan)))


def test_invalid_input_lists_every_problem(make_site):
    """Verify all problems are reported together."""
    with pytest.raises(InvalidInputError) as exc:
        validate_site_input(make_site(roof_area_m2=0, num_dwellers=0))
    assert len(exc.value.problems) == 2
    assert isinstance(exc.value, ValueError)


def test_zero_rainfall_and_space_allowed(make_site):
    validate_site_input(make_site(annual_rainfall_mm=0, available_space_m2=0))


@pytest.mark.parametrize("score,label", [
    (100, "Excellent"), (80, "Excellent"), (79, "Good"), (60, "Good"),
    (59, "Fair"), (40, "Fair"), (39, "Poor"), (0, "Poor"),
])
def test_feasibility_labels(score, label):
    assert label_for_score(score) == label


def test_recommendation_to_dict():
    """Verify the report payload uses archetype values and carries the label."""
    breakdown = ScoreBreakdown(60, 86.25, 60, 90, 70)
    rec = AIRecommendation(
        system_type=SystemArchetype.INJECTION_WELL_SYSTEM,
        confidence=80,
        reasoning=["a", "b"],
        alternative_options=[SystemArchetype.RECHARGE_PIT_WITH_STORAGE,
                             SystemArchetype.LARGE_UNDERGROUND_TANK],
        feasibility_score=73,
        score_breakdown=breakdown,
    )
    data = rec.to_dict()
    assert data["system_type"] == "injection_well_system"
    assert data["alternative_options"] == ["recharge_pit_with_storage", "large_underground_tank"]
    assert data["feasibility_label"] == "Good"
    assert data["score_breakdown"]["roof_suitability"] == 86.25
    assert rec.feasibility_description.startswith("Good potential")


def test_dimensions_omit_missing_diameter():
    assert "diameter" not in Dimensions(2.0, 1.5, 3.0).to_dict()
    assert Dimensions(1.5, 1.5, 15.0, 0.3).to_dict()["diameter"] == 0.3


def test_structure_specs_defaults():
    specs = StructureSpecs(type="Tank", capacity=1000, dimensions=Dimensions(1, 1, 1))
    assert specs.materials == []
    assert specs.estimated_cost == 0
    assert specs.to_dict()["dimensions"] == {"length": 1, "width": 1, "height": 1}
