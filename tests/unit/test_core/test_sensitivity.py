"""Tests for the what-if simulator."""

import math

import pandas as pd
import pytest
from core.sensitivity import (
    SCENARIOS,
    ScenarioType,
    WhatIfSimulator,
    get_what_if_simulator,
    to_dataframe,
)


@pytest.fixture
def simulator():
    return get_what_if_simulator()


class TestWhatIfSimulator:
    """Tests for the five fixed scenarios."""

    def test_runs_every_scenario_in_order(self, simulator, site):
        results = simulator.run(site)
        assert [r.scenario.scenario_type for r in results] == list(ScenarioType)
        assert len(results) == len(SCENARIOS) == 5

    def test_current_matches_engine(self, simulator, site):
        current = simulator.run(site)[0]
        assert current.site == site
        assert current.recommendation == simulator.engine.analyze_and_recommend(site)

    def test_scenario_adjustments(self, simulator, site):
        by_type = {r.scenario.scenario_type: r for r in simulator.run(site)}
        assert by_type[ScenarioType.OPTIMISTIC].site.annual_rainfall_mm == pytest.approx(960)
        assert by_type[ScenarioType.PESSIMISTIC].site.annual_rainfall_mm == pytest.approx(640)
        assert by_type[ScenarioType.EXPANDED_ROOF].site.roof_area_m2 == pytest.approx(225)
        assert by_type[ScenarioType.EXPANDED_ROOF].site.available_space_m2 == pytest.approx(30)
        assert by_type[ScenarioType.COMPACT].site.available_space_m2 == pytest.approx(17.5)

    def test_baseline_site_untouched(self, simulator, site):
        simulator.run(site)
        assert site.annual_rainfall_mm == 800.0

    def test_savings_and_payback(self, simulator, site):
        current = simulator.run(site)[0]
        assert current.harvest_potential == pytest.approx(96000)
        assert current.water_savings == pytest.approx(96000)
        assert current.money_savings == pytest.approx(1920)
        # 2 725 680 / 1 920 = 1419.625
        assert current.payback_period == 1419.6

    def test_savings_capped_at_demand(self, simulator, make_site):
        site = make_site(annual_rainfall_mm=3000, num_dwellers=1)
        current = simulator.run(site)[0]
        assert current.water_savings == site.annual_demand_liters

    def test_no_rain_never_pays_back(self, simulator, make_site):
        results = simulator.run(make_site(annual_rainfall_mm=0))
        assert all(math.isinf(r.payback_period) for r in results)

    def test_budget_flag(self, simulator, site):
        assert all(r.within_budget for r in simulator.run(site, budget=10 ** 9))
        assert not any(r.within_budget for r in simulator.run(site, budget=1))
        assert all(r.within_budget is None for r in simulator.run(site))

    def test_tariff(self, site):
        cheap = WhatIfSimulator(tariff=0.02).run(site)[0]
        dear = WhatIfSimulator(tariff=0.04).run(site)[0]
        assert dear.money_savings == pytest.approx(cheap.money_savings * 2)


def test_to_dataframe(simulator, site):
    df = to_dataframe(simulator.run(site))
    assert isinstance(df, pd.DataFrame)
    assert len(df) == 5
    assert {"label", "system_type", "estimated_cost", "payback_period"} <= set(df.columns)
    assert df.iloc[0]["scenario"] == "current"
