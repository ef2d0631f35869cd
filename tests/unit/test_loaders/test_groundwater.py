import random
from unittest.mock import MagicMock

import pytest
from core.models import Coordinates
from loaders.groundwater import (
    CONFIDENCE_DEFAULT,
    CONFIDENCE_GENERIC,
    CONFIDENCE_NAME,
    CONFIDENCE_NEAREST,
    GROUNDWATER_BY_CLASS,
    QUALITY_FAIR,
    QUALITY_GOOD,
    GroundwaterEstimator,
    estimate_aquifer_type,
    estimate_depth,
    seasonal_variation,
)
from loaders.regions import RegionClass


@pytest.fixture
def estimator():
    return GroundwaterEstimator(jitter=False)


def test_table_covers_every_class():
    assert set(GROUNDWATER_BY_CLASS) == set(RegionClass)


class TestLookupOrder:
    """Tests for the lookup tiers."""

    def test_name_match(self, estimator):
        profile = estimator.groundwater_for("Kurnool")
        assert profile.depth_m == 22.0
        assert profile.quality == QUALITY_FAIR
        assert profile.aquifer_type == "Hard Rock Aquifer (Granite-Gneiss)"
        assert profile.recharge_rate == 8
        assert profile.confidence == CONFIDENCE_NAME
        assert profile.region_class is RegionClass.RAYALASEEMA

    def test_nearest_region(self, estimator):
        profile = estimator.groundwater_for("Pedakakani village", Coordinates(16.35, 80.40))
        assert profile.depth_m == 8.0
        assert profile.region_class is RegionClass.COASTAL
        assert profile.confidence == CONFIDENCE_NEAREST

    def test_generic_bands(self, estimator):
        profile = estimator.groundwater_for("Somewhere in Haryana", Coordinates(29.9, 76.1))
        assert profile.depth_m == 25.0
        assert profile.aquifer_type == "Alluvial Aquifer"
        assert profile.recharge_rate == 9  # 600 mm × 15 %
        assert profile.quality == QUALITY_GOOD
        assert profile.confidence == CONFIDENCE_GENERIC
        assert profile.region_class is None

    def test_default(self, estimator):
        profile = estimator.groundwater_for("Unknown place")
        assert profile.depth_m == 10.0
        assert profile.aquifer_type == "Hard Rock Aquifer"
        assert profile.recharge_rate == 12
        assert profile.confidence == CONFIDENCE_DEFAULT


def test_seasonal_variation(estimator):
    seasons = estimator.groundwater_for("Kurnool").seasonal_variation
    assert seasons.pre_monsoon == 25.0
    assert seasons.monsoon == 20.0
    assert seasons.post_monsoon == 22.0


def test_monsoon_depth_never_negative():
    assert seasonal_variation(1.0).monsoon == 0.0


class TestJitter:
    """Tests for the random depth perturbation."""

    def test_depth_within_three_meters(self):
        estimator = GroundwaterEstimator(rng=random.Random(9))
        for _ in range(30):
            depth = estimator.groundwater_for("Vijayawada").depth_m
            assert 2.0 <= depth <= 8.0

    def test_depth_floor(self):
        rng = MagicMock()
        rng.uniform.return_value = -3.0
        estimator = GroundwaterEstimator(rng=rng)
        assert estimator._jittered_depth(2.0) == 1.0

    def test_seeded_runs_match(self):
        first = GroundwaterEstimator(rng=random.Random(4)).groundwater_for("Delhi", Coordinates(28.7, 77.1))
        second = GroundwaterEstimator(rng=random.Random(4)).groundwater_for("Delhi", Coordinates(28.7, 77.1))
        assert first == second

    def test_generic_quality_is_random_with_jitter(self):
        rng = MagicMock()
        rng.uniform.return_value = 0.0
        rng.random.return_value = 0.1
        profile = GroundwaterEstimator(rng=rng).groundwater_for("Nowhere", Coordinates(29.9, 76.1))
        assert profile.quality.startswith("Poor")


def test_coarse_helpers():
    assert estimate_depth(23, 88) == 6
    assert estimate_depth(10, 78) == 8
    assert estimate_depth(35, 95) == 10
    assert estimate_aquifer_type(12) == "Sedimentary Aquifer"


def test_to_dict(estimator):
    data = estimator.groundwater_for("Kurnool").to_dict()
    assert data["seasonal_variation"]["pre_monsoon"] == 25.0
    assert data["region_class"] == "rayalaseema"
