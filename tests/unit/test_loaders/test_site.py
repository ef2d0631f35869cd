import pytest
from unittest.mock import MagicMock

from core.config import EngineSettings
from core.models import Coordinates, InvalidInputError, SystemArchetype
from loaders.geocoder import LocationResult
from loaders.rainfall import DEFAULT_COORDINATES
from loaders.site import PropertyDetails, SiteDataFetcher


@pytest.fixture
def geocoder():
    mock = MagicMock()
    mock.geocode.return_value = [
        LocationResult(address="Guntur, Andhra Pradesh, India",
                       coordinates=Coordinates(16.3, 80.43), accuracy="high"),
    ]
    return mock


@pytest.fixture
def fetcher(geocoder, tmp_path):
    settings = EngineSettings(jitter_enabled=False, geocode_cache_path=str(tmp_path / "geo.db"))
    return SiteDataFetcher(geocoder=geocoder, settings=settings)


def details(**overrides):
    values = dict(location="Guntur", roof_area_m2=150, num_dwellers=4, available_space_m2=25)
    values.update(overrides)
    return PropertyDetails(**values)


def test_build_site_input(fetcher, geocoder):
    site, rainfall, groundwater = fetcher.build_site_input(details())

    geocoder.geocode.assert_called_once_with("Guntur", limit=1)
    assert site.coordinates == Coordinates(16.3, 80.43)
    assert site.annual_rainfall_mm == 895
    assert site.groundwater_depth_m == 8.0
    assert site.soil_type == "loam"
    assert site.roof_type == "concrete"
    assert rainfall.annual_rainfall_mm == site.annual_rainfall_mm
    assert groundwater.depth_m == site.groundwater_depth_m


def test_given_coordinates_skip_geocoding(fetcher, geocoder):
    site, _, _ = fetcher.build_site_input(details(coordinates=Coordinates(16.31, 80.44)))
    geocoder.geocode.assert_not_called()
    assert site.coordinates == Coordinates(16.31, 80.44)


def test_geocode_miss_falls_back_to_estimates(fetcher, geocoder, caplog):
    geocoder.geocode.return_value = []
    site, rainfall, _ = fetcher.build_site_input(details(location="Nowhere in particular"))

    assert site.coordinates == DEFAULT_COORDINATES
    assert rainfall.annual_rainfall_mm == 800
    assert "Could not geocode" in caplog.text


def test_explicit_soil_and_roof(fetcher):
    site, _, _ = fetcher.build_site_input(details(soil_type="sandy loam", roof_type="metal", budget=50000))
    assert site.soil_type == "sandy loam"
    assert site.roof_type == "metal"
    assert site.budget == 50000


def test_assess(fetcher):
    report = fetcher.assess(details())

    assert report.recommendation.system_type is SystemArchetype.INJECTION_WELL_SYSTEM
    assert report.structure.type == "Injection Well System"
    assert report.rainfall.source == "Regional Normals"
    assert report.groundwater.region_class.value == "coastal"
    assert report.cost_breakdown.total == report.structure.estimated_cost


def test_assess_rejects_bad_details(fetcher):
    with pytest.raises(InvalidInputError):
        fetcher.assess(details(num_dwellers=0))


def test_geocoder_created_lazily(tmp_path, monkeypatch):
    created = MagicMock()
    monkeypatch.setattr("loaders.site.get_geocoder", created)
    fetcher = SiteDataFetcher(settings=EngineSettings(jitter_enabled=False))
    created.assert_not_called()

    fetcher.build_site_input(details(coordinates=Coordinates(16.3, 80.43)))
    created.assert_not_called()
