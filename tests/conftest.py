import pytest

from core.models import Coordinates, SiteInput


def _make_site(**overrides) -> SiteInput:
    values = dict(
        roof_area_m2=150.0,
        location="Test Site",
        coordinates=Coordinates(16.3, 80.4),
        annual_rainfall_mm=800.0,
        groundwater_depth_m=15.0,
        soil_type="loam",
        roof_type="concrete",
        available_space_m2=25.0,
        num_dwellers=4,
    )
    values.update(overrides)
    return SiteInput(**values)


@pytest.fixture
def make_site():
    """Build a SiteInput from the reference site with some fields overridden."""
    return _make_site


@pytest.fixture
def site():
    """Reference site: 150 m² concrete roof, 800 mm rain, loam over a 15 m water table."""
    return _make_site()
