"""
Site Data Fetcher - Turns what a homeowner knows into a scored report.

    PropertyDetails -> geocode (if needed) -> rainfall + groundwater
                    -> SiteInput -> FeasibilityReport
"""

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from core.config import EngineSettings
from core.engine import FeasibilityReport, RecommendationEngine, get_recommendation_engine
from core.models import Coordinates, SiteInput
from loaders.geocoder import Geocoder, get_geocoder
from loaders.groundwater import GroundwaterEstimator, GroundwaterProfile, get_groundwater_estimator
from loaders.rainfall import RainfallEstimator, RainfallProfile, get_rainfall_estimator

log = logging.getLogger(__name__)

DEFAULT_SOIL_TYPE = "loam"
DEFAULT_ROOF_TYPE = "concrete"


@dataclass
class PropertyDetails:
    """Property attributes as entered by the user."""
    location: str
    roof_area_m2: float
    num_dwellers: int
    available_space_m2: float
    roof_type: str = DEFAULT_ROOF_TYPE
    soil_type: Optional[str] = None
    coordinates: Optional[Coordinates] = None
    budget: Optional[float] = None


class SiteDataFetcher:
    """
    Assembles a SiteInput from property details plus estimated site data.

    The geocoder is only created when a location actually needs resolving.
    """

    def __init__(self, geocoder: Optional[Geocoder] = None,
                 rainfall: Optional[RainfallEstimator] = None,
                 groundwater: Optional[GroundwaterEstimator] = None,
                 engine: Optional[RecommendationEngine] = None,
                 settings: Optional[EngineSettings] = None):
        self.settings = settings or EngineSettings.from_env()
        self._geocoder = geocoder
        self.rainfall = rainfall or get_rainfall_estimator(self.settings)
        self.groundwater = groundwater or get_groundwater_estimator(self.settings)
        self.engine = engine or get_recommendation_engine()

    @property
    def geocoder(self) -> Geocoder:
        if self._geocoder is None:
            self._geocoder = get_geocoder(self.settings)
        return self._geocoder

    def resolve_coordinates(self, details: PropertyDetails) -> Optional[Coordinates]:
        if details.coordinates is not None:
            return details.coordinates

        results = self.geocoder.geocode(details.location, limit=1)
        if not results:
            log.warning(f"Could not geocode {details.location!r}; using regional estimates only")
            return None
        return results[0].coordinates

    def build_site_input(self, details: PropertyDetails) -> Tuple[SiteInput, RainfallProfile, GroundwaterProfile]:
        """
        Gather site data for a property.

        Returns:
            (site, rainfall profile, groundwater profile)
        """
        coords = self.resolve_coordinates(details)
        rainfall = self.rainfall.rainfall_for(details.location, coords)
        groundwater = self.groundwater.groundwater_for(details.location, coords)

        site = SiteInput(
            roof_area_m2=details.roof_area_m2,
            location=details.location,
            coordinates=coords or rainfall.coordinates,
            annual_rainfall_mm=rainfall.annual_rainfall_mm,
            groundwater_depth_m=groundwater.depth_m,
            soil_type=details.soil_type or DEFAULT_SOIL_TYPE,
            roof_type=details.roof_type,
            available_space_m2=details.available_space_m2,
            num_dwellers=details.num_dwellers,
            budget=details.budget,
        )
        log.debug(f"Site for {details.location!r}: rain {site.annual_rainfall_mm} mm "
                  f"({rainfall.source}), water table {site.groundwater_depth_m} m")
        return site, rainfall, groundwater

    def assess(self, details: PropertyDetails) -> FeasibilityReport:
        """Full report for a property."""
        site, rainfall, groundwater = self.build_site_input(details)
        return self.engine.build_report(
            site, rainfall, groundwater, tariff=self.settings.water_tariff_per_liter
        )


def get_site_fetcher(settings: Optional[EngineSettings] = None) -> SiteDataFetcher:
    """Factory function for the site data fetcher."""
    return SiteDataFetcher(settings=settings)
