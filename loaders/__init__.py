"""
Data loaders for the Rainwater Harvesting Advisor.

Includes:
- Region table (named districts and cities)
- Rainfall estimates (annual + monthly)
- Groundwater estimates
- Geocoding (Nominatim, PIN code fallback)
- Site fetcher (combines all sources into a report)
"""

from loaders.regions import RegionClass, RegionRecord, find_by_name, find_nearest
from loaders.rainfall import RainfallEstimator, RainfallProfile, get_rainfall_estimator
from loaders.groundwater import GroundwaterEstimator, GroundwaterProfile, get_groundwater_estimator
from loaders.geocoder import Geocoder, LocationResult, get_geocoder
from loaders.site import PropertyDetails, SiteDataFetcher, get_site_fetcher

__all__ = [
    "RegionClass",
    "RegionRecord",
    "find_by_name",
    "find_nearest",
    "RainfallEstimator",
    "RainfallProfile",
    "get_rainfall_estimator",
    "GroundwaterEstimator",
    "GroundwaterProfile",
    "get_groundwater_estimator",
    "Geocoder",
    "LocationResult",
    "get_geocoder",
    "PropertyDetails",
    "SiteDataFetcher",
    "get_site_fetcher",
]
