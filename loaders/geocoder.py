"""
Geocoder - Resolve Indian addresses to coordinates using Nominatim.

Features:
- Rate limiting (1 request/second per Nominatim policy)
- SQLite caching of raw responses
- Retry with exponential backoff
- Results ranked by accuracy, then by how well they match the query
- PIN code fallback when Nominatim finds nothing
"""

import re
import time
import sqlite3
import json
import hashlib
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import requests
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from core.config import EngineSettings
from core.models import Coordinates
from loaders.regions import is_within_india

log = logging.getLogger(__name__)

# Rate limiter - tracks last request time
_last_request_time = 0.0
_MIN_REQUEST_INTERVAL = 1.1  # slightly over 1/sec

ACCURACY_RANK = {"high": 3, "medium": 2, "low": 1}
DUPLICATE_TOLERANCE_DEG = 0.001


@dataclass
class LocationResult:
    """One candidate location for an address."""
    address: str
    coordinates: Coordinates
    accuracy: str  # high | medium | low
    components: Dict[str, str] = field(default_factory=dict)
    bounding_box: Optional[Dict[str, float]] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "address": self.address,
            "coordinates": self.coordinates.to_dict(),
            "accuracy": self.accuracy,
            "components": dict(self.components),
            "bounding_box": self.bounding_box,
        }


# area, district, state, lat, lng
PIN_CODES = {
    "500001": ("Hyderabad GPO", "Hyderabad", "Telangana", 17.3850, 78.4867),
    "400001": ("Mumbai GPO", "Mumbai", "Maharashtra", 19.0760, 72.8777),
    "110001": ("New Delhi GPO", "New Delhi", "Delhi", 28.7041, 77.1025),
    "560001": ("Bangalore GPO", "Bangalore", "Karnataka", 12.9716, 77.5946),
    "600001": ("Chennai GPO", "Chennai", "Tamil Nadu", 13.0827, 80.2707),
    "700001": ("Kolkata GPO", "Kolkata", "West Bengal", 22.5726, 88.3639),
    "411001": ("Pune GPO", "Pune", "Maharashtra", 18.5204, 73.8567),
    "380001": ("Ahmedabad GPO", "Ahmedabad", "Gujarat", 23.0225, 72.5714),
    "302001": ("Jaipur GPO", "Jaipur", "Rajasthan", 26.9124, 75.7873),
    "682001": ("Kochi GPO", "Ernakulam", "Kerala", 9.9312, 76.2673),
    "530001": ("Visakhapatnam GPO", "Visakhapatnam", "Andhra Pradesh", 17.6868, 83.2185),
    "533001": ("Kakinada GPO", "East Godavari", "Andhra Pradesh", 16.9891, 82.2475),
    "522001": ("Guntur GPO", "Guntur", "Andhra Pradesh", 16.3067, 80.4365),
    "524001": ("Nellore GPO", "Nellore", "Andhra Pradesh", 14.4426, 79.9865),
    "515001": ("Anantapur GPO", "Anantapur", "Andhra Pradesh", 14.6819, 77.6006),
    "517001": ("Tirupati GPO", "Chittoor", "Andhra Pradesh", 13.6288, 79.4192),
    "518001": ("Kurnool GPO", "Kurnool", "Andhra Pradesh", 15.8281, 78.0373),
    "500002": ("Secunderabad", "Hyderabad", "Telangana", 17.4399, 78.4983),
    "506001": ("Warangal GPO", "Warangal", "Telangana", 17.9689, 79.5941),
    "507001": ("Khammam GPO", "Khammam", "Telangana", 17.2473, 80.1514),
}

_PIN_PATTERN = re.compile(r"\b\d{6}\b")


def is_valid_coordinates(lat: float, lng: float) -> bool:
    return -90 <= lat <= 90 and -180 <= lng <= 180


class GeocodingCache:
    """SQLite cache for raw Nominatim responses."""

    def __init__(self, db_path: str = "geocode_cache.db"):
        self.db_path = db_path
        self._init_db()

    def _init_db(self):
        conn = sqlite3.connect(self.db_path)
        conn.execute("""
            CREATE TABLE IF NOT EXISTS nominatim_cache (
                query_hash TEXT PRIMARY KEY,
                query_text TEXT,
                response_json TEXT,
                created_at REAL
            )
        """)
        conn.commit()
        conn.close()

    @staticmethod
    def _hash_query(query: str) -> str:
        return hashlib.md5(query.lower().strip().encode()).hexdigest()

    def get(self, query: str) -> Optional[Any]:
        conn = sqlite3.connect(self.db_path)
        row = conn.execute(
            "SELECT response_json FROM nominatim_cache WHERE query_hash = ?",
            (self._hash_query(query),)
        ).fetchone()
        conn.close()
        return json.loads(row[0]) if row else None

    def set(self, query: str, response: Any):
        conn = sqlite3.connect(self.db_path)
        conn.execute(
            """INSERT OR REPLACE INTO nominatim_cache
               (query_hash, query_text, response_json, created_at)
               VALUES (?, ?, ?, ?)""",
            (self._hash_query(query), query, json.dumps(response), time.time())
        )
        conn.commit()
        conn.close()


def parse_components(address: Dict[str, str]) -> Dict[str, str]:
    """Flatten a Nominatim `address` block into the components we report."""
    components = {
        "city": address.get("city") or address.get("town") or address.get("village"),
        "state": address.get("state"),
        "country": address.get("country"),
        "pincode": address.get("postcode"),
        "district": address.get("state_district"),
        "suburb": address.get("suburb") or address.get("neighbourhood"),
        "road": address.get("road"),
        "house_number": address.get("house_number"),
    }
    return {key: value for key, value in components.items() if value}


def classify_accuracy(item: Dict[str, Any], query: str) -> str:
    """Grade a Nominatim hit as high / medium / low accuracy."""
    importance = float(item.get("importance") or 0)
    place_type = item.get("type")
    osm_type = item.get("osm_type")

    query_lower = query.lower()
    display_lower = item.get("display_name", "").lower()
    good_match = query_lower in display_lower or any(
        word in display_lower for word in query_lower.split()
    )

    if (importance > 0.6 or place_type in ("house", "building", "address")
            or osm_type == "node" or (good_match and importance > 0.4)):
        return "high"
    if (importance > 0.3 or place_type in ("residential", "commercial", "suburb", "neighbourhood")
            or osm_type == "way"):
        return "medium"
    return "low"


def relevance_score(result: LocationResult, query: str) -> int:
    query_lower = query.lower()
    components = result.components
    score = 0

    if query_lower in result.address.lower():
        score += 10
    if query_lower in components.get("city", "").lower():
        score += 8
    if query_lower in components.get("district", "").lower():
        score += 6
    if query_lower in components.get("state", "").lower():
        score += 4
    if "pincode" in components and query_lower.replace(" ", "") in components["pincode"]:
        score += 9

    # More specific places rank higher
    if "road" in components:
        score += 2
    if "suburb" in components:
        score += 1

    return score


def rank_results(results: List[LocationResult], query: str) -> List[LocationResult]:
    """Sort by accuracy then relevance and drop near-duplicate coordinates."""
    ordered = sorted(
        results,
        key=lambda r: (ACCURACY_RANK[r.accuracy], relevance_score(r, query)),
        reverse=True,
    )

    kept: List[LocationResult] = []
    for result in ordered:
        duplicate = any(
            abs(prev.coordinates.lat - result.coordinates.lat) < DUPLICATE_TOLERANCE_DEG and
            abs(prev.coordinates.lng - result.coordinates.lng) < DUPLICATE_TOLERANCE_DEG
            for prev in kept
        )
        if not duplicate:
            kept.append(result)
    return kept


def lookup_pin_code(address: str) -> List[LocationResult]:
    """Resolve the first 6-digit PIN code in `address` from the static table."""
    match = _PIN_PATTERN.search(address)
    if not match or match.group() not in PIN_CODES:
        return []

    pin = match.group()
    area, district, state, lat, lng = PIN_CODES[pin]
    return [LocationResult(
        address=f"{area}, {district}, {state}, India - {pin}",
        coordinates=Coordinates(lat, lng),
        accuracy="high",
        components={
            "city": area,
            "district": district,
            "state": state,
            "pincode": pin,
            "country": "India",
        },
    )]


class Geocoder:
    """
    Geocoder using OpenStreetMap Nominatim API, biased to India.

    Respects rate limits: max 1 request per second.
    Transport failures are logged and yield an empty result.
    """

    NOMINATIM_URL = "https://nominatim.openstreetmap.org"

    def __init__(self, cache_path: str = "geocode_cache.db",
                 user_agent: str = EngineSettings.geocoder_user_agent,
                 min_request_interval: float = _MIN_REQUEST_INTERVAL):
        self.cache = GeocodingCache(cache_path)
        self.min_request_interval = min_request_interval
        self.session = requests.Session()
        self.session.headers.update({"User-Agent": user_agent})

    def _rate_limit(self):
        """Ensure we don't exceed 1 request per second."""
        global _last_request_time
        elapsed = time.time() - _last_request_time
        if elapsed < self.min_request_interval:
            time.sleep(self.min_request_interval - elapsed)
        _last_request_time = time.time()

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=2, min=2, max=10),
        retry=retry_if_exception_type(requests.RequestException),
        reraise=True,
    )
    def _request(self, endpoint: str, params: Dict) -> Any:
        """Make a rate-limited request with retry."""
        self._rate_limit()
        response = self.session.get(f"{self.NOMINATIM_URL}/{endpoint}", params=params, timeout=10)
        response.raise_for_status()
        return response.json()

    def _search(self, query: str, limit: int) -> List[Dict]:
        cache_key = f"search:{limit}:{query}"
        cached = self.cache.get(cache_key)
        if cached is not None:
            log.debug(f"Cache hit for: {query}")
            return cached

        params = {
            "q": query,
            "format": "json",
            "limit": limit,
            "countrycodes": "in",
            "addressdetails": 1,
        }
        try:
            items = self._request("search", params)
        except (requests.RequestException, ValueError) as e:
            log.error(f"Geocoding failed for '{query}': {e}")
            return []

        if items:
            self.cache.set(cache_key, items)
        return items or []

    def geocode(self, address: str, limit: int = 8) -> List[LocationResult]:
        """
        Convert an address to ranked candidate locations.

        Args:
            address: Free-form address, e.g. "Brodipet, Guntur 522002"
            limit: Maximum number of results

        Returns:
            Candidates best-first; empty if nothing was found
        """
        query = address.strip()
        if not query:
            return []
        if "india" not in query.lower():
            query += ", India"

        results = []
        for item in self._search(query, limit):
            bbox = None
            if item.get("boundingbox"):
                bb = item["boundingbox"]
                bbox = {
                    "min_lat": float(bb[0]),
                    "max_lat": float(bb[1]),
                    "min_lng": float(bb[2]),
                    "max_lng": float(bb[3]),
                }
            results.append(LocationResult(
                address=item.get("display_name", ""),
                coordinates=Coordinates(float(item["lat"]), float(item["lon"])),
                accuracy=classify_accuracy(item, address),
                components=parse_components(item.get("address") or {}),
                bounding_box=bbox,
            ))

        if not results:
            results = lookup_pin_code(address)
            if results:
                log.info(f"Resolved {address!r} from PIN code table")

        ranked = rank_results(results, address)[:limit]
        if ranked:
            best = ranked[0].coordinates
            log.info(f"Geocoded: {address} -> ({best.lat}, {best.lng})")
        else:
            log.warning(f"No results for: {address}")
        return ranked

    def reverse_geocode(self, lat: float, lng: float) -> Optional[LocationResult]:
        """
        Convert coordinates to an address.

        Returns:
            LocationResult at the given point, or None if not found
        """
        if not is_valid_coordinates(lat, lng):
            return None

        cache_key = f"reverse:{lat:.6f},{lng:.6f}"
        data = self.cache.get(cache_key)
        if data is None:
            params = {
                "lat": lat,
                "lon": lng,
                "format": "json",
                "addressdetails": 1,
                "zoom": 18,
            }
            try:
                data = self._request("reverse", params)
            except (requests.RequestException, ValueError) as e:
                log.error(f"Reverse geocoding failed: {e}")
                return None
            if not data or "display_name" not in data:
                return None
            self.cache.set(cache_key, data)

        return LocationResult(
            address=data["display_name"],
            coordinates=Coordinates(lat, lng),
            accuracy="high",
            components=parse_components(data.get("address") or {}),
        )


# Singleton instance
_geocoder: Optional[Geocoder] = None


def get_geocoder(settings: Optional[EngineSettings] = None) -> Geocoder:
    """Get the singleton geocoder instance."""
    global _geocoder
    if _geocoder is None:
        settings = settings or EngineSettings.from_env()
        _geocoder = Geocoder(
            cache_path=settings.geocode_cache_path,
            user_agent=settings.geocoder_user_agent,
        )
    return _geocoder
