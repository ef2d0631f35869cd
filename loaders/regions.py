"""
Region Table - Known rainfall regions for lookup by name or proximity.

Covers the districts of Andhra Pradesh (plus the Eastern Ghats hill
stations and the larger towns) and ten major Indian cities. Annual totals
are long-period normals in millimetres.
"""

import math
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

log = logging.getLogger(__name__)


class RegionClass(Enum):
    """Hydro-climatic class of a region."""
    COASTAL = "coastal"
    DELTA = "delta"
    RAYALASEEMA = "rayalaseema"
    HILLY = "hilly"
    INLAND = "inland"


@dataclass(frozen=True)
class RegionRecord:
    """One row of the region table."""
    key: str
    name: str
    lat: float
    lng: float
    annual_rainfall_mm: float
    region_class: RegionClass
    reliability: float
    aliases: Tuple[str, ...] = field(default_factory=tuple)

    def names(self) -> Tuple[str, ...]:
        return (self.key,) + self.aliases


# India's bounding box in decimal degrees
INDIA_BOUNDS = {
    "min_lat": 6.0,
    "max_lat": 37.6,
    "min_lng": 68.7,
    "max_lng": 97.25,
}

# Nearest-neighbour matches farther than this (degrees) are rejected
MAX_MATCH_DISTANCE_DEG = 1.0


# Hill stations come first so "Araku Valley, Visakhapatnam" matches Araku.
REGIONS: List[RegionRecord] = [
    # Eastern Ghats
    RegionRecord("araku valley", "Araku Valley, Andhra Pradesh", 18.3273, 82.8775, 1450, RegionClass.HILLY, 0.80, ("araku",)),
    RegionRecord("paderu", "Paderu, Andhra Pradesh", 18.0700, 82.6700, 1500, RegionClass.HILLY, 0.78),

    # Andhra Pradesh districts
    RegionRecord("srikakulam", "Srikakulam, Andhra Pradesh", 18.2949, 83.8938, 1162, RegionClass.COASTAL, 0.88),
    RegionRecord("vizianagaram", "Vizianagaram, Andhra Pradesh", 18.1067, 83.3956, 1131, RegionClass.COASTAL, 0.87),
    RegionRecord("visakhapatnam", "Visakhapatnam, Andhra Pradesh", 17.6868, 83.2185, 1202, RegionClass.COASTAL, 0.90, ("vizag", "vishakhapatnam")),
    RegionRecord("east godavari", "East Godavari, Andhra Pradesh", 16.9891, 82.2475, 1218, RegionClass.DELTA, 0.88, ("kakinada",)),
    RegionRecord("west godavari", "West Godavari, Andhra Pradesh", 16.7107, 81.0952, 1152, RegionClass.DELTA, 0.87, ("eluru",)),
    RegionRecord("krishna", "Krishna, Andhra Pradesh", 16.1875, 81.1389, 1028, RegionClass.DELTA, 0.88, ("machilipatnam",)),
    RegionRecord("guntur", "Guntur, Andhra Pradesh", 16.3067, 80.4365, 895, RegionClass.COASTAL, 0.86),
    RegionRecord("prakasam", "Prakasam, Andhra Pradesh", 15.5057, 80.0499, 872, RegionClass.COASTAL, 0.84, ("ongole",)),
    RegionRecord("nellore", "Nellore, Andhra Pradesh", 14.4426, 79.9865, 1080, RegionClass.COASTAL, 0.86),
    RegionRecord("kurnool", "Kurnool, Andhra Pradesh", 15.8281, 78.0373, 670, RegionClass.RAYALASEEMA, 0.83),
    RegionRecord("anantapur", "Anantapur, Andhra Pradesh", 14.6819, 77.6006, 553, RegionClass.RAYALASEEMA, 0.82, ("anantapuramu",)),
    RegionRecord("kadapa", "Kadapa, Andhra Pradesh", 14.4673, 78.8242, 700, RegionClass.RAYALASEEMA, 0.82, ("cuddapah",)),
    RegionRecord("chittoor", "Chittoor, Andhra Pradesh", 13.2172, 79.1003, 918, RegionClass.RAYALASEEMA, 0.83),

    # Andhra Pradesh towns
    RegionRecord("vijayawada", "Vijayawada, Andhra Pradesh", 16.5062, 80.6480, 1030, RegionClass.DELTA, 0.88),
    RegionRecord("rajahmundry", "Rajahmundry, Andhra Pradesh", 17.0005, 81.8040, 1100, RegionClass.DELTA, 0.86, ("rajamahendravaram",)),
    RegionRecord("tirupati", "Tirupati, Andhra Pradesh", 13.6288, 79.4192, 1000, RegionClass.RAYALASEEMA, 0.84),

    # Major cities
    RegionRecord("mumbai", "Mumbai, Maharashtra", 19.0760, 72.8777, 2200, RegionClass.COASTAL, 0.92, ("bombay",)),
    RegionRecord("delhi", "Delhi, India", 28.7041, 77.1025, 600, RegionClass.INLAND, 0.78),
    RegionRecord("bangalore", "Bangalore, Karnataka", 12.9716, 77.5946, 900, RegionClass.INLAND, 0.85, ("bengaluru",)),
    RegionRecord("hyderabad", "Hyderabad, Telangana", 17.3850, 78.4867, 800, RegionClass.INLAND, 0.82, ("secunderabad",)),
    RegionRecord("chennai", "Chennai, Tamil Nadu", 13.0827, 80.2707, 1200, RegionClass.COASTAL, 0.88, ("madras",)),
    RegionRecord("kolkata", "Kolkata, West Bengal", 22.5726, 88.3639, 1600, RegionClass.DELTA, 0.90, ("calcutta",)),
    RegionRecord("pune", "Pune, Maharashtra", 18.5204, 73.8567, 700, RegionClass.INLAND, 0.86),
    RegionRecord("ahmedabad", "Ahmedabad, Gujarat", 23.0225, 72.5714, 800, RegionClass.INLAND, 0.75),
    RegionRecord("jaipur", "Jaipur, Rajasthan", 26.9124, 75.7873, 550, RegionClass.INLAND, 0.70),
    RegionRecord("kochi", "Kochi, Kerala", 9.9312, 76.2673, 3000, RegionClass.COASTAL, 0.95, ("cochin", "ernakulam")),
]


def is_within_india(lat: float, lng: float) -> bool:
    """Check if a point is inside India's bounding box."""
    return (INDIA_BOUNDS["min_lat"] <= lat <= INDIA_BOUNDS["max_lat"] and
            INDIA_BOUNDS["min_lng"] <= lng <= INDIA_BOUNDS["max_lng"])


def find_by_name(location: str) -> Optional[RegionRecord]:
    """Case-insensitive substring match of any region name inside `location`."""
    text = (location or "").strip().lower()
    if not text:
        return None
    for record in REGIONS:
        if any(name in text for name in record.names()):
            return record
    return None


def find_nearest(lat: float, lng: float,
                 max_distance: float = MAX_MATCH_DISTANCE_DEG) -> Optional[Tuple[RegionRecord, float]]:
    """
    Nearest region by Euclidean distance in lat/lng degrees.

    Returns:
        (record, distance) when inside India and closer than `max_distance`,
        otherwise None
    """
    if not is_within_india(lat, lng):
        return None

    best = min(REGIONS, key=lambda r: math.hypot(r.lat - lat, r.lng - lng))
    distance = math.hypot(best.lat - lat, best.lng - lng)
    if distance < max_distance:
        return best, distance

    log.debug(f"Nearest region {best.key} is {distance:.2f}° away, rejected")
    return None
