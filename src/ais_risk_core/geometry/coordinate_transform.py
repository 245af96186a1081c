"""
Local planar projection and great-circle distance

좌표계 정의:
-------------
local equirectangular (flat earth):
   - x = East (meters), y = North (meters)
   - y = latitude * 111120
   - x = longitude * 111120 * cos(reference latitude)
   - reference latitude = self vessel latitude, clamped to +-89.9

Only valid at collision-avoidance ranges (tens of NM). Do not use it for
long-range navigation; use haversine_distance for ranges.
"""

from typing import Tuple

import numpy as np

from ..constants import (
    METERS_PER_DEGREE_LAT,
    EARTH_RADIUS_M,
    MAX_PROJECTION_LATITUDE,
)
from ..utils import clamp


def clamp_latitude(latitude: float) -> float:
    """
    Clamp a latitude to [-89.9, 89.9] so cos(latitude) never reaches zero.

    Args:
        latitude: degrees

    Returns:
        Clamped latitude (degrees)
    """
    return clamp(latitude, -MAX_PROJECTION_LATITUDE, MAX_PROJECTION_LATITUDE)


def longitude_scale(reference_latitude: float) -> float:
    """Meters per degree of longitude at the (clamped) reference latitude."""
    return METERS_PER_DEGREE_LAT * float(np.cos(np.radians(clamp_latitude(reference_latitude))))


def latlon_to_planar(
    latitude: float,
    longitude: float,
    reference_latitude: float
) -> Tuple[float, float]:
    """
    Project latitude/longitude into the local planar frame.

    Args:
        latitude: degrees
        longitude: degrees
        reference_latitude: latitude (degrees) used for longitude scaling,
            normally the self vessel's latitude

    Returns:
        (x_east, y_north) in meters
    """
    y = latitude * METERS_PER_DEGREE_LAT
    x = longitude * longitude_scale(reference_latitude)
    return x, y


def haversine_distance(
    lat1: float,
    lon1: float,
    lat2: float,
    lon2: float
) -> float:
    """
    Great-circle distance between two positions (haversine formula).

    Args:
        lat1, lon1: first position (degrees)
        lat2, lon2: second position (degrees)

    Returns:
        Distance in meters
    """
    d_lat = np.radians(lat2 - lat1)
    d_lon = np.radians(lon2 - lon1)
    a = (
        np.sin(d_lat / 2) ** 2
        + np.cos(np.radians(lat1)) * np.cos(np.radians(lat2)) * np.sin(d_lon / 2) ** 2
    )
    c = 2 * np.arctan2(np.sqrt(a), np.sqrt(1 - a))
    return float(EARTH_RADIUS_M * c)
