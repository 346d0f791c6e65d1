"""
Latitude/longitude <-> local metric conversions.

Spherical-Earth, equirectangular approximations. They are good for offsets
and rotations of modest extent (a site, a yard, a town) and degrade towards
the poles. At +/-90 degrees cos(latitude) is a tiny positive float rather
than zero, so longitude deltas come back very large but finite.
"""

from __future__ import annotations

import math
from typing import Tuple

EARTH_RADIUS_M = 6378137.0
METERS_PER_DEG_LAT = 111320.0


def meters_to_lat_delta(meters: float) -> float:
    """
    Convert a north/south distance to degrees of latitude.

    Example:
        >>> meters_to_lat_delta(111320)
        1.0
    """
    return meters / METERS_PER_DEG_LAT


def meters_to_lon_delta(meters: float, reference_lat_deg: float) -> float:
    """
    Convert an east/west distance to degrees of longitude at a given latitude.

    The result grows towards the poles; at +/-90 degrees it is on the order
    of 1e11 degrees per meter.
    """
    return meters / (METERS_PER_DEG_LAT * math.cos(math.radians(reference_lat_deg)))


def to_local_xy(lon: float, lat: float, origin_lon: float, origin_lat: float) -> Tuple[float, float]:
    """Project lon/lat to planar meters (x east, y north) around an origin."""
    x = (lon - origin_lon) * (math.pi / 180) * EARTH_RADIUS_M * math.cos(origin_lat * math.pi / 180)
    y = (lat - origin_lat) * (math.pi / 180) * EARTH_RADIUS_M
    return x, y


def from_local_xy(x: float, y: float, origin_lon: float, origin_lat: float) -> Tuple[float, float]:
    """Inverse of `to_local_xy`."""
    to_deg = 180 / math.pi
    lon = origin_lon + x / (EARTH_RADIUS_M * math.cos(origin_lat * math.pi / 180)) * to_deg
    lat = origin_lat + (y / EARTH_RADIUS_M) * to_deg
    return lon, lat


def rotate_xy(x: float, y: float, angle_rad: float) -> Tuple[float, float]:
    """Counter-clockwise 2D rotation about (0, 0)."""
    cos_a = math.cos(angle_rad)
    sin_a = math.sin(angle_rad)
    return x * cos_a - y * sin_a, x * sin_a + y * cos_a
