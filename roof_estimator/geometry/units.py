"""
Unit and degree conversion helpers shared by synthesis and estimation
"""

import math
from typing import Tuple

from ..config import get_config


def sqft_to_sqm(area_sqft: float) -> float:
    """Square feet to square meters"""
    return area_sqft * get_config().units.sqft_to_sqm


def sqm_to_sqft(area_sqm: float) -> float:
    """Square meters to square feet"""
    return area_sqm * get_config().units.sqm_to_sqft


def feet_per_degree_lat() -> float:
    return get_config().units.feet_per_degree_lat


def feet_per_degree_lng(lat: float) -> float:
    """Feet per degree of longitude, compressed by cos(lat) away from the equator"""
    return feet_per_degree_lat() * math.cos(math.radians(lat))


def meters_per_degree_lat() -> float:
    return feet_per_degree_lat() * get_config().units.meters_per_foot


def meters_per_degree_lng(lat: float) -> float:
    return feet_per_degree_lng(lat) * get_config().units.meters_per_foot


def rectangle_dimensions(area: float, aspect_ratio: float) -> Tuple[float, float]:
    """
    Width and length of a rectangle with the given area and long/short ratio.

    Units follow the input: square meters in, meters out.
    """
    width = math.sqrt(area / aspect_ratio)
    length = width * aspect_ratio
    return width, length


def meters_to_degree_offsets(
    lat: float,
    north_south_m: float,
    east_west_m: float
) -> Tuple[float, float]:
    """Convert a (north-south, east-west) distance in meters to (lat, lng) degrees"""
    lat_offset = north_south_m / meters_per_degree_lat()
    lng_offset = east_west_m / meters_per_degree_lng(lat)
    return lat_offset, lng_offset


def round_half_up(value: float) -> int:
    """Round to nearest integer with .5 going up (form displays use this rule)"""
    return int(math.floor(value + 0.5))


def is_finite_number(value) -> bool:
    if isinstance(value, bool):
        return False
    try:
        return math.isfinite(float(value))
    except (TypeError, ValueError):
        return False
