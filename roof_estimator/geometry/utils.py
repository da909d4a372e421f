"""
Geometry utility functions

Ring helpers for roof polygons expressed as GeoPoint lists
"""

import math
from typing import List, Tuple

from pyproj import Geod
from shapely.geometry import Polygon as ShapelyPolygon

from ..config import get_config
from ..models import GeoPoint
from . import units


_geod_cache = {}


def get_geod() -> Geod:
    """Geod for the configured ellipsoid (cached per ellipsoid name)"""
    ellps = get_config().estimation.ellipsoid
    if ellps not in _geod_cache:
        _geod_cache[ellps] = Geod(ellps=ellps)
    return _geod_cache[ellps]


def is_closed(points: List[GeoPoint]) -> bool:
    if len(points) < 2:
        return False
    return points[0].lat == points[-1].lat and points[0].lng == points[-1].lng


def close_ring(points: List[GeoPoint]) -> List[GeoPoint]:
    """Ensure ring is closed (first point == last point)"""
    if not points:
        return points

    if not is_closed(points):
        return list(points) + [points[0]]

    return list(points)


def open_ring(points: List[GeoPoint]) -> List[GeoPoint]:
    """Drop the duplicate closing point if present"""
    if is_closed(points) and len(points) > 1:
        return list(points[:-1])
    return list(points)


def get_centroid(points: List[GeoPoint]) -> GeoPoint:
    """Vertex average of the ring (closing point ignored)"""
    if not points:
        return GeoPoint(lat=0.0, lng=0.0)

    clean = open_ring(points)
    lat_sum = sum(p.lat for p in clean)
    lng_sum = sum(p.lng for p in clean)

    return GeoPoint(lat=lat_sum / len(clean), lng=lng_sum / len(clean))


def to_local_meters(
    points: List[GeoPoint],
    ref: GeoPoint
) -> List[Tuple[float, float]]:
    """Equirectangular projection of points to (x, y) meters from ref"""
    m_per_deg_lat = units.meters_per_degree_lat()
    m_per_deg_lng = units.meters_per_degree_lng(ref.lat)

    return [
        ((p.lng - ref.lng) * m_per_deg_lng, (p.lat - ref.lat) * m_per_deg_lat)
        for p in points
    ]


def shoelace_area(coords: List[Tuple[float, float]]) -> float:
    """Unsigned area of a planar ring"""
    if len(coords) < 3:
        return 0.0

    n = len(coords)
    area = 0.0
    for i in range(n):
        j = (i + 1) % n
        area += coords[i][0] * coords[j][1]
        area -= coords[j][0] * coords[i][1]

    return abs(area) / 2.0


def planar_area_sqm(points: List[GeoPoint]) -> float:
    """Ring area in square meters using shoelace on a local projection"""
    ring = open_ring(points)
    if len(ring) < 3:
        return 0.0

    local = to_local_meters(ring, get_centroid(ring))
    return shoelace_area(local)


def geodesic_area_sqm(points: List[GeoPoint]) -> float:
    """Ring area in square meters on the configured ellipsoid"""
    ring = close_ring(points)
    lons = [p.lng for p in ring]
    lats = [p.lat for p in ring]

    area, _perimeter = get_geod().polygon_area_perimeter(lons, lats)
    return abs(area)


def get_dimensions_ft(points: List[GeoPoint]) -> Tuple[float, float, float]:
    """Bounding box width, height and diagonal in feet"""
    if not points:
        return (0.0, 0.0, 0.0)

    min_lat = min(p.lat for p in points)
    max_lat = max(p.lat for p in points)
    min_lng = min(p.lng for p in points)
    max_lng = max(p.lng for p in points)

    center_lat = (min_lat + max_lat) / 2
    width = (max_lng - min_lng) * units.feet_per_degree_lng(center_lat)
    height = (max_lat - min_lat) * units.feet_per_degree_lat()

    return width, height, math.sqrt(width * width + height * height)


def is_simple_ring(points: List[GeoPoint]) -> bool:
    """True if the ring is a valid, non-self-intersecting polygon"""
    ring = open_ring(points)
    if len(ring) < 3:
        return False

    try:
        polygon = ShapelyPolygon([(p.lng, p.lat) for p in ring])
    except ValueError:
        return False

    return polygon.is_valid and polygon.area > 0
