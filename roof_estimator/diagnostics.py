"""
Polygon diagnostics

Helpers for troubleshooting polygon scaling and area mismatches:
a measurement report, rescaling a ring to a target area, and GeoJSON export.
"""

import math
from typing import List, Optional, Any

from loguru import logger
from pyproj.exceptions import GeodError

from .exceptions import InvalidInput
from .estimation.area_estimator import parse_polygon
from .geometry import units
from .geometry.utils import (
    close_ring,
    geodesic_area_sqm,
    get_centroid,
    get_dimensions_ft,
    is_simple_ring,
    open_ring,
    planar_area_sqm,
)
from .models import GeoJSONPolygon, GeoPoint, PolygonDimensions, PolygonReport


def describe_polygon(polygon: Any, expected_size: Optional[float] = None) -> PolygonReport:
    """
    Measure a polygon

    Args:
        polygon: Ring of GeoPoints or lat/lng dicts
        expected_size: Size in square feet the polygon is meant to represent

    Returns:
        PolygonReport

    Raises:
        InvalidInput: if the polygon cannot be parsed
    """
    points = parse_polygon(polygon)
    ring = open_ring(points)

    width, height, diagonal = get_dimensions_ft(ring)
    planar_sqft = units.sqm_to_sqft(planar_area_sqm(ring))

    try:
        geodesic_sqft = units.sqm_to_sqft(geodesic_area_sqm(ring))
    except (GeodError, ValueError) as e:
        logger.warning(f"Geodesic area unavailable: {e}")
        geodesic_sqft = None

    report = PolygonReport(
        vertex_count=len(points),
        centroid=get_centroid(ring),
        dimensions=PolygonDimensions(
            width_ft=units.round_half_up(width),
            height_ft=units.round_half_up(height),
            diagonal_ft=units.round_half_up(diagonal),
        ),
        planar_area_sqft=round(planar_sqft, 2),
        geodesic_area_sqft=round(geodesic_sqft, 2) if geodesic_sqft is not None else None,
        is_simple=is_simple_ring(ring),
    )

    if expected_size and expected_size > 0 and planar_sqft > 0:
        ratio = planar_sqft / expected_size
        report.expected_size_sqft = expected_size
        report.size_ratio = round(ratio, 4)
        report.recommended_scale_factor = round(1 / math.sqrt(ratio), 4)

    logger.debug(
        f"Polygon: {report.vertex_count} points, {report.planar_area_sqft} sqft planar, "
        f"{report.dimensions.width_ft}x{report.dimensions.height_ft} ft"
    )
    return report


def rescale_polygon(polygon: List[GeoPoint], target_size: float) -> List[GeoPoint]:
    """
    Scale a ring about its centroid so its area matches target_size sqft

    Returns the input unchanged if it cannot be measured.
    """
    if not units.is_finite_number(target_size) or float(target_size) <= 0:
        logger.warning(f"Invalid target size for polygon rescaling: {target_size!r}")
        return polygon

    try:
        points = parse_polygon(polygon)
    except InvalidInput as e:
        logger.warning(f"Cannot rescale polygon: {e}")
        return polygon

    current_sqft = units.sqm_to_sqft(planar_area_sqm(points))
    if current_sqft <= 0:
        logger.warning("Cannot rescale a polygon with zero area")
        return polygon

    factor = math.sqrt(float(target_size) / current_sqft)
    centroid = get_centroid(points)

    logger.info(
        f"Rescaling polygon from {current_sqft:.2f} to {target_size} sqft (factor {factor:.4f})"
    )
    return [
        GeoPoint(
            lat=centroid.lat + (p.lat - centroid.lat) * factor,
            lng=centroid.lng + (p.lng - centroid.lng) * factor,
        )
        for p in points
    ]


def to_geojson(polygon: List[GeoPoint]) -> GeoJSONPolygon:
    """Closed GeoJSON polygon in [lng, lat] order"""
    ring = close_ring(parse_polygon(polygon))
    return GeoJSONPolygon(coordinates=[[p.as_lng_lat() for p in ring]])
