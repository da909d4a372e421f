"""
Roof area estimator

Turns a drawn or generated polygon (or a building record) into a roof area in
square feet. Building records win over geometry; geometric results outside
the plausible range are discarded in favour of the caller's fallback size.
"""

import math
from typing import List, Optional, Any, Sequence

from loguru import logger

from ..config import get_config
from ..exceptions import CalculationUnavailable, InvalidInput, RoofEstimatorError
from ..geometry import units
from ..geometry.utils import close_ring, planar_area_sqm, is_simple_ring
from ..models import GeoPoint, PropertyData
from ..synthesis.polygon_generator import PropertyInput, coerce_property_data


def parse_polygon(polygon: Any) -> List[GeoPoint]:
    """
    Normalize polygon input to a list of GeoPoints

    Accepts GeoPoints or mappings with ``lat``/``lng`` keys.
    Raises InvalidInput for anything else.
    """
    if polygon is None:
        raise InvalidInput("no polygon supplied")
    if isinstance(polygon, (str, bytes)) or not isinstance(polygon, Sequence):
        raise InvalidInput(f"polygon must be a sequence of points, got {type(polygon).__name__}")

    points = []
    for i, point in enumerate(polygon):
        if isinstance(point, GeoPoint):
            lat, lng = point.lat, point.lng
        elif isinstance(point, dict):
            lat, lng = point.get("lat"), point.get("lng")
        else:
            raise InvalidInput(f"point {i} is not a lat/lng point: {point!r}")

        if not units.is_finite_number(lat) or not units.is_finite_number(lng):
            raise InvalidInput(f"point {i} has non-numeric coordinates: ({lat!r}, {lng!r})")
        points.append(GeoPoint(lat=float(lat), lng=float(lng)))

    if len(points) < 3:
        raise InvalidInput(f"polygon needs at least 3 points, got {len(points)}")

    return points


def roof_size_from_building_size(
    building_size: Optional[float],
    property_data: PropertyInput = None
) -> Optional[int]:
    """
    Roof area from a building record

    footprint = building_size / stories, inflated 5% per extra story,
    multiplied by the roof-type pitch factor.

    Returns:
        Roof area in square feet, or None without a usable building size
    """
    if not units.is_finite_number(building_size) or float(building_size) <= 0:
        return None

    est = get_config().estimation
    data = coerce_property_data(property_data) or PropertyData()

    stories = data.story_count
    footprint = float(building_size) / stories
    if stories > 1:
        footprint *= 1 + (stories - 1) * est.story_overlap

    roof_factor = est.roof_type_factors.get(data.roof_type_key, est.roof_type_factors["unknown"])
    roof_size = footprint * roof_factor
    if not math.isfinite(roof_size):
        logger.warning(f"Building size {building_size} gives a non-finite roof size, ignoring it")
        return None

    return units.round_half_up(roof_size)


def roof_area_from_pitch(property_data: PropertyInput) -> Optional[int]:
    """
    Roof area from building size and pitch category (flat/low/moderate/steep)

    Used as a cross-check against drawn polygons. Returns None without a
    building size.
    """
    data = coerce_property_data(property_data)
    if data is None or not units.is_finite_number(data.building_size) or data.building_size <= 0:
        return None

    est = get_config().estimation
    pitch = data.roof_pitch_key or est.default_pitch
    pitch_factor = est.pitch_factors.get(pitch, est.pitch_factors[est.default_pitch])

    roof_size = data.building_size / data.story_count * pitch_factor
    if not math.isfinite(roof_size):
        logger.warning(f"Building size {data.building_size} gives a non-finite roof size, ignoring it")
        return None

    return units.round_half_up(roof_size)


class AreaEstimator:
    """
    Estimate roof area in square feet

    Usage:
        estimator = AreaEstimator()
        area = estimator.estimate(points, fallback_size=2200)
    """

    def __init__(self):
        self.config = get_config()
        self.est = self.config.estimation

    def estimate(
        self,
        polygon: Any,
        property_data: PropertyInput = None,
        fallback_size: Optional[float] = None
    ) -> int:
        """
        Estimate roof area

        Args:
            polygon: Ring of GeoPoints (or lat/lng dicts), may be None
            property_data: Optional building record; its building size wins
            fallback_size: Returned when geometry is unusable

        Returns:
            Area in square feet, always positive
        """
        data = coerce_property_data(property_data)
        if data is not None and data.building_size:
            roof_size = roof_size_from_building_size(data.building_size, data)
            if roof_size:
                logger.info(f"Using roof size from building data: {roof_size} sqft")
                return roof_size

        try:
            return self.calculate_area(polygon)
        except RoofEstimatorError as e:
            fallback = self.resolve_fallback(fallback_size)
            logger.warning(f"Area calculation unavailable ({e}), using {fallback} sqft")
            return fallback

    def calculate_area(self, polygon: Any) -> int:
        """
        Geometric area of a ring, validated against the plausible range

        Raises:
            InvalidInput: malformed polygon
            CalculationUnavailable: no finite area or area out of range
        """
        points = close_ring(parse_polygon(polygon))

        if not is_simple_ring(points):
            logger.warning("Polygon is degenerate or self-intersecting, area may be unreliable")

        area_sqm = self._area_sqm(points)
        area_sqft = units.round_half_up(units.sqm_to_sqft(area_sqm))
        logger.debug(f"Calculated polygon area: {area_sqft} sqft")

        if not self.is_plausible(area_sqft):
            raise CalculationUnavailable(
                f"area {area_sqft} sqft outside "
                f"[{self.est.min_valid_area_sqft:g}, {self.est.max_valid_area_sqft:g}]"
            )

        return area_sqft

    def is_plausible(self, area_sqft: float) -> bool:
        return self.est.min_valid_area_sqft <= area_sqft <= self.est.max_valid_area_sqft

    def resolve_fallback(self, fallback_size: Optional[float]) -> int:
        if units.is_finite_number(fallback_size):
            rounded = units.round_half_up(float(fallback_size))
            if rounded > 0:
                return rounded
        return self.est.default_area_sqft

    def _area_sqm(self, points: List[GeoPoint]) -> float:
        # Same degree lengths the generator uses, so generated rings measure
        # back to their nominal size at any latitude
        area = planar_area_sqm(points)

        if not math.isfinite(area):
            raise CalculationUnavailable(f"non-finite area: {area}")

        return area


def estimate_area(
    polygon: Any,
    property_data: PropertyInput = None,
    fallback_size: Optional[float] = None
) -> int:
    """Estimate roof area in square feet. Never raises."""
    return AreaEstimator().estimate(polygon, property_data, fallback_size)
