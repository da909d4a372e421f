"""
Roof footprint polygon generator

Synthesizes a believable closed footprint (rectangle, L-shape or U-shape)
around a geocoded address from the reported size and optional building
metadata. Output is deterministic for a given input.
"""

import math
from typing import List, Optional, Tuple, Union, Dict, Any

from loguru import logger
from pydantic import ValidationError

from ..config import get_config
from ..exceptions import InvalidInput
from ..geometry import units
from ..models import GeoPoint, PropertyData


# Shape templates as (lat fraction, lng fraction) of the half extents.
# Walks start bottom-left and run counter-clockwise.
RECTANGLE = [(-1, -1), (-1, 1), (1, 1), (1, -1)]

L_SHAPES = [
    # wing cut out of the north-west corner
    [(-1, -1), (-1, 1), (1, 1), (1, -0.3), (0.4, -0.3), (0.4, -1), (-1, -1)],
    # deeper north-west cut
    [(-1, -1), (-1, 1), (1, 1), (1, -0.3), (0, -0.3), (0, -1), (-1, -1)],
    # north-east cut
    [(-1, -1), (-1, 1), (0.4, 1), (0.4, 0), (1, 0), (1, -1), (-1, -1)],
    # south-east cut
    [(-1, -1), (-1, 0.4), (0, 0.4), (0, 1), (1, 1), (1, -1), (-1, -1)],
]

# Two full-height wings joined by a connector across the southern half
U_SHAPE = [
    (-1, -1), (-1, 1), (1, 1), (1, 0.3),
    (0, 0.3), (0, -0.3), (1, -0.3), (1, -1), (-1, -1),
]


PropertyInput = Union[PropertyData, Dict[str, Any], None]


def shape_selector(lat: float, lng: float) -> int:
    """
    Deterministic per-location orientation index.

    round((lat*1000 + lng*1000) mod 4) with the remainder taking the sign of
    the dividend and halves rounding up, so negative longitudes can produce
    negative indices. Indices other than 0, 1, 2 use the last L-shape.
    """
    modulus = get_config().synthesis.shape_selector_modulus
    return units.round_half_up(math.fmod(lat * 1000 + lng * 1000, modulus))


def classify_building(property_type: Optional[str]) -> str:
    """Map a free-form property type to a building class"""
    text = (property_type or "").lower()
    for keyword, building_class in get_config().synthesis.building_keywords:
        if keyword in text:
            return building_class
    return "unknown"


def size_band_parameters(size: float) -> Tuple[float, float]:
    """(scale factor, aspect ratio) for a size when the building type is unknown"""
    for upper, scale_factor, aspect_ratio in get_config().synthesis.size_bands:
        if size < upper:
            return scale_factor, aspect_ratio
    synth = get_config().synthesis
    return synth.default_scale_factor, synth.default_aspect_ratio


def building_type_parameters(property_type: Optional[str]) -> Tuple[float, float]:
    """(scale factor, aspect ratio) for a property type"""
    shapes = get_config().synthesis.building_shapes
    return shapes.get(classify_building(property_type), shapes["unknown"])


def coerce_property_data(property_data: PropertyInput) -> Optional[PropertyData]:
    """Accept a PropertyData, a plain dict (camelCase or snake_case) or None"""
    if property_data is None or isinstance(property_data, PropertyData):
        return property_data

    try:
        return PropertyData.model_validate(property_data)
    except ValidationError as e:
        logger.warning(f"Ignoring unusable property data: {e.error_count()} validation error(s)")
        return None


class PolygonGenerator:
    """
    Generate roof footprint polygons

    Usage:
        generator = PolygonGenerator()
        points = generator.generate(39.74, -104.99, 2200)
    """

    def __init__(self):
        self.config = get_config()
        self.synth = self.config.synthesis

    def generate(
        self,
        lat: float,
        lng: float,
        size: float,
        property_data: PropertyInput = None
    ) -> List[GeoPoint]:
        """
        Generate a footprint polygon around (lat, lng)

        Args:
            lat: Latitude in degrees
            lng: Longitude in degrees
            size: Roof size in square feet
            property_data: Optional building record

        Returns:
            Ring of GeoPoints (4, 7 or 9 points)
        """
        try:
            lat, lng, size = self._validate_inputs(lat, lng, size)
        except InvalidInput as e:
            logger.warning(f"Invalid inputs for polygon generation: {e}")
            return self.generate_default(lat, lng)

        data = coerce_property_data(property_data)
        if data is not None:
            return self._generate_typed(lat, lng, size, data)

        return self.generate_size_based(lat, lng, size)

    def generate_size_based(self, lat: float, lng: float, size: float) -> List[GeoPoint]:
        """Rectangle scaled by size band when the building type is unknown"""
        scale_factor, aspect_ratio = size_band_parameters(size)
        logger.debug(f"Size-based polygon: {size} sqft, scale {scale_factor}, ratio {aspect_ratio}")

        frame = self._frame(lat, lng, size, scale_factor, aspect_ratio)
        return self._build(frame, lng, RECTANGLE)

    def generate_default(self, lat: Any = None, lng: Any = None) -> List[GeoPoint]:
        """Default rectangle used when inputs are unusable"""
        lat = float(lat) if units.is_finite_number(lat) else 0.0
        lng = float(lng) if units.is_finite_number(lng) else 0.0

        frame = self._frame(
            lat,
            lng,
            self.synth.default_size_sqft,
            self.synth.default_scale_factor,
            self.synth.default_aspect_ratio,
        )
        return self._build(frame, lng, RECTANGLE)

    # ============================================================
    # Helper Methods
    # ============================================================

    def _validate_inputs(self, lat: Any, lng: Any, size: Any) -> Tuple[float, float, float]:
        for name, value in (("lat", lat), ("lng", lng), ("size", size)):
            if not units.is_finite_number(value):
                raise InvalidInput(f"{name} is not a finite number: {value!r}")
            if float(value) == 0:
                raise InvalidInput(f"{name} is zero")

        if float(size) < 0:
            raise InvalidInput(f"size must be positive, got {size}")

        return float(lat), float(lng), float(size)

    def _generate_typed(
        self,
        lat: float,
        lng: float,
        size: float,
        data: PropertyData
    ) -> List[GeoPoint]:
        """Polygon tailored to the building type and story count"""
        if units.is_finite_number(data.building_size) and data.building_size > 0:
            size = float(data.building_size)

        property_type = (data.property_type or "unknown").lower()
        stories = data.story_count
        scale_factor, aspect_ratio = building_type_parameters(property_type)

        # Taller buildings have smaller footprints, but not linearly
        if stories > 1:
            footprint = size / math.sqrt(stories)
            logger.debug(f"{stories}-story {property_type}: footprint {footprint:.0f} sqft")
            frame = self._frame(lat, lng, footprint, scale_factor, aspect_ratio)
            return self._build(frame, lng, RECTANGLE)

        frame = self._frame(lat, lng, size, scale_factor, aspect_ratio)

        is_multi_family = "multi" in property_type or "apart" in property_type
        if is_multi_family and size > self.synth.l_shape_min_size_sqft:
            selector = shape_selector(lat, lng)
            template = L_SHAPES[selector] if selector in (0, 1, 2) else L_SHAPES[3]
            logger.debug(f"L-shaped footprint, orientation {selector}")
            return self._build(frame, lng, template)

        if "commercial" in property_type and size > self.synth.u_shape_min_size_sqft:
            logger.debug("U-shaped commercial footprint")
            return self._build(frame, lng, U_SHAPE)

        return self._build(frame, lng, RECTANGLE)

    def _frame(
        self,
        lat: float,
        lng: float,
        size: float,
        scale_factor: float,
        aspect_ratio: float
    ) -> Tuple[float, float, float]:
        """
        Center latitude and half extents (in degrees) of the footprint

        Returns:
            (center_lat, lat_offset, lng_offset)
        """
        area_sqm = units.sqft_to_sqm(size) * scale_factor
        width, length = units.rectangle_dimensions(area_sqm, aspect_ratio)

        lat_offset, lng_offset = units.meters_to_degree_offsets(lat, length / 2, width / 2)
        center_lat = lat + lat_offset * self.synth.position_adjustment

        return center_lat, lat_offset, lng_offset

    @staticmethod
    def _build(
        frame: Tuple[float, float, float],
        lng: float,
        template: List[Tuple[float, float]]
    ) -> List[GeoPoint]:
        center_lat, lat_offset, lng_offset = frame
        return [
            GeoPoint(lat=center_lat + lat_frac * lat_offset, lng=lng + lng_frac * lng_offset)
            for lat_frac, lng_frac in template
        ]


def generate_polygon(
    lat: float,
    lng: float,
    size: float,
    property_data: PropertyInput = None
) -> List[GeoPoint]:
    """Generate a roof footprint polygon. Never raises."""
    return PolygonGenerator().generate(lat, lng, size, property_data)
