"""
Footprint polygon synthesis
"""

from .polygon_generator import (
    PolygonGenerator,
    generate_polygon,
    shape_selector,
    classify_building,
    size_band_parameters,
    building_type_parameters,
)

__all__ = [
    "PolygonGenerator",
    "generate_polygon",
    "shape_selector",
    "classify_building",
    "size_band_parameters",
    "building_type_parameters",
]
