"""
Roof area estimation
"""

from .area_estimator import (
    AreaEstimator,
    estimate_area,
    parse_polygon,
    roof_size_from_building_size,
    roof_area_from_pitch,
)

__all__ = [
    "AreaEstimator",
    "estimate_area",
    "parse_polygon",
    "roof_size_from_building_size",
    "roof_area_from_pitch",
]
