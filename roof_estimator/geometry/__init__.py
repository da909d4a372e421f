"""
Geometry helpers shared by polygon synthesis and area estimation
"""

from . import units
from .utils import (
    close_ring,
    open_ring,
    get_centroid,
    planar_area_sqm,
    geodesic_area_sqm,
    get_dimensions_ft,
    is_simple_ring,
)

__all__ = [
    "units",
    "close_ring",
    "open_ring",
    "get_centroid",
    "planar_area_sqm",
    "geodesic_area_sqm",
    "get_dimensions_ft",
    "is_simple_ring",
]
