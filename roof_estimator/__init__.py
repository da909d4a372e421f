"""
Roof Estimator

Roof footprint polygon synthesis and roof area estimation for the
address-entry estimate form.
"""

from .models import GeoPoint, PropertyData, MeasurementResult
from .synthesis import generate_polygon
from .estimation import estimate_area

__version__ = "1.0.0"

__all__ = [
    "GeoPoint",
    "PropertyData",
    "MeasurementResult",
    "generate_polygon",
    "estimate_area",
]
