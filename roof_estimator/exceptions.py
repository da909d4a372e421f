"""
Exceptions raised inside the estimator

The public entry points catch these and degrade to default values, so callers
never see them. Helpers raise them so the fallback decision lives in one place.
"""


class RoofEstimatorError(Exception):
    """Base class for estimator errors"""


class InvalidInput(RoofEstimatorError):
    """Missing, NaN or non-numeric coordinates or size"""


class CalculationUnavailable(RoofEstimatorError):
    """Geometry could not be computed or the result is implausible"""
