"""
Configuration settings for the Roof Estimator
"""

from dataclasses import dataclass, field
from typing import Dict, List, Tuple


@dataclass
class UnitConfig:
    """Unit and degree conversion constants"""
    sqft_to_sqm: float = 0.092903
    sqm_to_sqft: float = 10.7639
    meters_per_foot: float = 0.3048

    # Rough feet per degree of latitude; longitude is scaled by cos(lat)
    feet_per_degree_lat: float = 364000.0


@dataclass
class SynthesisConfig:
    """Polygon synthesis parameters"""
    default_size_sqft: float = 2500.0
    default_scale_factor: float = 1.8
    default_aspect_ratio: float = 1.5

    # Polygon sits slightly north of the marker (front-yard anchored geocodes)
    position_adjustment: float = 0.15

    # (upper bound exclusive, scale factor, aspect ratio) when no property data
    size_bands: List[Tuple[float, float, float]] = field(default_factory=lambda: [
        (1200.0, 2.0, 1.3),
        (3000.0, 1.9, 1.5),
        (5000.0, 1.8, 1.5),
        (float("inf"), 1.7, 1.7),
    ])

    # Keyword -> building class, checked in order against property type
    building_keywords: List[Tuple[str, str]] = field(default_factory=lambda: [
        ("single", "single_family"),
        ("town", "townhouse"),
        ("multi", "multi_family"),
        ("apart", "multi_family"),
        ("commercial", "commercial"),
        ("industrial", "commercial"),
        ("warehouse", "warehouse"),
        ("storage", "warehouse"),
    ])

    # Building class -> (scale factor, aspect ratio)
    building_shapes: Dict[str, Tuple[float, float]] = field(default_factory=lambda: {
        "single_family": (1.8, 1.4),
        "townhouse": (1.75, 2.2),
        "multi_family": (1.9, 1.6),
        "commercial": (1.6, 1.2),
        "warehouse": (1.5, 2.5),
        "unknown": (1.8, 1.5),
    })

    # Complex outlines (single story only)
    l_shape_min_size_sqft: float = 3000.0
    u_shape_min_size_sqft: float = 8000.0
    shape_selector_modulus: int = 4


@dataclass
class EstimationConfig:
    """Area estimation parameters"""
    default_area_sqft: int = 2500
    min_valid_area_sqft: float = 500.0
    max_valid_area_sqft: float = 10000.0

    # Extra footprint per additional story (stairwells, common areas)
    story_overlap: float = 0.05

    # Roof surface / footprint by roof type
    roof_type_factors: Dict[str, float] = field(default_factory=lambda: {
        "flat": 1.05,
        "gable": 1.15,
        "hip": 1.18,
        "mansard": 1.35,
        "gambrel": 1.20,
        "shed": 1.08,
        "unknown": 1.12,
    })

    # Roof surface / footprint by pitch category
    pitch_factors: Dict[str, float] = field(default_factory=lambda: {
        "flat": 1.05,
        "low": 1.15,
        "moderate": 1.3,
        "steep": 1.5,
    })
    default_pitch: str = "moderate"

    # Ellipsoid for geodesic area
    ellipsoid: str = "WGS84"


@dataclass
class EstimatorConfig:
    """Top-level configuration"""
    units: UnitConfig = field(default_factory=UnitConfig)
    synthesis: SynthesisConfig = field(default_factory=SynthesisConfig)
    estimation: EstimationConfig = field(default_factory=EstimationConfig)

    # Output settings
    output_dir: str = "output"


# Global config instance
config = EstimatorConfig()


def get_config() -> EstimatorConfig:
    """Get global configuration"""
    return config


def validate_config(config: EstimatorConfig) -> None:
    """
    Validate that all required configuration values are set.
    Raises ValueError if any required value is missing or invalid.
    """
    errors = []

    if config.units is None:
        errors.append("units configuration is required but not set")
    elif config.units.feet_per_degree_lat <= 0:
        errors.append(f"units.feet_per_degree_lat must be positive, got {config.units.feet_per_degree_lat}")

    if config.synthesis is None:
        errors.append("synthesis configuration is required but not set")
    else:
        if config.synthesis.default_size_sqft <= 0:
            errors.append(f"synthesis.default_size_sqft must be positive, got {config.synthesis.default_size_sqft}")
        if not config.synthesis.size_bands:
            errors.append("synthesis.size_bands must not be empty")
        else:
            bounds = [band[0] for band in config.synthesis.size_bands]
            if bounds != sorted(bounds):
                errors.append("synthesis.size_bands must be sorted by upper bound")
            if bounds[-1] != float("inf"):
                errors.append("synthesis.size_bands must end with an unbounded band")
        if "unknown" not in config.synthesis.building_shapes:
            errors.append("synthesis.building_shapes requires an 'unknown' entry")
        for keyword, building_class in config.synthesis.building_keywords:
            if building_class not in config.synthesis.building_shapes:
                errors.append(f"building keyword '{keyword}' maps to undefined class '{building_class}'")
        if config.synthesis.shape_selector_modulus < 1:
            errors.append("synthesis.shape_selector_modulus must be at least 1")

    if config.estimation is None:
        errors.append("estimation configuration is required but not set")
    else:
        est = config.estimation
        if est.min_valid_area_sqft <= 0 or est.min_valid_area_sqft >= est.max_valid_area_sqft:
            errors.append(
                f"estimation bounds invalid: [{est.min_valid_area_sqft}, {est.max_valid_area_sqft}]"
            )
        if "unknown" not in est.roof_type_factors:
            errors.append("estimation.roof_type_factors requires an 'unknown' entry")
        if est.default_pitch not in est.pitch_factors:
            errors.append(f"estimation.default_pitch '{est.default_pitch}' has no pitch factor")

    if errors:
        error_msg = "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
        raise ValueError(error_msg)
