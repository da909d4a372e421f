"""
Tests for roof footprint polygon generation
"""

import math

import pytest

from roof_estimator import estimate_area, generate_polygon, GeoPoint, PropertyData
from roof_estimator.estimation import AreaEstimator
from roof_estimator.geometry import units
from roof_estimator.geometry.utils import (
    geodesic_area_sqm,
    get_dimensions_ft,
    is_simple_ring,
    planar_area_sqm,
)
from roof_estimator.synthesis import (
    building_type_parameters,
    classify_building,
    shape_selector,
    size_band_parameters,
)


DENVER = (39.7392, -104.9903)


def planar_sqft(points):
    return units.sqm_to_sqft(planar_area_sqm(points))


def normalized(points, places=3):
    """Shape outline scaled into the unit square, independent of location"""
    min_lat = min(p.lat for p in points)
    max_lat = max(p.lat for p in points)
    min_lng = min(p.lng for p in points)
    max_lng = max(p.lng for p in points)
    return [
        (
            round((p.lat - min_lat) / (max_lat - min_lat), places),
            round((p.lng - min_lng) / (max_lng - min_lng), places),
        )
        for p in points
    ]


# ============================================================
# Scale factor / aspect ratio selection
# ============================================================

@pytest.mark.parametrize("size,expected", [
    (800, (2.0, 1.3)),
    (1199, (2.0, 1.3)),
    (1200, (1.9, 1.5)),
    (2999, (1.9, 1.5)),
    (3000, (1.8, 1.5)),
    (4999, (1.8, 1.5)),
    (5000, (1.7, 1.7)),
    (12000, (1.7, 1.7)),
])
def test_size_band_boundaries(size, expected):
    assert size_band_parameters(size) == expected


@pytest.mark.parametrize("property_type,expected", [
    ("Single-Family", (1.8, 1.4)),
    ("townhouse", (1.75, 2.2)),
    ("Multi-Family", (1.9, 1.6)),
    ("Apartment complex", (1.9, 1.6)),
    ("COMMERCIAL", (1.6, 1.2)),
    ("light industrial", (1.6, 1.2)),
    ("warehouse", (1.5, 2.5)),
    ("self storage", (1.5, 2.5)),
    ("cabin", (1.8, 1.5)),
    (None, (1.8, 1.5)),
])
def test_building_type_parameters(property_type, expected):
    assert building_type_parameters(property_type) == expected


def test_classify_building_prefers_earlier_keywords():
    # "single" is checked before "town"
    assert classify_building("single family townhome") == "single_family"
    assert classify_building("") == "unknown"


# ============================================================
# Rectangles without property data
# ============================================================

@pytest.mark.parametrize("size", [900, 1500, 2500, 3500, 6000])
def test_rectangle_area_reconstructs_size(size):
    points = generate_polygon(*DENVER, size)
    scale_factor, _ = size_band_parameters(size)

    assert len(points) == 4
    assert planar_sqft(points) / scale_factor == pytest.approx(size, rel=1e-3)


@pytest.mark.parametrize("size", [1000, 2500, 4000])
def test_rectangle_aspect_ratio(size):
    points = generate_polygon(*DENVER, size)
    _, aspect_ratio = size_band_parameters(size)

    width, height, _ = get_dimensions_ft(points)
    assert height / width == pytest.approx(aspect_ratio, rel=1e-3)


@pytest.mark.parametrize("lat,lng", [
    DENVER,
    (30.2672, -97.7431),
    (45.5152, -122.6784),
    (60.0, 10.0),
    (65.0, 10.0),
    (70.0, 10.0),
    (-33.8688, 151.2093),
])
def test_area_round_trip_within_one_percent(lat, lng):
    size = 2500
    points = generate_polygon(lat, lng, size)
    scale_factor, _ = size_band_parameters(size)

    area = AreaEstimator().calculate_area(points)
    assert area == pytest.approx(size * scale_factor, rel=0.01)
    assert estimate_area(points) == area


@pytest.mark.parametrize("lat,lng", [DENVER, (30.2672, -97.7431), (45.5152, -122.6784)])
def test_geodesic_area_close_at_mid_latitudes(lat, lng):
    size = 2500
    points = generate_polygon(lat, lng, size)
    scale_factor, _ = size_band_parameters(size)

    area_sqft = units.sqm_to_sqft(geodesic_area_sqm(points))
    assert area_sqft == pytest.approx(size * scale_factor, rel=0.01)


def test_rectangle_sits_north_of_marker():
    lat, lng = DENVER
    points = generate_polygon(lat, lng, 2500)

    center_lat = sum(p.lat for p in points) / 4
    lat_offset = (max(p.lat for p in points) - min(p.lat for p in points)) / 2

    assert center_lat > lat
    assert center_lat - lat == pytest.approx(0.15 * lat_offset, rel=1e-6)
    assert sum(p.lng for p in points) / 4 == pytest.approx(lng)


def test_vertices_start_bottom_left_counter_clockwise():
    points = generate_polygon(*DENVER, 2500)
    bottom_left, bottom_right, top_right, top_left = points

    assert bottom_left.lat == bottom_right.lat < top_right.lat == top_left.lat
    assert bottom_left.lng == top_left.lng < bottom_right.lng == top_right.lng


def test_longitude_extent_widens_away_from_equator():
    near_equator = generate_polygon(1.0, 30.0, 2500)
    far_north = generate_polygon(60.0, 30.0, 2500)

    def lng_span(points):
        return max(p.lng for p in points) - min(p.lng for p in points)

    assert lng_span(far_north) / lng_span(near_equator) == pytest.approx(
        math.cos(math.radians(1.0)) / math.cos(math.radians(60.0)), rel=1e-6
    )


# ============================================================
# Invalid inputs
# ============================================================

@pytest.mark.parametrize("lat,lng,size", [
    (None, None, None),
    (39.7, -105.0, 0),
    (39.7, -105.0, float("nan")),
    (0, -105.0, 2000),
    (39.7, 0, 2000),
    ("north", -105.0, 2000),
    (39.7, -105.0, -2000),
])
def test_invalid_inputs_return_default_rectangle(lat, lng, size):
    points = generate_polygon(lat, lng, size)

    assert len(points) == 4
    assert all(math.isfinite(p.lat) and math.isfinite(p.lng) for p in points)
    # 2500 sqft at scale 1.8
    assert planar_sqft(points) == pytest.approx(4500, rel=1e-3)


def test_default_rectangle_keeps_valid_coordinates():
    points = generate_polygon(39.7, -105.0, None)
    assert min(p.lat for p in points) < 39.7 < max(p.lat for p in points)
    assert min(p.lng for p in points) < -105.0 < max(p.lng for p in points)


# ============================================================
# Typed polygons
# ============================================================

def test_single_family_uses_type_parameters():
    points = generate_polygon(*DENVER, 1800, PropertyData(property_type="single-family", building_size=2000))

    assert len(points) == 4
    # building size replaces the nominal size
    assert planar_sqft(points) == pytest.approx(2000 * 1.8, rel=1e-3)


def test_property_data_without_building_size_uses_size():
    points = generate_polygon(*DENVER, 2200, {"propertyType": "townhouse"})

    width, height, _ = get_dimensions_ft(points)
    assert planar_sqft(points) == pytest.approx(2200 * 1.75, rel=1e-3)
    assert height / width == pytest.approx(2.2, rel=1e-3)


def test_multi_story_shrinks_footprint_and_stays_rectangular():
    data = PropertyData(property_type="apartment", building_size=4000, stories=4)
    points = generate_polygon(*DENVER, 4000, data)

    assert len(points) == 4
    assert planar_sqft(points) == pytest.approx(4000 / 2 * 1.9, rel=1e-3)


def test_large_multi_story_commercial_is_rectangle():
    data = PropertyData(property_type="commercial", building_size=20000, stories=2)
    assert len(generate_polygon(*DENVER, 20000, data)) == 4


def test_camel_case_property_dict_is_accepted():
    points = generate_polygon(40.0, 1.0, 4000, {"propertyType": "multi-family", "buildingSize": 4000})
    assert len(points) == 7


@pytest.mark.parametrize("building_size", [float("inf"), float("nan"), -4000])
def test_non_finite_building_size_uses_nominal_size(building_size):
    points = generate_polygon(*DENVER, 2500, {"propertyType": "single-family", "buildingSize": building_size})

    assert len(points) == 4
    assert all(math.isfinite(p.lat) and math.isfinite(p.lng) for p in points)
    assert planar_sqft(points) == pytest.approx(2500 * 1.8, rel=1e-3)


def test_unusable_property_dict_falls_back_to_size_bands():
    points = generate_polygon(*DENVER, 2500, {"stories": "several"})

    assert len(points) == 4
    assert planar_sqft(points) == pytest.approx(2500 * 1.9, rel=1e-3)


# ============================================================
# Complex shapes
# ============================================================

def test_shape_selector_is_deterministic_hash_of_location():
    assert shape_selector(40.0, 1.0) == 0
    assert shape_selector(40.0, 1.001) == 1
    assert shape_selector(40.0, -74.0) == 0
    # remainder keeps the sign of the dividend
    assert shape_selector(*DENVER) == -3


def test_multi_family_l_shape_is_repeatable():
    data = {"propertyType": "multi-family", "buildingSize": 4000}

    first = generate_polygon(40.0, 1.0, 4000, data)
    second = generate_polygon(40.0, 1.0, 4000, data)

    assert len(first) == 7
    assert first == second
    assert first[0] == first[-1]


def test_l_shape_changes_with_selector():
    data = {"propertyType": "multi-family", "buildingSize": 4000}

    shape_0 = generate_polygon(40.0, 1.0, 4000, data)
    shape_1 = generate_polygon(40.0, 1.001, 4000, data)

    assert shape_selector(40.0, 1.0) != shape_selector(40.0, 1.001)
    assert normalized(shape_0) != normalized(shape_1)
    assert normalized(shape_0) == [
        (0.0, 0.0), (0.0, 1.0), (1.0, 1.0), (1.0, 0.35), (0.7, 0.35), (0.7, 0.0), (0.0, 0.0),
    ]


def test_negative_selector_uses_last_l_shape():
    points = generate_polygon(*DENVER, 5000, PropertyData(property_type="Apartment", building_size=5000))

    assert normalized(points) == [
        (0.0, 0.0), (0.0, 0.7), (0.5, 0.7), (0.5, 1.0), (1.0, 1.0), (1.0, 0.0), (0.0, 0.0),
    ]


def test_small_multi_family_is_rectangle():
    points = generate_polygon(40.0, 1.0, 3000, {"propertyType": "multi-family", "buildingSize": 3000})
    assert len(points) == 4


def test_large_commercial_gets_u_shape():
    points = generate_polygon(*DENVER, 9000, PropertyData(property_type="Commercial", building_size=9000))

    assert len(points) == 9
    assert points[0] == points[-1]
    assert is_simple_ring(points)


def test_large_industrial_stays_rectangular():
    points = generate_polygon(*DENVER, 9000, PropertyData(property_type="industrial", building_size=9000))
    assert len(points) == 4


@pytest.mark.parametrize("lat,lng,property_type,size", [
    (40.0, 1.0, "multi-family", 4000),
    (40.0, 1.001, "multi-family", 4000),
    (40.0, 1.002, "apartment", 4000),
    (39.7392, -104.9903, "multi-family", 4000),
    (39.7392, -104.9903, "commercial", 12000),
    (39.7392, -104.9903, "warehouse", 12000),
    (39.7392, -104.9903, None, 2500),
])
def test_synthesized_polygons_are_simple(lat, lng, property_type, size):
    data = PropertyData(property_type=property_type, building_size=size) if property_type else None
    points = generate_polygon(lat, lng, size, data)

    assert 4 <= len(points) <= 9
    assert all(isinstance(p, GeoPoint) for p in points)
    assert is_simple_ring(points)
