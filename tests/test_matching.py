import random

import pytest

from routematch.geo import Point, haversine_m
from routematch.matching import (
    MatchResult,
    match_route,
    check_route_match,
    find_best_drop_point,
    fare_basis_km,
    find_available_drivers,
)
from routematch.policy import acceptance_threshold_m
from routematch.polyline_codec import encode

def assert_index_invariant(m: MatchResult):
    assert 0 <= m.pickup_index <= m.dropoff_index <= m.total_route_points - 1

def test_direct_match_when_route_passes_both_points(eastbound_route):
    pickup = Point(12.90005, 77.610)
    dropoff = Point(12.90005, 77.680)
    threshold = acceptance_threshold_m(7)

    m = match_route(eastbound_route, pickup, dropoff, threshold)

    assert m is not None
    assert not m.is_partial_ride
    assert m.pickup_index == 10
    assert m.dropoff_index == 80
    assert m.dropoff_distance <= 10
    assert m.dropoff_distance <= threshold
    assert m.total_route_points == 101
    assert 0 <= m.distance_reduction <= 100
    assert_index_invariant(m)

def test_partial_ride_when_route_stops_short(short_eastbound_route):
    pickup = Point(12.9, 77.600)
    dropoff = Point(12.9, 77.700)
    original_km = haversine_m(pickup, dropoff) / 1000
    threshold = acceptance_threshold_m(original_km)

    m = match_route(short_eastbound_route, pickup, dropoff, threshold)

    assert m is not None
    assert m.is_partial_ride
    assert m.dropoff_distance > threshold
    assert m.best_drop_point_index == 80
    assert m.best_drop_point == short_eastbound_route[80]
    assert m.remaining_distance == pytest.approx(haversine_m(short_eastbound_route[80], dropoff))
    assert m.distance_reduction >= 60
    assert m.distance_reduction == pytest.approx(
        (m.original_distance - m.remaining_distance) / m.original_distance * 100
    )
    assert_index_invariant(m)

def test_no_match_when_pickup_is_beyond_threshold(eastbound_route):
    pickup = Point(12.95, 77.65)  # ~5.5 km north of the route
    dropoff = Point(12.9, 77.69)  # right on the route
    assert match_route(eastbound_route, pickup, dropoff, 800) is None

def test_no_match_when_dropoff_comes_before_pickup(eastbound_route):
    pickup = Point(12.9, 77.68)
    dropoff = Point(12.9, 77.60)
    assert match_route(eastbound_route, pickup, dropoff, acceptance_threshold_m(8.7)) is None

def test_no_match_when_route_covers_too_little(eastbound_route):
    # Route runs east, passenger wants to go north
    pickup = Point(12.9, 77.65)
    dropoff = Point(12.99, 77.65)
    assert match_route(eastbound_route, pickup, dropoff, acceptance_threshold_m(10)) is None

def test_pickup_equal_to_dropoff_is_no_match(eastbound_route):
    p = eastbound_route[5]
    assert match_route(eastbound_route, p, p, 800) is None

def test_empty_route_is_no_match():
    assert match_route([], Point(12.9, 77.6), Point(12.9, 77.7), 800) is None

def test_worked_example_polyline_long_trip():
    route_polyline = "_p~iF~ps|U_ulLnnqC_mqNvxq`@"
    pickup = Point(38.5, -120.2)
    dropoff = Point(44.0, -127.5)  # past the end of the route

    m = check_route_match(route_polyline, pickup, dropoff, 5000)

    assert m is not None
    assert m.pickup_index == 0
    assert m.pickup_distance == 0.0
    assert m.total_route_points == 3
    assert m.best_drop_point_index == 2
    # > 100 km trip only needs 30% coverage
    assert m.is_partial_ride
    assert_index_invariant(m)

def test_best_drop_point_is_searched_from_start():
    route = [Point(0.0, 0.0), Point(0.0, 0.01), Point(0.0, 0.02)]
    found = find_best_drop_point(route, Point(0.0, 0.0), start=1)
    assert found.index == 1

def test_best_drop_point_agrees_with_dropoff_index(eastbound_route):
    m = match_route(eastbound_route, Point(12.9, 77.62), Point(12.9003, 77.66), 1200)
    assert m.best_drop_point_index == m.dropoff_index
    assert m.remaining_distance == pytest.approx(m.dropoff_distance)

def test_check_route_match_degrades_on_malformed_polyline():
    assert check_route_match("~~~~", Point(0.0, 0.0), Point(0.0, 1.0), 800) is None
    assert check_route_match(None, Point(0.0, 0.0), Point(0.0, 1.0), 800) is None

def test_check_route_match_logs_unexpected_errors(caplog):
    # Unhashable polyline blows up inside the decode cache
    assert check_route_match(["not", "a", "polyline"], Point(0.0, 0.0), Point(0.0, 1.0), 800) is None
    assert "Error checking route match" in caplog.text

def test_to_dict_uses_snake_case(short_eastbound_route):
    m = match_route(short_eastbound_route, Point(12.9, 77.6), Point(12.9, 77.7), 1300)
    data = m.to_dict()
    assert data["is_partial_ride"] is True
    assert data["best_drop_point"] == {"lat": 12.9, "lng": 77.68}
    assert {"pickup_distance", "remaining_distance", "distance_reduction"} <= data.keys()

def test_fare_basis(short_eastbound_route, eastbound_route):
    partial = match_route(short_eastbound_route, Point(12.9, 77.6), Point(12.9, 77.7), 1300)
    assert fare_basis_km(partial, 10.8) == pytest.approx(
        (partial.original_distance - partial.remaining_distance) / 1000
    )
    full = match_route(eastbound_route, Point(12.9, 77.61), Point(12.9, 77.68), 1100)
    assert fare_basis_km(full, 7.0) == 7.0

def test_find_available_drivers_sorts_and_hides_route(make_route):
    on_route = {
        "id": 1, "route_polyline": encode(make_route(12.9, 77.6, 100)),
        "duration_minutes": 20, "end_location": "Whitefield, Bangalore",
        "end_lat": 12.9, "end_lng": 77.7, "driver_name": "A",
    }
    nearby = {
        "id": 2, "route_polyline": encode(make_route(12.903, 77.6, 100)),
        "duration_minutes": 20, "end_location": "Marathahalli",
        "end_lat": 12.903, "end_lng": 77.7, "driver_name": "B",
    }
    far_away = {
        "id": 3, "route_polyline": encode(make_route(13.5, 77.6, 100)),
        "duration_minutes": 20, "end_location": "Nowhere",
    }
    no_route = {"id": 4, "route_polyline": None}

    drivers = find_available_drivers(
        [nearby, far_away, on_route, no_route],
        Point(12.9, 77.61),
        Point(12.9, 77.68),
        trip_km=7.0,
        threshold_m=acceptance_threshold_m(7.0),
        rng=random.Random(7),
    )

    assert [d["id"] for d in drivers] == [1, 2]
    first = drivers[0]
    for hidden in ("route_polyline", "end_lat", "end_lng", "end_location"):
        assert hidden not in first
    assert first["end_location_masked"] == "Whitefield area"
    assert first["pickup_distance"] == 0
    assert not first["is_partial_ride"]
    assert first["distance_saved_percentage"] == 100
    assert first["remaining_distance"] == 0
    assert first["actual_dropoff_lat"] == 12.9
    assert first["actual_dropoff_lng"] == 77.68
    # 7 km * 3 per km, +/- 20%
    assert 16 <= first["estimated_fare"] <= 26
    assert 3 <= first["eta"] <= 30
