import pytest

from routematch.geo import Point

def line_route(lat: float, lng_start: float, steps: int, step: float = 0.001):
    return [Point(lat, round(lng_start + i * step, 5)) for i in range(steps + 1)]

@pytest.fixture
def eastbound_route():
    """101 vertices along lat 12.9, lng 77.600 -> 77.700, ~108 m apart."""
    return line_route(12.9, 77.6, 100)

@pytest.fixture
def short_eastbound_route():
    """Stops at lng 77.680, ~2.2 km short of 77.700."""
    return line_route(12.9, 77.6, 80)

@pytest.fixture
def make_route():
    return line_route
