import math
from typing import NamedTuple, Sequence

class Point(NamedTuple):
    lat: float
    lng: float

class ClosestPoint(NamedTuple):
    index: int
    distance: float

def haversine_m(a: Sequence[float], b: Sequence[float]) -> float:
    # a,b = (lat, lng)
    R = 6371000.0
    lat1, lng1 = math.radians(a[0]), math.radians(a[1])
    lat2, lng2 = math.radians(b[0]), math.radians(b[1])
    dlat = lat2 - lat1
    dlng = lng2 - lng1
    h = (math.sin(dlat / 2) ** 2 +
         math.cos(lat1) * math.cos(lat2) * math.sin(dlng / 2) ** 2)
    return 2 * R * math.asin(math.sqrt(min(1.0, h)))

def path_length_m(points: Sequence[Point]) -> float:
    """
    Sum of distances between consecutive points, in meters.
    """
    total = 0.0
    for i in range(1, len(points)):
        total += haversine_m(points[i - 1], points[i])
    return total

def closest_point(route: Sequence[Point], target: Point, start: int = 0) -> ClosestPoint:
    """
    Linear scan of route[start:] for the vertex nearest to target.
    Returned index refers to the full route. Ties keep the first vertex.
    """
    if start < 0:
        start = 0
    if start >= len(route):
        raise ValueError("Route has no points to search")

    best_index = start
    best_distance = haversine_m(route[start], target)
    for i in range(start + 1, len(route)):
        d = haversine_m(route[i], target)
        if d < best_distance:
            best_distance = d
            best_index = i

    return ClosestPoint(index=best_index, distance=best_distance)
