import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from .config import settings
from .geo import Point, haversine_m, path_length_m, closest_point
from .matching import MatchResult, match_route
from .policy import acceptance_threshold_m
from .polyline_codec import encode, get_route_points

logger = logging.getLogger(__name__)

class NoRouteMatch(Exception):
    pass

@dataclass(frozen=True)
class RouteSegment:
    points: List[Point]
    distance_m: float
    # Rough estimate at average city speed, not a routing-provider figure
    duration_min: int
    is_partial_ride: bool
    actual_dropoff: Point
    passenger_destination: Point
    remaining_distance_m: float

    @property
    def encoded(self) -> str:
        return encode(self.points)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "route_segment": [{"lat": p.lat, "lng": p.lng} for p in self.points],
            "encoded_segment": self.encoded,
            "segment_distance": int(round(self.distance_m)),
            "segment_duration": self.duration_min,
            "total_points": len(self.points),
            "is_partial_ride": self.is_partial_ride,
            "actual_dropoff_point": {"lat": self.actual_dropoff.lat, "lng": self.actual_dropoff.lng},
            "passenger_destination": {"lat": self.passenger_destination.lat, "lng": self.passenger_destination.lng},
            "remaining_distance": int(round(self.remaining_distance_m)),
        }

def estimate_duration_min(distance_m: float) -> int:
    minutes = (distance_m / 1000.0) / settings.city_speed_kmh * 60
    return int(math.floor(minutes + 0.5))

def extract_segment(
    route: Sequence[Point],
    pickup: Point,
    dropoff: Point,
    match: Optional[MatchResult]
) -> RouteSegment:
    """
    Slice of the driver's route between the passenger's pickup and drop point.

    The rest of the route, including where the driver is ultimately headed,
    is never part of the result. For partial rides the drop index is the one
    computed at match time so the segment agrees with the quoted fare.
    """
    if match is None:
        raise NoRouteMatch("No route match found")
    if not route:
        raise NoRouteMatch("Route has no points")

    partial = match.is_partial_ride and match.best_drop_point is not None
    actual_dropoff = match.best_drop_point if partial else dropoff

    pickup_index = closest_point(route, pickup).index
    if match.is_partial_ride and match.best_drop_point_index != -1:
        dropoff_index = match.best_drop_point_index
    else:
        dropoff_index = closest_point(route, actual_dropoff, start=pickup_index).index

    end = min(dropoff_index + 1, len(route))
    points = list(route[pickup_index:end])

    if points:
        snap_m = settings.snap_distance_m
        # Start exactly where the passenger stands
        if haversine_m(points[0], pickup) > snap_m:
            points.insert(0, pickup)
        if haversine_m(points[-1], actual_dropoff) > snap_m:
            points.append(actual_dropoff)

    distance_m = path_length_m(points)
    return RouteSegment(
        points=points,
        distance_m=distance_m,
        duration_min=estimate_duration_min(distance_m),
        is_partial_ride=match.is_partial_ride,
        actual_dropoff=actual_dropoff,
        passenger_destination=dropoff,
        remaining_distance_m=match.remaining_distance if match.is_partial_ride else 0.0,
    )

def route_segment_for_trip(route_polyline: Optional[str], pickup: Point, dropoff: Point) -> Optional[RouteSegment]:
    """
    Decode once, match, then extract. None means "no route match found".
    """
    if not route_polyline:
        return None
    try:
        route = get_route_points(route_polyline)
        trip_km = haversine_m(pickup, dropoff) / 1000.0
        match = match_route(route, pickup, dropoff, acceptance_threshold_m(trip_km))
        return extract_segment(route, pickup, dropoff, match)
    except NoRouteMatch:
        return None
    except Exception as e:
        logger.exception("Error processing route segment: %s", e)
        return None
