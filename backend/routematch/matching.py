import logging
import random
from dataclasses import dataclass, asdict
from typing import Any, Dict, List, Optional, Sequence

from .config import settings
from .geo import Point, ClosestPoint, haversine_m, closest_point
from .policy import required_reduction_pct, estimate_eta_min
from .polyline_codec import get_route_points

logger = logging.getLogger(__name__)

@dataclass(frozen=True)
class MatchResult:
    pickup_distance: float
    dropoff_distance: float
    pickup_index: int
    dropoff_index: int
    total_route_points: int
    is_partial_ride: bool
    best_drop_point: Optional[Point]
    best_drop_point_index: int
    remaining_distance: float
    distance_reduction: float
    original_distance: float

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        if self.best_drop_point is not None:
            data["best_drop_point"] = {"lat": self.best_drop_point.lat, "lng": self.best_drop_point.lng}
        return data

def find_best_drop_point(route: Sequence[Point], dropoff: Point, start: int) -> ClosestPoint:
    """
    Route vertex from start onward that leaves the least distance to the dropoff.

    Deliberately separate from the dropoff search: segment extraction consumes
    this index verbatim.
    """
    best_index = -1
    min_remaining = float("inf")
    for i in range(start, len(route)):
        remaining = haversine_m(route[i], dropoff)
        if remaining < min_remaining:
            min_remaining = remaining
            best_index = i
    return ClosestPoint(index=best_index, distance=min_remaining)

def match_route(
    route: Sequence[Point],
    pickup: Point,
    dropoff: Point,
    threshold_m: float
) -> Optional[MatchResult]:
    if not route:
        return None

    pickup_match = closest_point(route, pickup)
    # Driver never comes near the pickup
    if pickup_match.distance > threshold_m:
        return None

    original_distance = haversine_m(pickup, dropoff)
    if original_distance <= 0.0:
        # Pickup == dropoff: there is no journey to share
        return None

    # Dropoff has to come after pickup along the route
    dropoff_match = closest_point(route, dropoff, start=pickup_match.index)
    best_drop = find_best_drop_point(route, dropoff, start=pickup_match.index)

    distance_reduction = (original_distance - best_drop.distance) / original_distance * 100
    required = required_reduction_pct(original_distance / 1000.0)

    is_direct = dropoff_match.distance <= threshold_m
    is_partial = distance_reduction >= required
    if not (is_direct or is_partial):
        return None

    return MatchResult(
        pickup_distance=pickup_match.distance,
        dropoff_distance=dropoff_match.distance,
        pickup_index=pickup_match.index,
        dropoff_index=dropoff_match.index,
        total_route_points=len(route),
        is_partial_ride=is_partial and not is_direct,
        best_drop_point=route[best_drop.index],
        best_drop_point_index=best_drop.index,
        remaining_distance=best_drop.distance,
        distance_reduction=distance_reduction,
        original_distance=original_distance,
    )

def check_route_match(
    route_polyline: str,
    pickup: Point,
    dropoff: Point,
    threshold_m: float
) -> Optional[MatchResult]:
    """
    Best-effort matching against a stored polyline. Never raises: any failure
    is logged and reported as no match.
    """
    try:
        route = get_route_points(route_polyline)
        return match_route(route, pickup, dropoff, threshold_m)
    except Exception as e:
        logger.exception("Error checking route match: %s", e)
        return None

def fare_basis_km(match: MatchResult, requested_km: float) -> float:
    """
    Distance the fare is charged on: only the covered part for partial rides.
    """
    if match.is_partial_ride:
        return (match.original_distance - match.remaining_distance) / 1000.0
    return requested_km

def _mask_location(location: Optional[str]) -> Optional[str]:
    if not location:
        return None
    return location.split(",")[0].strip() + " area"

def find_available_drivers(
    trips: List[Dict[str, Any]],
    pickup: Point,
    dropoff: Point,
    trip_km: float,
    threshold_m: float,
    rng: Optional[random.Random] = None
) -> List[Dict[str, Any]]:
    """
    Match every candidate trip and return the ones that can serve the passenger,
    closest pickup first. Route geometry and the driver's end point never leave
    this function.
    """
    rng = rng or random.Random()
    hidden = {"route_polyline", "end_lat", "end_lng", "end_location"}

    drivers: List[Dict[str, Any]] = []
    for trip in trips:
        m = check_route_match(trip.get("route_polyline"), pickup, dropoff, threshold_m)
        if m is None:
            continue

        base_fare = fare_basis_km(m, trip_km) * settings.fare_per_km
        estimated_fare = int(round(base_fare * rng.uniform(0.8, 1.2)))
        eta = estimate_eta_min(float(trip.get("duration_minutes") or 0), m.pickup_index, m.total_route_points)
        actual_dropoff = m.best_drop_point if m.is_partial_ride else dropoff

        out = {k: v for k, v in trip.items() if k not in hidden}
        out.update({
            "estimated_fare": estimated_fare,
            "eta": eta,
            "pickup_distance": int(round(m.pickup_distance)),
            "dropoff_distance": int(round(m.dropoff_distance)),
            "end_location_masked": _mask_location(trip.get("end_location")),
            "is_partial_ride": m.is_partial_ride,
            # km for partial rides, 0 otherwise
            "remaining_distance": int(round(m.remaining_distance / 1000.0)) if m.is_partial_ride else 0,
            "distance_saved_percentage": int(round(m.distance_reduction)) if m.is_partial_ride else 100,
            "actual_dropoff_lat": actual_dropoff.lat,
            "actual_dropoff_lng": actual_dropoff.lng,
        })
        drivers.append(out)

    drivers.sort(key=lambda d: d["pickup_distance"])
    return drivers[:settings.max_driver_results]
