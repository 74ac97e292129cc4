import logging
import math
from typing import Any

from .config import settings

logger = logging.getLogger(__name__)

def acceptance_threshold_m(trip_km: float) -> float:
    """
    Max distance (meters) between a requested point and the route.
    Tight for short trips, looser as the trip gets longer.
    """
    if trip_km <= 5:
        threshold = 800.0
    elif trip_km <= 20:
        threshold = 1000.0 + (trip_km - 5) * 50
    elif trip_km <= 50:
        threshold = 1750.0 + (trip_km - 20) * 30
    elif trip_km <= 100:
        threshold = 2650.0 + (trip_km - 50) * 20
    else:
        # 1% of the trip, never below the 100 km value
        threshold = max(3650.0, trip_km * 10)

    logger.debug("Distance: %.2fkm, threshold: %.0fm", trip_km, threshold)
    return threshold

def required_reduction_pct(original_km: float) -> float:
    """
    Share of the direct journey a route must cover to be offered as a partial ride.
    """
    if original_km < 30:
        return 60.0
    if original_km <= 100:
        return 55.0
    return 30.0

def trip_distance_km(value: Any) -> float:
    """
    Caller-supplied trip distance, or the configured default when missing or unusable.
    """
    try:
        km = float(value)
    except (TypeError, ValueError):
        return settings.default_trip_km
    if not math.isfinite(km) or km <= 0:
        return settings.default_trip_km
    return km

def estimate_eta_min(duration_min: float, pickup_index: int, total_route_points: int) -> int:
    """
    Minutes until the driver reaches the pickup, from its position along the route.
    Clamped to 3..30.
    """
    progress = pickup_index / total_route_points if total_route_points else 0.0
    minutes = int(math.floor(duration_min * progress + 0.5))
    return max(3, min(minutes, 30))
