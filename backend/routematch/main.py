import logging
from fastapi import FastAPI, HTTPException
from typing import List

from .config import settings
from .cost_sharing import calculate_cost_sharing
from .geo import haversine_m
from .matching import check_route_match, find_available_drivers
from .models import (
    MatchRequestBody,
    MatchResponse,
    MatchInfo,
    SegmentRequestBody,
    SegmentResponse,
    AvailableDriversBody,
    AvailableDriver,
    CostSharingBody,
    CostSharingResult,
)
from .policy import acceptance_threshold_m, trip_distance_km
from .segment import route_segment_for_trip

logging.basicConfig(level=settings.log_level.upper())
logger = logging.getLogger(__name__)

app = FastAPI(title="Route Matching API", version="0.1.0")

@app.get("/health")
def health():
    return {"ok": True}

@app.post("/api/match", response_model=MatchResponse)
def match(body: MatchRequestBody):
    pickup = body.pickup.to_point()
    dropoff = body.dropoff.to_point()

    # Without an explicit trip distance, fall back to the direct pickup->dropoff distance
    if body.distance_km is None:
        trip_km = haversine_m(pickup, dropoff) / 1000.0
    else:
        trip_km = trip_distance_km(body.distance_km)
    threshold = acceptance_threshold_m(trip_km)

    result = check_route_match(body.route_polyline, pickup, dropoff, threshold)
    return MatchResponse(
        matched=result is not None,
        threshold_m=threshold,
        match=MatchInfo(**result.to_dict()) if result else None,
    )

@app.post("/api/route-segment", response_model=SegmentResponse)
def route_segment(body: SegmentRequestBody):
    """
    Pickup-to-drop slice of the driver's route, for display to the passenger.
    """
    if not body.route_polyline:
        raise HTTPException(status_code=404, detail="Trip or route not found")

    segment = route_segment_for_trip(body.route_polyline, body.pickup.to_point(), body.dropoff.to_point())
    if segment is None:
        raise HTTPException(status_code=404, detail="No route match found")
    return SegmentResponse(**segment.to_dict())

@app.post("/api/available-drivers", response_model=List[AvailableDriver])
def available_drivers(body: AvailableDriversBody):
    trip_km = trip_distance_km(body.distance_km)
    threshold = acceptance_threshold_m(trip_km)
    logger.info("Matching %d trips, distance %.1fkm, threshold %.0fm", len(body.trips), trip_km, threshold)

    trips = [t.model_dump() for t in body.trips]
    drivers = find_available_drivers(
        trips,
        body.pickup.to_point(),
        body.dropoff.to_point(),
        trip_km=trip_km,
        threshold_m=threshold,
    )
    return [AvailableDriver(**d) for d in drivers]

@app.post("/api/cost-sharing", response_model=CostSharingResult)
def cost_sharing(body: CostSharingBody):
    try:
        breakdown = calculate_cost_sharing(
            body.distance_km,
            vehicle_type=body.vehicle_type,
            fuel_type=body.fuel_type,
            passengers=body.number_of_passengers,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return CostSharingResult(**breakdown.to_dict())
