from pydantic import BaseModel, Field
from typing import List, Optional, Literal

from .geo import Point

class LatLng(BaseModel):
    lat: float = Field(..., ge=-90.0, le=90.0)
    lng: float = Field(..., ge=-180.0, le=180.0)

    def to_point(self) -> Point:
        return Point(self.lat, self.lng)

# Decoded route vertex, not range-checked
class RoutePoint(BaseModel):
    lat: float
    lng: float

class MatchRequestBody(BaseModel):
    route_polyline: str = Field(..., description="Encoded polyline of the driver's route")
    pickup: LatLng
    dropoff: LatLng
    distance_km: Optional[float] = Field(None, description="Trip distance used to derive the threshold")

class MatchInfo(BaseModel):
    pickup_distance: float
    dropoff_distance: float
    pickup_index: int
    dropoff_index: int
    total_route_points: int
    is_partial_ride: bool
    best_drop_point: Optional[RoutePoint] = None
    best_drop_point_index: int
    remaining_distance: float
    distance_reduction: float
    original_distance: float

class MatchResponse(BaseModel):
    matched: bool
    threshold_m: float
    match: Optional[MatchInfo] = None

class SegmentRequestBody(BaseModel):
    route_polyline: Optional[str] = None
    pickup: LatLng
    dropoff: LatLng

class SegmentResponse(BaseModel):
    route_segment: List[RoutePoint]
    encoded_segment: str
    segment_distance: int = Field(..., description="Meters")
    segment_duration: int = Field(..., description="Minutes, estimated at average city speed")
    total_points: int
    is_partial_ride: bool
    actual_dropoff_point: RoutePoint
    passenger_destination: RoutePoint
    remaining_distance: int = Field(..., description="Meters left after a partial ride, 0 otherwise")

class TripCandidate(BaseModel):
    id: int
    route_polyline: Optional[str] = None
    driver_name: Optional[str] = None
    start_location: Optional[str] = None
    end_location: Optional[str] = None
    departure_time: Optional[str] = None
    duration_minutes: float = 0.0
    available_seats: int = 1

class AvailableDriversBody(BaseModel):
    pickup: LatLng
    dropoff: LatLng
    distance_km: Optional[float] = None
    trips: List[TripCandidate]

class AvailableDriver(BaseModel):
    id: int
    driver_name: Optional[str] = None
    start_location: Optional[str] = None
    departure_time: Optional[str] = None
    duration_minutes: float
    available_seats: int
    estimated_fare: int
    eta: int
    pickup_distance: int
    dropoff_distance: int
    end_location_masked: Optional[str] = None
    is_partial_ride: bool
    remaining_distance: int = Field(..., description="Kilometers left after a partial ride, 0 otherwise")
    distance_saved_percentage: int
    actual_dropoff_lat: float
    actual_dropoff_lng: float

VehicleType = Literal["2W", "4W"]
FuelType = Literal["petrol", "diesel", "cng", "ev"]

class CostSharingBody(BaseModel):
    distance_km: float = Field(..., gt=0)
    vehicle_type: VehicleType = "4W"
    fuel_type: FuelType = "petrol"
    number_of_passengers: int = Field(1, ge=1)

class CostSharingResult(BaseModel):
    base_trip_cost: int
    passenger_pool: int
    cost_per_passenger: int
    driver_saved: int
    number_of_passengers: int
    distance_km: float
    vehicle_type: str
    fuel_type: str
    fuel_cost_per_km: float
    savings_vs_taxi: int
    taxi_estimate: int
    co2_saved_kg: float
    passenger_message: str
    passenger_eco_message: str
    driver_message: str
    driver_eco_message: str
    explanation: str
