import random
from dataclasses import dataclass, asdict
from typing import Any, Callable, Dict, List, Optional

# Rupees per km, admin-editable
DEFAULT_FUEL_PRICES: Dict[str, Dict[str, float]] = {
    "2W": {"petrol": 1.89, "diesel": 2.01, "cng": 2.75, "ev": 0.20},
    "4W": {"petrol": 6.31, "diesel": 5.04, "cng": 4.12, "ev": 0.95},
}

# Bike-taxi / cab rates per km, for the savings comparison
TAXI_RATES: Dict[str, float] = {"2W": 9.0, "4W": 14.0}

# Grams per km for one vehicle driving solo
SOLO_CO2_PER_KM: Dict[str, float] = {"2W": 40, "4W": 150}

# Passengers cover this share of the fuel cost, the driver the rest
PASSENGER_SHARE = 0.75
VEHICLE_TYPES = ("2W", "4W")
FUEL_TYPES = ("petrol", "diesel", "cng", "ev")

PASSENGER_MESSAGES: List[Callable[[Any], str]] = [
    lambda saved: f"You just saved ₹{saved} compared to a cab",
    lambda _: "Same route. Smarter choice.",
    lambda _: "Your daily commute just got cheaper and cleaner.",
    lambda _: "One shared ride = less traffic, less pollution.",
]
PASSENGER_ECO_MESSAGES: List[Callable[[Any], str]] = [
    lambda co2: f"You avoided ~{co2} kg of CO₂ today",
    lambda _: "You avoided burning extra fuel today",
]
DRIVER_MESSAGES: List[Callable[[Any], str]] = [
    lambda saved: f"You recovered ₹{saved} of your fuel cost today",
    lambda _: "You helped reduce traffic without changing your routine.",
    lambda _: "Same commute, lighter expense.",
]
DRIVER_ECO_MESSAGES: List[Callable[[Any], str]] = [
    lambda _: "You helped someone skip a solo ride today",
    lambda co2: f"Together you saved ~{co2} kg of CO₂",
]

@dataclass(frozen=True)
class CostBreakdown:
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

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

def _round(x: float) -> int:
    # half up, so amounts match what the app shows
    return int(x + 0.5) if x >= 0 else -int(-x + 0.5)

def calculate_cost_sharing(
    distance_km: float,
    vehicle_type: Optional[str] = "4W",
    fuel_type: Optional[str] = "petrol",
    passengers: Optional[int] = 1,
    fuel_prices: Optional[Dict[str, Dict[str, float]]] = None,
    rng: Optional[random.Random] = None
) -> CostBreakdown:
    if not distance_km or distance_km <= 0:
        raise ValueError("Distance must be a positive number")
    vehicle_type = (vehicle_type or "4W").upper()
    if vehicle_type not in VEHICLE_TYPES:
        raise ValueError("Vehicle type must be 2W or 4W")
    fuel_type = (fuel_type or "petrol").lower()
    if fuel_type not in FUEL_TYPES:
        raise ValueError("Fuel type must be petrol, diesel, cng, or ev")

    # A two-wheeler always carries exactly one passenger
    if vehicle_type == "2W":
        passengers = 1
    passengers = max(1, min(5, passengers or 1))

    prices = fuel_prices or DEFAULT_FUEL_PRICES
    fuel_cost_per_km = prices.get(vehicle_type, {}).get(fuel_type)
    if not fuel_cost_per_km:
        raise ValueError(f"No fuel price found for {vehicle_type} {fuel_type}")

    base_trip_cost = distance_km * fuel_cost_per_km
    passenger_pool = base_trip_cost * PASSENGER_SHARE
    cost_per_passenger = _round(passenger_pool / passengers)
    driver_saved = _round(base_trip_cost - cost_per_passenger * passengers)

    taxi_estimate = _round(distance_km * TAXI_RATES[vehicle_type])
    savings_vs_taxi = max(0, taxi_estimate - cost_per_passenger)

    # One less solo vehicle on the road
    solo_co2 = SOLO_CO2_PER_KM[vehicle_type] * distance_km
    co2_saved_kg = round(solo_co2 * (passengers / (passengers + 1)) / 1000, 1)

    rng = rng or random.Random()
    pool = _round(passenger_pool)
    return CostBreakdown(
        base_trip_cost=_round(base_trip_cost),
        passenger_pool=pool,
        cost_per_passenger=cost_per_passenger,
        driver_saved=driver_saved,
        number_of_passengers=passengers,
        distance_km=round(distance_km, 1),
        vehicle_type=vehicle_type,
        fuel_type=fuel_type,
        fuel_cost_per_km=fuel_cost_per_km,
        savings_vs_taxi=savings_vs_taxi,
        taxi_estimate=taxi_estimate,
        co2_saved_kg=co2_saved_kg,
        passenger_message=rng.choice(PASSENGER_MESSAGES)(savings_vs_taxi),
        passenger_eco_message=rng.choice(PASSENGER_ECO_MESSAGES)(co2_saved_kg),
        driver_message=rng.choice(DRIVER_MESSAGES)(pool),
        driver_eco_message=rng.choice(DRIVER_ECO_MESSAGES)(co2_saved_kg),
        explanation=(
            f"Your contribution of ₹{cost_per_passenger} helps share "
            f"{int(PASSENGER_SHARE * 100)}% of the fuel cost with the driver who's already going your way."
        ),
    )
