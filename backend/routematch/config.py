from pydantic import BaseModel
import os

class Settings(BaseModel):
    default_trip_km: float = float(os.getenv("DEFAULT_TRIP_KM", "10"))
    snap_distance_m: float = float(os.getenv("SNAP_DISTANCE_M", "50"))
    city_speed_kmh: float = float(os.getenv("CITY_SPEED_KMH", "30"))
    fare_per_km: float = float(os.getenv("FARE_PER_KM", "3"))
    max_driver_results: int = int(os.getenv("MAX_DRIVER_RESULTS", "20"))
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

settings = Settings()
