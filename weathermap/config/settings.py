from pydantic_settings import BaseSettings, SettingsConfigDict
from pathlib import Path
from typing import List
import logging

logger = logging.getLogger(__name__)
BASE_DIR = Path(__file__).resolve().parent.parent

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    ENVIRONMENT: str = "development"
    APP_VERSION: str = "0.1.0"
    LOG_DIR: str = str(BASE_DIR.parent / "logs")
    LOG_LEVEL: str = "INFO"

    ALLOWED_ORIGINS: List[str] = [
        "http://localhost",
        "http://localhost:3000",
        "http://127.0.0.1:8000",
    ]

    # Sampling center for the precipitation grid (Java, ~100 km around Jakarta/Bogor)
    CENTER_LAT: float = -6.0
    CENTER_LON: float = 106.0
    SAMPLE_RADIUS_M: float = 100000.0   # 100 km
    SAMPLE_COUNT: int = 10
    FORECAST_HOURS: int = 12            # hourly entries kept per location

    # Fallback user location (Miami) and the visible region around it
    USER_LAT: float = 25.7602
    USER_LON: float = -80.1959
    USER_REGION_METERS: float = 10000.0

    # Run the sample + fetch sequence once when the app comes up
    FETCH_ON_STARTUP: bool = True

    OPEN_METEO_URL: str = "https://api.open-meteo.com/v1/forecast"
    NOMINATIM_URL: str = "https://nominatim.openstreetmap.org/search"
    OSRM_URL: str = "https://router.project-osrm.org/route/v1/driving"
    USER_AGENT: str = "weathermap-backend/0.1"
    http_timeout: float = 30.0

settings = Settings()
logger.debug(f"Settings loaded: center=({settings.CENTER_LAT}, {settings.CENTER_LON}), radius={settings.SAMPLE_RADIUS_M}m")

def get_settings() -> Settings:
    return settings
