# tripquest/config.py
import os
from pathlib import Path
from pydantic_settings import BaseSettings
from pydantic import ConfigDict
from typing import List
from dotenv import load_dotenv
load_dotenv()

DEFAULT_CATALOG_PATH = str(Path(__file__).resolve().parent / "data" / "catalog.json")


class Settings(BaseSettings):
    # Application Settings
    max_days: int = 30
    max_group_size: int = 20
    allowed_origins: List[str] = ["http://localhost:3000"]
    persist_itineraries: bool = False

    # Generation model
    gemini_api_key: str = ""
    google_cloud_project: str = ""
    vertex_ai_location: str = "us-central1"
    gemini_model: str = "gemini-2.0-flash-lite"

    # Places, routes and translation
    google_maps_api_key: str = ""
    cloud_translation_api_key: str = ""
    place_search_radius_m: float = 50000.0

    # Budget-constrained generation loop
    budget_retry_threshold: float = 1.5
    max_generation_attempts: int = 2
    arrival_module_id: str = "module-arrival-and-acclimatize"
    departure_module_id: str = "module-departure-and-reflection"

    # Timeouts (seconds)
    llm_timeout_seconds: float = 60.0
    http_timeout_seconds: float = 10.0
    itinerary_deadline_seconds: float = 600.0

    # Reference data
    catalog_source: str = "file"  # "file" or "firestore"
    catalog_path: str = DEFAULT_CATALOG_PATH
    database: str = "(default)"

    model_config = ConfigDict(
        env_file=".env",
        extra="ignore"
    )


class CloudRunConfig:
    """Configuration for Cloud Run deployment"""

    IS_CLOUD_RUN: bool = os.getenv("K_SERVICE") is not None
    PROJECT_ID: str = os.getenv("GOOGLE_CLOUD_PROJECT", "")
    PORT: int = int(os.getenv("PORT", "8080"))

settings = Settings()
cloud_config = CloudRunConfig()
