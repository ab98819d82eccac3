from datetime import date
from pydantic import BaseModel, Field, model_validator
from typing import Optional, Dict, Any, List

from tripquest.config import settings


# ---------------------------
# Core Models
# ---------------------------

class LatLng(BaseModel):
    lat: float
    lng: float


class Location(BaseModel):
    """Coordinates as returned by the Places and Routes APIs"""
    latitude: float
    longitude: float


class TripPlanningRequest(BaseModel):
    origin: Optional[str] = None
    destination: str = Field(..., min_length=1, max_length=200, description="Travel destination")
    destinationLatLng: Optional[LatLng] = None
    startDate: date
    endDate: date
    budget: float = Field(..., gt=0, description="Total budget in the trip currency")
    currency: str = Field("USD", min_length=3, max_length=3)
    theme: str = Field(..., min_length=1, description="Persona id driving the itinerary")
    groupSize: int = Field(2, ge=1, description="Number of travellers")
    accommodation: Optional[str] = None
    transport: Optional[str] = None
    language: str = Field("en", min_length=2, max_length=10)

    @model_validator(mode="after")
    def validate_trip_window(self):
        if self.endDate < self.startDate:
            raise ValueError("endDate must not be before startDate")
        if self.duration_in_days > settings.max_days:
            raise ValueError(f"Trips are limited to {settings.max_days} days")
        if self.groupSize > settings.max_group_size:
            raise ValueError(f"groupSize must be at most {settings.max_group_size}")
        return self

    @property
    def duration_in_days(self) -> int:
        return (self.endDate - self.startDate).days + 1


class Activity(BaseModel):
    timeOfDay: str
    activityName: str = "N/A"
    description: str = "N/A"
    approximateCost: str = "N/A"
    suggestedDuration: str = "N/A"
    category: str = "N/A"


class TravelInfo(BaseModel):
    duration: str
    distanceMeters: int


class EnrichedActivity(Activity):
    placeId: Optional[str] = None
    rating: Optional[float] = None
    userRatingsTotal: Optional[int] = None
    photos: Optional[List[Dict[str, Any]]] = None
    location: Optional[Location] = None
    formattedAddress: Optional[str] = None
    websiteUri: Optional[str] = None
    travelToNext: Optional[TravelInfo] = None


class ItineraryDay(BaseModel):
    day: int
    moduleId: str
    moduleName: str
    narrative: str = ""
    activities: List[EnrichedActivity] = []


class CostBreakdown(BaseModel):
    accommodation: float = 0
    activities: float = 0
    transport: float = 0
    food: float = 0
    miscellaneous: float = 0
    total: float = 0
    isOverBudget: bool = False
    overageAmount: float = 0


class PersonaSnapshot(BaseModel):
    personaId: str
    primaryPersona: str
    moduleDNA: List[str] = []
    introduction: str = ""
    conclusion: str = ""


class Destination(BaseModel):
    name: str
    latLng: Optional[LatLng] = None


class Itinerary(BaseModel):
    title: str
    request: TripPlanningRequest
    destination: Destination
    personaSnapshot: PersonaSnapshot
    costBreakdown: CostBreakdown
    days: List[ItineraryDay] = []
    status: str = "draft"
    meta: Optional[Dict[str, Any]] = {}  # {"generatedAt": ..., "season": ..., "model": ...}


# ---------------------------
# Request/Response Models
# ---------------------------

class GenerateItineraryResponse(BaseModel):
    status: str = "success"
    itinerary: Itinerary
    itineraryId: Optional[str] = None
    processingTime: float


class QuizAnswer(BaseModel):
    option_text: str


class QuizRequest(BaseModel):
    answers: Dict[str, QuizAnswer]


class QuizResponse(BaseModel):
    status: str = "success"
    persona: str
