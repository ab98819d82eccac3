from fastapi import APIRouter, Depends, HTTPException, status, Response
from pydantic import BaseModel
from typing import Optional, Dict, Any
import logging
from datetime import datetime

from tripquest.config import settings
from tripquest.dependencies import get_firestore_client, get_itinerary_service
from tripquest.models.itinerary import GenerateItineraryResponse, TripPlanningRequest
from tripquest.services.catalog_service import PersonaNotFoundError
from tripquest.services.firestore_service import FirestoreService
from tripquest.services.itinerary_service import ItineraryService, ItineraryTimeoutError

logger = logging.getLogger(__name__)
router = APIRouter(tags=["itinerary"])


class ErrorResponse(BaseModel):
    """Error response model"""
    status: str = "error"
    message: str
    details: Optional[Dict[str, Any]] = None


def _error(status_code: int, message: str) -> HTTPException:
    return HTTPException(status_code=status_code, detail={"status": "error", "message": message})


@router.post("/itinerary/generate", response_model=GenerateItineraryResponse, responses={
    404: {"model": ErrorResponse, "description": "Persona not found"},
    500: {"model": ErrorResponse, "description": "Internal Server Error"},
    504: {"model": ErrorResponse, "description": "Generation timed out"}
})
async def generate_itinerary(
    request: TripPlanningRequest,
    response: Response,
    itinerary_service: ItineraryService = Depends(get_itinerary_service)
):
    """
    Generate a complete persona-driven itinerary.

    Days are generated in order with a soft per-day budget; the response always
    contains every day (possibly empty) and a cost breakdown flagging any overage.
    """
    start_time = datetime.now()

    try:
        itinerary = await itinerary_service.plan_trip(request)

        itinerary_id = None
        if settings.persist_itineraries:
            fs = FirestoreService(get_firestore_client())
            itinerary_id = fs.save_trip(itinerary.model_dump(mode="json"))
            logger.info(f"Saved itinerary {itinerary_id}")

        processing_time = (datetime.now() - start_time).total_seconds()
        logger.info(f"Itinerary generated in {processing_time:.2f}s")
        response.headers["X-Processing-Time"] = str(processing_time)

        return GenerateItineraryResponse(
            itinerary=itinerary,
            itineraryId=itinerary_id,
            processingTime=processing_time
        )

    except PersonaNotFoundError as e:
        logger.error(f"Unknown persona in trip planning: {e}")
        raise _error(status.HTTP_404_NOT_FOUND, str(e))
    except ValueError as e:
        logger.error(f"Validation error in trip planning: {e}")
        raise _error(status.HTTP_400_BAD_REQUEST, f"Invalid request: {str(e)}")
    except ItineraryTimeoutError as e:
        logger.error(f"Timeout in trip planning: {e}")
        raise _error(status.HTTP_504_GATEWAY_TIMEOUT, "Itinerary generation timed out")
    except Exception as e:
        logger.error(f"Unexpected error in trip planning: {e}", exc_info=True)
        raise _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")
