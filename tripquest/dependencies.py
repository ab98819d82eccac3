import os
import json
import logging
from dotenv import load_dotenv
from fastapi import HTTPException, status
from typing import Optional, Dict, Any

from firebase_admin import credentials, initialize_app, get_app, _apps, firestore as admin_firestore
from google.cloud import secretmanager
from google.api_core import exceptions as gapi_exceptions

from tripquest.config import settings
from tripquest.services.catalog_service import Catalog, get_catalog
from tripquest.services.enrichment_service import EnrichmentService
from tripquest.services.itinerary_service import ItineraryService
from tripquest.services.llm_service import ConfigurationError, get_llm_service
from tripquest.services.places_service import get_places_service
from tripquest.services.translation_service import TranslationService
load_dotenv()
logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)


SERVICE_ACCOUNT_SECRET = os.getenv("SERVICE_ACCOUNT_SECRET")  # e.g. projects/PROJECT_ID/secrets/SA_KEY/versions/latest
GOOGLE_APPLICATION_CREDENTIALS = os.getenv("GOOGLE_APPLICATION_CREDENTIALS")  # local path (dev)
PROJECT_ID = os.getenv("PROJECT_ID")


def _access_secret_from_sm(resource_name: str) -> str:
    """
    Given a full Secret Manager resource name (projects/.../secrets/.../versions/...),
    retrieve the secret payload (string).
    """
    try:
        client = secretmanager.SecretManagerServiceClient()
        response = client.access_secret_version(request={"name": resource_name})
        return response.payload.data.decode("UTF-8")
    except gapi_exceptions.GoogleAPIError as e:
        logger.exception("Unable to access secret %s: %s", resource_name, e)
        raise


def _init_firebase(cred: Optional[credentials.Base] = None):
    """Initialize firebase_admin once; later calls return the existing app."""
    if _apps:
        return get_app()
    app = initialize_app(cred) if cred else initialize_app()
    logger.info("Initialized firebase_admin (%s)", "explicit credential" if cred else "ADC")
    return app


def init_firebase_admin():
    """
    Initialize firebase_admin and return Firestore client.
    Order of preference:
      1) SERVICE_ACCOUNT_SECRET env var -> fetch JSON from Secret Manager
      2) GOOGLE_APPLICATION_CREDENTIALS env var -> local file path (dev)
      3) ADC (Cloud Run) -> initialize_app() without args
    """
    if SERVICE_ACCOUNT_SECRET:
        secret_res_name = SERVICE_ACCOUNT_SECRET
        # support shorthand secret ID (e.g., "SA_KEY") when a project id is provided
        if not secret_res_name.startswith("projects/") and PROJECT_ID:
            secret_res_name = f"projects/{PROJECT_ID}/secrets/{SERVICE_ACCOUNT_SECRET}/versions/latest"
        logger.info("Loading service account from Secret Manager: %s", secret_res_name)
        sa_dict: Dict[str, Any] = json.loads(_access_secret_from_sm(secret_res_name))
        _init_firebase(credentials.Certificate(sa_dict))
    elif GOOGLE_APPLICATION_CREDENTIALS and os.path.exists(GOOGLE_APPLICATION_CREDENTIALS):
        logger.info("Loading service account from path: %s", GOOGLE_APPLICATION_CREDENTIALS)
        _init_firebase(credentials.Certificate(GOOGLE_APPLICATION_CREDENTIALS))
    else:
        logger.info("No explicit service account provided, attempting Application Default Credentials (ADC)")
        _init_firebase()

    return admin_firestore.client(database_id=settings.database)


# Lazily initialize a single global Firestore client to reuse across requests
_db_client = None


def get_firestore_client():
    global _db_client
    if _db_client is None:
        _db_client = init_firebase_admin()
    return _db_client


# ---------------------------
# FastAPI dependencies
# ---------------------------
def get_catalog_dependency() -> Catalog:
    return get_catalog()


def get_translation_service() -> TranslationService:
    return TranslationService()


def get_itinerary_service() -> ItineraryService:
    """
    Build the itinerary service for a request.
    Raises HTTPException(500) when no generation credential is configured.
    """
    try:
        llm_service = get_llm_service()
    except ConfigurationError as e:
        logger.error(f"Configuration error in trip planning: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"status": "error", "message": "AI service temporarily unavailable"}
        )
    return ItineraryService(
        llm_service=llm_service,
        enrichment=EnrichmentService(get_places_service()),
        translation=get_translation_service(),
        places=get_places_service(),
    )
