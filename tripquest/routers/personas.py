from fastapi import APIRouter, Depends, Header
from typing import List, Optional

from tripquest.dependencies import get_catalog_dependency, get_translation_service
from tripquest.models.catalog import Persona
from tripquest.models.itinerary import QuizRequest, QuizResponse
from tripquest.services.catalog_service import Catalog
from tripquest.services.persona_service import get_translated_personas, parse_accept_language
from tripquest.services.quiz_service import calculate_dominant_persona
from tripquest.services.translation_service import TranslationService

router = APIRouter(tags=["personas"])


@router.get("/personas", response_model=List[Persona])
async def list_personas(
    catalog: Catalog = Depends(get_catalog_dependency),
    translation: TranslationService = Depends(get_translation_service),
    accept_language: Optional[str] = Header(None)
):
    """List personas, translated into the caller's Accept-Language when possible."""
    target_lang = parse_accept_language(accept_language)
    return await get_translated_personas(catalog.list_personas(), target_lang, translation)


@router.post("/quiz/persona", response_model=QuizResponse)
def calculate_persona(body: QuizRequest, catalog: Catalog = Depends(get_catalog_dependency)):
    """Score quiz answers and return the dominant persona id."""
    answers = {question_id: answer.option_text for question_id, answer in body.answers.items()}
    return QuizResponse(persona=calculate_dominant_persona(answers, catalog))
