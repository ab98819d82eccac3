import logging
from typing import List, Optional, Sequence

from tripquest.models.catalog import Persona
from tripquest.services.translation_service import TranslationService

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)

TRANSLATED_FIELDS = ("name", "tagline", "description")


def parse_accept_language(header: Optional[str]) -> str:
    """Base language of the first ``Accept-Language`` tag, e.g. ``"es-ES,es;q=0.9"`` -> ``"es"``."""
    if not header:
        return "en"
    first_tag = header.split(",")[0].split(";")[0].strip()
    return first_tag.split("-")[0].lower() or "en"


async def get_translated_personas(
    personas: Sequence[Persona],
    target_lang: str,
    translation: TranslationService,
) -> List[Persona]:
    """
    Translate each persona's name, tagline and description in one batch.

    Personas missing any of those fields, and every persona when translation
    is unavailable or fails, are returned in English.
    """
    personas = list(personas)
    if target_lang == "en":
        return personas

    translatable = [p for p in personas if all(getattr(p, field) for field in TRANSLATED_FIELDS)]
    texts = [getattr(p, field) for p in translatable for field in TRANSLATED_FIELDS]
    if not texts:
        return personas

    translated = await translation.translate(texts, target_lang)
    if translated == texts:
        logger.warning(f"Personas left untranslated for '{target_lang}'")
        return personas

    width = len(TRANSLATED_FIELDS)
    updates = {
        persona.id: dict(zip(TRANSLATED_FIELDS, translated[i * width:(i + 1) * width]))
        for i, persona in enumerate(translatable)
    }
    return [p.model_copy(update=updates[p.id]) if p.id in updates else p for p in personas]
