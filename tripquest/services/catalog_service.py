"""
In-memory catalog of personas, itinerary modules and quiz questions.

The catalog is loaded once per process, either from the bundled seed file or
from the Firestore collections ``personas``, ``itinerary_modules`` and
``quiz_questions``, and is read-only afterwards.
"""

import json
import logging
from dataclasses import dataclass
from functools import lru_cache
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional

from tripquest.config import settings
from tripquest.models.catalog import ItineraryModule, Persona, QuizQuestion

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)

PERSONAS_COLLECTION = "personas"
MODULES_COLLECTION = "itinerary_modules"
QUIZ_COLLECTION = "quiz_questions"


class PersonaNotFoundError(LookupError):
    """Raised when a planning request names an unknown persona"""


def _index(items: Iterable[Any]) -> Mapping[str, Any]:
    return MappingProxyType({item.id: item for item in items})


@dataclass(frozen=True)
class Catalog:
    personas: Mapping[str, Persona]
    modules: Mapping[str, ItineraryModule]
    quiz_questions: Mapping[str, QuizQuestion]

    @classmethod
    def from_dict(cls, data: Dict[str, List[Dict[str, Any]]]) -> "Catalog":
        return cls(
            personas=_index(Persona(**p) for p in data.get(PERSONAS_COLLECTION, [])),
            modules=_index(ItineraryModule(**m) for m in data.get(MODULES_COLLECTION, [])),
            quiz_questions=_index(QuizQuestion(**q) for q in data.get(QUIZ_COLLECTION, [])),
        )

    def get_persona(self, persona_id: str) -> Persona:
        persona = self.personas.get(persona_id)
        if persona is None:
            raise PersonaNotFoundError(f"Persona '{persona_id}' not found.")
        return persona

    def get_module(self, module_id: str) -> Optional[ItineraryModule]:
        return self.modules.get(module_id)

    def list_personas(self) -> List[Persona]:
        return list(self.personas.values())

    def all_modules(self) -> List[ItineraryModule]:
        return list(self.modules.values())


def load_catalog_from_file(path: str) -> Catalog:
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    catalog = Catalog.from_dict(data)
    logger.info(
        f"Loaded catalog from {path}: {len(catalog.personas)} personas, "
        f"{len(catalog.modules)} modules, {len(catalog.quiz_questions)} quiz questions"
    )
    return catalog


def load_catalog_from_firestore(fs) -> Catalog:
    data = {
        name: fs.load_collection(name)
        for name in (PERSONAS_COLLECTION, MODULES_COLLECTION, QUIZ_COLLECTION)
    }
    catalog = Catalog.from_dict(data)
    logger.info(
        f"Loaded catalog from Firestore: {len(catalog.personas)} personas, "
        f"{len(catalog.modules)} modules, {len(catalog.quiz_questions)} quiz questions"
    )
    return catalog


@lru_cache
def get_catalog() -> Catalog:
    """Load the process-wide catalog on first use."""
    if settings.catalog_source == "firestore":
        from tripquest.dependencies import get_firestore_client
        from tripquest.services.firestore_service import FirestoreService
        return load_catalog_from_firestore(FirestoreService(get_firestore_client()))
    return load_catalog_from_file(settings.catalog_path)
