from typing import Dict, Mapping, Optional

from tripquest.models.catalog import QuizOption, QuizQuestion
from tripquest.services.catalog_service import Catalog

DEFAULT_PERSONA = "All-Rounder"


def find_selected_option(question: QuizQuestion, option_text: str) -> Optional[QuizOption]:
    return next((opt for opt in question.options if opt.option_text == option_text), None)


def calculate_dominant_persona(answers: Mapping[str, str], catalog: Catalog) -> str:
    """
    Sum the persona scores of every selected quiz option and return the id of
    the highest-scoring persona. On a tie the persona that was scored later
    wins; no scorable answer gives "All-Rounder".

    Args:
        answers: question id -> selected option text
        catalog: catalog holding the quiz questions
    """
    scores: Dict[str, int] = {}
    for question_id, option_text in answers.items():
        question = catalog.quiz_questions.get(question_id)
        if not question or not option_text:
            continue
        option = find_selected_option(question, option_text)
        if option is None:
            continue
        for persona_id, score in option.persona_scores.items():
            scores[persona_id] = scores.get(persona_id, 0) + score

    if not scores:
        return DEFAULT_PERSONA
    dominant = None
    for persona_id, score in scores.items():
        if dominant is None or score >= scores[dominant]:
            dominant = persona_id
    return dominant
