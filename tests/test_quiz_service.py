from tripquest.services.quiz_service import DEFAULT_PERSONA, calculate_dominant_persona, find_selected_option


def test_highest_total_score_wins(catalog):
    answers = {
        "q1": "The Early Riser. Watching the sunrise from a mountain top.",
        "q2": "A Story you can't wait to tell.",
        "q3": "A New Adventure.",
    }
    assert calculate_dominant_persona(answers, catalog) == "thrill-seeker"


def test_scores_accumulate_across_questions(catalog):
    answers = {
        "q1": "The Urbanite. Exploring a bustling city street market.",
        "q2": "A New Skill.",
    }
    # urban-explorer 3, gastronomic-guru 2 + 3
    assert calculate_dominant_persona(answers, catalog) == "gastronomic-guru"


def test_tie_goes_to_persona_scored_last(catalog):
    assert calculate_dominant_persona({"q3": "A New Adventure."}, catalog) == "urban-explorer"


def test_unknown_answers_fall_back_to_all_rounder(catalog):
    assert calculate_dominant_persona({}, catalog) == DEFAULT_PERSONA
    assert calculate_dominant_persona({"q9": "A New Adventure."}, catalog) == DEFAULT_PERSONA
    assert calculate_dominant_persona({"q1": "Staying home"}, catalog) == DEFAULT_PERSONA
    assert calculate_dominant_persona({"q1": ""}, catalog) == DEFAULT_PERSONA


def test_find_selected_option_matches_exact_text(catalog):
    question = catalog.quiz_questions["q2"]
    assert find_selected_option(question, "A New Skill.").persona_scores == {
        "gastronomic-guru": 3, "cultural-crusader": 2
    }
    assert find_selected_option(question, "a new skill.") is None
