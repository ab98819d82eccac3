from pydantic import BaseModel, ConfigDict
from typing import Optional, Dict, Tuple


# ---------------------------
# Reference data (read-only)
# ---------------------------

class ModuleActivity(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: str  # time of day: morning | afternoon | evening
    prompt_text: str
    keywords: Tuple[str, ...] = ()


class ItineraryModule(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    narrative: str
    activities: Tuple[ModuleActivity, ...] = ()
    applicable_seasons: Tuple[str, ...] = ("all",)

    def applies_to(self, season: str) -> bool:
        return "all" in self.applicable_seasons or season in self.applicable_seasons


class Persona(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    tagline: str = ""
    description: str = ""
    icon_url: Optional[str] = None
    introduction: str = ""
    conclusion: str = ""
    available_modules: Tuple[str, ...] = ()


class QuizOption(BaseModel):
    model_config = ConfigDict(frozen=True)

    option_text: str
    image_url: Optional[str] = None
    persona_scores: Dict[str, int] = {}


class QuizQuestion(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    question_text: str
    options: Tuple[QuizOption, ...] = ()
