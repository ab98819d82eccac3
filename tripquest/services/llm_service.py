import asyncio
import logging
from typing import Any, List, Optional
from dataclasses import dataclass

from google import genai
from google.genai import types

from tripquest.config import settings

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)


class ConfigurationError(RuntimeError):
    """Raised when the generation model credential is missing"""


@dataclass
class LLMConfig:
    """Configuration for LLM calls"""
    model: str = "gemini-2.0-flash-lite"
    temperature: float = 0.7
    top_p: float = 0.95
    max_output_tokens: int = 8192
    json_output: bool = False
    safety_settings_off: bool = False
    timeout_seconds: Optional[float] = None


@dataclass
class LLMResponse:
    """Standardized LLM response"""
    success: bool
    content: str
    raw_response: Any
    error: Optional[str] = None
    blocked: bool = False
    block_reason: Optional[str] = None


class GeminiLLMService:
    """Gemini client used by the day generator, configured from settings"""

    def __init__(self, client: Optional[genai.Client] = None):
        if client is not None:
            self.client = client
            return

        if settings.gemini_api_key:
            self.client = genai.Client(api_key=settings.gemini_api_key.strip('"'))
            logger.info("Initialized Gemini client with API key")
        elif settings.google_cloud_project:
            self.client = genai.Client(
                vertexai=True,
                project=settings.google_cloud_project,
                location=settings.vertex_ai_location
            )
            logger.info(f"Initialized Vertex AI client for project: {settings.google_cloud_project}")
        else:
            raise ConfigurationError("GEMINI_API_KEY environment variable not set.")

    def _create_safety_settings(self, safety_off: bool) -> List[types.SafetySetting]:
        """Create safety settings configuration"""
        if not safety_off:
            return []  # Use default safety settings

        return [
            types.SafetySetting(category=category, threshold="OFF")
            for category in (
                "HARM_CATEGORY_HATE_SPEECH",
                "HARM_CATEGORY_DANGEROUS_CONTENT",
                "HARM_CATEGORY_SEXUALLY_EXPLICIT",
                "HARM_CATEGORY_HARASSMENT",
            )
        ]

    async def generate_content(
        self,
        user_message: str,
        system_instruction: str,
        config: Optional[LLMConfig] = None
    ) -> LLMResponse:
        """
        Generate content with Gemini.

        Args:
            user_message: The prompt for this call
            system_instruction: System instruction for this call
            config: LLM configuration (optional, uses defaults if not provided)

        Returns:
            LLMResponse; ``blocked`` is set when the prompt was rejected or the
            model produced no text. Transport errors and timeouts come back as
            ``success=False`` instead of raising.
        """
        if config is None:
            config = LLMConfig(model=settings.gemini_model)

        generate_content_config = types.GenerateContentConfig(
            system_instruction=system_instruction,
            temperature=config.temperature,
            top_p=config.top_p,
            max_output_tokens=config.max_output_tokens,
            response_mime_type="application/json" if config.json_output else None,
            safety_settings=self._create_safety_settings(config.safety_settings_off)
        )
        timeout = config.timeout_seconds or settings.llm_timeout_seconds

        try:
            logger.info(f"Making LLM call with model: {config.model}, json: {config.json_output}")
            response = await asyncio.wait_for(
                self.client.aio.models.generate_content(
                    model=config.model,
                    contents=user_message,
                    config=generate_content_config
                ),
                timeout=timeout
            )
        except asyncio.TimeoutError:
            logger.error(f"LLM call timed out after {timeout}s")
            return LLMResponse(success=False, content="", raw_response=None, error="timeout")
        except Exception as e:
            logger.error(f"LLM call failed: {e}")
            return LLMResponse(success=False, content="", raw_response=None, error=str(e))

        feedback = getattr(response, "prompt_feedback", None)
        block_reason = getattr(feedback, "block_reason", None) if feedback else None
        content = response.text or ""

        if block_reason or not content:
            return LLMResponse(
                success=True,
                content=content,
                raw_response=response,
                blocked=True,
                block_reason=str(block_reason) if block_reason else "empty response"
            )

        logger.info(f"LLM call successful, response length: {len(content)}")
        return LLMResponse(success=True, content=content, raw_response=response)


# Singleton instance
_llm_service_instance = None

def get_llm_service() -> GeminiLLMService:
    """Get singleton instance of LLM service"""
    global _llm_service_instance
    if _llm_service_instance is None:
        _llm_service_instance = GeminiLLMService()
    return _llm_service_instance


# Predefined System Instructions
class SystemInstructions:
    """Collection of predefined system instructions"""

    @staticmethod
    def trip_planner() -> str:
        return (
            "You are a professional travel planner with extensive knowledge of global destinations, "
            "local customs, transportation, accommodations, and activities. Provide detailed, accurate, "
            "and practical travel advice. Your primary goal is to create a detailed, accurate, and "
            "practical travel itinerary that STRICTLY adheres to the provided budget. "
            "Always prioritize cost-effective options."
        )
