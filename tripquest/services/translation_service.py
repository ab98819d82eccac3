import html
import asyncio
import logging
from typing import List, Optional

import requests

from tripquest.config import settings

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)

TRANSLATE_API_URL = "https://translation.googleapis.com/language/translate/v2"


class TranslationService:
    """Cloud Translation v2 client. Translation is opportunistic: failures return the input."""

    def __init__(self, api_key: Optional[str] = None, timeout: Optional[float] = None,
                 session: Optional[requests.Session] = None):
        self.api_key = settings.cloud_translation_api_key if api_key is None else api_key
        self.timeout = timeout or settings.http_timeout_seconds
        self.session = session or requests.Session()

    @property
    def available(self) -> bool:
        return bool(self.api_key)

    def _translate(self, texts: List[str], target_lang: str) -> List[str]:
        response = self.session.post(
            TRANSLATE_API_URL,
            params={"key": self.api_key},
            json={"q": texts, "target": target_lang, "format": "text"},
            timeout=self.timeout
        )
        response.raise_for_status()
        translations = response.json()["data"]["translations"]
        return [html.unescape(t["translatedText"]) for t in translations]

    async def translate(self, texts: List[str], target_lang: str) -> List[str]:
        if not texts or not target_lang or target_lang == "en" or not self.available:
            return list(texts)
        try:
            translated = await asyncio.to_thread(self._translate, list(texts), target_lang)
        except (requests.RequestException, KeyError, ValueError, TypeError) as e:
            logger.error(f"Failed to translate {len(texts)} text(s) to '{target_lang}': {e}")
            return list(texts)
        if len(translated) != len(texts):
            logger.error("Translation returned a different number of texts, keeping originals")
            return list(texts)
        return translated
