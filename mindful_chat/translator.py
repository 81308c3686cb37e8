"""
Text translation with a free-endpoint fallback.

The generative model is preferred; the unauthenticated translate endpoint
is used when it is unavailable or fails, and the original text is returned
when both fail.
"""

import logging
import re

import httpx

from .config import DEFAULT_TRANSLATE_URL
from .credentials import CredentialService
from .generative import failure_reason
from .models import Result

logger = logging.getLogger(__name__)

DEVANAGARI = re.compile("[\u0900-\u097F]")

TRANSLATE_PROMPT = """Translate the following text from {from_lang} to {to_lang}. Only respond with the translation, nothing else:

"{text}"
"""


def contains_devanagari(text: str) -> bool:
    """Return True if the text contains Hindi (Devanagari) characters."""
    return DEVANAGARI.search(text) is not None


def parse_free_translation(data: object) -> str:
    """
    Join the translated fragments of a free-endpoint response.

    Fragments are the first element of every item of ``data[0]``; anything
    that does not follow that shape is skipped.
    """
    if not isinstance(data, list) or not data or not isinstance(data[0], list):
        return ""
    fragments = []
    for item in data[0]:
        if isinstance(item, list) and item and isinstance(item[0], str):
            fragments.append(item[0])
    return "".join(fragments)


class Translator:
    def __init__(
        self,
        credentials: CredentialService,
        http: httpx.AsyncClient,
        free_url: str = DEFAULT_TRANSLATE_URL,
    ) -> None:
        self._credentials = credentials
        self._http = http
        self._free_url = free_url

    async def translate(self, text: str, from_lang: str, to_lang: str) -> Result[str]:
        """
        Translate text between two languages. Never raises.

        Args:
            text: Text to translate
            from_lang: Source language code (e.g. "hi")
            to_lang: Target language code (e.g. "en")

        Returns:
            The translation, or the original text if every path failed
        """
        if not text.strip() or from_lang == to_lang:
            return Result.success(text)

        reason = "credential-invalid"
        try:
            client = await self._credentials.client()
            if client is not None:
                answer = await client.generate(
                    TRANSLATE_PROMPT.format(
                        from_lang=from_lang, to_lang=to_lang, text=text
                    )
                )
                if answer.strip():
                    return Result.success(answer.strip())
                reason = "malformed-remote-response"
        except Exception as e:
            logger.warning("Error using AI for translation, falling back: %s", e)
            reason = failure_reason(e)

        return await self._translate_free(text, from_lang, to_lang, reason)

    async def _translate_free(
        self, text: str, from_lang: str, to_lang: str, reason: str
    ) -> Result[str]:
        params = {"client": "gtx", "sl": from_lang, "tl": to_lang, "dt": "t", "q": text}
        try:
            response = await self._http.get(self._free_url, params=params)
            response.raise_for_status()
            translated = parse_free_translation(response.json())
        except Exception as e:
            logger.error("Error using free translation API: %s", e)
            return Result.fallback(text, "transport-error")

        if not translated:
            logger.warning("Free translation API returned no text")
            return Result.fallback(text, "malformed-remote-response")
        return Result.fallback(translated, reason)
