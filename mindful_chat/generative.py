"""
Client for the hosted text-generation API.

Only the single ``generateContent`` call is needed: every feature of the
service (emotion classification, replies, translation, key validation) is a
prompt and an optional system directive.
"""

from typing import Any

import httpx

from .config import DEFAULT_GENERATIVE_URL, DEFAULT_MODEL


class GenerationError(Exception):
    """Raised when the generation API cannot produce text."""


class MalformedResponseError(GenerationError):
    """Raised when the API answers with a body that carries no text."""


class GenerativeClient:
    """
    Thin async wrapper around the ``generateContent`` endpoint.

    The HTTP client is owned by the caller so that connection pooling and
    test transports can be shared across components.
    """

    def __init__(
        self,
        api_key: str,
        http: httpx.AsyncClient,
        model: str = DEFAULT_MODEL,
        base_url: str = DEFAULT_GENERATIVE_URL,
    ) -> None:
        self._api_key = api_key
        self._http = http
        self.model = model
        self._url = f"{base_url.rstrip('/')}/models/{model}:generateContent"

    async def generate(self, prompt: str, system: str | None = None) -> str:
        """
        Generate text for a prompt.

        Args:
            prompt: The user prompt
            system: Optional system directive

        Returns:
            The generated text of the first candidate

        Raises:
            httpx.HTTPError: On transport errors and non-2xx responses
            MalformedResponseError: If the response holds no candidate text
        """
        payload: dict[str, Any] = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}]
        }
        if system:
            payload["systemInstruction"] = {"parts": [{"text": system}]}

        response = await self._http.post(
            self._url, json=payload, headers={"x-goog-api-key": self._api_key}
        )
        response.raise_for_status()
        return _extract_text(response)


def _extract_text(response: httpx.Response) -> str:
    try:
        data = response.json()
        parts = data["candidates"][0]["content"]["parts"]
        return "".join(part.get("text", "") for part in parts)
    except (ValueError, KeyError, IndexError, TypeError, AttributeError) as e:
        raise MalformedResponseError(f"Unexpected generation response: {e}") from e


def failure_reason(error: Exception) -> str:
    """Map a generation failure onto a fallback reason."""
    if isinstance(error, MalformedResponseError):
        return "malformed-remote-response"
    return "transport-error"
