"""
API key storage and validation.

A ``CredentialService`` is created once per application session. The first
validity check costs one lightweight generation call; its result is cached
until the key is changed.
"""

import logging

import httpx

from .capabilities import KeyValueStore
from .config import DEFAULT_GENERATIVE_URL, DEFAULT_MODEL
from .generative import GenerativeClient
from .models import ValidationState

logger = logging.getLogger(__name__)

API_KEY_STORE_KEY = "gemini_api_key"


class CredentialService:
    """
    Holds the generative API key and its cached validation state.

    State moves from ``unchecked`` to ``valid`` or ``invalid`` on the first
    validation and stays there until ``set_credential`` or
    ``clear_credential`` resets it.
    """

    def __init__(
        self,
        key_store: KeyValueStore,
        http: httpx.AsyncClient,
        default_key: str = "",
        model: str = DEFAULT_MODEL,
        base_url: str = DEFAULT_GENERATIVE_URL,
    ) -> None:
        self._key_store = key_store
        self._http = http
        self._default_key = default_key
        self._model = model
        self._base_url = base_url
        self._state = ValidationState.UNCHECKED
        self._client: GenerativeClient | None = None

    @property
    def state(self) -> ValidationState:
        return self._state

    @property
    def credential(self) -> str:
        stored = self._key_store.get(API_KEY_STORE_KEY)
        return self._default_key if stored is None else stored

    def has_credential(self) -> bool:
        return self.credential.strip() != ""

    def set_credential(self, value: str) -> None:
        """Store a new key and forget any previous validation."""
        self._key_store.set(API_KEY_STORE_KEY, value)
        self._reset()

    def clear_credential(self) -> None:
        self._key_store.delete(API_KEY_STORE_KEY)
        self._reset()

    def _reset(self) -> None:
        self._state = ValidationState.UNCHECKED
        self._client = None

    async def validate(self) -> bool:
        """
        Check the key against the generation API, at most once per key.

        Returns:
            Whether the current key is usable
        """
        if self._state is not ValidationState.UNCHECKED:
            return self._state is ValidationState.VALID

        key = self.credential
        if not key.strip():
            logger.warning("No generative API key configured")
            self._state = ValidationState.INVALID
            return False

        client = GenerativeClient(
            key, self._http, model=self._model, base_url=self._base_url
        )
        try:
            await client.generate("test")
        except Exception as e:
            logger.warning("API key validation failed: %s", e)
            self._state = ValidationState.INVALID
            return False

        self._client = client
        self._state = ValidationState.VALID
        return True

    async def is_valid(self) -> bool:
        return await self.validate()

    async def update_credential(self, value: str) -> bool:
        """Replace the key and validate it immediately."""
        self.set_credential(value)
        return await self.validate()

    async def client(self) -> GenerativeClient | None:
        """Return the validated generation client, or None if unusable."""
        if await self.validate():
            return self._client
        return None
