"""
Voice input state for a chat session.

Recognition itself happens in a ``SpeechBackend``; this module only tracks
whether the user is listening and turns backend events into compose-field
text and notifications.
"""

import logging
from collections.abc import Iterable

from .capabilities import SpeechBackend
from .models import Notification

logger = logging.getLogger(__name__)

LANGUAGE_NAMES = {"en-US": "English", "hi-IN": "Hindi"}


class VoiceInput:
    def __init__(self, backend: SpeechBackend | None, language: str = "en-US") -> None:
        self._backend = backend
        self.language = language
        self.listening = False

    def toggle(self) -> Notification | None:
        """Start or stop listening, as the microphone button does."""
        if self._backend is None:
            return Notification(
                title="Speech Recognition Not Supported",
                description="Speech recognition is not available on this device.",
                variant="destructive",
            )

        if self.listening:
            self._backend.stop()
            self.listening = False
            return None

        self._backend.start(self.language)
        self.listening = True
        name = LANGUAGE_NAMES.get(self.language, self.language)
        return Notification(
            title="Listening...", description=f"Speak now. {name} language is active."
        )

    def set_language(self, language: str) -> None:
        """Switch language, restarting an active session with the new one."""
        self.language = language
        if self.listening and self._backend is not None:
            self._backend.stop()
            self._backend.start(language)

    def handle_results(self, transcripts: Iterable[str]) -> str:
        """Join the best transcript of every result so far."""
        return "".join(transcripts)

    def handle_error(self, error: str) -> Notification:
        logger.error("Speech recognition error: %s", error)
        self.listening = False
        return Notification(
            title="Speech Recognition Error",
            description=f"Error: {error}. Please try again.",
            variant="destructive",
        )

    def handle_end(self) -> None:
        self.listening = False
