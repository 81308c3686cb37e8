"""
Chat session orchestration.

A ``ChatSession`` runs one user's conversation: it translates Hindi input,
checks for crisis keywords, detects the emotion of each turn, asks the
responder for a reply and keeps the session store up to date. Failures of
the remote services never interrupt a turn; they surface only as advisory
notifications.
"""

import asyncio
import logging

import httpx
from pydantic import BaseModel, Field

from .capabilities import CameraBackend, JsonFileKeyValueStore, KeyValueStore, SpeechBackend
from .config import AppConfig
from .credentials import CredentialService
from .crisis import is_crisis
from .emotion import EmotionClassifier
from .face import FaceEmotionDetector
from .models import (
    Emotion,
    JournalEntry,
    Message,
    Notification,
    Personality,
    Result,
    Role,
    Settings,
    ValidationState,
)
from .responder import ResponseGenerator
from .settings import SettingsStore
from .speech import VoiceInput
from .store import SessionStore
from .translator import Translator, contains_devanagari

logger = logging.getLogger(__name__)

GENERIC_REPLY = (
    "I'm here to listen. Could you tell me more about what you're experiencing?"
)

AUTO_MESSAGES: dict[Emotion, str] = {
    Emotion.HAPPY: "I'm feeling happy today!",
    Emotion.NEUTRAL: "I'm feeling okay.",
    Emotion.SAD: "I'm feeling sad right now.",
    Emotion.ANXIOUS: "I'm feeling anxious about things.",
    Emotion.STRESSED: "I'm feeling stressed out.",
    Emotion.ANGRY: "I'm feeling frustrated and angry.",
}

JOURNAL_EMOTIONS = {Emotion.SAD, Emotion.ANXIOUS, Emotion.STRESSED}


class TurnResult(BaseModel):
    """Everything a single chat turn produced."""

    user_message: Message
    reply: Message
    emotion: Result | None = Field(
        None, description="Classifier result; None when a face scan supplied the emotion"
    )
    response: Result | None = None
    crisis: bool = False


class ChatSession:
    def __init__(
        self,
        store: SessionStore,
        credentials: CredentialService,
        classifier: EmotionClassifier,
        responder: ResponseGenerator,
        translator: Translator,
        settings_store: SettingsStore,
        voice: VoiceInput | None = None,
        face: FaceEmotionDetector | None = None,
        personality: Personality = Personality.SUPPORTIVE,
        auto_message_delay: float = 1.5,
    ) -> None:
        self.store = store
        self.credentials = credentials
        self.classifier = classifier
        self.responder = responder
        self.translator = translator
        self.settings_store = settings_store
        self.settings = settings_store.load()
        self.voice = voice or VoiceInput(None, self.settings.voice_language)
        self.face = face or FaceEmotionDetector()
        self.personality = personality
        self.auto_message_delay = auto_message_delay

        self.compose = ""
        self.show_crisis_resources = False
        self.emotion_detection_enabled = False
        self._face_emotion: Emotion | None = None
        self._auto_message_sent = False
        self._notifications: list[Notification] = []

    @classmethod
    def from_config(
        cls,
        config: AppConfig,
        http: httpx.AsyncClient,
        key_store: KeyValueStore | None = None,
        speech: SpeechBackend | None = None,
        camera: CameraBackend | None = None,
    ) -> "ChatSession":
        """Wire a session from configuration and a shared HTTP client."""
        key_store = key_store or JsonFileKeyValueStore(config.store_path)
        credentials = CredentialService(
            key_store,
            http,
            default_key=config.google_api_key,
            model=config.model,
            base_url=config.generative_url,
        )
        settings_store = SettingsStore(key_store)
        return cls(
            store=SessionStore(),
            credentials=credentials,
            classifier=EmotionClassifier(credentials),
            responder=ResponseGenerator(credentials),
            translator=Translator(credentials, http, free_url=config.translate_url),
            settings_store=settings_store,
            voice=VoiceInput(speech, settings_store.load().voice_language),
            face=FaceEmotionDetector(camera),
        )

    @property
    def offline(self) -> bool:
        return self.settings.offline_mode

    def notify(
        self, title: str, description: str, destructive: bool = False
    ) -> None:
        self._notifications.append(
            Notification(
                title=title,
                description=description,
                variant="destructive" if destructive else "default",
            )
        )

    def drain_notifications(self) -> list[Notification]:
        notifications, self._notifications = self._notifications, []
        return notifications

    # MARK: - Lifecycle

    async def startup(self) -> bool:
        """Check the API key and switch to offline mode if it is unusable."""
        valid = await self.credentials.is_valid()
        if not valid:
            self.settings = self.settings.model_copy(update={"offline_mode": True})
            self.notify(
                "Offline Mode Activated",
                "API key issues detected. Using offline mode with local responses.",
            )
        return valid

    async def update_credential(self, api_key: str) -> bool:
        valid = await self.credentials.update_credential(api_key)
        self.notify("API Key Updated", "Your API key has been updated successfully.")
        return valid

    # MARK: - Chat

    async def send_message(self, text: str | None = None) -> TurnResult | None:
        """
        Run one chat turn.

        Args:
            text: Message to send; the compose buffer is used when omitted

        Returns:
            The turn result, or None if there was nothing to send
        """
        original = text if text else self.compose
        if not original.strip():
            return None
        self.compose = ""

        try:
            return await self._run_turn(original)
        except Exception as e:
            logger.exception("Error processing message: %s", e)
            reply = self.store.append_message(
                Message(role=Role.ASSISTANT, content=GENERIC_REPLY)
            )
            return TurnResult(
                user_message=Message(role=Role.USER, content=original), reply=reply
            )

    async def _run_turn(self, original: str) -> TurnResult:
        history = self.store.messages()

        processed = original
        translated = None
        if contains_devanagari(original) and not self.offline:
            translation = await self.translator.translate(original, "hi", "en")
            if translation.value and translation.value != original:
                processed = translated = translation.value

        crisis = is_crisis(original) or is_crisis(processed)
        if crisis:
            self.show_crisis_resources = True

        user_message = self.store.append_message(
            Message(role=Role.USER, content=original, translated=translated)
        )

        emotion_result = None
        if self._face_emotion is not None:
            emotion = self._face_emotion
            self._face_emotion = None
        else:
            emotion_result = await self.classifier.classify(processed, self.offline)
            emotion = emotion_result.value
        await self.store.record_mood(emotion)

        response = await self.responder.respond(
            processed, self.personality, emotion, history, self.offline
        )
        reply = self.store.append_message(
            Message(role=Role.ASSISTANT, content=response.value, emotion=emotion)
        )

        if emotion in JOURNAL_EMOTIONS:
            self.notify(
                "Journaling Suggestion",
                "Writing about your feelings might help. "
                "Would you like to add a journal entry?",
            )

        return TurnResult(
            user_message=user_message,
            reply=reply,
            emotion=emotion_result,
            response=response,
            crisis=crisis,
        )

    # MARK: - Face emotion

    def toggle_emotion_detection(self) -> bool:
        self.emotion_detection_enabled = not self.emotion_detection_enabled
        if self.emotion_detection_enabled:
            self.face.enable()
            self._auto_message_sent = False
            self.notify(
                "Emotion Detection Enabled",
                "Click 'Scan Now' to analyze your current emotional state.",
            )
        else:
            self.face.disable()
            self.notify(
                "Emotion Detection Disabled", "Emotion scanning has been turned off."
            )
        return self.emotion_detection_enabled

    async def scan_face(self) -> tuple[Emotion, TurnResult | None]:
        """Run a face scan and feed its emotion into the session."""
        emotion = self.face.scan()
        return emotion, await self.handle_face_emotion(emotion)

    async def handle_face_emotion(self, emotion: Emotion) -> TurnResult | None:
        """
        Record a face-detected emotion and maybe send the canned message for it.

        Only one automatic message is sent per enabling of emotion detection,
        and none while the user has text in the compose buffer.
        """
        self._face_emotion = emotion
        await self.store.record_mood(emotion)
        self.notify("Emotion Detected", f"You appear to be feeling {emotion.value}.")

        if not self.settings.auto_message_enabled or self._auto_message_sent:
            return None

        self._auto_message_sent = True
        await asyncio.sleep(self.auto_message_delay)
        if self.compose.strip():
            self._auto_message_sent = False
            return None
        return await self.send_message(AUTO_MESSAGES[emotion])

    # MARK: - Preferences

    def set_personality(self, personality: Personality) -> None:
        self.personality = Personality(personality)

    def toggle_offline(self) -> bool:
        going_online = self.offline
        self.settings = self.settings.model_copy(
            update={"offline_mode": not self.offline}
        )
        if going_online and self.credentials.state is ValidationState.INVALID:
            self.notify(
                "API Key Invalid",
                "No valid API key found. Some features will use fallback responses.",
                destructive=True,
            )
        elif going_online:
            self.notify(
                "Online Mode Activated", "Using AI-powered responses when available."
            )
        else:
            self.notify(
                "Offline Mode Activated", "Using local responses without API calls."
            )
        return self.offline

    def update_settings(self, settings: Settings) -> Settings:
        self.settings = settings
        self.voice.set_language(settings.voice_language)
        self.settings_store.save(settings)
        self.notify(
            "Preferences Updated", "Your preferences have been updated successfully."
        )
        return settings

    # MARK: - Voice

    def toggle_listening(self) -> bool:
        notification = self.voice.toggle()
        if notification is not None:
            self._notifications.append(notification)
        return self.voice.listening

    def handle_speech_results(self, transcripts: list[str]) -> str:
        self.compose = self.voice.handle_results(transcripts)
        return self.compose

    def handle_speech_error(self, error: str) -> None:
        self._notifications.append(self.voice.handle_error(error))

    # MARK: - Journal

    def add_journal_entry(self, content: str, emotion: Emotion) -> JournalEntry:
        entry = self.store.add_journal_entry(content, emotion)
        self.notify(
            "Journal Entry Added", "Your thoughts have been saved to your journal."
        )
        return entry
