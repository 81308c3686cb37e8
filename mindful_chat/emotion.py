"""
Emotion classification for chat messages.

A keyword pass always runs first and is the answer whenever the remote
model is unavailable or answers outside the emotion vocabulary.
"""

import logging

from .credentials import CredentialService
from .generative import failure_reason
from .models import Emotion, Result

logger = logging.getLogger(__name__)

# Checked in order; the first emotion with a matching keyword wins.
EMOTION_KEYWORDS: list[tuple[Emotion, tuple[str, ...]]] = [
    (
        Emotion.HAPPY,
        ("happy", "joy", "great", "wonderful", "खुश", "प्रसन्न", "आनंदित"),
    ),
    (
        Emotion.SAD,
        ("sad", "depressed", "unhappy", "miserable", "दुखी", "उदास", "निराश"),
    ),
    (
        Emotion.ANXIOUS,
        ("anxious", "worry", "nervous", "fear", "चिंतित", "घबराहट", "डर"),
    ),
    (
        Emotion.STRESSED,
        ("stress", "overwhelm", "pressure", "तनाव", "दबाव", "परेशान"),
    ),
    (
        Emotion.ANGRY,
        ("angry", "mad", "furious", "upset", "गुस्सा", "क्रोधित", "नाराज"),
    ),
]

CLASSIFY_PROMPT = """Analyze the following text and determine the primary emotion expressed.
Choose exactly one emotion from this list: happy, neutral, sad, anxious, stressed, angry.
Only respond with the emotion name, nothing else.

Text: "{text}"
"""


def detect_local(text: str) -> Emotion:
    """Classify text by keyword containment, without any network access."""
    lower_text = text.lower()
    for emotion, keywords in EMOTION_KEYWORDS:
        if any(keyword in lower_text for keyword in keywords):
            return emotion
    return Emotion.NEUTRAL


class EmotionClassifier:
    def __init__(self, credentials: CredentialService) -> None:
        self._credentials = credentials

    async def classify(self, text: str, offline: bool = False) -> Result[Emotion]:
        """
        Detect the primary emotion of a message.

        The remote model's answer overrides the keyword pass whenever it is
        one of the known emotions. This method never raises.

        Args:
            text: The message to classify
            offline: Skip the remote model entirely

        Returns:
            The detected emotion and the path that produced it
        """
        try:
            return await self._classify(text, offline)
        except Exception as e:
            logger.error("Error detecting emotion: %s", e)
            return Result.fallback(Emotion.NEUTRAL, "unexpected-error")

    async def _classify(self, text: str, offline: bool) -> Result[Emotion]:
        local = detect_local(text)
        if offline:
            return Result.fallback(local, "offline")

        client = await self._credentials.client()
        if client is None:
            return Result.fallback(local, "credential-invalid")

        try:
            answer = await client.generate(CLASSIFY_PROMPT.format(text=text))
        except Exception as e:
            logger.warning("Remote emotion detection failed, using keywords: %s", e)
            return Result.fallback(local, failure_reason(e))

        try:
            return Result.success(Emotion(answer.strip().lower()))
        except ValueError:
            logger.warning("Remote emotion %r is not a known emotion", answer)
            return Result.fallback(local, "malformed-remote-response")
