"""
Face emotion scanning.

No facial-expression model is bundled: a scan captures a frame when a
camera is available and picks a weighted-random emotion, favouring neutral.
"""

import logging
import random

from .capabilities import CameraBackend
from .models import Emotion

logger = logging.getLogger(__name__)

EMOTION_WEIGHTS: dict[Emotion, int] = {
    Emotion.HAPPY: 3,
    Emotion.NEUTRAL: 5,
    Emotion.SAD: 2,
    Emotion.ANXIOUS: 2,
    Emotion.STRESSED: 2,
    Emotion.ANGRY: 1,
}


class FaceEmotionDetector:
    """
    Camera-backed emotion scanner.

    Falls back to simulated mode (no frame capture) when there is no camera
    or it cannot be opened.
    """

    def __init__(
        self, camera: CameraBackend | None = None, rng: random.Random | None = None
    ) -> None:
        self._camera = camera
        self._rng = rng or random.Random()
        self.active = False
        self.simulated = False
        self.detection_count = 0
        self.last_emotion: Emotion | None = None

    def enable(self) -> None:
        self.active = True
        self.simulated = False
        if self._camera is None:
            self.simulated = True
            return
        try:
            self._camera.open()
        except Exception as e:
            logger.warning("Camera unavailable, using simulated mode: %s", e)
            self.simulated = True

    def disable(self) -> None:
        if self.active and not self.simulated and self._camera is not None:
            self._camera.close()
        self.active = False

    def scan(self) -> Emotion:
        """Capture a frame (when possible) and return the detected emotion."""
        if self.active and not self.simulated and self._camera is not None:
            frame = self._camera.capture()
            logger.debug("Captured frame of %d bytes", len(frame))

        emotions = list(EMOTION_WEIGHTS)
        weights = list(EMOTION_WEIGHTS.values())
        emotion = self._rng.choices(emotions, weights=weights)[0]
        self.last_emotion = emotion
        self.detection_count += 1
        return emotion
