"""
Capability ports for device and storage access.

The chat logic only talks to these protocols; concrete speech and camera
backends are supplied by whatever front end hosts the session, and tests
supply fakes.
"""

import json
import logging
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


class SpeechBackend(Protocol):
    """Continuous speech-to-text session with interim results."""

    def start(self, language: str) -> None: ...

    def stop(self) -> None: ...


class CameraBackend(Protocol):
    def open(self) -> None: ...

    def capture(self) -> bytes: ...

    def close(self) -> None: ...


class MemoryKeyValueStore:
    """Key-value store kept in process memory."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileKeyValueStore:
    """
    Key-value store backed by a single JSON document.

    The file is read lazily on first access and rewritten on every change.
    An unreadable file is treated as empty.
    """

    def __init__(self, path: Path) -> None:
        self.path = path
        self._data: dict[str, str] | None = None

    def _load(self) -> dict[str, str]:
        if self._data is None:
            try:
                data = json.loads(self.path.read_text(encoding="utf-8"))
            except FileNotFoundError:
                self._data = {}
            except (OSError, ValueError) as e:
                logger.warning("Ignoring unreadable store %s: %s", self.path, e)
                self._data = {}
            else:
                if isinstance(data, dict):
                    self._data = data
                else:
                    logger.warning("Ignoring store %s: not a JSON object", self.path)
                    self._data = {}
        return self._data

    def _flush(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(self._load(), indent=2), encoding="utf-8")

    def get(self, key: str) -> str | None:
        return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        self._load()[key] = value
        self._flush()

    def delete(self, key: str) -> None:
        if self._load().pop(key, None) is not None:
            self._flush()
